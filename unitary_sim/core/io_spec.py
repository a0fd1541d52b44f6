"""Input/Output specifications for the unitary simulator."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from unitary_sim.core.matrix import StateVector


class OperationKind(Enum):
    """Closed set of operation kinds the engine understands."""
    U = "U"
    CX = "CX"
    MEASURE = "measure"
    RESET = "reset"
    BARRIER = "barrier"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> OperationKind:
        return _NAME_TO_KIND.get(name.lower(), cls.OTHER)


_NAME_TO_KIND = {
    "u": OperationKind.U,
    "u3": OperationKind.U,
    "cx": OperationKind.CX,
    "cnot": OperationKind.CX,
    "measure": OperationKind.MEASURE,
    "reset": OperationKind.RESET,
    "barrier": OperationKind.BARRIER,
}

U_PARAM_NAMES = ("theta", "phi", "lambda")


@dataclass(frozen=True)
class Operation:
    """
    A normalized circuit operation.

    Attributes:
        kind: Operation kind
        qubits: Qubit indices; (target,) for U, (control, target) for CX
        params: Gate angles keyed by "theta", "phi", "lambda"
        name: Name the front-end used for this operation
        clbits: Classical bits written by a measurement
    """
    kind: OperationKind
    qubits: Tuple[int, ...] = ()
    params: Dict[str, float] = field(default_factory=dict)
    name: str = ""
    clbits: Tuple[int, ...] = ()

    @classmethod
    def u(cls, qubit: int, theta: float, phi: float, lam: float) -> Operation:
        return cls(
            kind=OperationKind.U,
            qubits=(qubit,),
            params={"theta": float(theta), "phi": float(phi), "lambda": float(lam)},
            name="U",
        )

    @classmethod
    def cx(cls, control: int, target: int) -> Operation:
        return cls(kind=OperationKind.CX, qubits=(control, target), name="CX")

    @classmethod
    def measure(cls, qubit: int, clbit: int) -> Operation:
        return cls(kind=OperationKind.MEASURE, qubits=(qubit,),
                   name="measure", clbits=(clbit,))

    @classmethod
    def reset(cls, qubit: int) -> Operation:
        return cls(kind=OperationKind.RESET, qubits=(qubit,), name="reset")

    @classmethod
    def barrier(cls, *qubits: int) -> Operation:
        return cls(kind=OperationKind.BARRIER, qubits=tuple(qubits), name="barrier")

    @property
    def angles(self) -> Tuple[float, float, float]:
        """(θ, φ, λ) of a U operation."""
        return tuple(self.params[p] for p in U_PARAM_NAMES)

    def __repr__(self) -> str:
        if self.params:
            param_str = ", ".join(f"{k}={v:.4f}" for k, v in self.params.items())
            return f"{self.name or self.kind.value}({param_str}) @ {self.qubits}"
        return f"{self.name or self.kind.value} @ {self.qubits}"


@dataclass
class ParsedCircuit:
    """
    Normalized circuit as delivered by a circuit source.

    Attributes:
        num_qubits: Number of qubits
        num_clbits: Number of classical bits
        operations: Operations in circuit order
    """
    num_qubits: int
    num_clbits: int = 0
    operations: List[Operation] = field(default_factory=list)

    @property
    def number_of_operations(self) -> int:
        return len(self.operations)

    def validate(self) -> None:
        """
        Check every operation against the register.

        Raises:
            ValueError: On a U without its angles or qubit, a CX without two
                distinct qubits, or any qubit outside the register.
        """
        if isinstance(self.num_qubits, bool) or not isinstance(self.num_qubits, numbers.Integral):
            raise ValueError(f"number_of_qubits must be an integer, got {self.num_qubits!r}")

        for position, op in enumerate(self.operations):
            label = op.name or op.kind.value

            if op.kind is OperationKind.U:
                missing = [p for p in U_PARAM_NAMES if p not in op.params]
                if missing:
                    raise ValueError(f"Operation {position} (U) is missing {', '.join(missing)}")
                if len(op.qubits) != 1:
                    raise ValueError(f"Operation {position} (U) needs one qubit, got {op.qubits}")
            elif op.kind is OperationKind.CX:
                if len(op.qubits) != 2 or op.qubits[0] == op.qubits[1]:
                    raise ValueError(
                        f"Operation {position} (CX) needs two distinct qubits, got {op.qubits}"
                    )

            for qubit in op.qubits:
                if (isinstance(qubit, bool) or not isinstance(qubit, numbers.Integral)
                        or not 0 <= qubit < self.num_qubits):
                    raise ValueError(
                        f"Operation {position} ({label}) uses qubit {qubit!r}, "
                        f"outside a register of {self.num_qubits} qubits"
                    )

    def __repr__(self) -> str:
        return (f"ParsedCircuit(qubits={self.num_qubits}, "
                f"operations={self.number_of_operations})")


class SimulatorStatus(Enum):
    INITIALIZED = "INITIALIZED"
    RUNNING = "RUNNING"
    DONE = "DONE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Engine configuration.

    Attributes:
        max_qubits: Refuse circuits wider than this (None = no limit)
        record_dropped: List dropped measure/reset operations in the result
    """
    max_qubits: Optional[int] = None
    record_dropped: bool = True


DEFAULT_CONFIG = SimulatorConfig()


@dataclass
class SimulationResult:
    """
    Result of a unitary simulation run.

    Attributes:
        status: DONE on success, ERROR if an unsupported operation stopped the run
        num_qubits: Number of qubits of the simulated circuit
        unitary: Flat row-major unitary of length 4^n (None on error)
        warnings: Messages for operations that were dropped
        error: Description of the failure when status is ERROR
        metadata: Run metadata
    """
    status: SimulatorStatus
    num_qubits: int
    unitary: Optional[np.ndarray] = None
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status is SimulatorStatus.DONE

    def _require_unitary(self) -> np.ndarray:
        if self.unitary is None:
            raise ValueError(f"No unitary available (status {self.status.value})")
        return self.unitary

    def unitary_matrix(self) -> np.ndarray:
        """The unitary as a 2^n x 2^n array."""
        dim = 1 << self.num_qubits
        return self._require_unitary().reshape(dim, dim)

    def as_pairs(self) -> List[Tuple[float, float]]:
        """The unitary as row-major (real, imaginary) pairs."""
        return [(float(z.real), float(z.imag)) for z in self._require_unitary()]

    def evolve(self, state: StateVector) -> StateVector:
        """Apply the simulated unitary to a state vector."""
        return StateVector(self.unitary_matrix() @ state.as_array())

    def to_dict(self) -> Dict[str, Any]:
        """Result in the {"data": {"unitary": ...}, "status": ...} layout."""
        unitary = self.as_pairs() if self.unitary is not None else []
        return {
            "data": {"unitary": unitary},
            "status": self.status.value,
        }

    def __repr__(self) -> str:
        return (f"SimulationResult(status={self.status.value}, "
                f"qubits={self.num_qubits})")
