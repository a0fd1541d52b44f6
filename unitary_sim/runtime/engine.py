"""
Unitary simulator engine.

Folds the operations of a circuit into one 2^n x 2^n unitary. Exponential
in the number of qubits; callers are expected to keep n small.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union

from unitary_sim.compiler.parser import (
    BackendCircuitSource,
    CircuitSource,
    OperationListSource,
    QiskitCircuitSource,
)
from unitary_sim.core.embedding import enlarge_single, enlarge_two
from unitary_sim.core.gates import CX_GATE, u_gate
from unitary_sim.core.io_spec import (
    DEFAULT_CONFIG,
    Operation,
    OperationKind,
    ParsedCircuit,
    SimulationResult,
    SimulatorConfig,
    SimulatorStatus,
)
from unitary_sim.core.matrix import Matrix
from unitary_sim.utils.logging_config import get_logger


logger = get_logger(__name__)


@dataclass
class UnitarySimulator:
    """
    Computes the unitary of a circuit delivered by a circuit source.

    Usage:
        source = QiskitCircuitSource(qasm_text)
        simulator = UnitarySimulator(source)
        result = simulator.run()
        print(result.unitary_matrix())

    Construction loads the circuit and fails with ValueError on a bad
    register size. run() starts from the identity and left-multiplies the
    enlargement of every gate in circuit order. Measure and reset are
    dropped with a warning, barriers are ignored, and any other operation
    stops the run with status ERROR.

    Attributes:
        source: Circuit source to load the operations from
        config: Engine configuration
        circuit: The loaded circuit
        unitary_state: Running unitary of size 2^n
        status: Engine state
        cursor: Index of the operation being applied
    """
    source: CircuitSource
    config: SimulatorConfig = DEFAULT_CONFIG
    circuit: ParsedCircuit = field(init=False, repr=False)
    unitary_state: Matrix = field(init=False, repr=False)
    status: SimulatorStatus = field(init=False, default=SimulatorStatus.INITIALIZED)
    cursor: int = field(init=False, default=0)
    _warnings: List[str] = field(init=False, default_factory=list, repr=False)

    # Every OperationKind must be listed here.
    _HANDLERS = {
        OperationKind.U: "_apply_u",
        OperationKind.CX: "_apply_cx",
        OperationKind.MEASURE: "_drop",
        OperationKind.RESET: "_drop",
        OperationKind.BARRIER: "_ignore",
        OperationKind.OTHER: "_unsupported",
    }

    def __post_init__(self):
        circuit = self.source.load()
        num_qubits = circuit.num_qubits

        if (isinstance(num_qubits, bool) or not isinstance(num_qubits, numbers.Integral)
                or num_qubits < 1):
            raise ValueError(f"number_of_qubits must be a positive integer, got {num_qubits!r}")
        num_qubits = circuit.num_qubits = int(num_qubits)
        if self.config.max_qubits is not None and num_qubits > self.config.max_qubits:
            raise ValueError(
                f"Circuit has {num_qubits} qubits, more than the configured "
                f"maximum of {self.config.max_qubits}"
            )
        circuit.validate()

        self.circuit = circuit
        self._reset()
        logger.debug("new: number_of_qubits=%d number_of_operations=%d unitary_state.size=%d",
                     num_qubits, circuit.number_of_operations, self.unitary_state.size)

    @property
    def num_qubits(self) -> int:
        return self.circuit.num_qubits

    def _reset(self) -> None:
        self.unitary_state = Matrix.identity(1 << self.num_qubits)
        self.status = SimulatorStatus.INITIALIZED
        self.cursor = 0
        self._warnings = []

    def run(self) -> SimulationResult:
        """
        Apply every operation and return the resulting unitary.

        Each call starts again from the identity. An exception raised while
        applying an operation leaves the engine in ERROR and propagates.
        """
        self._reset()
        self.status = SimulatorStatus.RUNNING
        operations = self.circuit.operations

        for index, operation in enumerate(operations):
            self.cursor = index
            try:
                applied = self.apply(operation)
            except Exception:
                logger.error("Error: failed to apply %r at position %d", operation, index)
                self.status = SimulatorStatus.ERROR
                raise
            if not applied:
                message = (f"Unknown operation '{operation.name or operation.kind.value}' "
                           f"at position {index}")
                logger.error("Error: %s", message)
                self.status = SimulatorStatus.ERROR
                return SimulationResult(
                    status=self.status,
                    num_qubits=self.num_qubits,
                    unitary=None,
                    warnings=list(self._warnings),
                    error=message,
                    metadata={
                        "operations_applied": index,
                        "number_of_operations": len(operations),
                    },
                )

        self.cursor = len(operations)
        self.status = SimulatorStatus.DONE
        logger.debug("run: finished %d operations, unitary size %d",
                     len(operations), self.unitary_state.size)

        return SimulationResult(
            status=self.status,
            num_qubits=self.num_qubits,
            unitary=self.unitary_state.as_slice(),
            warnings=list(self._warnings),
            metadata={
                "operations_applied": len(operations),
                "number_of_operations": len(operations),
            },
        )

    def apply(self, operation: Operation) -> bool:
        """
        Apply one operation to the running unitary.

        Returns:
            False if the operation is not supported, True otherwise
        """
        logger.debug("Gate: %r", operation)
        handler = getattr(self, self._HANDLERS[operation.kind])
        return handler(operation)

    def _compose(self, enlargement: Matrix) -> None:
        # Later gates act after earlier ones, so they multiply from the left.
        self.unitary_state = enlargement @ self.unitary_state

    def _apply_u(self, operation: Operation) -> bool:
        qubit = operation.qubits[0]
        theta, phi, lam = operation.angles
        gate = u_gate(theta, phi, lam)
        logger.debug("qubit:'%d' theta:'%s' phi:'%s' lam:'%s'", qubit, theta, phi, lam)
        self._compose(enlarge_single(gate, qubit, self.num_qubits))
        return True

    def _apply_cx(self, operation: Operation) -> bool:
        control, target = operation.qubits
        logger.debug("control:'%d' target:'%d'", control, target)
        self._compose(enlarge_two(CX_GATE, control, target, self.num_qubits))
        return True

    def _drop(self, operation: Operation) -> bool:
        message = (f"{operation.kind.value.capitalize()} on qubits {list(operation.qubits)} "
                   f"has been dropped from unitary simulator")
        logger.warning("Warning: %s", message)
        if self.config.record_dropped:
            self._warnings.append(message)
        return True

    def _ignore(self, operation: Operation) -> bool:
        return True

    def _unsupported(self, operation: Operation) -> bool:
        return False


def simulate_unitary(
    circuit: Union[CircuitSource, Sequence[Operation], Mapping[str, Any], str, Any],
    num_qubits: Optional[int] = None,
    config: Optional[SimulatorConfig] = None
) -> SimulationResult:
    """
    Compute the unitary of a circuit in one call.

    Args:
        circuit: A circuit source, a list of Operations (needs num_qubits),
                 a backend circuit dictionary or its JSON text, OpenQASM 2
                 text, or a qiskit.QuantumCircuit
        num_qubits: Register size for a plain operation list
        config: Engine configuration

    Returns:
        SimulationResult of the run
    """
    if isinstance(circuit, CircuitSource):
        source = circuit
    elif isinstance(circuit, Mapping):
        source = BackendCircuitSource(circuit)
    elif isinstance(circuit, str):
        if circuit.lstrip().startswith("{"):
            source = BackendCircuitSource(circuit)
        else:
            source = QiskitCircuitSource(circuit)
    elif isinstance(circuit, (list, tuple)):
        if num_qubits is None:
            raise ValueError("num_qubits is required for an operation list")
        source = OperationListSource(circuit, num_qubits)
    else:
        source = QiskitCircuitSource(circuit)

    simulator = UnitarySimulator(source, config=config or DEFAULT_CONFIG)
    return simulator.run()
