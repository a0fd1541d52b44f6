"""
Circuit sources for the unitary simulator.

A circuit source turns some circuit description into a ParsedCircuit: a
flat, ordered list of normalized operations plus register sizes. Sources
are handed to the engine explicitly; the engine never parses or unrolls
circuits itself.
"""

from __future__ import annotations

import json
import numbers
from dataclasses import dataclass, field
from typing import (
    Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union,
    runtime_checkable,
)

from unitary_sim.core.io_spec import (
    Operation,
    OperationKind,
    ParsedCircuit,
    U_PARAM_NAMES,
)
from unitary_sim.utils.logging_config import get_logger


logger = get_logger(__name__)

# Gate set the front-end unrolls onto
DEFAULT_BASIS_GATES = ("u", "cx")


@runtime_checkable
class CircuitSource(Protocol):
    """Anything that can deliver a normalized circuit."""

    def load(self) -> ParsedCircuit:
        ...


@dataclass
class OperationListSource:
    """
    Circuit source over an already normalized operation list.

    Attributes:
        operations: Operations in circuit order
        num_qubits: Number of qubits
        num_clbits: Number of classical bits
    """
    operations: Sequence[Operation]
    num_qubits: int
    num_clbits: int = 0

    def load(self) -> ParsedCircuit:
        parsed = ParsedCircuit(
            num_qubits=self.num_qubits,
            num_clbits=self.num_clbits,
            operations=list(self.operations),
        )
        parsed.validate()
        return parsed


def _require_count(circuit: Mapping[str, Any], key: str) -> int:
    if key not in circuit:
        raise ValueError(f"Circuit is missing '{key}'")
    value = circuit[key]
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise ValueError(f"'{key}' must be a non-negative integer, got {value!r}")
    return int(value)


def _parse_backend_entry(position: int, entry: Mapping[str, Any]) -> Operation:
    """Parse one entry of the backend 'qasm' list."""
    name = entry.get("name")
    if not isinstance(name, str):
        raise ValueError(f"Operation {position} has no name: {entry!r}")

    kind = OperationKind.from_name(name)
    try:
        qubits = tuple(int(q) for q in entry.get("qubit_indices", ()))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Operation {position} ({name}) has bad qubit_indices") from exc

    if kind is OperationKind.U:
        missing = [p for p in U_PARAM_NAMES if p not in entry]
        if missing:
            raise ValueError(f"Operation {position} (U) is missing {', '.join(missing)}")
        if len(qubits) != 1:
            raise ValueError(f"Operation {position} (U) needs one qubit, got {qubits}")
        theta, phi, lam = (float(entry[p]) for p in U_PARAM_NAMES)
        return Operation.u(qubits[0], theta, phi, lam)

    if kind is OperationKind.CX:
        if len(qubits) != 2:
            raise ValueError(f"Operation {position} (CX) needs two qubits, got {qubits}")
        return Operation.cx(*qubits)

    clbits = tuple(int(c) for c in entry.get("cbit_indices", ()))
    return Operation(kind=kind, qubits=qubits, name=name, clbits=clbits)


@dataclass
class BackendCircuitSource:
    """
    Circuit source over the backend circuit dictionary.

    The dictionary (or its JSON text) looks like:

        {
            "number_of_qubits": 2,
            "number_of_cbits": 2,
            "number_of_operations": 2,
            "qasm": [
                {"name": "U", "theta": 1.5707963267948966, "phi": 0.0,
                 "lambda": 3.141592653589793, "qubit_indices": [1]},
                {"name": "CX", "qubit_indices": [1, 0]}
            ]
        }

    Missing or malformed counts raise ValueError. Names outside the
    supported set become OTHER operations.
    """
    circuit: Union[Mapping[str, Any], str]

    def load(self) -> ParsedCircuit:
        circuit = self.circuit
        if isinstance(circuit, (str, bytes)):
            circuit = json.loads(circuit)
        if not isinstance(circuit, Mapping):
            raise ValueError(f"Backend circuit must be a mapping, got {type(circuit).__name__}")

        num_qubits = _require_count(circuit, "number_of_qubits")
        num_operations = _require_count(circuit, "number_of_operations")
        num_clbits = _require_count(circuit, "number_of_cbits") if "number_of_cbits" in circuit else 0

        entries = circuit.get("qasm", [])
        if not isinstance(entries, list):
            raise ValueError("'qasm' must be a list of operations")
        if len(entries) != num_operations:
            raise ValueError(
                f"number_of_operations is {num_operations} but "
                f"{len(entries)} operations were given"
            )

        operations = [_parse_backend_entry(i, e) for i, e in enumerate(entries)]
        parsed = ParsedCircuit(
            num_qubits=num_qubits,
            num_clbits=num_clbits,
            operations=operations,
        )
        parsed.validate()
        logger.debug("Loaded backend circuit: %d qubits, %d operations",
                     num_qubits, num_operations)
        return parsed


def parse_qiskit_circuit(circuit) -> ParsedCircuit:
    """
    Convert an unrolled Qiskit QuantumCircuit into a ParsedCircuit.

    Args:
        circuit: A qiskit.QuantumCircuit already expressed in the u/cx basis

    Returns:
        ParsedCircuit with one Operation per instruction
    """
    operations: List[Operation] = []

    for instruction in circuit.data:
        op = instruction.operation
        qubits = tuple(circuit.find_bit(q).index for q in instruction.qubits)
        clbits = tuple(circuit.find_bit(c).index for c in instruction.clbits)
        kind = OperationKind.from_name(op.name)

        if kind is OperationKind.U:
            theta, phi, lam = (float(p) for p in op.params)
            operations.append(Operation.u(qubits[0], theta, phi, lam))
        elif kind is OperationKind.CX:
            operations.append(Operation.cx(*qubits))
        else:
            operations.append(
                Operation(kind=kind, qubits=qubits, name=op.name, clbits=clbits)
            )

    return ParsedCircuit(
        num_qubits=circuit.num_qubits,
        num_clbits=circuit.num_clbits,
        operations=operations,
    )


@dataclass
class QiskitCircuitSource:
    """
    Circuit source backed by Qiskit.

    Accepts a QuantumCircuit or OpenQASM 2 text, binds parameters and
    unrolls the circuit onto the basis gates with qiskit.transpile.

    Attributes:
        circuit: qiskit.QuantumCircuit or OpenQASM 2 source text
        basis_gates: Gate set to unroll onto
        optimization_level: Transpiler optimization level
        parameters: Values for symbolic parameters, keyed by parameter name
    """
    circuit: Any
    basis_gates: Tuple[str, ...] = DEFAULT_BASIS_GATES
    optimization_level: int = 0
    parameters: Optional[Dict[str, float]] = field(default=None)

    def _bind(self, circuit):
        if self.parameters:
            by_name = {p.name: p for p in circuit.parameters}
            unknown = sorted(set(self.parameters) - set(by_name))
            if unknown:
                raise ValueError(f"Unknown circuit parameters: {', '.join(unknown)}")
            circuit = circuit.assign_parameters(
                {by_name[name]: value for name, value in self.parameters.items()}
            )
        if circuit.parameters:
            names = ", ".join(sorted(p.name for p in circuit.parameters))
            raise ValueError(f"Circuit has unbound parameters: {names}")
        return circuit

    def load(self) -> ParsedCircuit:
        try:
            from qiskit import QuantumCircuit, transpile
        except ImportError:
            raise ImportError("Qiskit is required for circuit parsing. "
                              "Install with: pip install qiskit")

        circuit = self.circuit
        if isinstance(circuit, str):
            circuit = QuantumCircuit.from_qasm_str(circuit)

        circuit = self._bind(circuit)
        unrolled = transpile(
            circuit,
            basis_gates=list(self.basis_gates),
            optimization_level=self.optimization_level,
        )
        parsed = parse_qiskit_circuit(unrolled)
        logger.debug("Unrolled Qiskit circuit: %r", parsed)
        return parsed


def circuit_to_backend_dict(parsed: ParsedCircuit) -> Dict[str, Any]:
    """
    Convert a ParsedCircuit into the backend circuit dictionary.

    Useful for serialization; BackendCircuitSource reads the result back.
    """
    entries = []
    for op in parsed.operations:
        if op.kind is OperationKind.U:
            entry = {"name": "U", **{p: op.params[p] for p in U_PARAM_NAMES}}
        elif op.kind is OperationKind.CX:
            entry = {"name": "CX"}
        else:
            entry = {"name": op.name or op.kind.value}
        entry["qubit_indices"] = list(op.qubits)
        if op.clbits:
            entry["cbit_indices"] = list(op.clbits)
        entries.append(entry)

    return {
        "number_of_qubits": parsed.num_qubits,
        "number_of_cbits": parsed.num_clbits,
        "number_of_operations": len(entries),
        "qasm": entries,
    }
