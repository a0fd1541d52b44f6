"""Circuit sources that feed the simulator."""

from unitary_sim.compiler.parser import (
    BackendCircuitSource,
    CircuitSource,
    OperationListSource,
    QiskitCircuitSource,
    circuit_to_backend_dict,
    parse_qiskit_circuit,
)

__all__ = [
    "BackendCircuitSource",
    "CircuitSource",
    "OperationListSource",
    "QiskitCircuitSource",
    "circuit_to_backend_dict",
    "parse_qiskit_circuit",
]
