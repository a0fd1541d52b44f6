"""Core components: complex scalars, matrices, gates, embedding and I/O specs."""

from unitary_sim.core.scalar import Complex, EPSILON
from unitary_sim.core.matrix import Matrix, StateVector
from unitary_sim.core.gates import Gate, CX_GATE, u_gate
from unitary_sim.core.embedding import index1, index2, enlarge_single, enlarge_two
from unitary_sim.core.io_spec import (
    Operation,
    OperationKind,
    ParsedCircuit,
    SimulationResult,
    SimulatorConfig,
    SimulatorStatus,
)

__all__ = [
    # Scalars and matrices
    "Complex",
    "EPSILON",
    "Matrix",
    "StateVector",
    # Gates
    "Gate",
    "CX_GATE",
    "u_gate",
    # Embedding
    "index1",
    "index2",
    "enlarge_single",
    "enlarge_two",
    # I/O specifications
    "Operation",
    "OperationKind",
    "ParsedCircuit",
    "SimulationResult",
    "SimulatorConfig",
    "SimulatorStatus",
]
