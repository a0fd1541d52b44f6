"""
Unitary simulation demo.

Computes the full unitary of a few small circuits: a GHZ preparation from
Qiskit, a circuit in the backend dictionary format, and a parameterized
MaxCut QAOA layer checked against Qiskit's exact operator.
"""

import json
import logging

import numpy as np
from typing import List, Tuple


def create_ghz_circuit(num_qubits: int):
    """
    Create a GHZ preparation circuit.

    Args:
        num_qubits: Number of qubits

    Returns:
        Qiskit QuantumCircuit
    """
    try:
        from qiskit import QuantumCircuit
    except ImportError:
        raise ImportError("Qiskit required. Install with: pip install qiskit")

    qc = QuantumCircuit(num_qubits)
    qc.h(0)
    for q in range(num_qubits - 1):
        qc.cx(q, q + 1)
    return qc


def create_maxcut_qaoa_layer(edges: List[Tuple[int, int]], num_qubits: int):
    """One QAOA layer for MaxCut with symbolic gamma and beta."""
    from qiskit import QuantumCircuit
    from qiskit.circuit import Parameter

    gamma = Parameter("gamma")
    beta = Parameter("beta")

    qc = QuantumCircuit(num_qubits)
    for q in range(num_qubits):
        qc.h(q)
    for (u, v) in edges:
        qc.rzz(2 * gamma, u, v)
    for q in range(num_qubits):
        qc.rx(2 * beta, q)
    qc.measure_all()
    return qc


def demo_ghz():
    """
    Simulate a GHZ circuit and apply its unitary to |0...0>.
    """
    from unitary_sim import QiskitCircuitSource, UnitarySimulator
    from unitary_sim.core import StateVector

    num_qubits = 4

    print("=" * 60)
    print("GHZ Unitary Demo")
    print("=" * 60)

    simulator = UnitarySimulator(QiskitCircuitSource(create_ghz_circuit(num_qubits)))
    result = simulator.run()

    print(f"Status: {result.status.value}")
    print(f"Unrolled operations: {simulator.circuit.number_of_operations}")
    u = result.unitary_matrix()
    print(f"Unitary: {u.shape[0]}x{u.shape[1]}, "
          f"U·U† = I: {np.allclose(u @ u.conj().T, np.eye(u.shape[0]))}")

    state = result.evolve(StateVector.basis_state(num_qubits))
    print("\nNonzero amplitudes of U|0000>:")
    for index in state.nonzero_indices():
        print(f"  |{index:0{num_qubits}b}>: {state.amplitude(index):.4f}")

    print("=" * 60)
    return result


def demo_backend_circuit():
    """
    Simulate a circuit given in the backend dictionary format.
    """
    from unitary_sim import simulate_unitary

    circuit = {
        "number_of_qubits": 3,
        "number_of_cbits": 3,
        "number_of_operations": 4,
        "qasm": [
            {"name": "U", "theta": np.pi / 2, "phi": 0.0, "lambda": np.pi, "qubit_indices": [0]},
            {"name": "CX", "qubit_indices": [0, 2]},
            {"name": "measure", "qubit_indices": [2], "cbit_indices": [0]},
            {"name": "U", "theta": np.pi, "phi": 0.0, "lambda": np.pi, "qubit_indices": [1]},
        ],
    }

    print("\n" + "=" * 60)
    print("Backend Circuit Demo")
    print("=" * 60)

    result = simulate_unitary(json.dumps(circuit))
    print(f"Status: {result.status.value}")
    for warning in result.warnings:
        print(f"Warning: {warning}")

    payload = result.to_dict()
    print(f"Result entries: {len(payload['data']['unitary'])}")
    print(f"First row: {payload['data']['unitary'][:8]}")

    print("=" * 60)
    return result


def demo_validation():
    """
    Check a parameterized QAOA layer against Qiskit's Operator.
    """
    from unitary_sim.utils import validate_against_qiskit

    edges = [(0, 1), (1, 2), (2, 0)]
    qc = create_maxcut_qaoa_layer(edges, num_qubits=3)

    print("\n" + "=" * 60)
    print("Validation Demo")
    print("=" * 60)

    for gamma, beta in [(0.2, 0.4), (0.8, 1.1), (np.pi / 2, 0.3)]:
        print(f"gamma={gamma:.2f}, beta={beta:.2f}")
        validate_against_qiskit(qc, parameters={"gamma": gamma, "beta": beta}, verbose=True)

    print("=" * 60)


if __name__ == "__main__":
    from unitary_sim.utils import setup_logging

    setup_logging(level=logging.WARNING)
    demo_ghz()
    demo_backend_circuit()
    demo_validation()
