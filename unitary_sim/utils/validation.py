"""
Validation utilities for the unitary simulator.

Compares simulated unitaries against Qiskit's exact Operator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np


@dataclass
class ValidationResult:
    """Result of validating the simulator against an exact reference."""
    num_qubits: int
    max_error: float
    passed: bool
    threshold: float
    details: Dict[str, Any]


def equal_up_to_global_phase(
    a: np.ndarray,
    b: np.ndarray,
    atol: float = 1e-9
) -> bool:
    """Check a == e^(iα)·b for some phase α."""
    return _phase_aligned_error(a, b) <= atol


def _phase_aligned_error(a: np.ndarray, b: np.ndarray) -> float:
    a = np.asarray(a, dtype=np.complex128)
    b = np.asarray(b, dtype=np.complex128)
    if a.shape != b.shape:
        return float("inf")

    # Align on the largest entry of b
    pivot = np.unravel_index(np.argmax(np.abs(b)), b.shape)
    if abs(b[pivot]) == 0.0:
        return float(np.max(np.abs(a))) if a.size else 0.0
    phase = a[pivot] / b[pivot]
    if abs(phase) == 0.0:
        return float(np.max(np.abs(a - b)))
    phase = phase / abs(phase)
    return float(np.max(np.abs(a - phase * b)))


def validate_against_qiskit(
    circuit,
    parameters: Optional[Dict[str, float]] = None,
    threshold: float = 1e-9,
    verbose: bool = False
) -> ValidationResult:
    """
    Validate the simulated unitary against qiskit.quantum_info.Operator.

    Final measurements are removed before building the reference operator.
    The comparison ignores global phase, which unrolling may introduce.

    Args:
        circuit: Qiskit QuantumCircuit or OpenQASM 2 text
        parameters: Values for symbolic parameters
        threshold: Maximum allowed element-wise error
        verbose: Print a short report

    Returns:
        ValidationResult with comparison data
    """
    try:
        from qiskit import QuantumCircuit
        from qiskit.quantum_info import Operator
    except ImportError:
        raise ImportError("Qiskit required for validation")

    from unitary_sim.compiler.parser import QiskitCircuitSource
    from unitary_sim.runtime.engine import UnitarySimulator

    if isinstance(circuit, str):
        circuit = QuantumCircuit.from_qasm_str(circuit)

    simulator = UnitarySimulator(QiskitCircuitSource(circuit, parameters=parameters))
    result = simulator.run()
    if not result.succeeded:
        raise ValueError(f"Simulation failed: {result.error}")
    simulated = result.unitary_matrix()

    reference_circuit = circuit.remove_final_measurements(inplace=False)
    if parameters:
        by_name = {p.name: p for p in reference_circuit.parameters}
        reference_circuit = reference_circuit.assign_parameters(
            {by_name[name]: value for name, value in parameters.items()}
        )
    reference = Operator(reference_circuit).data

    max_error = _phase_aligned_error(simulated, reference)
    passed = max_error <= threshold

    if verbose:
        print(f"Qubits: {circuit.num_qubits}, operations: {simulator.circuit.number_of_operations}")
        print(f"Max error (up to global phase): {max_error:.3e}")
        print(f"Result: {'PASSED' if passed else 'FAILED'}")

    return ValidationResult(
        num_qubits=circuit.num_qubits,
        max_error=max_error,
        passed=passed,
        threshold=threshold,
        details={
            "number_of_operations": simulator.circuit.number_of_operations,
            "warnings": result.warnings,
        },
    )
