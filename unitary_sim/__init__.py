"""
unitary-sim - exact unitary simulation of quantum circuits.

Folds a circuit, unrolled to U and CX gates, into its 2^n x 2^n unitary.
"""

from unitary_sim.compiler.parser import QiskitCircuitSource, BackendCircuitSource
from unitary_sim.runtime.engine import UnitarySimulator, simulate_unitary

__version__ = "0.1.0"
__all__ = [
    "UnitarySimulator",
    "simulate_unitary",
    "QiskitCircuitSource",
    "BackendCircuitSource",
]
