"""Runtime components for unitary simulation."""

from unitary_sim.runtime.engine import UnitarySimulator, simulate_unitary

__all__ = ["UnitarySimulator", "simulate_unitary"]
