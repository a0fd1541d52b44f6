"""Utility functions for the unitary simulator."""

from unitary_sim.utils.logging_config import get_logger, setup_logging
from unitary_sim.utils.validation import validate_against_qiskit

__all__ = ["get_logger", "setup_logging", "validate_against_qiskit"]
