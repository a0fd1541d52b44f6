"""
Gate definitions for the unitary simulator.

A gate binds a matrix to the number of qubits it acts on. The simulator
only needs the parametrized single-qubit U(θ, φ, λ) gate and the CX gate;
every other gate is unrolled into these by the circuit front-end.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from unitary_sim.core.matrix import DTypeLike, Matrix
from unitary_sim.core.scalar import Complex


@dataclass
class Gate:
    """
    A gate acting on `size` qubits.

    Attributes:
        size: Number of qubits the gate acts on
        matrix: Defining matrix of dimension 2^size
    """
    size: int
    matrix: Matrix

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Gate must act on at least one qubit, got {self.size}")
        if self.matrix.size != 1 << self.size:
            raise ValueError(
                f"Gate on {self.size} qubit(s) needs a {1 << self.size}x{1 << self.size} "
                f"matrix, got {self.matrix.size}x{self.matrix.size}"
            )

    @classmethod
    def from_slice(
        cls,
        elements: Sequence,
        dtype: Optional[DTypeLike] = None
    ) -> Gate:
        """
        Build a gate from a flat row-major list of 2^(2·size) elements.

        The qubit width is log2(sqrt(len(elements))).
        """
        matrix = Matrix.from_row_slice(elements, dtype=dtype)
        dim = matrix.size
        if dim < 2 or dim & (dim - 1):
            raise ValueError(f"Gate dimension must be a power of two, got {dim}")
        return cls(size=dim.bit_length() - 1, matrix=matrix)

    @property
    def dimension(self) -> int:
        return self.matrix.size

    def __getitem__(self, index: Tuple[int, int]):
        return self.matrix[index]

    def __str__(self) -> str:
        return f"Gate({self.size}): {self.matrix}"


def u_gate(theta: float, phi: float, lam: float) -> Gate:
    """
    General single-qubit unitary U(θ, φ, λ).

        [[cos(θ/2),          -e^(iλ) sin(θ/2)],
         [e^(iφ) sin(θ/2),   e^(i(φ+λ)) cos(θ/2)]]
    """
    c = Complex(math.cos(theta / 2.0), 0.0)
    s = Complex(math.sin(theta / 2.0), 0.0)
    i = Complex.i()
    return Gate.from_slice([
        c,
        -(i * lam).exp() * s,
        (i * phi).exp() * s,
        (i * phi + i * lam).exp() * c,
    ], dtype=np.complex128)


def inverse_u_angles(theta: float, phi: float, lam: float) -> Tuple[float, float, float]:
    """Angles of U(θ, φ, λ)†, which is U(-θ, -λ, -φ)."""
    return -theta, -lam, -phi


# Two-qubit gates use the local index bit(qubit0) + 2·bit(qubit1), so for
# CX with qubit0 = control and qubit1 = target the control is the low bit.
CX_ELEMENTS = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
)

CX_GATE = Gate.from_slice(CX_ELEMENTS, dtype=np.float64)
