"""
Embedding of one- and two-qubit gates into the full n-qubit operator space.

Basis indices are n-bit integers with qubit 0 as the least significant bit,
i.e. the basis is ordered q_{n-1} ⊗ ... ⊗ q_1 ⊗ q_0. Single-qubit gates are
enlarged with Kronecker products; two-qubit gates are scattered into place
by inserting their local bits into every index of the remaining qubits.
Both strategies encode the same ordering.
"""

from __future__ import annotations

import itertools

import numpy as np

from unitary_sim.core.gates import Gate
from unitary_sim.core.matrix import Matrix


def index1(bit, position: int, k):
    """
    Insert `bit` into bitstring k at `position`.

    Bits of k below `position` stay put; the rest shift up by one.
    Accepts ints or NumPy integer arrays for k.
    """
    lowbits = k & ((1 << position) - 1)
    return ((((k >> position) << 1) | bit) << position) | lowbits


def index2(bit1, pos1: int, bit2, pos2: int, k):
    """
    Insert bit1 at pos1 and bit2 at pos2 into bitstring k.

    The higher position is inserted first, one place lower, so that the
    second insertion shifts it into its final place.
    """
    if pos1 == pos2:
        raise ValueError(f"Qubit positions must differ, got {pos1} twice")
    if pos1 > pos2:
        return index1(bit2, pos2, index1(bit1, pos1 - 1, k))
    return index1(bit1, pos1, index1(bit2, pos2 - 1, k))


def _check_qubit(qubit: int, num_qubits: int) -> None:
    if not 0 <= qubit < num_qubits:
        raise ValueError(f"Qubit {qubit} out of range for {num_qubits} qubits")


def enlarge_single(gate: Gate, qubit: int, num_qubits: int) -> Matrix:
    """
    Enlarge a single-qubit gate to n qubits.

    Returns identity(2^(n-q-1)) ⊗ gate ⊗ identity(2^q). Exponential in the
    number of qubits.
    """
    if gate.size != 1:
        raise ValueError(f"Expected a single-qubit gate, got size {gate.size}")
    _check_qubit(qubit, num_qubits)

    dtype = gate.matrix.dtype
    upper = Matrix.identity(1 << (num_qubits - qubit - 1), dtype=dtype)
    lower = Matrix.identity(1 << qubit, dtype=dtype)
    return upper.kronecker(gate.matrix.kronecker(lower))


def enlarge_two(gate: Gate, qubit0: int, qubit1: int, num_qubits: int) -> Matrix:
    """
    Enlarge a two-qubit gate to n qubits.

    Gate entry [j + 2k, jj + 2kk] is written at
    (index2(j, q0, k, q1, i), index2(jj, q0, kk, q1, i)) for every index i
    of the other n-2 qubits. Any 4x4 matrix may be embedded this way.
    """
    if gate.size != 2:
        raise ValueError(f"Expected a two-qubit gate, got size {gate.size}")
    _check_qubit(qubit0, num_qubits)
    _check_qubit(qubit1, num_qubits)
    if qubit0 == qubit1:
        raise ValueError(f"Two-qubit gate needs distinct qubits, got {qubit0} twice")

    rest = np.arange(1 << (num_qubits - 2), dtype=np.int64)
    # positions[j + 2k] lists the global indices with bit j at qubit0, k at qubit1
    positions = [
        index2(j, qubit0, k, qubit1, rest)
        for k, j in itertools.product((0, 1), repeat=2)
    ]

    local = gate.matrix.to_numpy()
    enlarged = np.zeros((1 << num_qubits, 1 << num_qubits), dtype=local.dtype)
    for row, col in itertools.product(range(4), repeat=2):
        enlarged[positions[row], positions[col]] = local[row, col]
    return Matrix(enlarged)
