"""
Dense square matrices and state vectors.

Matrix stores size*size elements row-major in a NumPy array. The scalar
type is the array dtype: complex128 for general operators, float64 for
real-valued (permutation-encoded) gates. Operations return new matrices;
only set() and embed() mutate in place.

Basis convention for kronecker(): the left operand holds the more
significant qubits, i.e. operators read q_{n-1} ⊗ ... ⊗ q_1 ⊗ q_0.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from unitary_sim.core.scalar import EPSILON, Complex


DTypeLike = Union[np.dtype, type, str]


def _to_scalar(value):
    if isinstance(value, Complex):
        return complex(value)
    return value


def _as_array(elements: Iterable, dtype: Optional[DTypeLike]) -> np.ndarray:
    if isinstance(elements, np.ndarray):
        values = elements.ravel()
    else:
        values = [_to_scalar(v) for v in elements]
    if dtype is None:
        arr = np.asarray(values)
        if not (np.issubdtype(arr.dtype, np.complexfloating)
                or np.issubdtype(arr.dtype, np.floating)):
            arr = arr.astype(np.float64)
        return arr
    return np.asarray(values, dtype=dtype)


def _approx_equal_arrays(a: np.ndarray, b: np.ndarray) -> bool:
    diff = a - b
    return bool(np.all(np.abs(np.real(diff)) < EPSILON)
                and np.all(np.abs(np.imag(diff)) < EPSILON))


class Matrix:
    """
    Square dense matrix over a numeric scalar type.

    Attributes:
        size: Number of rows (and columns)
        dtype: NumPy scalar type of the elements
    """

    __slots__ = ("_elements",)

    def __init__(self, elements: np.ndarray):
        # Owns its elements; never aliases the caller's array
        elements = np.array(elements, copy=True, order="C")
        if elements.ndim != 2 or elements.shape[0] != elements.shape[1]:
            raise ValueError(f"Matrix must be square, got shape {elements.shape}")
        self._elements = elements

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls, size: int, dtype: DTypeLike = np.complex128) -> Matrix:
        """Zero-filled matrix of given size."""
        return cls(np.zeros((size, size), dtype=dtype))

    @classmethod
    def filled(cls, size: int, value, dtype: DTypeLike = np.complex128) -> Matrix:
        """Matrix with every element set to value."""
        return cls(np.full((size, size), _to_scalar(value), dtype=dtype))

    @classmethod
    def identity(cls, size: int, dtype: DTypeLike = np.complex128) -> Matrix:
        return cls(np.eye(size, dtype=dtype))

    @classmethod
    def from_row_slice(
        cls,
        elements: Sequence,
        dtype: Optional[DTypeLike] = None
    ) -> Matrix:
        """
        Build a matrix from a flat row-major sequence.

        The size is sqrt(len(elements)); a length that is not a perfect
        square is rejected.
        """
        arr = _as_array(elements, dtype)
        size = math.isqrt(arr.size)
        if size * size != arr.size:
            raise ValueError(
                f"Row slice of length {arr.size} is not a square matrix"
            )
        return cls(arr.reshape(size, size))

    @classmethod
    def from_vector(
        cls,
        size: int,
        elements: Sequence,
        dtype: Optional[DTypeLike] = None
    ) -> Matrix:
        """Build a size x size matrix from exactly size*size row-major elements."""
        arr = _as_array(elements, dtype)
        if arr.size != size * size:
            raise ValueError(
                f"Expected {size * size} elements for size {size}, got {arr.size}"
            )
        return cls(arr.reshape(size, size))

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._elements.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._elements.dtype

    def _check_index(self, i: int, j: int) -> None:
        if not (0 <= i < self.size and 0 <= j < self.size):
            raise IndexError(
                f"Index ({i}, {j}) out of range for matrix of size {self.size}"
            )

    def get(self, i: int, j: int):
        """Element at row i, column j."""
        self._check_index(i, j)
        return self._elements[i, j].item()

    def set(self, i: int, j: int, value) -> None:
        """Set the element at row i, column j."""
        self._check_index(i, j)
        self._elements[i, j] = _to_scalar(value)

    def __getitem__(self, index):
        i, j = index
        return self.get(i, j)

    def __setitem__(self, index, value) -> None:
        i, j = index
        self.set(i, j, value)

    def as_slice(self) -> np.ndarray:
        """Flat row-major copy of the elements."""
        return self._elements.ravel().copy()

    def to_numpy(self) -> np.ndarray:
        return self._elements.copy()

    def copy(self) -> Matrix:
        return Matrix(self._elements)

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------

    def embed(self, other: Matrix, i: int, j: int) -> None:
        """
        Embed another matrix into this one, overwriting elements.

        The top-left corner of other lands at (i, j).

        Raises:
            ValueError: If other does not fit inside this matrix.
        """
        if i < 0 or j < 0 or i + other.size > self.size or j + other.size > self.size:
            raise ValueError(
                f"Cannot embed matrix of size {other.size} at ({i}, {j}) "
                f"into matrix of size {self.size}"
            )
        self._elements[i:i + other.size, j:j + other.size] = other._elements

    def submatrix(self, i: int, j: int, size: int) -> Matrix:
        """Copy of the size x size block whose top-left corner is (i, j)."""
        if i < 0 or j < 0 or i + size > self.size or j + size > self.size:
            raise ValueError(
                f"Block of size {size} at ({i}, {j}) exceeds matrix of size {self.size}"
            )
        return Matrix(self._elements[i:i + size, j:j + size])

    def _validate_permutation(self, permutation: Sequence[int]) -> np.ndarray:
        perm = np.asarray(permutation, dtype=np.int64)
        if perm.shape != (self.size,):
            raise ValueError(
                f"Permutation of length {perm.size} for matrix of size {self.size}"
            )
        if not np.array_equal(np.sort(perm), np.arange(self.size)):
            raise ValueError(f"Not a permutation of 0..{self.size - 1}: {list(permutation)}")
        return perm

    def permute_rows(self, permutation: Sequence[int]) -> Matrix:
        """Row i of this matrix becomes row permutation[i] of the result."""
        perm = self._validate_permutation(permutation)
        result = np.empty_like(self._elements)
        result[perm, :] = self._elements
        return Matrix(result)

    def permute_columns(self, permutation: Sequence[int]) -> Matrix:
        """Column j of this matrix becomes column permutation[j] of the result."""
        perm = self._validate_permutation(permutation)
        result = np.empty_like(self._elements)
        result[:, perm] = self._elements
        return Matrix(result)

    def kronecker(self, other: Matrix) -> Matrix:
        """
        Tensor product self ⊗ other.

        Element [r1*m + r2, c1*m + c2] is self[r1, c1] * other[r2, c2],
        where m is other.size.
        """
        return Matrix(np.kron(self._elements, other._elements))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_size(self, other: Matrix, op: str) -> None:
        if self.size != other.size:
            raise ValueError(
                f"Cannot {op} matrices of size {self.size} and {other.size}"
            )

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_size(other, "add")
        return Matrix(self._elements + other._elements)

    def mul(self, other: Matrix) -> Matrix:
        """Matrix product self · other."""
        self._check_same_size(other, "multiply")
        return Matrix(self._elements @ other._elements)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.mul(other)

    def dot(self, vector: Union[StateVector, Sequence]) -> StateVector:
        """Apply this matrix to a state vector."""
        if isinstance(vector, StateVector):
            amplitudes = vector.as_array()
        else:
            amplitudes = np.asarray([_to_scalar(v) for v in vector])
        if amplitudes.shape != (self.size,):
            raise ValueError(
                f"Vector of length {amplitudes.size} for matrix of size {self.size}"
            )
        return StateVector(self._elements @ amplitudes)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def approx_eq(self, other: Matrix) -> bool:
        """Element-wise equality within the complex scalar tolerance."""
        if self.size != other.size:
            return False
        return _approx_equal_arrays(self._elements, other._elements)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.approx_eq(other)

    __hash__ = None

    def conjugate_transpose(self) -> Matrix:
        return Matrix(self._elements.conj().T)

    def is_unitary(self, atol: float = 1e-10) -> bool:
        """Check U · U† == I."""
        product = self._elements @ self._elements.conj().T
        return bool(np.allclose(product, np.eye(self.size), atol=atol))

    def __repr__(self) -> str:
        return f"Matrix(size={self.size}, dtype={self.dtype})"

    def __str__(self) -> str:
        rows = "\n".join(
            "[" + ", ".join(str(v) for v in row) + "]" for row in self._elements
        )
        return f"Matrix {self.size}x{self.size}\n{rows}"


class StateVector:
    """
    Quantum state as an ordered sequence of complex amplitudes.

    The length is 2^n for an n-qubit register; amplitude k belongs to the
    basis state whose bit q is the value of qubit q.
    """

    __slots__ = ("_amplitudes",)

    def __init__(self, amplitudes: Iterable):
        if isinstance(amplitudes, np.ndarray):
            arr = amplitudes.astype(np.complex128).ravel()
        else:
            arr = np.asarray([_to_scalar(a) for a in amplitudes], dtype=np.complex128)
        length = arr.size
        if length == 0 or length & (length - 1):
            raise ValueError(f"State vector length must be a power of two, got {length}")
        self._amplitudes = arr

    @classmethod
    def basis_state(cls, num_qubits: int, index: int = 0) -> StateVector:
        """Computational basis state |index⟩ on num_qubits qubits."""
        dim = 1 << num_qubits
        if not 0 <= index < dim:
            raise ValueError(f"Basis index {index} out of range for {num_qubits} qubits")
        amplitudes = np.zeros(dim, dtype=np.complex128)
        amplitudes[index] = 1.0
        return cls(amplitudes)

    @property
    def num_qubits(self) -> int:
        return len(self).bit_length() - 1

    def __len__(self) -> int:
        return self._amplitudes.size

    def amplitude(self, index: int) -> complex:
        return complex(self._amplitudes[index])

    def probabilities(self) -> np.ndarray:
        return np.abs(self._amplitudes) ** 2

    def norm(self) -> float:
        return float(np.linalg.norm(self._amplitudes))

    def as_array(self) -> np.ndarray:
        return self._amplitudes.copy()

    def nonzero_indices(self, atol: float = EPSILON) -> List[int]:
        """Basis indices whose amplitude magnitude exceeds atol."""
        return [int(i) for i in np.flatnonzero(np.abs(self._amplitudes) > atol)]

    def approx_eq(self, other: StateVector) -> bool:
        if len(self) != len(other):
            return False
        return _approx_equal_arrays(self._amplitudes, other._amplitudes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        return self.approx_eq(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"StateVector(num_qubits={self.num_qubits})"
