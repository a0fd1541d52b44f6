"""
Complex scalar arithmetic for the unitary simulator.

Values are immutable pairs of 64-bit floats. Equality is approximate:
two values are equal when both component differences are below EPSILON,
which absorbs the error accumulated by long chains of multiplications.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional, Union


EPSILON = 1e-12

# Below this exponent pow() multiplies iteratively.
_POW_ITERATIVE_LIMIT = 5

Number = Union["Complex", float, int]


@dataclass(frozen=True, eq=False)
class Complex:
    """Complex number re + im·i with 64-bit float parts."""
    re: float = 0.0
    im: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "re", float(self.re))
        object.__setattr__(self, "im", float(self.im))

    @classmethod
    def zero(cls) -> Complex:
        return cls(0.0, 0.0)

    @classmethod
    def one(cls) -> Complex:
        return cls(1.0, 0.0)

    @classmethod
    def i(cls) -> Complex:
        """The imaginary unit."""
        return cls(0.0, 1.0)

    @classmethod
    def from_polar(cls, r: float, phi: float) -> Complex:
        """Construct r·e^(iφ)."""
        return cls(r * math.cos(phi), r * math.sin(phi))

    @classmethod
    def from_complex(cls, value: complex) -> Complex:
        value = complex(value)
        return cls(value.real, value.imag)

    @classmethod
    def nth_root_of_unity(cls, n: int) -> Complex:
        """Primitive n-th root of unity e^(i·2π/n); 1 for n == 0."""
        if n == 0:
            return cls.one()
        return cls.from_polar(1.0, 2.0 * math.pi / n)

    def norm_sqr(self) -> float:
        """|z|^2"""
        return self.re * self.re + self.im * self.im

    def scale(self, t: float) -> Complex:
        return Complex(self.re * t, self.im * t)

    def exp(self) -> Complex:
        """e^z = e^re · (cos im + i sin im)"""
        return Complex(math.cos(self.im), math.sin(self.im)).scale(math.exp(self.re))

    def pow(self, n: int) -> Complex:
        """
        Integer power by repeated squaring.

        Small exponents are multiplied out directly. Larger ones are split as
        n = 2^l + r with l = floor(log2 n): self^(2^l) takes l squarings and
        self^r is computed recursively.
        """
        if n < 0:
            raise ValueError(f"Exponent must be non-negative, got {n}")
        if n == 0:
            return Complex.one()
        if n < _POW_ITERATIVE_LIMIT:
            x = Complex.one()
            for _ in range(n):
                x = x * self
            return x

        l = n.bit_length() - 1
        r = n - (1 << l)

        x = self
        for _ in range(l):
            x = x * x

        return self.pow(r) * x

    def approx_eq(self, other: Number) -> bool:
        value = _coerce(other)
        if value is None:
            raise TypeError(f"Cannot compare Complex with {type(other).__name__}")
        return (abs(self.re - value.re) < EPSILON
                and abs(self.im - value.im) < EPSILON)

    def __add__(self, other: Number) -> Complex:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return Complex(self.re + other.re, self.im + other.im)

    __radd__ = __add__

    def __mul__(self, other: Number) -> Complex:
        if isinstance(other, numbers.Real):
            return self.scale(float(other))
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return Complex(self.re * other.re - self.im * other.im,
                       self.re * other.im + self.im * other.re)

    __rmul__ = __mul__

    def __neg__(self) -> Complex:
        return Complex(-self.re, -self.im)

    def __eq__(self, other) -> bool:
        if not isinstance(other, (Complex, numbers.Number)):
            return NotImplemented
        return self.approx_eq(other)

    # Approximate equality cannot be made consistent with hashing.
    __hash__ = None

    def __complex__(self) -> complex:
        return complex(self.re, self.im)

    def __repr__(self) -> str:
        sign = "-" if self.im < 0 else "+"
        return f"{self.re} {sign} {abs(self.im)}i"

    def __str__(self) -> str:
        sign = "-" if self.im < 0 else "+"
        return f"{self.re:.8e} {sign} {abs(self.im):.8e}i"


def _coerce(value) -> Optional[Complex]:
    """Complex view of a number, or None for unsupported types."""
    if isinstance(value, Complex):
        return value
    if isinstance(value, numbers.Number):
        value = complex(value)
        return Complex(value.real, value.imag)
    return None
