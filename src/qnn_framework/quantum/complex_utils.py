"""
Complex Arithmetic
==================

Scalar complex values used at the edges of the engine (memory state,
amplitude queries). Bulk state-vector math runs on numpy complex128
arrays; ``Complex`` converts to and from builtin ``complex`` losslessly.

NaN and infinity propagate like any IEEE double.
"""

from dataclasses import dataclass
from typing import Union

Number = Union[int, float, complex]


@dataclass(frozen=True)
class Complex:
    """Immutable complex scalar (real, imag)"""
    real: float = 0.0
    imag: float = 0.0

    @classmethod
    def from_builtin(cls, z: Number) -> 'Complex':
        z = complex(z)
        return cls(float(z.real), float(z.imag))

    def to_builtin(self) -> complex:
        return complex(self.real, self.imag)

    def __add__(self, other: 'Complex') -> 'Complex':
        return add(self, _as_complex(other))

    __radd__ = __add__

    def __mul__(self, other) -> 'Complex':
        return multiply(self, _as_complex(other))

    __rmul__ = __mul__

    def __complex__(self) -> complex:
        return self.to_builtin()

    def conjugate(self) -> 'Complex':
        return conjugate(self)

    def magnitude_squared(self) -> float:
        return magnitude_squared(self)

    def magnitude(self) -> float:
        return magnitude(self)


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)


def _as_complex(value) -> Complex:
    if isinstance(value, Complex):
        return value
    if isinstance(value, (int, float, complex)):
        return Complex.from_builtin(value)
    return Complex.from_builtin(complex(value))


def add(a: Complex, b: Complex) -> Complex:
    return Complex(a.real + b.real, a.imag + b.imag)


def multiply(a: Complex, b: Complex) -> Complex:
    """(a.re + i a.im)(b.re + i b.im)"""
    return Complex(
        a.real * b.real - a.imag * b.imag,
        a.real * b.imag + a.imag * b.real,
    )


def conjugate(a: Complex) -> Complex:
    return Complex(a.real, -a.imag)


def magnitude_squared(a: Complex) -> float:
    return a.real * a.real + a.imag * a.imag


def magnitude(a: Complex) -> float:
    return magnitude_squared(a) ** 0.5


def scale(a: Complex, factor: float) -> Complex:
    return Complex(a.real * factor, a.imag * factor)


__all__ = [
    'Complex',
    'ZERO',
    'ONE',
    'add',
    'multiply',
    'conjugate',
    'magnitude_squared',
    'magnitude',
    'scale',
]
