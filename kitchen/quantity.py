"""Exact rational quantities for recipe ingredients."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from functools import total_ordering


class ArithmeticDomainError(ArithmeticError):
    """Raised for arithmetic the measurement model does not define."""

    pass


@total_ordering
class Quantity:
    """
    An exact, non-negative amount of an ingredient.

    A quantity is either a ``Whole`` number or a ``Frac`` rational. The four
    arithmetic operators always work on the rational value and return a
    ``Frac``; call ``normalize()`` to collapse integral results back into a
    ``Whole`` before display.

    Equality, hashing and ordering compare values, so ``Whole(1)`` equals
    ``Frac(Fraction(2, 2))``.
    """

    __slots__ = ()

    @staticmethod
    def whole(n: int) -> Whole:
        return Whole(n)

    @staticmethod
    def frac(whole: int, numer: int, denom: int) -> Frac:
        """Build ``whole numer/denom`` (e.g. ``frac(1, 1, 2)`` is one and a half)."""
        return Frac(whole + Fraction(numer, denom))

    @staticmethod
    def from_fraction(value: Fraction | int) -> Quantity:
        """Build a normalized quantity from a rational value."""
        return Frac(Fraction(value)).normalize()

    def as_fraction(self) -> Fraction:
        raise NotImplementedError

    def normalize(self) -> Quantity:
        """Collapse an integral ``Frac`` into a ``Whole``. Anything else is unchanged."""
        return self

    def extract_parts(self) -> tuple[int, Fraction]:
        """
        Split into the whole part and the proper fraction remainder.

        Returns:
            Tuple of (whole, remainder), e.g. ``(1, Fraction(1, 2))`` for 3/2
        """
        value = self.as_fraction()
        whole = value.numerator // value.denominator
        return whole, value - whole

    def approx_float(self) -> float:
        """Lossy float projection. Only meant for display, never for math."""
        value = self.as_fraction()
        return value.numerator / value.denominator

    def plural(self) -> bool:
        return self.as_fraction() > 1

    def is_zero(self) -> bool:
        return self.as_fraction() == 0

    def __add__(self, other: object) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Frac(self.as_fraction() + other.as_fraction())

    def __sub__(self, other: object) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        result = self.as_fraction() - other.as_fraction()
        if result < 0:
            raise ArithmeticDomainError(f"Cannot subtract {other} from {self}: result is negative")
        return Frac(result)

    def __mul__(self, other: object) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Frac(self.as_fraction() * other.as_fraction())

    def __truediv__(self, other: object) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        if other.is_zero():
            raise ArithmeticDomainError(f"Cannot divide {self} by a zero quantity")
        return Frac(self.as_fraction() / other.as_fraction())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.as_fraction() == other.as_fraction()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.as_fraction() < other.as_fraction()

    def __hash__(self) -> int:
        return hash(self.as_fraction())

    def __str__(self) -> str:
        normalized = self.normalize()
        if isinstance(normalized, Whole):
            return str(normalized.value)
        whole, remainder = self.extract_parts()
        fraction = f"{remainder.numerator}/{remainder.denominator}"
        if whole == 0:
            return fraction
        return f"{whole} {fraction}"


@dataclass(frozen=True, eq=False)
class Whole(Quantity):
    """A whole number quantity."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Whole quantities need an int, got {self.value!r}")
        if self.value < 0:
            raise ArithmeticDomainError(f"Quantities cannot be negative: {self.value}")

    def as_fraction(self) -> Fraction:
        return Fraction(self.value)


@dataclass(frozen=True, eq=False)
class Frac(Quantity):
    """A rational quantity. Not necessarily a proper fraction."""

    value: Fraction

    def __post_init__(self) -> None:
        # Accept ints and fraction-like values; always store a Fraction
        object.__setattr__(self, "value", Fraction(self.value))
        if self.value < 0:
            raise ArithmeticDomainError(f"Quantities cannot be negative: {self.value}")

    def as_fraction(self) -> Fraction:
        return self.value

    def normalize(self) -> Quantity:
        if self.value.denominator == 1:
            return Whole(self.value.numerator)
        return self


ZERO = Whole(0)
ONE = Whole(1)
