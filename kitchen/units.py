"""Unit tables and exact conversions for ingredient measures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import ClassVar, Literal, cast

from .quantity import ONE, ArithmeticDomainError, Quantity, Whole

MeasureKind = Literal["Volume", "Count", "Weight"]


class UnitConversionError(ValueError):
    """Raised for unrecognized unit tokens or conversions across measure kinds."""

    pass


class VolumeUnit(Enum):
    """Volume units, imperial (US) and metric."""

    TSP = "tsp"
    TBSP = "tbsp"
    FLOZ = "floz"
    CUP = "cup"
    PINT = "pint"
    QRT = "qrt"
    GAL = "gal"
    ML = "ml"
    LTR = "ltr"


# Milliliters per unit. Round kitchen numbers, not lab numbers.
ML_PER_UNIT: dict[VolumeUnit, Whole] = {
    VolumeUnit.TSP: Whole(5),
    VolumeUnit.TBSP: Whole(15),
    VolumeUnit.FLOZ: Whole(30),
    VolumeUnit.CUP: Whole(240),
    VolumeUnit.PINT: Whole(480),
    VolumeUnit.QRT: Whole(960),
    VolumeUnit.GAL: Whole(3840),
    VolumeUnit.ML: Whole(1),
    VolumeUnit.LTR: Whole(1000),
}

# Largest first. normalize() picks the first unit holding at least one whole unit.
NORMALIZE_ORDER: tuple[VolumeUnit, ...] = (
    VolumeUnit.GAL,
    VolumeUnit.LTR,
    VolumeUnit.QRT,
    VolumeUnit.PINT,
    VolumeUnit.CUP,
    VolumeUnit.FLOZ,
    VolumeUnit.TBSP,
    VolumeUnit.TSP,
)

METRIC_UNITS = frozenset({VolumeUnit.ML, VolumeUnit.LTR})

# Units that never take a plural "s" when displayed
UNPLURALIZED_UNITS = frozenset({VolumeUnit.FLOZ, VolumeUnit.ML, VolumeUnit.LTR})

KILOGRAM = Whole(1000)

# Recipe unit aliases (maps every accepted unit token to its canonical unit)
UNIT_ALIASES: dict[str, str] = {
    "tsp": "tsp",
    "tsps": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "floz": "floz",
    "cup": "cup",
    "cups": "cup",
    "pint": "pint",
    "pints": "pint",
    "pnt": "pint",
    "qrt": "qrt",
    "qrts": "qrt",
    "quart": "qrt",
    "quarts": "qrt",
    "gal": "gal",
    "gals": "gal",
    "gallon": "gal",
    "gallons": "gal",
    "ml": "ml",
    "ltr": "ltr",
    "liter": "ltr",
    "liters": "ltr",
    "litre": "ltr",
    "litres": "ltr",
    "cnt": "count",
    "count": "count",
    "g": "gram",
    "gram": "gram",
    "grams": "gram",
    "kg": "kilogram",
    "kilogram": "kilogram",
    "kilograms": "kilogram",
    # Recognized so they fail loudly instead of becoming part of a name
    "lb": "pound",
    "lbs": "pound",
    "pound": "pound",
    "pounds": "pound",
    "oz": "ounce",
}

IMPERIAL_WEIGHT_UNITS = frozenset({"pound", "ounce"})


@total_ordering
@dataclass(frozen=True, eq=False)
class VolumeMeasure:
    """
    A volume in one of the ``VolumeUnit`` units.

    Two volume measures are equal when their milliliter values are equal,
    whatever units they are expressed in.
    """

    unit: VolumeUnit
    qty: Quantity

    def get_ml(self) -> Quantity:
        """Get this measure's quantity as milliliters."""
        return (self.qty * ML_PER_UNIT[self.unit]).normalize()

    def metric(self) -> bool:
        return self.unit in METRIC_UNITS

    def plural(self) -> bool:
        return self.qty.plural()

    def into(self, unit: VolumeUnit) -> VolumeMeasure:
        """Convert into ``unit``. Exact, so converting back recovers the original."""
        return VolumeMeasure(unit, (self.get_ml() / ML_PER_UNIT[unit]).normalize())

    def into_ml(self) -> VolumeMeasure:
        return self.into(VolumeUnit.ML)

    def into_tsp(self) -> VolumeMeasure:
        return self.into(VolumeUnit.TSP)

    def into_tbsp(self) -> VolumeMeasure:
        return self.into(VolumeUnit.TBSP)

    def into_floz(self) -> VolumeMeasure:
        return self.into(VolumeUnit.FLOZ)

    def into_cup(self) -> VolumeMeasure:
        return self.into(VolumeUnit.CUP)

    def into_pint(self) -> VolumeMeasure:
        return self.into(VolumeUnit.PINT)

    def into_qrt(self) -> VolumeMeasure:
        return self.into(VolumeUnit.QRT)

    def into_gal(self) -> VolumeMeasure:
        return self.into(VolumeUnit.GAL)

    def into_ltr(self) -> VolumeMeasure:
        return self.into(VolumeUnit.LTR)

    def normalize(self) -> VolumeMeasure:
        """
        Express this volume in the largest unit that holds at least one whole unit.

        Units are checked gal, ltr, qrt, pint, cup, floz, tbsp, tsp; anything
        smaller than a teaspoon falls back to milliliters.
        """
        ml = self.get_ml()
        for unit in NORMALIZE_ORDER:
            if ml / ML_PER_UNIT[unit] >= ONE:
                return self.into(unit)
        return self.into_ml()

    def _combine(self, other: VolumeMeasure, op) -> VolumeMeasure:
        # Same unit keeps the unit, mixed units are combined in milliliters
        if self.unit == other.unit:
            return VolumeMeasure(self.unit, op(self.qty, other.qty).normalize())
        return VolumeMeasure(VolumeUnit.ML, op(self.get_ml(), other.get_ml()).normalize())

    def __add__(self, other: object) -> VolumeMeasure:
        if not isinstance(other, VolumeMeasure):
            return NotImplemented
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other: object) -> VolumeMeasure:
        if not isinstance(other, VolumeMeasure):
            return NotImplemented
        return self._combine(other, lambda a, b: a - b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VolumeMeasure):
            return NotImplemented
        return self.get_ml() == other.get_ml()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VolumeMeasure):
            return NotImplemented
        return self.get_ml() < other.get_ml()

    def __hash__(self) -> int:
        return hash(self.get_ml())

    def __str__(self) -> str:
        suffix = "s" if self.plural() and self.unit not in UNPLURALIZED_UNITS else ""
        return f"{self.qty} {self.unit.value}{suffix}"


class Measure:
    """
    An ingredient amount: a ``Volume``, a ``Count`` of items or a ``Gram`` weight.

    Arithmetic is only defined within one kind of measure. Mixing kinds raises
    ``ArithmeticDomainError``.
    """

    __slots__ = ()

    kind: MeasureKind

    @staticmethod
    def volume(unit: VolumeUnit | str, qty: Quantity) -> Volume:
        return Volume(VolumeMeasure(VolumeUnit(unit), qty))

    @staticmethod
    def count(qty: Quantity | int) -> Count:
        return Count(Whole(qty) if isinstance(qty, int) else qty)

    @staticmethod
    def gram(qty: Quantity | int) -> Gram:
        return Gram(Whole(qty) if isinstance(qty, int) else qty)

    @staticmethod
    def parse(text: str) -> Measure:
        """Parse the display form of a measure (e.g. ``"1 1/2 cups"``)."""
        from .recipe_parser import parse_measure

        return parse_measure(text)

    @property
    def quantity(self) -> Quantity:
        raise NotImplementedError

    def plural(self) -> bool:
        return self.quantity.plural()

    def normalize(self) -> Measure:
        raise NotImplementedError

    def _check_kind(self, other: Measure, verb: str) -> None:
        if self.kind != other.kind:
            raise ArithmeticDomainError(
                f"Cannot {verb} {other.kind} measure {other} and {self.kind} measure {self}"
            )


@dataclass(frozen=True)
class Volume(Measure):
    """A volume measure."""

    measure: VolumeMeasure
    kind: ClassVar[MeasureKind] = "Volume"

    @property
    def quantity(self) -> Quantity:
        return self.measure.qty

    def normalize(self) -> Volume:
        return Volume(self.measure.normalize())

    def __add__(self, other: object) -> Volume:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "add")
        return Volume(self.measure + cast(Volume, other).measure)

    def __sub__(self, other: object) -> Volume:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "subtract")
        return Volume(self.measure - cast(Volume, other).measure)

    def __str__(self) -> str:
        return str(self.measure)


@dataclass(frozen=True)
class Count(Measure):
    """A count of unitless items, like 3 eggs."""

    qty: Quantity
    kind: ClassVar[MeasureKind] = "Count"

    @property
    def quantity(self) -> Quantity:
        return self.qty

    def normalize(self) -> Count:
        return Count(self.qty.normalize())

    def __add__(self, other: object) -> Count:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "add")
        return Count((self.qty + other.quantity).normalize())

    def __sub__(self, other: object) -> Count:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "subtract")
        return Count((self.qty - other.quantity).normalize())

    def __str__(self) -> str:
        return str(self.qty)


@dataclass(frozen=True)
class Gram(Measure):
    """A weight in grams."""

    qty: Quantity
    kind: ClassVar[MeasureKind] = "Weight"

    @property
    def quantity(self) -> Quantity:
        return self.qty

    def normalize(self) -> Gram:
        return Gram(self.qty.normalize())

    def __add__(self, other: object) -> Gram:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "add")
        return Gram((self.qty + other.quantity).normalize())

    def __sub__(self, other: object) -> Gram:
        if not isinstance(other, Measure):
            return NotImplemented
        self._check_kind(other, "subtract")
        return Gram((self.qty - other.quantity).normalize())

    def __str__(self) -> str:
        return f"{self.qty} gram{'s' if self.plural() else ''}"


def canonical_unit(unit: str) -> str:
    """
    Map a unit token to its canonical unit name.

    Raises:
        UnitConversionError: If the token is not a known unit
    """
    canonical = UNIT_ALIASES.get(unit.lower().strip())
    if canonical is None:
        raise UnitConversionError(f"Unrecognized unit: '{unit}'")
    return canonical


def measure_from_unit(unit: str | None, qty: Quantity) -> Measure:
    """
    Build a measure from a quantity and an optional unit token.

    Args:
        unit: Unit token as written in a recipe (e.g. "cups", "tbsp", "g"),
              or None for a plain count
        qty: The amount

    Returns:
        The matching Volume, Count or Gram measure

    Raises:
        UnitConversionError: If the token is unknown or names an unsupported unit
    """
    if unit is None:
        return Count(qty)

    canonical = canonical_unit(unit)
    if canonical == "count":
        return Count(qty)
    if canonical == "gram":
        return Gram(qty)
    if canonical == "kilogram":
        return Gram((qty * KILOGRAM).normalize())
    if canonical in IMPERIAL_WEIGHT_UNITS:
        raise UnitConversionError(
            f"Imperial weight unit '{unit}' is not supported, use grams or kilograms"
        )
    return Volume(VolumeMeasure(VolumeUnit(canonical), qty))


def convert_measure(measure: Measure, unit: str) -> Measure:
    """
    Convert a measure into the unit named by ``unit``.

    Volumes convert between any volume units; counts and grams only convert
    to themselves (kilograms are expressed as grams).

    Raises:
        UnitConversionError: If the unit is unknown or of a different kind
    """
    canonical = canonical_unit(unit)
    if isinstance(measure, Volume):
        try:
            target = VolumeUnit(canonical)
        except ValueError:
            raise UnitConversionError(
                f"Cannot convert Volume measure {measure} to '{unit}'"
            ) from None
        return Volume(measure.measure.into(target))
    if isinstance(measure, Gram) and canonical in ("gram", "kilogram"):
        return measure.normalize()
    if isinstance(measure, Count) and canonical == "count":
        return measure.normalize()
    raise UnitConversionError(f"Cannot convert {measure.kind} measure {measure} to '{unit}'")
