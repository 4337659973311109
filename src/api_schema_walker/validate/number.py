"""Range and multiple-of validators for numeric values.

Every constraint carries an explicit ``*_set`` flag: zero is a meaningful
bound ("maximum is 0"), so presence cannot be derived from the value.
"""

import decimal
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from fractions import Fraction
from typing import Any, Generic, TypeVar

from api_schema_walker.parser.base import Schema, SchemaType

from .errors import ConstraintError, MaxError, MinError, MultipleOfError

T = TypeVar("T", int, float, decimal.Decimal)


@dataclass
class Number(ABC, Generic[T]):
    """Optional maximum, minimum and multiple-of constraints for one value."""

    max: T = 0
    max_set: bool = False
    max_exclusive: bool = False
    min: T = 0
    min_set: bool = False
    min_exclusive: bool = False
    multiple_of: T = 0
    multiple_of_set: bool = False

    def set_maximum(self, v: T) -> None:
        self.max = v
        self.max_set = True
        self.max_exclusive = False

    def set_exclusive_maximum(self, v: T) -> None:
        self.max = v
        self.max_set = True
        self.max_exclusive = True

    def set_minimum(self, v: T) -> None:
        self.min = v
        self.min_set = True
        self.min_exclusive = False

    def set_exclusive_minimum(self, v: T) -> None:
        self.min = v
        self.min_set = True
        self.min_exclusive = True

    def set_multiple_of(self, v: T) -> None:
        self.multiple_of = v
        self.multiple_of_set = True

    def configured(self) -> bool:
        """Whether any constraint is set."""
        return self.max_set or self.min_set or self.multiple_of_set

    def validate(self, v: T) -> None:
        """Raise a ConstraintError if ``v`` violates a constraint.

        Checks run in the order maximum, minimum, multiple-of; the first
        violation is raised.
        """
        if self.max_set:
            if (self.max_exclusive and v >= self.max) or (not self.max_exclusive and v > self.max):
                raise MaxError(self.max, v, exclusive=self.max_exclusive)

        if self.min_set:
            if (self.min_exclusive and v <= self.min) or (not self.min_exclusive and v < self.min):
                raise MinError(self.min, v, exclusive=self.min_exclusive)

        if self.multiple_of_set and not self._is_multiple(v):
            raise MultipleOfError(self.multiple_of, v)

    def is_valid(self, v: T) -> bool:
        try:
            self.validate(v)
        except ConstraintError:
            return False
        return True

    @abstractmethod
    def coerce(self, value: Any) -> T:
        """Convert a literal from a document into this validator's type.

        Raises TypeError for values that are not numbers.
        """

    @abstractmethod
    def _is_multiple(self, v: T) -> bool:
        """Whether v is an exact multiple of multiple_of."""


def _check_number(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, decimal.Decimal)):
        raise TypeError(f"{value!r} is not a number")
    if value != value:
        raise TypeError("NaN is not comparable")


@dataclass
class Int(Number[int]):
    """Validator for integer values."""

    def coerce(self, value: Any) -> int:
        _check_number(value)
        if isinstance(value, int):
            return value
        if not math.isfinite(value) or value != int(value):
            raise TypeError(f"{value!r} is not an integer")
        return int(value)

    def _is_multiple(self, v: int) -> bool:
        return self.multiple_of != 0 and v % self.multiple_of == 0

    def as_decimal(self) -> "Decimal":
        """The same constraints as a Decimal validator, for non-integral values."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name in ("max", "min", "multiple_of"):
            values[name] = decimal.Decimal(values[name])
        return Decimal(**values)


@dataclass
class Float(Number[float]):
    """Validator for binary floating-point values.

    Multiples are checked on the shortest decimal representation of the
    operands, so 0.3 is a multiple of 0.1.
    """

    max: float = 0.0
    min: float = 0.0
    multiple_of: float = 0.0

    def coerce(self, value: Any) -> float:
        _check_number(value)
        return float(value)

    def _is_multiple(self, v: float) -> bool:
        if self.multiple_of == 0 or not math.isfinite(v) or not math.isfinite(self.multiple_of):
            return False
        return Fraction(repr(v)) % Fraction(repr(self.multiple_of)) == 0


@dataclass
class Decimal(Number[decimal.Decimal]):
    """Validator for arbitrary-precision decimal values.

    Multiples are computed exactly, with no rounding.
    """

    max: decimal.Decimal = decimal.Decimal(0)
    min: decimal.Decimal = decimal.Decimal(0)
    multiple_of: decimal.Decimal = decimal.Decimal(0)

    def coerce(self, value: Any) -> decimal.Decimal:
        _check_number(value)
        if isinstance(value, float):
            return decimal.Decimal(repr(value))
        return decimal.Decimal(value)

    def _is_multiple(self, v: decimal.Decimal) -> bool:
        if self.multiple_of == 0 or not v.is_finite() or not self.multiple_of.is_finite():
            return False
        return Fraction(v) % Fraction(self.multiple_of) == 0


def from_schema(schema: Schema) -> Number | None:
    """Build the validator for a numeric leaf schema.

    Integer schemas get ``Int`` unless a keyword is not integral, in which
    case ``Decimal`` is used. Number schemas with format float or double get
    ``Float``, any other number schema gets ``Decimal``. Returns None for
    non-numeric schemas.
    """
    keywords = [k for k in (schema.maximum, schema.minimum, schema.multiple_of) if k is not None]

    if schema.type is SchemaType.INTEGER and all(k == k.to_integral_value() for k in keywords):
        validator, convert = Int(), int
    elif schema.type is SchemaType.NUMBER and schema.format in ("float", "double"):
        validator, convert = Float(), float
    elif schema.type in (SchemaType.INTEGER, SchemaType.NUMBER):
        validator, convert = Decimal(), decimal.Decimal
    else:
        return None

    if schema.maximum is not None:
        if schema.exclusive_maximum:
            validator.set_exclusive_maximum(convert(schema.maximum))
        else:
            validator.set_maximum(convert(schema.maximum))

    if schema.minimum is not None:
        if schema.exclusive_minimum:
            validator.set_exclusive_minimum(convert(schema.minimum))
        else:
            validator.set_minimum(convert(schema.minimum))

    if schema.multiple_of is not None:
        validator.set_multiple_of(convert(schema.multiple_of))

    return validator
