"""Constraint violation errors raised by the numeric validators."""

from typing import Any


class ConstraintError(ValueError):
    """Base class for value-level constraint violations."""


class MaxError(ConstraintError):
    def __init__(self, maximum: Any, value: Any, exclusive: bool = False):
        self.maximum = maximum
        self.value = value
        self.exclusive = exclusive
        op = ">=" if exclusive else ">"
        super().__init__(f"value {value} {op} maximum {maximum}")


class MinError(ConstraintError):
    def __init__(self, minimum: Any, value: Any, exclusive: bool = False):
        self.minimum = minimum
        self.value = value
        self.exclusive = exclusive
        op = "<=" if exclusive else "<"
        super().__init__(f"value {value} {op} minimum {minimum}")


class MultipleOfError(ConstraintError):
    def __init__(self, multiple_of: Any, value: Any):
        self.multiple_of = multiple_of
        self.value = value
        super().__init__(f"value {value} is not a multiple of {multiple_of}")
