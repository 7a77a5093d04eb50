"""Enumerations used throughout the tally module."""

from __future__ import annotations

from enum import Enum


class _StrEnum(str, Enum):
    """Enum subclass that compares/serialises as its value."""

    def __str__(self) -> str:  # pragma: no cover - trivial
        return str(self.value)


class Channel(_StrEnum):
    ATTENDED = "attended"
    TRANSPORTED = "transported"


class Axis(_StrEnum):
    SEX = "sex"
    AGE = "age"

    @property
    def pool(self) -> str:
        """Name of the counter holding this axis' unclassified patients."""

        return "sex_unknown" if self is Axis.SEX else "age_unknown"


class Category(_StrEnum):
    MALE = "male"
    FEMALE = "female"
    MINORS = "minors"
    ADULTS = "adults"

    @property
    def axis(self) -> Axis:
        if self in (Category.MALE, Category.FEMALE):
            return Axis.SEX
        return Axis.AGE


class Resource(_StrEnum):
    DECEASED = "deceased"
    EVACUATED = "evacuated"
    MOBILE_UNITS = "mobile_units"
    AIR_UNITS = "air_units"


class AllocationField(_StrEnum):
    NAME = "name"
    COUNT = "count"


__all__ = ["Channel", "Axis", "Category", "Resource", "AllocationField"]
