"""Body weight models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WeightEntry:
    """One weight sample (kg) for a calendar day."""

    date: str
    weight: float


@dataclass(frozen=True)
class WeightPoint:
    """A charted day; ``is_entry`` is False for forward-filled days."""

    date: str
    weight: float
    is_entry: bool
