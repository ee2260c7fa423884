from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")


def round_money(value: float) -> float:
    return round(float(value), 2)


def round_pct(value: float, digits: int = 1) -> float:
    return round(float(value), digits)


def pct_change(current: float, previous: float) -> float:
    """Percent change from previous to current, rounded to one decimal.

    A zero baseline yields 100 when current grew and 0 when both are zero.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round_pct((current - previous) / previous * 100)


def trend(change: float) -> str:
    return "up" if change >= 0 else "down"


def ratio_pct(part: float, whole: float, digits: int = 1) -> float:
    if whole <= 0:
        return 0.0
    return round_pct(part / whole * 100, digits)


def top_k(items: Iterable[T], key: Callable[[T], Any], k: int | None = None) -> list[T]:
    """Descending by key; ties keep first-seen order."""
    ranked = sorted(items, key=key, reverse=True)
    return ranked if k is None else ranked[:k]
