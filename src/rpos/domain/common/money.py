from __future__ import annotations

import math
from collections.abc import Iterable


def ensure_non_negative(value: float, field_name: str) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{field_name} must be >= 0")


def ensure_positive(value: float, field_name: str) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{field_name} must be > 0")


def amounts_equal(left: float, right: float) -> bool:
    return math.isclose(left, right, rel_tol=1e-9, abs_tol=1e-9)


def sum_amounts(values: Iterable[float]) -> float:
    return float(sum(values, 0.0))


def format_amount(value: float) -> str:
    """Two-decimal rendering used only at presentation time."""
    return f"{value:.2f}"
