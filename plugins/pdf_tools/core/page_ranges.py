"""Parse human-entered page range expressions.

An expression is a comma separated list of 1-based page numbers (``"5"``) and
inclusive intervals (``"2-4"`` or ``"4-2"``). Parsing is forgiving: malformed
terms and out-of-range pages are skipped, so ``select_pages`` is defined for
every input and only ever narrows the result.
"""

from __future__ import annotations

import re
from typing import Iterable, List

_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")

# Longer bounds lie past any real document and are capped rather than converted.
_MAX_DIGITS = 12
_HUGE = 10**_MAX_DIGITS


def _to_int(value: str) -> int | None:
    """Read the leading integer of ``value`` (``"3abc"`` -> 3, ``"1.5"`` -> 1)."""

    match = _LEADING_INT.match(value)
    if match is None:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    number = int(digits) if len(digits) <= _MAX_DIGITS else _HUGE
    return -number if sign == "-" else number


def select_pages(expression: str | None, page_count: int) -> List[int]:
    """Return the sorted, unique zero-based page indices named by ``expression``.

    Every index lies in ``[0, page_count)``. Nothing is raised: a term that is
    not a number or a two-sided interval contributes nothing, and intervals
    reaching past the document are clipped to it.
    """

    if not expression or page_count <= 0:
        return []

    selected: set[int] = set()
    for term in expression.split(","):
        bounds = term.strip().split("-")
        if len(bounds) == 1:
            value = _to_int(bounds[0])
            if value is not None and 0 <= value - 1 < page_count:
                selected.add(value - 1)
        elif len(bounds) == 2:
            start, end = _to_int(bounds[0]), _to_int(bounds[1])
            if start is None or end is None:
                continue
            low = max(min(start, end) - 1, 0)
            high = min(max(start, end) - 1, page_count - 1)
            selected.update(range(low, high + 1))
    return sorted(selected)


def complement_pages(selected: Iterable[int], page_count: int) -> List[int]:
    """Return the ascending indices of ``[0, page_count)`` missing from ``selected``."""

    excluded = set(selected)
    return [index for index in range(max(page_count, 0)) if index not in excluded]


def describe_pages(indices: Iterable[int]) -> str:
    """Compact zero-based ``indices`` into a 1-based string like ``"1-3, 5"``."""

    ordered = sorted(set(indices))
    if not ordered:
        return ""
    runs: List[str] = []
    start = prev = ordered[0]
    for index in ordered[1:] + [None]:
        if index is not None and index == prev + 1:
            prev = index
            continue
        runs.append(f"{start + 1}" if start == prev else f"{start + 1}-{prev + 1}")
        if index is not None:
            start = prev = index
    return ", ".join(runs)


__all__ = ["select_pages", "complement_pages", "describe_pages"]
