from __future__ import annotations

# Positional, exact comparison of two log extracts.

from collections.abc import Sequence

from ..exceptions import EquivalenceMismatch
from ..models import DiffEqual, DiffResult, DiffUnequal


def first_divergence(a: Sequence[str], b: Sequence[str]) -> int | None:
    n = min(len(a), len(b))
    idx = next((i for i in range(n) if a[i] != b[i]), n)
    if idx == n and len(a) == len(b):
        return None
    return idx


def diff_lines(a: Sequence[str], b: Sequence[str], left_label: str = "left", right_label: str = "right") -> DiffResult:
    idx = first_divergence(a, b)
    if idx is None:
        return DiffEqual(left_label=left_label, right_label=right_label, line_count=len(a))
    return DiffUnequal(
        index=idx,
        left_line=a[idx] if idx < len(a) else None,
        right_line=b[idx] if idx < len(b) else None,
        left_label=left_label,
        right_label=right_label,
        left_lines=tuple(a),
        right_lines=tuple(b),
    )


def assert_equivalent(a: Sequence[str], b: Sequence[str], left_label: str, right_label: str) -> DiffEqual:
    result = diff_lines(a, b, left_label, right_label)
    if isinstance(result, DiffUnequal):
        raise EquivalenceMismatch(result)
    return result
