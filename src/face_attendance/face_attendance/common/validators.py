from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_signature(values: Iterable, *, expected_length: Optional[int] = None) -> tuple[float, ...]:
    """Validate a face signature and return it as a tuple of floats.

    Booleans are rejected even though they are ints in Python.
    """

    if values is None or isinstance(values, (str, bytes)):
        raise ValidationError("Signature must be a sequence of numbers")
    try:
        items = list(values)
    except TypeError:
        raise ValidationError("Signature must be a sequence of numbers")

    if not items:
        raise ValidationError("Signature must not be empty")

    out: list[float] = []
    for v in items:
        if isinstance(v, bool) or not isinstance(v, Real):
            raise ValidationError("Signature must contain only numbers")
        f = float(v)
        if not math.isfinite(f):
            raise ValidationError("Signature must contain only finite numbers")
        out.append(f)

    if expected_length is not None and len(out) != expected_length:
        raise ValidationError(f"Signature length {len(out)} does not match enrolled length {expected_length}")
    return tuple(out)
