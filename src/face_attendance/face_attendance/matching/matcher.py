from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, Sequence, TypeVar

from .distance import euclidean_distance

T = TypeVar("T")


@dataclass(frozen=True)
class Match(Generic[T]):
    item: T
    distance: float


def nearest_match(
    candidates: Iterable[T],
    query: Sequence[float],
    *,
    threshold: float,
    signature_of: Callable[[T], Sequence[float]],
) -> Optional[Match[T]]:
    """Return the candidate closest to ``query`` if it is strictly under ``threshold``.

    Candidates are scanned in the given order and only a strictly smaller
    distance replaces the current best, so ties go to the earliest candidate.
    """

    best: Optional[Match[T]] = None
    for item in candidates:
        d = euclidean_distance(signature_of(item), query)
        if d < threshold and (best is None or d < best.distance):
            best = Match(item=item, distance=d)
    return best
