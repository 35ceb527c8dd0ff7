"""Random permutation and sampling helpers shared by the study engines."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle(seq: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a shuffled copy of *seq* using the Fisher-Yates algorithm.

    The input is never modified.  Pass a seeded :class:`random.Random` as
    *rng* for reproducible orderings; the module level generator is used
    otherwise.
    """

    source = rng or random
    items = list(seq)
    for i in range(len(items) - 1, 0, -1):
        j = source.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def sample(seq: Sequence[T], k: int, rng: Optional[random.Random] = None) -> List[T]:
    """Pick *k* distinct elements from *seq*.

    Asking for more elements than available returns all of them in a
    random order instead of failing.
    """

    if k <= 0:
        return []
    return shuffle(seq, rng)[:k]


__all__ = ["sample", "shuffle"]
