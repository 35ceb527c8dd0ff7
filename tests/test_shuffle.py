import random
import sys
from collections import Counter
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizdeck.shuffle import sample, shuffle


@pytest.mark.parametrize("size", [0, 1, 2, 5, 20])
def test_shuffle_returns_permutation_without_mutating_input(size):
    original = list(range(size))
    snapshot = list(original)

    result = shuffle(original, random.Random(size))

    assert sorted(result) == snapshot
    assert len(result) == size
    assert original == snapshot
    assert result is not original


def test_shuffle_accepts_tuples():
    assert sorted(shuffle(("a", "b", "c"))) == ["a", "b", "c"]


def test_shuffle_is_reproducible_with_seeded_generator():
    items = list(range(10))
    assert shuffle(items, random.Random(42)) == shuffle(items, random.Random(42))


def test_shuffle_is_roughly_uniform():
    rng = random.Random(1234)
    counts = Counter(tuple(shuffle("abc", rng)) for _ in range(6000))

    assert len(counts) == 6
    for count in counts.values():
        assert 850 < count < 1150


def test_sample_returns_distinct_prefix():
    items = list(range(10))
    picked = sample(items, 3, random.Random(3))

    assert len(picked) == 3
    assert len(set(picked)) == 3
    assert set(picked) <= set(items)


@pytest.mark.parametrize("k", [4, 5, 50])
def test_sample_larger_than_input_returns_everything_once(k):
    items = ["w", "x", "y", "z"]
    picked = sample(items, k)

    assert sorted(picked) == items


def test_sample_of_zero_is_empty():
    assert sample([1, 2, 3], 0) == []
