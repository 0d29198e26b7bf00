"""
Shared pytest fixtures for the min-max heap tests.
"""

import os
import random
from typing import List

import pytest

from heap import MinMaxHeap, parent, grandparent, is_min_level


def assert_minmax_invariant(values: List[int]) -> None:
    """Checks every node against its parent and grandparent, independently of the engine."""
    for i in range(1, len(values)):
        for anchor in (parent(i), grandparent(i)):
            if anchor < 0:
                continue
            if is_min_level(anchor):
                assert values[anchor] <= values[i], f"min-level {anchor} > {i} in {values}"
            else:
                assert values[anchor] >= values[i], f"max-level {anchor} < {i} in {values}"


@pytest.fixture
def heap() -> MinMaxHeap:
    return MinMaxHeap(verify_sample_rate=1)


@pytest.fixture
def make_heap():
    """Builds a heap from an already valid min-max array."""

    def _make(values: List[int]) -> MinMaxHeap:
        return MinMaxHeap.restore({"values": list(values)}, verify_sample_rate=1)

    return _make


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20241019)


@pytest.fixture
def state_path(tmp_path) -> str:
    return os.path.join(str(tmp_path), "heap_state.json")


class FakeClock:
    """Manually advanced clock for playback tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def check_invariant():
    return assert_minmax_invariant
