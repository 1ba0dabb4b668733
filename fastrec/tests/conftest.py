"""Shared fixtures: a tiny hand-checked store and a seeded random one."""

import numpy as np
import pytest

from fastrec.data.index import SimpleIndex
from fastrec.preference.store import PreferenceStore


SCENARIO_RECORDS = [
    ("u0", "i0", 1.0),
    ("u0", "i1", 1.0),
    ("u1", "i0", 1.0),
    ("u1", "i2", 1.0),
]


@pytest.fixture
def scenario_store() -> PreferenceStore:
    """Two users, three items, one shared item."""
    users = SimpleIndex(["u0", "u1"])
    items = SimpleIndex(["i0", "i1", "i2"])
    return PreferenceStore.build(SCENARIO_RECORDS, users, items)


@pytest.fixture
def random_store() -> PreferenceStore:
    """40 users x 25 items, ~200 distinct pairs, some users and items empty."""
    rng = np.random.default_rng(7)
    pairs = set()
    while len(pairs) < 200:
        # Users 38-39 and items 23-24 never drawn
        pairs.add((int(rng.integers(0, 38)), int(rng.integers(0, 23))))
    records = [
        (u, i, float(rng.integers(1, 6)))
        for u, i in sorted(pairs)
    ]
    return PreferenceStore.from_indexed(records, num_users=40, num_items=25)
