"""Shared pytest setup for the Glass test suite."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parent.parent

# tests import both `glass_ref` (from src/) and `tests.support.harness`
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.append(str(entry))


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail collection when two parametrized cases end up with the same node id."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    clashes = sorted(nodeid for nodeid, seen in counts.items() if seen > 1)
    if clashes:
        listing = "\n".join(f"- {nodeid}" for nodeid in clashes)
        raise pytest.UsageError(f"Duplicate test ids collected:\n{listing}")


@pytest.fixture
def sample_vars():
    """Predefined names for scenarios that need lists and dictionaries."""
    from glass_ref.types import GlsDict, GlsList, GlsNumber, GlsString

    return {
        "xs": GlsList([GlsNumber(1.0), GlsNumber(2.0)]),
        "ys": GlsList([GlsNumber(2.0), GlsNumber(3.0)]),
        "left": GlsDict({"a": GlsNumber(1.0)}),
        "right": GlsDict({"a": GlsNumber(2.0), "b": GlsNumber(3.0)}),
        "name": GlsString("glass"),
        "n": GlsNumber(3.0),
    }
