from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from helpers import ClassTree

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile(
    "svcregctl",
    database=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("svcregctl")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture
def classes_dir(tmp_path: Path) -> Path:
    root = tmp_path / "target" / "classes"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def tree(classes_dir: Path) -> ClassTree:
    return ClassTree(classes_dir)
