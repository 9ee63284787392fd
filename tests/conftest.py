"""Shared fixtures for the dynamic_epp tests."""

import pytest

from common import FakeSysfsTree, RecordingSysfs
from dynamic_epp.config import Config

@pytest.fixture(name="tree")
def fixture_tree(tmp_path):
    """An 8-CPU AMD P-State EPP system in 'balanced' state."""
    return FakeSysfsTree(tmp_path / "cpu").build()

@pytest.fixture(name="sysfs")
def fixture_sysfs(tree):
    return RecordingSysfs(tree.root)

@pytest.fixture(name="cfg")
def fixture_cfg(tmp_path):
    """A configuration with built-in defaults only."""
    return Config(str(tmp_path / "dynamic-epp.yaml"), str(tmp_path / "template.yaml"))
