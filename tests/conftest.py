"""
Shared test fixtures and configuration for pytest
"""
import os
import tempfile

# Keep logs and config out of the real home directory; must run before
# any numberdesk module is imported.
os.environ["NUMBERDESK_HOME"] = tempfile.mkdtemp(prefix="numberdesk-tests-")

from io import StringIO

import pytest
from rich.console import Console

from numberdesk.core.batch import DelayPolicy, SelectionStore
from numberdesk.core.models import ResourceSnapshot
from numberdesk.utils.config_manager import ConfigManager

from test_helpers import SAMPLE_ENTRIES, FakeAdminApi, FakeSleep


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Fresh ConfigManager backed by a temporary file"""
    ConfigManager.reset_instance()
    manager = ConfigManager(config_path=tmp_path / "config.json")
    yield manager
    ConfigManager.reset_instance()


@pytest.fixture
def snapshot():
    """Five numbers: n1, n3, n5 available; n2 assigned; n4 suspended"""
    return ResourceSnapshot.from_api(SAMPLE_ENTRIES)


@pytest.fixture
def selection(snapshot):
    return SelectionStore(snapshot)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def fast_delay():
    return DelayPolicy(0.0, 0.0)


@pytest.fixture
def fake_api():
    return FakeAdminApi()


@pytest.fixture
def console():
    """Console writing to a buffer; read it back with console.file.getvalue()"""
    return Console(file=StringIO(), width=120, force_terminal=False, color_system=None)
