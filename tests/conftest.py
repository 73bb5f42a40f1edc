"""
Pytest configuration and shared fixtures.

Marks:
    integration -- clones real git repositories created under tmp_path;
                   requires git on PATH (no network access needed)

Tests decorated with this mark are skipped automatically when git is
absent, so the unit test suite always runs cleanly.
"""

import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lostcity_launcher.bootstrap import Bootstrapper
from lostcity_launcher.config import ConfigStore, LauncherSettings
from lostcity_launcher.menu import MenuController
from lostcity_launcher.platform_policy import PlatformPolicy
from lostcity_launcher.revisions import RevisionCatalog

_HAVE_GIT = shutil.which("git") is not None


# ---------------------------------------------------------------------------
# Auto-skip via markers
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(config, items):
    for item in items:
        if item.get_closest_marker("integration") and not _HAVE_GIT:
            item.add_marker(pytest.mark.skip(reason="integration deps missing: git"))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner():
    """
    A CommandRunner stand-in that records calls.
    `git clone ... <dir>` creates <dir> in cwd, like the real clone would.
    """

    def fake_run(args, cwd=None):
        if list(args[:2]) == ["git", "clone"]:
            (Path(cwd) / args[-1]).mkdir()

    mock = MagicMock()
    mock.run.side_effect = fake_run
    return mock


@pytest.fixture()
def catalog():
    return RevisionCatalog()


@pytest.fixture()
def bootstrapper(tmp_path, runner, catalog):
    return Bootstrapper(tmp_path, runner, catalog, LauncherSettings())


@pytest.fixture()
def controller(tmp_path, runner, catalog, bootstrapper):
    return MenuController(
        root=tmp_path,
        store=ConfigStore(tmp_path / "server.json"),
        catalog=catalog,
        bootstrapper=bootstrapper,
        runner=runner,
        policy=PlatformPolicy(),
    )
