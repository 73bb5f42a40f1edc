"""
Companion checkout management.

Bootstrap sequence (ensure_environment), re-run before every top-level menu:
  1. git clone engine      at the configured revision
  2. git clone content     at the configured revision
  3. git clone webclient   at the configured revision, only if it has one
  4. git clone javaclient  at the revision's client branch
  5. bun install + bun run setup in engine/, while engine/.env is missing

Only missing directories are cloned. A directory's presence is taken to mean
it was cloned at the revision configured at that time; nothing re-checks it.
"""

import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Optional

from lostcity_launcher.commands import CommandRunner
from lostcity_launcher.config import Configuration, LauncherSettings
from lostcity_launcher.revisions import RevisionCatalog

COMPANIONS = ("engine", "content", "webclient", "javaclient")

# Written by `bun run setup`; its absence means first-time setup has not run.
ENGINE_ENV_FILE = ".env"


def _force_writable(func, path, exc):
    """rmtree error handler: retry once after clearing the read-only bit."""
    if isinstance(exc, tuple):
        exc = exc[1]
    # Git marks object files read-only, which Windows refuses to delete.
    if not isinstance(exc, PermissionError):
        raise exc
    os.chmod(path, stat.S_IWRITE)
    func(path)


def force_rmtree(path: Path) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_force_writable)
    else:
        shutil.rmtree(path, onerror=_force_writable)


class Bootstrapper:
    def __init__(
        self,
        root: Path,
        runner: CommandRunner,
        catalog: RevisionCatalog,
        settings: LauncherSettings,
    ):
        self.root = Path(root)
        self.runner = runner
        self.catalog = catalog
        self.settings = settings

    def path(self, companion: str) -> Path:
        return self.root / companion

    def clone_branch(self, companion: str, config: Configuration) -> Optional[str]:
        """Branch/tag to clone `companion` at, or None if it is not used."""
        if companion == "webclient":
            return config.rev if self.catalog.has_webclient(config.rev) else None
        if companion == "javaclient":
            return self.catalog.java_client_branch(config.rev)
        return config.rev

    def clone(self, companion: str, branch: str) -> None:
        self.runner.run(
            [
                "git",
                "clone",
                self.settings.remote_url(companion),
                "--single-branch",
                "-b",
                branch,
                companion,
            ],
            cwd=self.root,
        )

    def ensure_environment(self, config: Configuration) -> None:
        for companion in COMPANIONS:
            if self.path(companion).exists():
                continue
            branch = self.clone_branch(companion, config)
            if branch is None:
                continue
            print(f"\nCloning {companion} ({branch})...")
            self.clone(companion, branch)

        self.ensure_engine_setup()

    def ensure_engine_setup(self) -> None:
        engine = self.path("engine")
        if not engine.exists() or (engine / ENGINE_ENV_FILE).exists():
            return

        print("\nRunning first-time engine setup...")
        self.runner.run(["bun", "install"], cwd=engine)
        self.runner.run(["bun", "run", "setup"], cwd=engine)

    def update_all(self) -> None:
        """git pull every installed companion; missing ones are skipped."""
        for companion in COMPANIONS:
            target = self.path(companion)
            if not target.exists():
                print(f"\nSkipping {companion} (not installed)")
                continue
            print(f"\nUpdating {companion}...")
            self.runner.run(["git", "pull"], cwd=target)

    def remove_all(self) -> None:
        """Delete every companion checkout so the next bootstrap starts fresh."""
        for companion in COMPANIONS:
            try:
                force_rmtree(self.path(companion))
            except FileNotFoundError:
                pass
            else:
                print(f"Removed {self.path(companion)}")
