"""
Terminal menus and the actions behind them.

States:
    first-run config -> ready -> {start, update, web, java, advanced} -> ready
    ready -> quit

Nothing here catches errors: command failures and prompt cancellation go
straight to the top-level loop in cli.py.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List

from lostcity_launcher.bootstrap import Bootstrapper
from lostcity_launcher.commands import CommandRunner
from lostcity_launcher.config import (
    ConfigError,
    ConfigNotFound,
    ConfigStore,
    Configuration,
)
from lostcity_launcher.platform_policy import PlatformPolicy
from lostcity_launcher.prompts import select
from lostcity_launcher.revisions import RevisionCatalog

# Files produced by `bun run build` in webclient/, served by the engine.
WEBCLIENT_ARTIFACTS = ("client.js", "deps.js")
NO_WEBCLIENT_MESSAGE = (
    "This version does not have a webclient available (yet?), sorry."
)

# Java client launch args: node id, port offset, memory mode, world type.
_JAVA_BASE_ARGS = ["10", "0", "highmem", "members"]
# Revisions after 225 also take the client version.
_JAVA_CLIENT_VERSION = "32"


@dataclass(frozen=True)
class MenuEntry:
    label: str
    description: str
    action: str
    enabled: bool = True


# ---------------------------------------------------------------------------
# Menu construction
# ---------------------------------------------------------------------------


def build_menu(config: Configuration, catalog: RevisionCatalog) -> List[MenuEntry]:
    if catalog.has_webclient(config.rev):
        web = MenuEntry(
            "Run Web Client",
            "Opens your browser to play using the modern web client (TypeScript)",
            "web",
        )
    else:
        web = MenuEntry(
            "Run Web Client (unavailable)",
            "Not available in this version.",
            "web",
            enabled=False,
        )

    return [
        MenuEntry("Start Server", "Starts the server normally", "start"),
        MenuEntry(
            "Update Source", "Pull the latest commits for all subprojects", "update"
        ),
        web,
        MenuEntry(
            "Run Java Client",
            "Opens the legacy Java applet to play using the original client",
            "java",
        ),
        MenuEntry("Advanced Options", "View more options", "advanced"),
        MenuEntry("Quit", "", "quit"),
    ]


def build_advanced_menu() -> List[MenuEntry]:
    return [
        MenuEntry(
            "Start Server (engine dev)",
            "Starts the server and watches for .ts file changes to reload",
            "start-dev",
        ),
        MenuEntry("Clean-build Server", "", "clean-build"),
        MenuEntry("Build Web Client", "", "build-web"),
        MenuEntry("Build Java Client", "", "build-java"),
        MenuEntry(
            "Change Version",
            "Pick another revision and re-download everything",
            "change-version",
        ),
        MenuEntry("Back", "Go back", "back"),
    ]


def build_revision_choices(catalog: RevisionCatalog) -> List[MenuEntry]:
    return [
        MenuEntry(
            f"{rev} (DEVELOPERS ONLY)" if info.wip else rev,
            info.description,
            rev,
        )
        for rev, info in catalog.ordered_for_prompt()
    ]


def java_client_args(rev: str) -> List[str]:
    if rev == "225":
        return list(_JAVA_BASE_ARGS)
    return _JAVA_BASE_ARGS + [_JAVA_CLIENT_VERSION]


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class MenuController:
    """Runs one menu cycle per main() call until `running` goes False."""

    def __init__(
        self,
        root: Path,
        store: ConfigStore,
        catalog: RevisionCatalog,
        bootstrapper: Bootstrapper,
        runner: CommandRunner,
        policy: PlatformPolicy,
    ):
        self.root = Path(root)
        self.store = store
        self.catalog = catalog
        self.bootstrapper = bootstrapper
        self.runner = runner
        self.policy = policy
        self.config = None
        self.running = True

        self._actions = {
            "start": self.start_server,
            "update": self.update_source,
            "web": self.run_web_client,
            "java": self.run_java_client,
            "advanced": self.advanced,
            "quit": self.quit,
        }
        self._advanced_actions = {
            "start-dev": self.start_dev_server,
            "clean-build": self.clean_build_server,
            "build-web": self.build_web_client,
            "build-java": self.build_java_client,
            "change-version": self.change_version,
            "back": lambda: None,
        }

    def _dir(self, companion: str) -> Path:
        return self.bootstrapper.path(companion)

    # --- states -------------------------------------------------------------

    def main(self) -> None:
        if self.config is None:
            self.config = self.load_config()

        self.bootstrapper.ensure_environment(self.config)

        choice = select(
            f"What would you like to do? (revision {self.config.rev})",
            build_menu(self.config, self.catalog),
        )
        self._actions[choice]()

    def load_config(self) -> Configuration:
        try:
            return self.store.load()
        except ConfigNotFound:
            return self.prompt_config()
        except ConfigError as e:
            print(f"\n{e}\nPlease choose a version again.")
            return self.prompt_config()

    def prompt_config(self) -> Configuration:
        rev = select(
            "What version are you interested in?",
            build_revision_choices(self.catalog),
        )
        config = Configuration(rev=rev)
        self.store.save(config)
        return config

    def advanced(self) -> None:
        choice = select("What would you like to do?", build_advanced_menu())
        self._advanced_actions[choice]()

    def quit(self) -> None:
        self.running = False

    # --- top-level actions --------------------------------------------------

    def start_server(self) -> None:
        self.runner.run(["bun", "start"], cwd=self._dir("engine"))

    def update_source(self) -> None:
        self.bootstrapper.update_all()

    def run_web_client(self) -> None:
        if not self.catalog.has_webclient(self.config.rev):
            print(NO_WEBCLIENT_MESSAGE)
            return
        self.runner.run(self.policy.opener_command(self.policy.client_url()))

    def run_java_client(self) -> None:
        args = " ".join(java_client_args(self.config.rev))
        self.runner.run(
            self.policy.gradle_command() + ["run", f"--args={args}"],
            cwd=self._dir("javaclient"),
        )

    # --- advanced actions ---------------------------------------------------

    def start_dev_server(self) -> None:
        self.runner.run(["bun", "run", "dev"], cwd=self._dir("engine"))

    def clean_build_server(self) -> None:
        engine = self._dir("engine")
        self.runner.run(["bun", "run", "clean"], cwd=engine)
        self.runner.run(["bun", "run", "build"], cwd=engine)

    def build_web_client(self) -> None:
        if not self.catalog.has_webclient(self.config.rev):
            print(NO_WEBCLIENT_MESSAGE)
            return
        webclient = self._dir("webclient")
        self.runner.run(["bun", "run", "build"], cwd=webclient)

        dest = self._dir("engine") / "public" / "client"
        dest.mkdir(parents=True, exist_ok=True)
        for artifact in WEBCLIENT_ARTIFACTS:
            shutil.copyfile(webclient / "out" / artifact, dest / artifact)
            print(f"Copied {artifact} -> {dest}")

    def build_java_client(self) -> None:
        self.runner.run(
            self.policy.gradle_command() + ["build"], cwd=self._dir("javaclient")
        )

    def change_version(self) -> None:
        self.config = self.prompt_config()
        self.bootstrapper.remove_all()
