"""
CLI entry point for lostcity-launcher.

Run it from the directory that should hold the engine/, content/,
webclient/ and javaclient/ checkouts. Everything else happens in the menu.
"""

import argparse
import os
import sys
from pathlib import Path

from lostcity_launcher import __version__
from lostcity_launcher.bootstrap import Bootstrapper
from lostcity_launcher.commands import CommandFailed, CommandRunner
from lostcity_launcher.config import (
    CONFIG_FILE,
    ConfigError,
    ConfigStore,
    read_settings,
)
from lostcity_launcher.dependencies import REQUIRED_TOOLS, check_dependencies
from lostcity_launcher.menu import MenuController
from lostcity_launcher.platform_policy import policy_for
from lostcity_launcher.prompts import PromptAborted
from lostcity_launcher.revisions import RevisionCatalog


def build_parser():
    parser = argparse.ArgumentParser(
        prog="lostcity-launcher",
        description="Set up, update and run a LostCity server and clients.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def build_controller(root: Path) -> MenuController:
    settings = read_settings(root)
    runner = CommandRunner()
    catalog = RevisionCatalog()
    return MenuController(
        root=root,
        store=ConfigStore(root / CONFIG_FILE),
        catalog=catalog,
        bootstrapper=Bootstrapper(root, runner, catalog, settings),
        runner=runner,
        policy=policy_for(sys.platform),
    )


def run_menu_loop(controller: MenuController) -> int:
    """
    Drive the menu until the user quits.

    External commands print their own errors, so a failed command or a
    cancelled prompt ends the launcher quietly with status 0. Anything else
    is reported and the menu is shown again.
    """
    while controller.running:
        try:
            controller.main()
        except (CommandFailed, PromptAborted, KeyboardInterrupt):
            return 0
        except Exception as e:
            print(e)
    return 0


def main(argv=None):
    build_parser().parse_args(argv)

    root = Path(os.getcwd()).resolve()
    print(f"=== lostcity-launcher: {root} ===")

    check_dependencies(REQUIRED_TOOLS)

    try:
        controller = build_controller(root)
    except ConfigError as e:
        print(f"\n{e}", file=sys.stderr)
        return 1

    return run_menu_loop(controller)


if __name__ == "__main__":
    sys.exit(main())
