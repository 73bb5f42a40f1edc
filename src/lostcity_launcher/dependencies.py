"""
Pre-flight check for the tools the launcher shells out to.

The Java client ships its own Gradle wrapper and only needs a JDK when it is
actually launched, so it is not checked here.
"""

import shutil
import sys

REQUIRED_TOOLS = {
    "git": "https://git-scm.com/downloads",
    "bun": "https://bun.sh/  (curl -fsSL https://bun.sh/install | bash)",
}


def missing_tools(tools: dict) -> dict:
    """Return the subset of `tools` whose executable is not on PATH."""
    return {name: hint for name, hint in tools.items() if shutil.which(name) is None}


def check_dependencies(tools: dict = REQUIRED_TOOLS) -> None:
    """
    Exit with install guidance unless every tool in `tools` is on PATH.

    Args:
        tools: mapping of executable name -> where to get it
    """
    missing = missing_tools(tools)
    if not missing:
        return

    print("\nThe launcher needs these tools on your PATH:\n")
    for name, hint in missing.items():
        print(f"  {name:6s}  {hint}")
    print("\nInstall them, open a new terminal, and run the launcher again.")
    sys.exit(1)
