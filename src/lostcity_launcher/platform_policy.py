"""
Platform-specific command and URL choices.

The engine's embedded web server is reachable on the default HTTP port on
Windows and macOS, and on 8888 elsewhere.
"""

import sys
from typing import List

_CLIENT_PATH = "/rs2.cgi"


class PlatformPolicy:
    """Linux and other POSIX desktops."""

    name = "linux"
    client_port = 8888

    def opener_command(self, target: str) -> List[str]:
        return ["xdg-open", target]

    def gradle_command(self) -> List[str]:
        return ["./gradlew"]

    def client_url(self) -> str:
        port = f":{self.client_port}" if self.client_port else ""
        return f"http://localhost{port}{_CLIENT_PATH}"


class MacPolicy(PlatformPolicy):
    name = "darwin"
    client_port = None

    def opener_command(self, target: str) -> List[str]:
        return ["open", target]


class WindowsPolicy(PlatformPolicy):
    name = "win32"
    client_port = None

    # start and gradlew.bat need cmd.exe; the empty string is start's window title.
    def opener_command(self, target: str) -> List[str]:
        return ["cmd", "/c", "start", "", target]

    def gradle_command(self) -> List[str]:
        return ["cmd", "/c", "gradlew"]


def policy_for(platform: str = sys.platform) -> PlatformPolicy:
    """Return the policy for a sys.platform value."""
    if platform == "win32":
        return WindowsPolicy()
    if platform == "darwin":
        return MacPolicy()
    return PlatformPolicy()
