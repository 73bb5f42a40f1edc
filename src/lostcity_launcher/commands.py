"""
Synchronous external command execution.

Commands inherit the terminal's stdin/stdout/stderr so build tools and the
server stream their own output. A non-zero exit raises CommandFailed; the
tool has already printed its own diagnostics by then.
"""

import subprocess
from pathlib import Path
from typing import Optional, Sequence

COMMAND_FAILED_PREFIX = "Command failed:"


class CommandFailed(Exception):
    """An external command could not be run or exited non-zero."""

    def __init__(self, args: Sequence[str], returncode: Optional[int] = None):
        self.command = list(args)
        self.returncode = returncode
        detail = " ".join(self.command)
        if returncode is not None:
            detail += f" (exit code {returncode})"
        super().__init__(f"{COMMAND_FAILED_PREFIX} {detail}")


class CommandRunner:
    """Runs one external command at a time, blocking until it exits."""

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> None:
        where = f" (in {cwd})" if cwd is not None else ""
        print(f"$ {' '.join(args)}{where}")
        try:
            result = subprocess.run(list(args), cwd=cwd)
        except OSError as e:
            # Missing or unrunnable executable, or a bad working directory.
            raise CommandFailed(args) from e
        if result.returncode != 0:
            raise CommandFailed(args, result.returncode)
