"""Interactive terminal prompts for the launcher menus."""

from typing import Sequence


class PromptAborted(Exception):
    """The user cancelled a prompt (Ctrl+C or end of input)."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read(prompt: str) -> str:
    try:
        return input(prompt)
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptAborted() from e


def _render(message: str, entries: Sequence) -> None:
    print(f"\n{message}\n")
    for number, entry in enumerate(entries, start=1):
        line = f"  {number}) {entry.label}"
        if entry.description:
            line += f"  - {entry.description}"
        print(line)
    print()


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


def select(message: str, entries: Sequence) -> str:
    """
    Show a numbered menu and return the `action` of the chosen entry.

    `entries` are MenuEntry-like objects (label, description, action,
    enabled). Disabled entries are listed but cannot be chosen.
    """
    if not any(entry.enabled for entry in entries):
        raise ValueError(f"No selectable entries for: {message}")

    _render(message, entries)
    while True:
        answer = _read(f"Choose [1-{len(entries)}]: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(entries):
            entry = entries[int(answer) - 1]
            if entry.enabled:
                return entry.action
            print("  That option is not available.")
            continue
        print(f"  Please enter a number from 1 to {len(entries)}.")
