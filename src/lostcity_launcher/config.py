"""
Launcher configuration.

Two files live in the working directory:

    server.json    -- the selected revision, written by the launcher
    launcher.toml  -- optional, hand-edited upstream overrides for forks

server.json format:

    {
      "rev": "225"
    }

launcher.toml format (every key optional):

    repo_org = "https://github.com/LostCityRS"

    [repos]
    engine = "Engine-TS"
    content = "Content"
    webclient = "Client-TS"
    javaclient = "Client-Java"
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import tomli

CONFIG_FILE = "server.json"
SETTINGS_FILE = "launcher.toml"

DEFAULT_REPO_ORG = "https://github.com/LostCityRS"
DEFAULT_REPOS = {
    "engine": "Engine-TS",
    "content": "Content",
    "webclient": "Client-TS",
    "javaclient": "Client-Java",
}


class ConfigNotFound(FileNotFoundError):
    """server.json does not exist yet; first-run setup is needed."""


class ConfigError(ValueError):
    """A configuration file exists but cannot be used."""


# ---------------------------------------------------------------------------
# server.json
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Configuration:
    rev: str

    def to_dict(self) -> dict:
        return {"rev": self.rev}

    @classmethod
    def from_dict(cls, data) -> "Configuration":
        if not isinstance(data, dict) or not isinstance(data.get("rev"), str):
            raise ConfigError('expected an object with a string "rev" field')
        return cls(rev=data["rev"])


class ConfigStore:
    """Loads and saves the persisted Configuration."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Configuration:
        if not self.path.exists():
            raise ConfigNotFound(str(self.path))
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return Configuration.from_dict(data)
        except (ValueError, OSError) as e:
            # JSONDecodeError, UnicodeDecodeError and ConfigError are ValueErrors.
            raise ConfigError(f"Invalid {self.path.name}: {e}") from e

    def save(self, config: Configuration) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
        print(f"\nWrote {self.path}")


# ---------------------------------------------------------------------------
# launcher.toml
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LauncherSettings:
    repo_org: str = DEFAULT_REPO_ORG
    repos: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_REPOS))

    def remote_url(self, companion: str) -> str:
        return f"{self.repo_org.rstrip('/')}/{self.repos[companion]}"


def read_settings(root: Path) -> LauncherSettings:
    """Read launcher.toml from root, falling back to the upstream defaults."""
    settings_path = Path(root) / SETTINGS_FILE
    if not settings_path.exists():
        return LauncherSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {SETTINGS_FILE}: {e}") from e

    unknown = set(data) - {"repo_org", "repos"}
    if unknown:
        raise ConfigError(
            f"Unknown keys in {SETTINGS_FILE}: {', '.join(sorted(unknown))}"
        )

    repos = dict(DEFAULT_REPOS)
    overrides = data.get("repos", {})
    if not isinstance(overrides, dict):
        raise ConfigError(f"[repos] in {SETTINGS_FILE} must be a table")
    unknown = set(overrides) - set(DEFAULT_REPOS)
    if unknown:
        raise ConfigError(
            f"Unknown repos in {SETTINGS_FILE}: {', '.join(sorted(unknown))}"
        )
    repos.update(overrides)

    repo_org = data.get("repo_org", DEFAULT_REPO_ORG)
    if not isinstance(repo_org, str):
        raise ConfigError(f"repo_org in {SETTINGS_FILE} must be a string")
    for companion, repo in repos.items():
        if not isinstance(repo, str):
            raise ConfigError(
                f"repos.{companion} in {SETTINGS_FILE} must be a string"
            )

    return LauncherSettings(repo_org=repo_org, repos=repos)
