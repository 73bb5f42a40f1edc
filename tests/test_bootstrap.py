"""Tests for cloning, first-time setup, update and removal of checkouts."""

import os
import stat
from unittest.mock import patch

import pytest

from lostcity_launcher.bootstrap import COMPANIONS, Bootstrapper, _force_writable
from lostcity_launcher.commands import CommandFailed
from lostcity_launcher.config import Configuration, LauncherSettings


def _commands(runner):
    return [list(c.args[0]) for c in runner.run.call_args_list]


def _clones(runner):
    return {
        args[-1]: args[-2]
        for args in _commands(runner)
        if args[:2] == ["git", "clone"]
    }


def _installed(root):
    return {name for name in COMPANIONS if (root / name).exists()}


# ---------------------------------------------------------------------------
# clone_branch
# ---------------------------------------------------------------------------


def test_clone_branch_policy(bootstrapper):
    config = Configuration(rev="377-wip")
    assert bootstrapper.clone_branch("engine", config) == "377-wip"
    assert bootstrapper.clone_branch("content", config) == "377-wip"
    assert bootstrapper.clone_branch("webclient", config) is None
    assert bootstrapper.clone_branch("javaclient", config) == "377"


@pytest.mark.parametrize("rev", ["225", "244", "245.2", "254", "377-wip"])
def test_clone_branch_never_clones_missing_webclient(bootstrapper, catalog, rev):
    branch = bootstrapper.clone_branch("webclient", Configuration(rev=rev))
    if catalog.describe(rev).webclient:
        assert branch == rev
    else:
        assert branch is None


# ---------------------------------------------------------------------------
# ensure_environment
# ---------------------------------------------------------------------------


def test_empty_dir_with_webclient_gets_all_four(tmp_path, runner, bootstrapper):
    bootstrapper.ensure_environment(Configuration(rev="225"))

    assert _installed(tmp_path) == set(COMPANIONS)
    assert _clones(runner) == {
        "engine": "225",
        "content": "225",
        "webclient": "225",
        "javaclient": "225",
    }


def test_revision_without_webclient_gets_three(tmp_path, runner, bootstrapper):
    bootstrapper.ensure_environment(Configuration(rev="377-wip"))

    assert _installed(tmp_path) == {"engine", "content", "javaclient"}
    assert "webclient" not in _clones(runner)
    assert _clones(runner)["javaclient"] == "377"


def test_clone_command_shape(tmp_path, runner, bootstrapper):
    bootstrapper.ensure_environment(Configuration(rev="244"))

    first = runner.run.call_args_list[0]
    assert list(first.args[0]) == [
        "git",
        "clone",
        "https://github.com/LostCityRS/Engine-TS",
        "--single-branch",
        "-b",
        "244",
        "engine",
    ]
    assert first.kwargs["cwd"] == tmp_path


def test_clone_uses_settings_remote(tmp_path, runner, catalog):
    settings = LauncherSettings(repo_org="https://example.com/fork")
    Bootstrapper(tmp_path, runner, catalog, settings).ensure_environment(
        Configuration(rev="225")
    )
    assert "https://example.com/fork/Content" in _commands(runner)[1]


def test_existing_directories_are_not_recloned(tmp_path, runner, bootstrapper):
    for name in COMPANIONS:
        (tmp_path / name).mkdir()
    (tmp_path / "engine" / ".env").touch()

    bootstrapper.ensure_environment(Configuration(rev="225"))

    runner.run.assert_not_called()


def test_first_time_setup_runs_install_then_setup(tmp_path, runner, bootstrapper):
    bootstrapper.ensure_environment(Configuration(rev="225"))

    tail = runner.run.call_args_list[-2:]
    assert [list(c.args[0]) for c in tail] == [
        ["bun", "install"],
        ["bun", "run", "setup"],
    ]
    assert all(c.kwargs["cwd"] == tmp_path / "engine" for c in tail)


def test_setup_skipped_when_env_exists(tmp_path, runner, bootstrapper):
    (tmp_path / "engine").mkdir()
    (tmp_path / "engine" / ".env").write_text("NODE_PORT=43594\n")

    bootstrapper.ensure_environment(Configuration(rev="225"))

    assert ["bun", "install"] not in _commands(runner)


def test_failed_install_propagates_and_skips_setup(tmp_path, runner, bootstrapper):
    for name in COMPANIONS:
        (tmp_path / name).mkdir()

    def fail_install(args, cwd=None):
        if list(args) == ["bun", "install"]:
            raise CommandFailed(args, 1)

    runner.run.side_effect = fail_install

    with pytest.raises(CommandFailed):
        bootstrapper.ensure_environment(Configuration(rev="225"))
    assert ["bun", "run", "setup"] not in _commands(runner)


def test_failed_clone_is_retried_next_time(tmp_path, runner, bootstrapper):
    clone = runner.run.side_effect
    runner.run.side_effect = CommandFailed(["git", "clone"], 128)
    with pytest.raises(CommandFailed):
        bootstrapper.ensure_environment(Configuration(rev="225"))
    assert _installed(tmp_path) == set()

    runner.run.side_effect = clone
    bootstrapper.ensure_environment(Configuration(rev="225"))
    assert _installed(tmp_path) == set(COMPANIONS)


# ---------------------------------------------------------------------------
# update_all / remove_all
# ---------------------------------------------------------------------------


def test_update_all_pulls_in_order(tmp_path, runner, bootstrapper):
    for name in COMPANIONS:
        (tmp_path / name).mkdir()

    bootstrapper.update_all()

    assert _commands(runner) == [["git", "pull"]] * 4
    assert [c.kwargs["cwd"] for c in runner.run.call_args_list] == [
        tmp_path / name for name in COMPANIONS
    ]


def test_update_all_skips_missing(tmp_path, runner, bootstrapper, capsys):
    for name in ("engine", "content", "javaclient"):
        (tmp_path / name).mkdir()

    bootstrapper.update_all()

    cwds = [c.kwargs["cwd"] for c in runner.run.call_args_list]
    assert tmp_path / "webclient" not in cwds
    assert len(cwds) == 3
    assert "Skipping webclient" in capsys.readouterr().out


def test_remove_all_deletes_everything(tmp_path, bootstrapper):
    for name in COMPANIONS:
        (tmp_path / name / "src").mkdir(parents=True)
        (tmp_path / name / "src" / "file.ts").write_text("x")
    pack = tmp_path / "engine" / ".git" / "objects" / "pack"
    pack.mkdir(parents=True)
    (pack / "pack-1.idx").write_bytes(b"idx")
    os.chmod(pack / "pack-1.idx", stat.S_IREAD)

    bootstrapper.remove_all()

    assert _installed(tmp_path) == set()


def test_remove_all_is_idempotent(tmp_path, bootstrapper):
    (tmp_path / "engine").mkdir()

    bootstrapper.remove_all()
    bootstrapper.remove_all()

    assert _installed(tmp_path) == set()


def test_force_writable_clears_read_only_and_retries(tmp_path):
    target = tmp_path / "pack-1.idx"
    target.write_bytes(b"idx")
    os.chmod(target, stat.S_IREAD)

    _force_writable(os.remove, str(target), PermissionError(str(target)))

    assert not target.exists()


def test_force_writable_accepts_exc_info_tuple(tmp_path):
    target = tmp_path / "pack-1.idx"
    target.write_bytes(b"idx")
    os.chmod(target, stat.S_IREAD)
    error = PermissionError(str(target))

    _force_writable(os.remove, str(target), (PermissionError, error, None))

    assert not target.exists()


def test_force_writable_reraises_other_errors(tmp_path):
    missing = tmp_path / "gone"
    with pytest.raises(FileNotFoundError):
        _force_writable(os.lstat, str(missing), FileNotFoundError(str(missing)))


def test_remove_all_passes_read_only_handler(tmp_path, bootstrapper):
    with patch("shutil.rmtree") as rmtree:
        bootstrapper.remove_all()

    assert rmtree.call_count == len(COMPANIONS)
    handlers = set(rmtree.call_args.kwargs.values())
    assert handlers == {_force_writable}
