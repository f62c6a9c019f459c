import logging

import pytest

import devflow.__main__ as cli
from devflow.exceptions import DevflowError, GitError
from devflow.parsers import commit_options, fixup_options, get_parsers
from devflow.signals import CancelSignal


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    """Keep test runs from reconfiguring the root logger."""
    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: calls.append(kwargs))
    return calls


def use_command(monkeypatch, command):
    monkeypatch.setattr(cli, "run_command", command)


def test_get_parsers():
    root_parser, subparsers = get_parsers()
    assert set(subparsers.choices) == {"branch", "commit", "fixup", "pr"}
    args = root_parser.parse_args(
        ["-v", "commit", "--type", "feat", "--no-breaking", "--files", "a.py, b.py"]
    )
    assert args.verbose
    assert args.command == "commit"
    options = commit_options(args)
    assert options.type == "feat"
    assert options.breaking is False
    assert options.files == ["a.py", "b.py"]
    assert options.scope is None


def test_fixup_parser():
    root_parser, _ = get_parsers()
    args = root_parser.parse_args(["fixup", "--target", "abc123", "--no-autosquash", "-a"])
    options = fixup_options(args)
    assert options.target == "abc123"
    assert options.autosquash is False
    assert options.all
    assert options.files == []


def test_version(capsys):
    with pytest.raises(SystemExit) as exit_info:
        cli.main(["--version"])
    assert exit_info.value.code == 0
    assert "devflow v" in capsys.readouterr().out


def test_missing_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exit_info:
        cli.main([])
    assert exit_info.value.code == 1
    assert "usage: devflow" in capsys.readouterr().out


def test_success_exits_zero(monkeypatch, logging_calls):
    seen = []

    async def command(args):
        seen.append(args.command)

    use_command(monkeypatch, command)
    with pytest.raises(SystemExit) as exit_info:
        cli.main(["--verbose", "branch", "--dry-run"])
    assert exit_info.value.code == 0
    assert seen == ["branch"]
    assert logging_calls[0]["console_log_level"] == logging.DEBUG


def test_cancel_exits_zero(monkeypatch, capsys):
    async def command(args):
        raise CancelSignal()

    use_command(monkeypatch, command)
    with pytest.raises(SystemExit) as exit_info:
        cli.main(["commit"])
    assert exit_info.value.code == 0
    assert "Cancelled." in capsys.readouterr().out


def test_devflow_error_exits_one(monkeypatch, capsys):
    async def command(args):
        raise GitError(["git", "push"], 1, "rejected")

    use_command(monkeypatch, command)
    with pytest.raises(SystemExit) as exit_info:
        cli.main(["pr"])
    assert exit_info.value.code == 1
    output = capsys.readouterr().out
    assert "Error:" in output
    assert "rejected" in output


def test_unexpected_error_exits_one(monkeypatch):
    async def command(args):
        raise RuntimeError("boom")

    use_command(monkeypatch, command)
    with pytest.raises(SystemExit) as exit_info:
        cli.main(["pr"])
    assert exit_info.value.code == 1


@pytest.mark.asyncio
async def test_run_command_rejects_unknown_command():
    _, subparsers = get_parsers()
    args = subparsers.choices["pr"].parse_args([])
    args.command = "deploy"
    args.debug_hooks = False
    with pytest.raises(DevflowError):
        await cli.run_command(args)
