import subprocess

import pytest

from devflow import git
from devflow.exceptions import GitError


class FakeCompleted:
    def __init__(self, stdout="", returncode=0, stderr=""):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr


@pytest.fixture
def fake_run(monkeypatch):
    """Replace `subprocess.run` with a lookup table keyed by the argument tuple."""
    responses = {}
    calls = []
    envs = []

    def run(args, **kwargs):
        calls.append((tuple(args), kwargs.get("input")))
        envs.append(kwargs.get("env"))
        return responses.get(tuple(args), FakeCompleted())

    monkeypatch.setattr(subprocess, "run", run)
    run.responses = responses
    run.calls = calls
    run.envs = envs
    return run


def test_run_returns_stripped_stdout(fake_run):
    fake_run.responses[("git", "branch", "--show-current")] = FakeCompleted("feat/X_y\n")
    assert git.get_branch() == "feat/X_y"


def test_run_raises_git_error(fake_run):
    fake_run.responses[("git", "status")] = FakeCompleted("", 128, "not a git repository\n")
    with pytest.raises(GitError) as error:
        git.git("status")
    assert error.value.returncode == 128
    assert str(error.value) == "'git status' exited with status 128: not a git repository"


def test_missing_executable_raises_git_error(monkeypatch):
    def run(args, **kwargs):
        raise FileNotFoundError("gh")

    monkeypatch.setattr(subprocess, "run", run)
    with pytest.raises(GitError) as error:
        git.run(["gh", "pr", "view"])
    assert error.value.returncode == 127


def test_branch_pattern_and_parse_branch():
    pattern = git.branch_pattern("{type}/{ticket}_{description}")
    assert pattern.match("feat/ABC-1_add-login")
    parsed = git.parse_branch("feat/ABC-1_add-login")
    assert parsed == git.ParsedBranch("feat", "ABC-1", "add login")


def test_parse_branch_custom_format():
    parsed = git.parse_branch("fix/add-login", "{type}/{description}")
    assert parsed.type == "fix"
    assert parsed.ticket == git.UNTRACKED
    assert parsed.description == "add login"


def test_parse_branch_without_match():
    parsed = git.parse_branch("main")
    assert parsed == git.ParsedBranch(None, git.UNTRACKED, "main")


def test_format_branch_name():
    name = git.format_branch_name(
        "{type}/{ticket}_{description}", type="feat", ticket="X-1", description="add-login"
    )
    assert name == "feat/X-1_add-login"


def test_is_protected_branch():
    assert git.is_protected_branch("main")
    assert git.is_protected_branch("develop")
    assert not git.is_protected_branch("feat/X_y")


def test_infer_ticket(fake_run):
    fake_run.responses[("git", "branch", "--show-current")] = FakeCompleted("fix/PROJ-9_x")
    assert git.infer_ticket() == "PROJ-9"


def test_infer_ticket_outside_repository(fake_run):
    fake_run.responses[("git", "branch", "--show-current")] = FakeCompleted("", 128)
    assert git.infer_ticket() == git.UNTRACKED


def test_infer_scope_from_log(fake_run):
    fake_run.responses[("git", "log", "main..HEAD", "--format=%s")] = FakeCompleted(
        "fix: typo\nfeat[X-1](auth): add login\nfeat(api): old\n"
    )
    assert git.infer_scope() == "auth"


def test_get_scopes_from_commits():
    commits = ["feat(auth): a", "fix(api): b", "feat(auth): c", "chore: d"]
    assert git.get_scopes_from_commits(commits) == ["auth", "api"]


def test_changed_files(fake_run):
    fake_run.responses[("git", "diff", "--cached", "--name-only")] = FakeCompleted("a.py\n")
    fake_run.responses[("git", "diff", "--name-only")] = FakeCompleted("b.py\n\nc.py\n")
    assert git.staged_files() == ["a.py"]
    assert git.unstaged_files() == ["b.py", "c.py"]


def test_stage_skips_empty_file_list(fake_run):
    git.stage([])
    git.stage(["a.py", "b.py"])
    assert fake_run.calls == [(("git", "add", "--", "a.py", "b.py"), None)]


def test_get_remote_branches_excludes_head_and_current(fake_run):
    fake_run.responses[("git", "branch", "-r")] = FakeCompleted(
        "  origin/HEAD -> origin/main\n  origin/main\n  origin/develop\n  origin/feat/x\n"
    )
    assert git.get_remote_branches(exclude="feat/x") == ["origin/main", "origin/develop"]


def test_get_default_base_picks_closest_remote(fake_run):
    fake_run.responses[("git", "branch", "-r")] = FakeCompleted(
        "  origin/main\n  origin/develop\n"
    )
    fake_run.responses[("git", "merge-base", "HEAD", "origin/main")] = FakeCompleted("aaa")
    fake_run.responses[("git", "merge-base", "HEAD", "origin/develop")] = FakeCompleted(
        "bbb"
    )
    fake_run.responses[("git", "rev-list", "--count", "aaa..HEAD")] = FakeCompleted("7")
    fake_run.responses[("git", "rev-list", "--count", "bbb..HEAD")] = FakeCompleted("2")
    assert git.get_default_base("feat/x") == "develop"


def test_get_existing_pr(fake_run):
    fake_run.responses[("gh", "pr", "view", "--json", "url,number")] = FakeCompleted(
        '{"url": "https://github.com/o/r/pull/3", "number": 3}'
    )
    assert git.get_existing_pr() == {"url": "https://github.com/o/r/pull/3", "number": 3}


def test_get_existing_pr_none(fake_run):
    fake_run.responses[("gh", "pr", "view", "--json", "url,number")] = FakeCompleted(
        "", 1, "no pull requests found"
    )
    assert git.get_existing_pr() is None


def test_create_pr_passes_body_on_stdin(fake_run):
    git.create_pr(
        title="Add login",
        body="## Summary",
        base="main",
        head="feat/x",
        labels=["feature", "auth"],
        reviewers=["octocat"],
    )
    args, stdin = fake_run.calls[0]
    assert args[:4] == ("gh", "pr", "create", "--draft")
    assert args[args.index("--label") + 1] == "feature,auth"
    assert "--reviewer" in args
    assert stdin == "## Summary"


def test_ensure_label_ignores_failures(fake_run):
    fake_run.responses[
        ("gh", "label", "create", "bug", "--color", "D73A4A", "--force")
    ] = FakeCompleted("", 1, "forbidden")
    git.ensure_label("bug", "D73A4A")


def test_get_branch_commits(fake_run):
    fake_run.responses[("git", "log", "main..HEAD", "--format=%H|%s")] = FakeCompleted(
        "2222222bbbb|feat: a | b\n1111111aaaa|fix: typo\n"
    )
    commits = git.get_branch_commits("main")
    assert commits == [
        git.BranchCommit("2222222bbbb", "feat: a | b"),
        git.BranchCommit("1111111aaaa", "fix: typo"),
    ]
    assert commits[1].short_hash == "1111111"


def test_get_branch_commits_outside_repository(fake_run):
    fake_run.responses[("git", "log", "main..HEAD", "--format=%H|%s")] = FakeCompleted(
        "", 128, "fatal"
    )
    assert git.get_branch_commits("main") == []


def test_fixup_and_autosquash(fake_run):
    git.commit_fixup("1111111aaaa")
    git.rebase_autosquash("main")
    assert [args for args, _ in fake_run.calls] == [
        ("git", "commit", "--fixup=1111111aaaa"),
        ("git", "rebase", "-i", "--autosquash", "main"),
    ]
    assert fake_run.envs[0] is None
    assert fake_run.envs[1]["GIT_SEQUENCE_EDITOR"] == "true"
