import pytest

from devflow import git

BRANCH_COMMITS = [
    git.BranchCommit("2222222bbbbbbb", "feat(auth): add login"),
    git.BranchCommit("1111111aaaaaaa", "fix: typo"),
]


class GitRecorder:
    """Records calls to the side-effecting git helpers."""

    def __init__(self):
        self.calls = []

    def record(self, name):
        def call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return ""

        return call

    def names(self):
        return [name for name, _, _ in self.calls]


@pytest.fixture
def fake_git(monkeypatch):
    """Patch `devflow.git` so no git or gh process is ever started."""
    recorder = GitRecorder()
    defaults = {
        "get_branch": lambda: "feat/X-1_add-login",
        "staged_files": lambda: [],
        "unstaged_files": lambda: ["src/api/app.py", "README.md"],
        "untracked_files": lambda: ["README.md", "notes.txt"],
        "get_default_base": lambda branch: "main",
        "infer_scope": lambda base="main": None,
        "get_remote_branches": lambda exclude=None: ["origin/main", "origin/develop"],
        "get_commits": lambda base: ["feat(auth): add login", "fix: typo"],
        "get_branch_commits": lambda base: list(BRANCH_COMMITS),
        "get_existing_pr": lambda: None,
        "gh_installed": lambda: True,
    }
    for name, value in defaults.items():
        monkeypatch.setattr(git, name, value)
    for name in (
        "stage",
        "stage_all",
        "commit",
        "commit_fixup",
        "rebase_autosquash",
        "checkout_new_branch",
        "push_branch",
        "ensure_label",
        "create_pr",
        "edit_pr",
    ):
        monkeypatch.setattr(git, name, recorder.record(name))
    recorder.patch = lambda name, value: monkeypatch.setattr(git, name, value)
    return recorder
