import pytest

from devflow.commands.commit import (
    CommitState,
    build_commit_message,
    file_matches_pattern,
    format_commit_message,
    infer_scope_from_paths,
)
from devflow.config import DEFAULT_COMMIT_FORMAT, DevflowConfig, Scope


@pytest.mark.parametrize(
    "file, pattern, expected",
    [
        ("src/api/app.py", "src/api/**", True),
        ("src/api/v1/app.py", "src/api/**", True),
        ("src/web/app.py", "src/api/**", False),
        ("app.py", "**/*.py", True),
        ("src/deep/app.py", "**/*.py", True),
        ("src/app.ts", "**/*.py", False),
        ("src/app.py", "src/*.py", True),
        ("src/pkg/app.py", "src/*.py", False),
        ("docs/index.md", "docs/index.md", True),
        ("docsXindex.md", "docs.index.md", False),
    ],
)
def test_file_matches_pattern(file, pattern, expected):
    assert file_matches_pattern(file, pattern) is expected


def test_infer_scope_from_paths_picks_most_matches():
    scopes = [
        Scope(value="api", paths=["src/api/**"]),
        Scope(value="ui", paths=["src/ui/**", "**/*.css"]),
        Scope(value="docs"),
    ]
    files = ["src/ui/button.tsx", "src/ui/theme.css", "src/api/app.py"]
    assert infer_scope_from_paths(files, scopes) == "ui"
    assert infer_scope_from_paths(["README.md"], scopes) is None
    assert infer_scope_from_paths(files, []) is None


def test_format_commit_message_full():
    subject = format_commit_message(
        DEFAULT_COMMIT_FORMAT,
        type="feat",
        ticket="X-1",
        breaking="!",
        scope="auth",
        message="add login",
    )
    assert subject == "feat[X-1]!(auth): add login"


def test_format_commit_message_drops_empty_parts():
    subject = format_commit_message(
        DEFAULT_COMMIT_FORMAT,
        type="fix",
        ticket="",
        breaking="",
        scope="",
        message="typo",
    )
    assert subject == "fix: typo"


def test_build_commit_message_with_body_and_footers():
    state = CommitState(
        type="feat",
        scope="api",
        message="drop v1",
        is_breaking=True,
        body="Removes the v1 endpoints.",
        breaking_desc="v1 is gone",
    )
    subject, message = build_commit_message(DevflowConfig(), state, "X-1")
    assert subject == "feat[X-1]!(api): drop v1"
    assert message == (
        "feat[X-1]!(api): drop v1\n\n"
        "Removes the v1 endpoints.\n\n"
        "BREAKING CHANGE: v1 is gone\n"
        "Refs: X-1"
    )


def test_build_commit_message_untracked_ticket_has_no_refs():
    state = CommitState(type="chore", message="bump deps")
    _, message = build_commit_message(DevflowConfig(), state, "UNTRACKED")
    assert message == "chore[UNTRACKED]: bump deps"
