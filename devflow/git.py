# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Thin wrappers around the `git` and `gh` command-line tools.

Every invocation goes through `run()`, which executes the command without a
shell, captures its output and raises `GitError` on a non-zero exit status.
Helpers that only gather hints (ticket, scope, default base) swallow
`GitError` and fall back to a neutral value, since a missing hint never blocks
a command.
"""
from __future__ import annotations

import json
import os
import re
import shutil
import subprocess
from dataclasses import dataclass

from devflow.config import DEFAULT_BRANCH_FORMAT
from devflow.exceptions import GitError
from devflow.logger import logger

PROTECTED_BRANCHES = ("main", "master", "develop", "production")
UNTRACKED = "UNTRACKED"

PLACEHOLDER_PATTERNS = {
    "type": r"[^/]+",
    "ticket": r"[^_]+",
    "description": r".+",
    "scope": r"[^/]+",
}
PLACEHOLDER_RE = re.compile(r"\{(type|ticket|description|scope)\}")
SCOPE_FROM_SUBJECT_RE = re.compile(r"^\w+(?:\[[^\]]*\])?!?\(([^)]+)\)")


def run(
    args: list[str], *, input: str | None = None, env: dict[str, str] | None = None
) -> str:
    """Run a command and return its stripped stdout.

    Raises:
        GitError: If the command cannot be started or exits with a non-zero status.
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(
            args, input=input, capture_output=True, text=True, check=False, env=env
        )
    except FileNotFoundError as error:
        raise GitError(args, 127, str(error)) from error
    if result.returncode != 0:
        raise GitError(args, result.returncode, result.stderr)
    return result.stdout.strip()


def git(*args: str) -> str:
    return run(["git", *args])


def lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.strip()]


def get_branch() -> str:
    return git("branch", "--show-current")


def is_protected_branch(branch: str | None = None) -> bool:
    return (branch or get_branch()) in PROTECTED_BRANCHES


@dataclass
class ParsedBranch:
    type: str | None
    ticket: str
    description: str


def branch_pattern(branch_format: str) -> re.Pattern[str]:
    """Compile a branch format such as `{type}/{ticket}_{description}` to a regex."""
    pattern: list[str] = []
    seen: set[str] = set()
    position = 0
    for match in PLACEHOLDER_RE.finditer(branch_format):
        pattern.append(re.escape(branch_format[position : match.start()]))
        name = match.group(1)
        if name in seen:
            pattern.append(f"(?P={name})")
        else:
            pattern.append(f"(?P<{name}>{PLACEHOLDER_PATTERNS[name]})")
            seen.add(name)
        position = match.end()
    pattern.append(re.escape(branch_format[position:]))
    return re.compile(f"^{''.join(pattern)}$")


def parse_branch(branch: str, branch_format: str | None = None) -> ParsedBranch:
    """Split a branch name into type, ticket and description using its format."""
    match = branch_pattern(branch_format or DEFAULT_BRANCH_FORMAT).match(branch)
    if not match:
        return ParsedBranch(type=None, ticket=UNTRACKED, description=branch)
    fields = match.groupdict()
    return ParsedBranch(
        type=fields.get("type"),
        ticket=fields.get("ticket") or UNTRACKED,
        description=(fields.get("description") or branch).replace("-", " "),
    )


def format_branch_name(
    branch_format: str, *, type: str, ticket: str, description: str, scope: str = ""
) -> str:
    name = branch_format
    for key, value in (
        ("type", type),
        ("ticket", ticket),
        ("description", description),
        ("scope", scope),
    ):
        name = name.replace(f"{{{key}}}", value)
    return name


def infer_ticket(branch_format: str | None = None) -> str:
    try:
        return parse_branch(get_branch(), branch_format).ticket
    except GitError:
        return UNTRACKED


def infer_scope(base: str = "main") -> str | None:
    """Return the scope of the most recent scoped commit since `base`."""
    try:
        subjects = lines(git("log", f"{base}..HEAD", "--format=%s"))
    except GitError:
        return None
    for subject in subjects:
        match = SCOPE_FROM_SUBJECT_RE.match(subject)
        if match:
            return match.group(1)
    return None


def staged_files() -> list[str]:
    return lines(git("diff", "--cached", "--name-only"))


def unstaged_files() -> list[str]:
    return lines(git("diff", "--name-only"))


def untracked_files() -> list[str]:
    return lines(git("ls-files", "--others", "--exclude-standard"))


def stage_all() -> None:
    git("add", "-A")


def stage(files: list[str]) -> None:
    if files:
        git("add", "--", *files)


def commit(message: str) -> str:
    return git("commit", "-m", message)


def checkout_new_branch(name: str) -> str:
    return git("checkout", "-b", name)


def get_commits(base: str) -> list[str]:
    try:
        return lines(git("log", f"{base}..HEAD", "--format=%s"))
    except GitError:
        return []


@dataclass
class BranchCommit:
    hash: str
    subject: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


def get_branch_commits(base: str) -> list[BranchCommit]:
    """Return the commits on HEAD since `base`, newest first."""
    try:
        output = git("log", f"{base}..HEAD", "--format=%H|%s")
    except GitError:
        return []
    commits = []
    for line in lines(output):
        commit_hash, _, subject = line.partition("|")
        commits.append(BranchCommit(commit_hash, subject))
    return commits


def commit_fixup(target: str) -> str:
    return git("commit", f"--fixup={target}")


def rebase_autosquash(base: str) -> str:
    """Squash pending fixup commits onto their targets without opening an editor."""
    env = {**os.environ, "GIT_SEQUENCE_EDITOR": "true"}
    return run(["git", "rebase", "-i", "--autosquash", base], env=env)


def get_scopes_from_commits(commits: list[str]) -> list[str]:
    scopes: dict[str, None] = {}
    for subject in commits:
        match = re.search(r"\(([^)]+)\)", subject)
        if match:
            scopes.setdefault(match.group(1), None)
    return list(scopes)


def get_remote_branches(exclude: str | None = None) -> list[str]:
    try:
        remotes = lines(git("branch", "-r"))
    except GitError:
        return []
    branches = []
    for remote in remotes:
        remote = remote.strip()
        if "HEAD" in remote or (exclude and remote.endswith(f"/{exclude}")):
            continue
        branches.append(remote)
    return branches


def get_default_base(current_branch: str) -> str:
    """Return the remote branch the current branch is closest to."""
    closest = "main"
    fewest_ahead: int | None = None
    for remote in get_remote_branches(exclude=current_branch):
        try:
            merge_base = git("merge-base", "HEAD", remote)
            ahead = int(git("rev-list", "--count", f"{merge_base}..HEAD"))
        except (GitError, ValueError):
            continue
        if fewest_ahead is None or ahead < fewest_ahead:
            fewest_ahead = ahead
            closest = remote.removeprefix("origin/")
    return closest


def push_branch(branch: str) -> None:
    git("push", "-u", "origin", branch)


def gh_installed() -> bool:
    return shutil.which("gh") is not None


def get_existing_pr() -> dict | None:
    try:
        output = run(["gh", "pr", "view", "--json", "url,number"])
    except GitError:
        return None
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return None


def ensure_label(name: str, color: str) -> None:
    try:
        run(["gh", "label", "create", name, "--color", color, "--force"])
    except GitError as error:
        logger.debug("Could not create label '%s': %s", name, error)


def create_pr(
    *,
    title: str,
    body: str,
    base: str,
    head: str,
    labels: list[str],
    reviewers: list[str] | None = None,
) -> str:
    args = [
        "gh", "pr", "create", "--draft",
        "--title", title,
        "--body-file", "-",
        "--base", base,
        "--head", head,
        "--assignee", "@me",
    ]  # fmt: skip
    if labels:
        args += ["--label", ",".join(labels)]
    if reviewers:
        args += ["--reviewer", ",".join(reviewers)]
    return run(args, input=body)


def edit_pr(*, number: int, title: str, body: str, labels: list[str]) -> str:
    args = ["gh", "pr", "edit", str(number), "--title", title, "--body-file", "-"]
    if labels:
        args += ["--add-label", ",".join(labels)]
    return run(args, input=body)
