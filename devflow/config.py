# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration loader for devflow commands.

The project configuration lives in the repository root as `.devflow.json`.
YAML (`.devflow.yaml`, `.devflow.yml`) and TOML (`.devflow.toml`) files are
accepted too, and `DEVFLOW_CONFIG` may point at an explicit file.

A missing file yields the defaults. A file that cannot be parsed, or whose
content does not fit the schema, prints a warning and yields the defaults.
Unknown fields and incomplete entries only produce warnings.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devflow.console import console
from devflow.exceptions import ConfigError
from devflow.logger import logger
from devflow.themes import OneColors

CONFIG_FILENAMES = (
    ".devflow.json",
    ".devflow.yaml",
    ".devflow.yml",
    ".devflow.toml",
)

DEFAULT_BRANCH_TYPES = [
    "feat",
    "fix",
    "chore",
    "refactor",
    "docs",
    "test",
    "release",
    "hotfix",
]

DEFAULT_COMMIT_TYPES = [
    {"value": "feat", "label": "feat:     A new feature"},
    {"value": "fix", "label": "fix:      A bug fix"},
    {"value": "chore", "label": "chore:    Maintenance tasks"},
    {"value": "refactor", "label": "refactor: Code restructuring"},
    {"value": "docs", "label": "docs:     Documentation changes"},
    {"value": "test", "label": "test:     Adding or updating tests"},
    {"value": "style", "label": "style:    Code style changes"},
    {"value": "ci", "label": "ci:       CI/CD changes"},
    {"value": "perf", "label": "perf:     Performance improvements"},
    {"value": "build", "label": "build:    Build system changes"},
]

DEFAULT_CHECKLIST = [
    "Code follows project conventions",
    "Self-reviewed the changes",
    "No new warnings or errors introduced",
]

DEFAULT_COMMIT_FORMAT = "{type}[{ticket}]{breaking}({scope}): {message}"
DEFAULT_BRANCH_FORMAT = "{type}/{ticket}_{description}"

VALID_FIELDS = {
    "ticketBaseUrl",
    "scopes",
    "branchTypes",
    "commitTypes",
    "checklist",
    "commitFormat",
    "branchFormat",
    "prReviewers",
}


class Scope(BaseModel):
    value: str
    description: str = ""
    paths: list[str] = Field(default_factory=list)


class CommitType(BaseModel):
    value: str
    label: str


class DevflowConfig(BaseModel):
    """Project configuration. Field aliases match the camelCase file keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ticket_base_url: str | None = Field(default=None, alias="ticketBaseUrl")
    scopes: list[Scope] = Field(default_factory=list)
    branch_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BRANCH_TYPES), alias="branchTypes"
    )
    commit_types: list[CommitType] = Field(
        default_factory=lambda: [CommitType(**item) for item in DEFAULT_COMMIT_TYPES],
        alias="commitTypes",
    )
    checklist: list[str] = Field(default_factory=lambda: list(DEFAULT_CHECKLIST))
    commit_format: str = Field(default=DEFAULT_COMMIT_FORMAT, alias="commitFormat")
    branch_format: str = Field(default=DEFAULT_BRANCH_FORMAT, alias="branchFormat")
    pr_reviewers: list[str] = Field(default_factory=list, alias="prReviewers")


@dataclass
class ConfigWarning:
    field: str
    message: str


def validate_config(raw: dict[str, Any]) -> list[ConfigWarning]:
    """Return non-fatal problems found in a raw configuration mapping."""
    warnings: list[ConfigWarning] = []

    for key in raw:
        if key not in VALID_FIELDS:
            warnings.append(ConfigWarning(key, f'Unknown field "{key}" will be ignored'))

    scopes = raw.get("scopes")
    if isinstance(scopes, list):
        for index, scope in enumerate(scopes):
            if not isinstance(scope, dict) or not scope.get("value"):
                warnings.append(
                    ConfigWarning(
                        f"scopes[{index}]", 'Scope is missing required field "value"'
                    )
                )

    commit_format = raw.get("commitFormat")
    if isinstance(commit_format, str):
        if "{type}" not in commit_format or "{message}" not in commit_format:
            warnings.append(
                ConfigWarning(
                    "commitFormat",
                    "Format should include at least {type} and {message} placeholders",
                )
            )

    commit_types = raw.get("commitTypes")
    if isinstance(commit_types, list):
        for index, commit_type in enumerate(commit_types):
            if (
                not isinstance(commit_type, dict)
                or not commit_type.get("value")
                or not commit_type.get("label")
            ):
                warnings.append(
                    ConfigWarning(
                        f"commitTypes[{index}]",
                        'Commit type is missing "value" or "label"',
                    )
                )

    return warnings


def find_config_file(cwd: Path | None = None) -> Path | None:
    explicit = os.environ.get("DEVFLOW_CONFIG")
    if explicit:
        return Path(explicit)
    base = cwd or Path.cwd()
    return next(
        (base / name for name in CONFIG_FILENAMES if (base / name).is_file()), None
    )


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a configuration file based on its suffix.

    Raises:
        ConfigError: If the file is missing, unreadable, malformed or not a mapping.
    """
    try:
        text = path.read_text(encoding="UTF-8")
    except OSError as error:
        raise ConfigError(f"Cannot read {path.name}: {error}") from error

    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            raw = yaml.safe_load(text) or {}
        elif suffix == ".toml":
            raw = toml.loads(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, toml.TomlDecodeError) as error:
        raise ConfigError(f"Failed to parse {path.name}: {error}") from error

    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level.")
    return raw


def load_config(cwd: Path | None = None) -> DevflowConfig:
    """Load the project configuration, falling back to defaults."""
    path = find_config_file(cwd)
    if path is None:
        logger.debug("No devflow configuration found; using defaults.")
        return DevflowConfig()

    try:
        raw = read_config_file(path)
    except ConfigError as error:
        logger.warning("%s", error)
        console.print(f"[{OneColors.LIGHT_YELLOW}]⚠ {error} Using defaults.[/]")
        return DevflowConfig()

    for warning in validate_config(raw):
        console.print(f"[{OneColors.LIGHT_YELLOW}]⚠ {path.name}: {warning.message}[/]")

    try:
        config = DevflowConfig.model_validate(raw)
    except ValidationError as error:
        logger.warning("Invalid configuration in %s: %s", path, error)
        console.print(
            f"[{OneColors.LIGHT_YELLOW}]⚠ {path.name} does not match the expected "
            "schema. Using defaults.[/]"
        )
        return DevflowConfig()

    logger.debug("Loaded configuration from %s", path)
    return config
