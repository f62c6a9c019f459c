import json

import pytest

from devflow.config import (
    DEFAULT_COMMIT_FORMAT,
    ConfigWarning,
    DevflowConfig,
    find_config_file,
    load_config,
    read_config_file,
    validate_config,
)
from devflow.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_explicit_config(monkeypatch):
    monkeypatch.delenv("DEVFLOW_CONFIG", raising=False)


def test_defaults_without_config_file(tmp_path):
    config = load_config(tmp_path)
    assert config == DevflowConfig()
    assert config.commit_format == DEFAULT_COMMIT_FORMAT
    assert "feat" in config.branch_types
    assert len(config.commit_types) == 10
    assert config.scopes == []


def test_load_json_config(tmp_path):
    (tmp_path / ".devflow.json").write_text(
        json.dumps(
            {
                "ticketBaseUrl": "https://tracker.example.com/browse",
                "scopes": [{"value": "api", "paths": ["src/api/**"]}],
                "branchTypes": ["feat", "fix"],
                "prReviewers": ["octocat"],
            }
        )
    )
    config = load_config(tmp_path)
    assert config.ticket_base_url == "https://tracker.example.com/browse"
    assert config.scopes[0].value == "api"
    assert config.scopes[0].paths == ["src/api/**"]
    assert config.branch_types == ["feat", "fix"]
    assert config.pr_reviewers == ["octocat"]


def test_load_yaml_config(tmp_path):
    (tmp_path / ".devflow.yaml").write_text(
        "commitFormat: '{type}({scope}): {message}'\n"
        "checklist:\n  - Tests pass\n"
    )
    config = load_config(tmp_path)
    assert config.commit_format == "{type}({scope}): {message}"
    assert config.checklist == ["Tests pass"]


def test_load_toml_config(tmp_path):
    (tmp_path / ".devflow.toml").write_text(
        'branchFormat = "{type}/{description}"\n'
        '[[commitTypes]]\nvalue = "feat"\nlabel = "Feature"\n'
    )
    config = load_config(tmp_path)
    assert config.branch_format == "{type}/{description}"
    assert [commit_type.value for commit_type in config.commit_types] == ["feat"]


def test_json_takes_precedence(tmp_path):
    (tmp_path / ".devflow.json").write_text("{}")
    (tmp_path / ".devflow.yaml").write_text("{}")
    assert find_config_file(tmp_path).name == ".devflow.json"


def test_explicit_config_path(tmp_path, monkeypatch):
    path = tmp_path / "custom.yml"
    path.write_text("branchTypes: [spike]\n")
    monkeypatch.setenv("DEVFLOW_CONFIG", str(path))
    assert find_config_file(tmp_path) == path
    assert load_config(tmp_path).branch_types == ["spike"]


def test_malformed_config_falls_back_to_defaults(tmp_path):
    (tmp_path / ".devflow.json").write_text("{not json")
    assert load_config(tmp_path) == DevflowConfig()


def test_schema_mismatch_falls_back_to_defaults(tmp_path):
    (tmp_path / ".devflow.json").write_text(json.dumps({"branchTypes": "feat"}))
    assert load_config(tmp_path) == DevflowConfig()


def test_read_config_file_rejects_non_mapping(tmp_path):
    path = tmp_path / ".devflow.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="mapping"):
        read_config_file(path)


def test_read_config_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        read_config_file(tmp_path / ".devflow.json")


def test_validate_config_warnings():
    warnings = validate_config(
        {
            "bogus": 1,
            "scopes": [{"description": "no value"}],
            "commitFormat": "{scope}",
            "commitTypes": [{"value": "feat"}],
        }
    )
    assert ConfigWarning("bogus", 'Unknown field "bogus" will be ignored') in warnings
    assert [warning.field for warning in warnings] == [
        "bogus",
        "scopes[0]",
        "commitFormat",
        "commitTypes[0]",
    ]


def test_validate_config_accepts_valid_config():
    raw = {"scopes": [{"value": "api"}], "commitFormat": "{type}: {message}"}
    assert validate_config(raw) == []
