"""Global configuration file: ~/.gitlab-fork-cli/config.toml."""

import os
import tomllib
from collections.abc import MutableMapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, cast

import tomlkit

from gitlab_fork.fork.types import TokenSettings
from gitlab_fork.gateway.git.auth import DEFAULT_TOKEN_USERNAME
from gitlab_fork.gateway.git.real import DEFAULT_GIT_NETWORK_TIMEOUT
from gitlab_fork.gateway.gitlab.real import DEFAULT_BASE_URL
from gitlab_fork.promote.types import DEFAULT_BRANCH_NAME

CONFIG_PATH_ENV_VAR = "GITLAB_FORK_CLI_CONFIG"


@dataclass(frozen=True)
class GlobalConfig:
    """In-memory representation of config.toml.

    Example config.toml:
      base_url = "https://gitlab.internal.example.com"
      insecure = true
      default_branch = "master"
      git_timeout_seconds = 300
    """

    base_url: str = DEFAULT_BASE_URL
    insecure: bool = False
    default_branch: str = DEFAULT_BRANCH_NAME
    git_timeout_seconds: int = DEFAULT_GIT_NETWORK_TIMEOUT
    git_username: str = DEFAULT_TOKEN_USERNAME
    secret_name: str = "aml-image-builder-secret"
    secret_key: str = "MODEL_REPO_GIT_TOKEN"
    models_group: str = "amlmodels"
    admin_namespace: str = "kubeflow"


def get_config_keys() -> dict[str, str]:
    """User-exposed config keys with descriptions, in display order."""
    return {
        "base_url": "GitLab instance URL used for API calls",
        "insecure": "Skip TLS certificate verification for GitLab and git",
        "default_branch": "Default branch created on empty destination repositories",
        "git_timeout_seconds": "Timeout for each network git command",
        "git_username": "Username sent with tokens for git over HTTPS",
        "secret_name": "Cluster secret holding the GitLab token in each namespace",
        "secret_key": "Key of the token inside that secret",
        "models_group": "Subgroup of a target group that receives forks",
        "admin_namespace": "Namespace whose token lists and forks projects",
    }


def config_path() -> Path:
    """Location of the config file, honouring GITLAB_FORK_CLI_CONFIG."""
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gitlab-fork-cli" / "config.toml"


def _field_types() -> dict[str, type]:
    return {f.name: type(f.default) for f in fields(GlobalConfig)}


def load_config(path: Path) -> GlobalConfig:
    """Load config.toml if present; otherwise return defaults.

    Unknown keys are ignored.

    Raises:
        ValueError: If a known key has a value of the wrong type
    """
    if not path.exists():
        return GlobalConfig()

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    types = _field_types()
    values: dict[str, Any] = {}
    for key, expected in types.items():
        if key not in data:
            continue
        value = data[key]
        # bool is a subclass of int; reject it where an int is expected
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            msg = f"{path}: '{key}' must be a {expected.__name__}, got {value!r}"
            raise ValueError(msg)
        values[key] = value
    return GlobalConfig(**values)


def parse_config_value(key: str, value: str) -> str | bool | int:
    """Convert a command-line string to the type of config key `key`.

    Raises:
        KeyError: If `key` is not a config key
        ValueError: If `value` cannot be converted
    """
    expected = _field_types()[key]
    if expected is bool:
        if value.lower() not in ("true", "false"):
            raise ValueError(f"Invalid boolean value: {value}")
        return value.lower() == "true"
    if expected is int:
        if not value.isdigit() or int(value) < 1:
            raise ValueError(f"Invalid value: {value}. {key} must be a positive integer.")
        return int(value)
    return value


def write_config_value(path: Path, key: str, value: str | bool | int) -> None:
    """Set one top-level key in config.toml.

    Preserves existing formatting and comments using tomlkit.
    """
    if not path.parent.exists():
        path.parent.mkdir(parents=True)

    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()
        doc.add(tomlkit.comment("gitlab-fork-cli configuration"))

    assert isinstance(doc, MutableMapping), f"Expected MutableMapping, got {type(doc)}"
    cast(dict[str, Any], doc)[key] = value

    with path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)


def token_settings(config: GlobalConfig) -> TokenSettings:
    """Secret layout taken from the effective configuration."""
    return TokenSettings(
        secret_name=config.secret_name,
        secret_key=config.secret_key,
        admin_namespace=config.admin_namespace,
        models_group=config.models_group,
    )
