"""Configuration loading for the consistency hook and release file."""

import json
import logging
import os
import re
import shlex
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern

import jsonschema
import yaml
from dotenv import load_dotenv

from consistency_hook.constants import (
    DEFAULT_APPLY_COMMAND,
    DEFAULT_CHECK_COMMAND,
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_GIT_PROGRAM,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PUSH_BRANCH,
    DEFAULT_PUSH_REMOTE,
    DEFAULT_TAG_PREFIX,
    ENV_PREFIX,
)
from consistency_hook.errors import ConfigError

SCHEMA_PATH = Path(__file__).parent / "schemas" / "release_config.schema.json"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass
class HookConfig:
    """Settings for one ConsistencyHook."""
    
    check_command: List[str] = field(default_factory=lambda: list(DEFAULT_CHECK_COMMAND))
    apply_command: List[str] = field(default_factory=lambda: list(DEFAULT_APPLY_COMMAND))
    git_program: str = DEFAULT_GIT_PROGRAM
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    push_remote: str = DEFAULT_PUSH_REMOTE
    push_branch: str = DEFAULT_PUSH_BRANCH
    stop_on_commit_error: bool = False
    report_dir: Optional[Path] = None

    def with_overrides(self, **overrides: Any) -> "HookConfig":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown hook settings: {', '.join(sorted(unknown))}")
        
        values = {k: v for k, v in overrides.items() if v is not None}
        if "report_dir" in values:
            values["report_dir"] = Path(values["report_dir"])
        updated = replace(self, **values)
        updated.validate()
        return updated

    def validate(self) -> None:
        if not self.check_command:
            raise ConfigError("check_command must name a program")
        if not self.apply_command:
            raise ConfigError("apply_command must name a program")
        if not self.commit_message.strip():
            raise ConfigError("commit_message must not be empty")
        if not self.push_remote or not self.push_branch:
            raise ConfigError("push_remote and push_branch are required")


def _split_command(name: str, raw: str) -> List[str]:
    try:
        parts = shlex.split(raw)
    except ValueError as e:
        raise ConfigError(f"{name} is not a valid command line: {e}")
    if not parts:
        raise ConfigError(f"{name} is empty")
    return parts


def env_overrides() -> Dict[str, Any]:
    """
    Read hook overrides from the environment (and .env, if present).
    
    Recognised variables:
        CONSISTENCY_HOOK_CHECK_COMMAND, CONSISTENCY_HOOK_APPLY_COMMAND,
        CONSISTENCY_HOOK_COMMIT_MESSAGE, CONSISTENCY_HOOK_PUSH_REMOTE,
        CONSISTENCY_HOOK_PUSH_BRANCH, CONSISTENCY_HOOK_REPORT_DIR
    """
    load_dotenv()
    
    overrides: Dict[str, Any] = {}
    for key in ("check_command", "apply_command"):
        raw = os.environ.get(ENV_PREFIX + key.upper())
        if raw:
            overrides[key] = _split_command(ENV_PREFIX + key.upper(), raw)
    for key in ("commit_message", "push_remote", "push_branch", "report_dir"):
        raw = os.environ.get(ENV_PREFIX + key.upper())
        if raw:
            overrides[key] = raw
    return overrides


def load_hook_config(base: Optional[HookConfig] = None, **overrides: Any) -> HookConfig:
    """
    Resolve hook settings: defaults, then `base`, then environment, then
    explicit keyword overrides (e.g. CLI flags).
    """
    config = base if base is not None else HookConfig()
    config = config.with_overrides(**env_overrides())
    return config.with_overrides(**overrides)


def resolve_log_level(name: Optional[str]) -> int:
    """Map a level name to a logging level. Falls back to the environment, then INFO."""
    if not name:
        name = os.environ.get(ENV_PREFIX + "LOG_LEVEL", DEFAULT_LOG_LEVEL)
    level = LOG_LEVELS.get(name.upper())
    if level is None:
        raise ConfigError(f"Unknown log level: {name}")
    return level


@dataclass
class ProjectInfo:
    name: str
    description: str = ""
    repository: str = ""
    homepage: str = ""
    license: str = ""
    author: str = ""


@dataclass
class VersionFile:
    path: str
    template: str = "typescript"


@dataclass
class UpdateFile:
    """A file whose version strings are rewritten on release."""
    path: str
    patterns: Dict[str, Pattern] = field(default_factory=dict)


@dataclass
class ReleaseOptions:
    tag_prefix: str = DEFAULT_TAG_PREFIX
    git_remote: str = DEFAULT_PUSH_REMOTE
    log_level: str = DEFAULT_LOG_LEVEL


@dataclass
class ReleaseConfig:
    """Release configuration file contents."""
    project: ProjectInfo
    version_file: Optional[VersionFile] = None
    update_files: List[UpdateFile] = field(default_factory=list)
    options: ReleaseOptions = field(default_factory=ReleaseOptions)
    post_release: List[Dict[str, Any]] = field(default_factory=list)

    def hook_config(self, entry: Dict[str, Any], **overrides: Any) -> HookConfig:
        """Build the HookConfig for a `format` post-release entry.

        The entry's settings sit above the defaults; environment and
        explicit overrides still win over the file.
        """
        settings = {k: v for k, v in entry.items() if k != "kind"}
        settings.setdefault("push_remote", self.options.git_remote)
        return load_hook_config(HookConfig().with_overrides(**settings), **overrides)


def _read_document(config_file: Path) -> Dict[str, Any]:
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")
    
    content = config_file.read_text()
    try:
        if config_file.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        elif config_file.suffix == ".json":
            data = json.loads(content)
        else:
            raise ConfigError(
                f"Unsupported file type: {config_file.suffix}. Use .yaml, .yml, or .json"
            )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {config_file}: {e}")
    
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping at the top level")
    return data


def _compile_patterns(path: str, patterns: Dict[str, str]) -> Dict[str, Pattern]:
    compiled = {}
    for name, pattern in patterns.items():
        try:
            compiled[name] = re.compile(pattern, re.MULTILINE)
        except re.error as e:
            raise ConfigError(f"Invalid pattern '{name}' for {path}: {e}")
    return compiled


def load_release_config(config_file: Path) -> ReleaseConfig:
    """
    Load and validate a release configuration file (.yaml, .yml or .json).
    
    Raises:
        ConfigError: missing file, parse error, schema violation or bad regex.
    """
    config_file = Path(config_file)
    data = _read_document(config_file)
    
    schema = json.loads(SCHEMA_PATH.read_text())
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Invalid release config at {location}: {e.message}")
    
    version_file = None
    if "version_file" in data:
        version_file = VersionFile(**data["version_file"])
    
    update_files = [
        UpdateFile(
            path=item["path"],
            patterns=_compile_patterns(item["path"], item.get("patterns", {})),
        )
        for item in data.get("update_files", [])
    ]
    
    options = ReleaseOptions(**data.get("options", {}))
    
    return ReleaseConfig(
        project=ProjectInfo(**data["project"]),
        version_file=version_file,
        update_files=update_files,
        options=options,
        post_release=list(data.get("hooks", {}).get("post_release", [])),
    )
