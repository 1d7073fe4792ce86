"""Defaults for the consistency hook."""

# Formatter invocations (check-only must not write files)
DEFAULT_CHECK_COMMAND = ["deno", "fmt", "--check"]
DEFAULT_APPLY_COMMAND = ["deno", "fmt"]

DEFAULT_GIT_PROGRAM = "git"
DEFAULT_COMMIT_MESSAGE = "fix(fmt): format generated files after release"
DEFAULT_PUSH_REMOTE = "origin"
DEFAULT_PUSH_BRANCH = "main"

DEFAULT_TAG_PREFIX = "v"
DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_REPORTS_DIR = "execution/hook_reports"

ENV_PREFIX = "CONSISTENCY_HOOK_"
