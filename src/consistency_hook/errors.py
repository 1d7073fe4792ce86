"""Error taxonomy for the consistency hook.

Every HookError maps to the PipelineOutcome the run ends with. None of
these escape ConsistencyHook.run(); they are converted to a warning there.
"""

from consistency_hook.outcome import PipelineOutcome


class HookError(Exception):
    """Base class for failures inside the hook pipeline."""
    outcome = PipelineOutcome.UNEXPECTED_ERROR


class CheckFailure(HookError):
    """The formatter check could not run (distinct from finding issues)."""
    outcome = PipelineOutcome.FORMAT_CHECK_FAILED


class RepairFailure(HookError):
    """The formatter apply invocation did not complete."""
    outcome = PipelineOutcome.REPAIR_FAILED


class StatusFailure(HookError):
    """The porcelain status query failed to run."""
    outcome = PipelineOutcome.REPAIRED_BUT_COMMIT_FAILED


class CommitOrPushFailure(HookError):
    """One or more of stage, commit, push failed."""
    outcome = PipelineOutcome.REPAIRED_BUT_COMMIT_FAILED


class UnexpectedFailure(HookError):
    """Any other runtime fault."""
    outcome = PipelineOutcome.UNEXPECTED_ERROR


class ConfigError(Exception):
    """Raised when hook or release configuration is missing or invalid."""
    pass
