"""Post-release consistency hook: check, format, commit, push."""

from consistency_hook.hook import ConsistencyHook, HookRun
from consistency_hook.outcome import PipelineOutcome

__all__ = ["ConsistencyHook", "HookRun", "PipelineOutcome"]
