"""Post-release consistency hook.

Runs after release assets are written:
    check -> format -> status -> stage/commit/push

Every failure is downgraded to a single warning. run() never raises,
so formatting hygiene cannot fail a release that already succeeded.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Type

from consistency_hook.config import HookConfig
from consistency_hook.errors import (
    CheckFailure,
    CommitOrPushFailure,
    HookError,
    RepairFailure,
    StatusFailure,
    UnexpectedFailure,
)
from consistency_hook.outcome import PipelineOutcome
from consistency_hook.process import CommandInvocation, Runner, run_command
from consistency_hook.report import write_hook_report
from consistency_hook.vcs import GitCommands, parse_porcelain

logger = logging.getLogger(__name__)


@dataclass
class HookRun:
    """Record of one run() call."""
    outcome: Optional[PipelineOutcome] = None
    invocations: List[CommandInvocation] = field(default_factory=list)
    changed_paths: List[str] = field(default_factory=list)
    warning: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value if self.outcome else None,
            "warning": self.warning,
            "changed_paths": list(self.changed_paths),
            "invocations": [inv.to_dict() for inv in self.invocations],
            "start_time": self.started_at.isoformat() if self.started_at else None,
            "end_time": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
        }


def _error_text(invocation: CommandInvocation) -> str:
    text = invocation.stderr.strip() or invocation.stdout.strip()
    return text or f"exit code {invocation.exit_code}"


class ConsistencyHook:
    """
    Verify generated files are formatted; repair, commit and push if not.

    Args:
        config: Hook settings (formatter commands, commit message, remote/branch)
        runner: Callable with the run_command signature
        cwd: Repository working directory (default: current directory)
    """

    def __init__(
        self,
        config: Optional[HookConfig] = None,
        runner: Runner = run_command,
        cwd: Optional[str] = None,
    ):
        self.config = config if config is not None else HookConfig()
        self.runner = runner
        self.cwd = cwd
        self.git = GitCommands(program=self.config.git_program)
        self.last_run: Optional[HookRun] = None

    def __call__(self) -> PipelineOutcome:
        return self.run()

    def run(self) -> PipelineOutcome:
        """Run the pipeline. Always returns normally; the outcome is advisory."""
        hook_run = HookRun(started_at=datetime.now())
        self.last_run = hook_run

        try:
            hook_run.outcome = self._run_pipeline(hook_run)
        except HookError as e:
            self._record_failure(hook_run, e)
        except Exception as e:
            self._record_failure(hook_run, UnexpectedFailure(f"{type(e).__name__}: {e}"))

        hook_run.finished_at = datetime.now()

        if self.config.report_dir is not None:
            try:
                path = write_hook_report(hook_run, self.config.report_dir)
                logger.debug("Hook report written to %s", path)
            except OSError as e:
                logger.error("Could not write hook report: %s", e)

        return hook_run.outcome

    def _record_failure(self, hook_run: HookRun, error: HookError) -> None:
        hook_run.outcome = error.outcome
        hook_run.warning = str(error)
        logger.warning("Post-release formatting failed: %s", error)

    def _invoke(
        self,
        hook_run: HookRun,
        program: str,
        args: Sequence[str],
        failure: Type[HookError],
        label: str,
    ) -> CommandInvocation:
        try:
            invocation = self.runner(program, list(args), cwd=self.cwd)
        except OSError as e:
            raise failure(f"{label} could not run: {e}") from e
        hook_run.invocations.append(invocation)
        return invocation

    def _run_pipeline(self, hook_run: HookRun) -> PipelineOutcome:
        cfg = self.config

        # 1. Check (must not write files)
        check = self._invoke(
            hook_run, cfg.check_command[0], cfg.check_command[1:], CheckFailure, "Formatter check"
        )
        if check.success:
            logger.info("No formatting issues found in generated files")
            return PipelineOutcome.NO_CHANGES_NEEDED
        logger.info("Formatting issues detected, running formatter")

        # 2. Repair
        apply = self._invoke(
            hook_run, cfg.apply_command[0], cfg.apply_command[1:], RepairFailure, "Formatter"
        )
        if not apply.success:
            raise RepairFailure(f"Formatting failed: {_error_text(apply)}")
        logger.info("Formatting completed")

        # 3. Diff
        status_inv = self._invoke(
            hook_run, self.git.program, self.git.status(), StatusFailure, "git status"
        )
        if not status_inv.success:
            raise StatusFailure(f"Could not check git status: {_error_text(status_inv)}")
        status = parse_porcelain(status_inv.stdout)
        if status.is_clean:
            logger.info("No formatting changes to commit")
            return PipelineOutcome.NO_CHANGES_NEEDED

        # 4. Stage, commit, push
        hook_run.changed_paths = status.paths
        logger.info("Committing formatting changes: %s", ", ".join(status.paths))
        self._commit_and_push(hook_run)

        logger.info(
            "Formatting changes committed and pushed to %s/%s", cfg.push_remote, cfg.push_branch
        )
        return PipelineOutcome.REPAIRED_AND_COMMITTED

    def _commit_and_push(self, hook_run: HookRun) -> None:
        """
        Stage, commit and push back to back.

        Intermediate results are not checked unless stop_on_commit_error is
        set; all failures are reported together afterwards.
        """
        cfg = self.config
        steps = [
            ("stage", self.git.stage_all()),
            ("commit", self.git.commit(cfg.commit_message)),
            ("push", self.git.push(cfg.push_remote, cfg.push_branch)),
        ]

        failed = []
        for name, args in steps:
            try:
                invocation = self.runner(self.git.program, args, cwd=self.cwd)
            except OSError as e:
                failed.append(f"{name} ({e})")
            else:
                hook_run.invocations.append(invocation)
                if not invocation.success:
                    failed.append(f"{name} ({_error_text(invocation)})")
            if failed and cfg.stop_on_commit_error:
                break

        if failed:
            raise CommitOrPushFailure(
                "Could not commit and push formatting changes: " + "; ".join(failed)
            )
