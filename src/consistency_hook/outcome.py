"""Terminal results of a consistency hook run."""

from enum import Enum


class PipelineOutcome(str, Enum):
    NO_CHANGES_NEEDED = "no_changes_needed"
    REPAIRED_AND_COMMITTED = "repaired_and_committed"
    REPAIRED_BUT_COMMIT_FAILED = "repaired_but_commit_failed"
    FORMAT_CHECK_FAILED = "format_check_failed"
    REPAIR_FAILED = "repair_failed"
    UNEXPECTED_ERROR = "unexpected_error"
