"""External process invocation for the hook's tool calls."""

import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class CommandInvocation:
    """Captured result of one external command. Immutable once captured."""
    program: str
    args: Tuple[str, ...]
    stdout: str
    stderr: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join((self.program,) + self.args)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command_line,
            "exit_code": self.exit_code,
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


# Anything shaped like run_command can stand in for it.
Runner = Callable[..., CommandInvocation]


def run_command(
    program: str,
    args: Sequence[str],
    cwd: Optional[str] = None,
) -> CommandInvocation:
    """
    Run a program to completion and capture its output.
    
    Blocks until the process exits. No timeout is applied. Output is
    decoded as UTF-8 with undecodable bytes replaced; it only feeds logs.
    Launch failures (missing binary, permissions) propagate as OSError.
    """
    result = subprocess.run(
        [program, *args],
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
    )
    return CommandInvocation(
        program=program,
        args=tuple(args),
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        exit_code=result.returncode,
    )
