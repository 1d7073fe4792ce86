"""End-to-end hook runs against a real git repository and bare remote."""

import os
import shutil
import subprocess
import sys

import pytest

from consistency_hook.config import HookConfig
from consistency_hook.hook import ConsistencyHook
from consistency_hook.outcome import PipelineOutcome

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

FORMATTED = "const x = 1;\n"
UNFORMATTED = "const   x=1\n"


def git(cwd, *args) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout.strip()


def check_command(filename):
    """Exit 0 only when the file holds the formatted text."""
    code = (
        "import sys; "
        f"sys.exit(0 if open({filename!r}, encoding='utf-8').read() == {FORMATTED!r} else 1)"
    )
    return [sys.executable, "-c", code]


def apply_command(filename):
    code = (
        f"open({filename!r}, 'w', encoding='utf-8', newline='').write({FORMATTED!r})"
    )
    return [sys.executable, "-c", code]


def setup_repo(tmp_path, filename, content):
    remote = tmp_path / "remote.git"
    work = tmp_path / "work"
    git(tmp_path, "init", "--bare", str(remote))
    git(tmp_path, "init", str(work))
    git(work, "symbolic-ref", "HEAD", "refs/heads/main")
    git(work, "config", "user.name", "Release Bot")
    git(work, "config", "user.email", "release-bot@example.com")
    git(work, "config", "commit.gpgsign", "false")
    (work / filename).write_text(content, encoding="utf-8")
    git(work, "add", ".")
    git(work, "commit", "-m", "chore(release): v1.0.0")
    git(work, "remote", "add", "origin", str(remote))
    git(work, "push", "origin", "main")
    return work, remote


@pytest.fixture(autouse=True)
def isolated_git_config(monkeypatch):
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


def commit_count(work) -> int:
    return int(git(work, "rev-list", "--count", "HEAD"))


def remote_head(remote) -> str:
    return git(remote, "rev-parse", "refs/heads/main")


class TestRealRepository:
    """The hook drives a real formatter stand-in, git and a bare remote."""

    def test_repair_is_committed_and_pushed(self, tmp_path):
        work, remote = setup_repo(tmp_path, "version.ts", UNFORMATTED)
        before = commit_count(work)
        remote_before = remote_head(remote)
        config = HookConfig(
            check_command=check_command("version.ts"),
            apply_command=apply_command("version.ts"),
        )
        hook = ConsistencyHook(config=config, cwd=str(work))

        outcome = hook.run()

        assert outcome == PipelineOutcome.REPAIRED_AND_COMMITTED
        assert commit_count(work) == before + 1
        assert git(work, "log", "-1", "--format=%s") == config.commit_message
        assert remote_head(remote) != remote_before
        assert remote_head(remote) == git(work, "rev-parse", "HEAD")
        assert hook.last_run.changed_paths == ["version.ts"]
        assert git(work, "status", "--porcelain") == ""

    def test_formatted_tree_is_left_alone(self, tmp_path):
        """Check passes: no new commit and the remote does not move."""
        work, remote = setup_repo(tmp_path, "version.ts", FORMATTED)
        before = commit_count(work)
        remote_before = remote_head(remote)
        config = HookConfig(
            check_command=check_command("version.ts"),
            apply_command=apply_command("version.ts"),
        )

        outcome = ConsistencyHook(config=config, cwd=str(work)).run()

        assert outcome == PipelineOutcome.NO_CHANGES_NEEDED
        assert commit_count(work) == before
        assert remote_head(remote) == remote_before

    def test_formatter_changing_no_bytes_creates_no_commit(self, tmp_path):
        work, remote = setup_repo(tmp_path, "version.ts", FORMATTED)
        before = commit_count(work)
        config = HookConfig(
            check_command=[sys.executable, "-c", "import sys; sys.exit(1)"],
            apply_command=apply_command("version.ts"),
        )
        hook = ConsistencyHook(config=config, cwd=str(work))

        outcome = hook.run()

        assert outcome == PipelineOutcome.NO_CHANGES_NEEDED
        assert commit_count(work) == before
        assert [inv.args[0] for inv in hook.last_run.invocations][-1] == "status"

    def test_unusual_file_name_reported_verbatim(self, tmp_path):
        """Names git would C-quote come back unescaped."""
        filename = 'café "gen".ts'
        work, remote = setup_repo(tmp_path, filename, UNFORMATTED)
        config = HookConfig(
            check_command=check_command(filename),
            apply_command=apply_command(filename),
        )
        hook = ConsistencyHook(config=config, cwd=str(work))

        outcome = hook.run()

        assert outcome == PipelineOutcome.REPAIRED_AND_COMMITTED
        assert hook.last_run.changed_paths == [filename]
