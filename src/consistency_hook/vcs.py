"""Git command surface and porcelain status parsing."""

from dataclasses import dataclass
from typing import List, Tuple

# Single-character escapes git uses inside C-quoted paths
_C_ESCAPES = {
    '"': 0x22,
    "\\": 0x5C,
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
}
_OCTAL = set("01234567")


@dataclass(frozen=True)
class StatusEntry:
    code: str
    path: str


@dataclass(frozen=True)
class RepositoryStatus:
    """Changed-path entries from `git status --porcelain`."""
    entries: Tuple[StatusEntry, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.entries

    @property
    def paths(self) -> List[str]:
        return [entry.path for entry in self.entries]


def unquote_path(path: str) -> str:
    """Decode a C-quoted porcelain path (`"a\\"b.ts"`, `"caf\\303\\251.ts"`)."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\" or i + 1 >= len(body):
            out += ch.encode("utf-8")
            i += 1
            continue
        digits = body[i + 1:i + 4]
        if len(digits) == 3 and set(digits) <= _OCTAL:
            out.append(int(digits, 8) & 0xFF)
            i += 4
        elif body[i + 1] in _C_ESCAPES:
            out.append(_C_ESCAPES[body[i + 1]])
            i += 2
        else:
            out += body[i + 1].encode("utf-8")
            i += 2
    return out.decode("utf-8", errors="replace")


def _parse_nul_separated(text: str) -> List[StatusEntry]:
    # -z output: `XY path\0`, renames/copies add the source as the next field
    entries = []
    records = text.split("\0")
    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if len(record) < 4:
            continue
        code = record[:2]
        if "R" in code or "C" in code:
            i += 1
        entries.append(StatusEntry(code=code, path=record[3:]))
    return entries


def _parse_lines(text: str) -> List[StatusEntry]:
    entries = []
    for line in text.splitlines():
        if not line.strip() or len(line) < 4:
            continue
        code = line[:2]
        path = line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        entries.append(StatusEntry(code=code, path=unquote_path(path.strip())))
    return entries


def parse_porcelain(text: str) -> RepositoryStatus:
    """
    Parse porcelain v1 output into a RepositoryStatus.

    Accepts both `-z` (NUL-terminated, unquoted) and line output, where
    each line is `XY <path>`, renames read `XY <old> -> <new>` and
    special characters are C-quoted. Renames report the new path.
    Empty or whitespace-only output is a clean tree.
    """
    if "\0" in text:
        entries = _parse_nul_separated(text)
    else:
        entries = _parse_lines(text)
    return RepositoryStatus(entries=tuple(entries))


@dataclass(frozen=True)
class GitCommands:
    """Argument lists for the git invocations the hook makes."""
    program: str = "git"

    def status(self) -> List[str]:
        return ["status", "--porcelain", "-z"]

    def stage_all(self) -> List[str]:
        return ["add", "."]

    def commit(self, message: str) -> List[str]:
        return ["commit", "-m", message]

    def push(self, remote: str, branch: str) -> List[str]:
        return ["push", remote, branch]
