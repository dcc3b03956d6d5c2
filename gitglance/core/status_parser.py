"""Parser for ``git status --porcelain=v1`` output."""

import logging

from gitglance.models.file_change import FileChange, FileChangeStatus

from .git_runner import GitError

logger = logging.getLogger(__name__)

UNTRACKED_CODE = "??"
IGNORED_CODE = "!!"
RENAME_SEPARATOR = " -> "

# Index (X) column, i.e. staged changes
_INDEX_CODES: dict[str, FileChangeStatus | None] = {
    " ": None,
    "M": FileChangeStatus.MODIFIED,
    "T": FileChangeStatus.MODIFIED,
    "A": FileChangeStatus.ADDED,
    "C": FileChangeStatus.ADDED,
    "D": FileChangeStatus.DELETED,
    "R": FileChangeStatus.RENAMED,
}

# Worktree (Y) column, i.e. unstaged changes
_WORKTREE_CODES: dict[str, FileChangeStatus | None] = {
    " ": None,
    "M": FileChangeStatus.MODIFIED,
    "T": FileChangeStatus.MODIFIED,
    "A": FileChangeStatus.ADDED,
    "D": FileChangeStatus.DELETED,
    "R": FileChangeStatus.RENAMED,
}

# Both sides added or deleted: merge conflicts, not regular changes
_UNMERGED_CODES = {"AA", "DD"}

#: Two-letter porcelain code -> (staged_status, unstaged_status)
STATUS_TABLE: dict[str, tuple[FileChangeStatus | None, FileChangeStatus | None]] = {
    index + worktree: (staged, unstaged)
    for index, staged in _INDEX_CODES.items()
    for worktree, unstaged in _WORKTREE_CODES.items()
    if index + worktree != "  " and index + worktree not in _UNMERGED_CODES
}
STATUS_TABLE[UNTRACKED_CODE] = (None, FileChangeStatus.UNTRACKED)

_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    '"': 0x22,
    "\\": 0x5C,
}


class ParseAnomaly(GitError):
    """A status line that does not match any recognized format."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")


def unquote_path(text: str) -> str:
    """Decode a path that git quoted as a C string literal.

    Unquoted input is returned unchanged. Octal escapes are collected as raw
    bytes so multi-byte UTF-8 names decode correctly. Bytes that are not valid
    UTF-8 become surrogate escapes, so the result can be passed back to git.
    """
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text

    body = text[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 >= len(body):
            out.extend(char.encode("utf-8", "surrogateescape"))
            i += 1
            continue
        escape = body[i + 1]
        octal = body[i + 1:i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            i += 4
        elif escape in _ESCAPES:
            out.append(_ESCAPES[escape])
            i += 2
        else:
            out.extend(escape.encode("utf-8", "surrogateescape"))
            i += 2
    return out.decode("utf-8", errors="surrogateescape")


def _closing_quote(text: str) -> int:
    """Return the index of the quote closing the string opened at ``text[0]``."""
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i
        i += 1
    return -1


def _split_rename(line: str, rest: str) -> tuple[str, str]:
    """Split ``ORIG -> PATH`` into (original, new) paths."""
    if rest.startswith('"'):
        end = _closing_quote(rest)
        if end < 0 or not rest[end + 1:].startswith(RENAME_SEPARATOR):
            raise ParseAnomaly(line, "malformed rename entry")
        original, new = rest[:end + 1], rest[end + 1 + len(RENAME_SEPARATOR):]
    else:
        original, separator, new = rest.partition(RENAME_SEPARATOR)
        if not separator:
            raise ParseAnomaly(line, "rename entry without target path")

    if not original or not new:
        raise ParseAnomaly(line, "rename entry with empty path")
    return unquote_path(original), unquote_path(new)


def parse_status_line(line: str) -> FileChange | None:
    """Parse one porcelain line.

    Returns None for ignored entries.

    Raises:
        ParseAnomaly: if the line is not a recognized status entry.
    """
    if len(line) < 4 or line[2] != " ":
        raise ParseAnomaly(line, "not a porcelain status line")

    code, rest = line[:2], line[3:]
    if code == IGNORED_CODE:
        return None

    try:
        staged, unstaged = STATUS_TABLE[code]
    except KeyError:
        raise ParseAnomaly(line, f"unrecognized status code {code!r}") from None

    original_path = None
    if code[0] in "RC" or code[1] == "R":
        original_path, path = _split_rename(line, rest)
    else:
        path = unquote_path(rest)

    return FileChange(
        path=path,
        unstaged_status=unstaged,
        staged_status=staged,
        original_path=original_path,
    )


def parse_status(output: str) -> list[FileChange]:
    """Parse ``git status --porcelain=v1`` output into file changes.

    Lines that cannot be parsed are logged and skipped so one bad entry does
    not hide the rest.
    """
    changes = []
    # Records end in LF only; names may contain other line separators
    for line in output.split("\n"):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        try:
            change = parse_status_line(line)
        except ParseAnomaly as e:
            logger.warning("Skipping status entry: %s", e)
            continue
        if change is not None:
            changes.append(change)
    return changes
