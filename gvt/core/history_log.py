"""Append-only history log for gvt.

One physical line per version, `"<N>: <message>"`, with newlines inside the
message escaped so that every entry stays on a single line.
"""

from __future__ import annotations

import re
from pathlib import Path

from ..utils.env import log_debug
from .types import ErrorKind, LogEntry, RepositoryError


NO_HISTORY = "No history available."

LOG_ENCODING = "utf-8"
LOG_ERRORS = "surrogateescape"

_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


def escape_message(message: str) -> str:
    """Fold a message onto one line."""
    return message.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def unescape_message(text: str) -> str:
    """Reverse `escape_message`. Unknown escapes are kept verbatim."""
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


def coerce_version(value: int | str | None) -> int | None:
    """Parse a version number, or None if it is not a non-negative integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text.isascii() or not text.isdigit():
        return None
    return int(text)


def parse_line(line: str) -> LogEntry | None:
    """Parse one stored line; None if it is not a well-formed entry."""
    token, sep, rest = line.rstrip("\n").partition(":")
    if not sep:
        return None
    version = coerce_version(token)
    if version is None or token != token.strip():
        return None
    if rest.startswith(" "):
        rest = rest[1:]
    return LogEntry(version=version, message=unescape_message(rest))


class HistoryLog:
    """Ledger of version messages, queryable by version or by recency."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def encode_entry(self, version: int, message: str) -> bytes:
        """Serialize the line for `version`.

        Undecodable file-name bytes (surrogate escapes) are written back as
        the original bytes.

        Raises:
            UnicodeEncodeError: if the message holds other lone surrogates.
        """
        line = f"{version}: {escape_message(message)}\n"
        return line.encode(LOG_ENCODING, LOG_ERRORS)

    def append(self, version: int, message: str, data: bytes) -> LogEntry:
        """Append an already encoded line. Earlier lines are never touched."""
        with open(self.path, "ab") as f:
            f.write(data)
        log_debug(f"Recorded history entry for version {version}")
        return LogEntry(version=version, message=message)

    def record(self, version: int, message: str) -> LogEntry:
        """Append the entry for `version`."""
        return self.append(version, message, self.encode_entry(version, message))

    def entries(self) -> list[LogEntry]:
        """All entries in the order they were recorded."""
        if not self.exists():
            return []

        result: list[LogEntry] = []
        with open(self.path, encoding=LOG_ENCODING, errors=LOG_ERRORS, newline="\n") as f:
            for raw in f:
                entry = parse_line(raw)
                if entry is None:
                    if raw.strip():
                        log_debug(f"Skipping malformed history line: {raw.rstrip()!r}")
                    continue
                result.append(entry)
        return result

    def entry_for(self, version: int | str) -> LogEntry:
        """Look up the entry of one version.

        Raises:
            RepositoryError: INVALID_VERSION if no entry exists.
        """
        number = coerce_version(version)
        if number is not None:
            for entry in self.entries():
                if entry.version == number:
                    return entry
        raise RepositoryError(ErrorKind.INVALID_VERSION, f"Invalid version number: {version}")

    def recent(self, limit: int | None = None) -> list[LogEntry]:
        """The last `limit` entries, newest first (all when limit <= 0 or None)."""
        entries = self.entries()
        if limit is not None and limit > 0:
            entries = entries[-limit:]
        return list(reversed(entries))

    @staticmethod
    def format_entry(entry: LogEntry) -> str:
        return f"{entry.version}: {entry.summary}"

    def format_recent(self, limit: int | None = None) -> str:
        entries = self.recent(limit)
        if not entries:
            return NO_HISTORY
        return "\n".join(self.format_entry(entry) for entry in entries)
