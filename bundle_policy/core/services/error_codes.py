"""
Error code registry — assigns stable numeric codes to invariant messages.

Production bundles replace ``invariant(cond, 'message')`` text with a
numeric code, so every message seen in source needs an entry in the
persisted registry (``scripts/error-codes/codes.json``)::

    {"0": "React.addons.createFragment(...): Encountered an invalid child...", ...}

Existing codes are never renumbered; new messages get the next free
code.  Writes are atomic (write to temp file, then rename).

The registry is the error-code extraction collaborator of the module
map: ``open_error_code_registry`` yields a registry whose ``extract``
method is passed as the per-file hook.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<string>'(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*")
    | (?P<template>`(?:[^`\\]|\\.)*`)
    | (?P<ident>[A-Za-z_$][\w$]*)
    | (?P<number>\d[\w.]*)
    | (?P<punct>.)
    """,
    re.VERBOSE | re.DOTALL,
)
_REGEX_LITERAL = re.compile(r"/(?:[^/\\\n\[]|\\.|\[(?:[^\]\\\n]|\\.)*\])+/[A-Za-z]*")
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\n": ""}

# A "/" after these starts a regular expression literal, not a division
_REGEX_AFTER_PUNCT = frozenset("(,=:[!&|?{};+-*%<>~^")
_REGEX_AFTER_WORD = frozenset({"return", "typeof", "case", "do", "else", "in", "void"})

_OPEN = frozenset("([{")
_CLOSE = frozenset(")]}")


class _Token(NamedTuple):
    kind: str
    text: str


class ErrorCodeError(Exception):
    """Raised when the error code registry cannot be read."""


def _tokenize(source: str) -> list[_Token]:
    """Split JS source into significant tokens; whitespace and comments dropped."""
    tokens: list[_Token] = []
    pos = 0
    while pos < len(source):
        if source[pos] == "/" and not source.startswith(("//", "/*"), pos) and _regex_allowed(tokens):
            literal = _REGEX_LITERAL.match(source, pos)
            if literal:
                tokens.append(_Token("regex", literal.group()))
                pos = literal.end()
                continue
        match = _TOKEN.match(source, pos)
        kind = match.lastgroup
        if kind not in ("space", "comment"):
            tokens.append(_Token(kind, match.group()))
        pos = match.end()
    return tokens


def _regex_allowed(tokens: list[_Token]) -> bool:
    if not tokens:
        return True
    last = tokens[-1]
    if last.kind == "punct":
        return last.text in _REGEX_AFTER_PUNCT
    return last.kind == "ident" and last.text in _REGEX_AFTER_WORD


def _message_start(tokens: list[_Token], open_paren: int) -> int | None:
    """Index of the first token after the condition's top-level comma."""
    depth = 0
    for i in range(open_paren + 1, len(tokens)):
        kind, text = tokens[i]
        if kind != "punct":
            continue
        if text in _OPEN:
            depth += 1
        elif text in _CLOSE:
            if depth == 0:
                return None
            depth -= 1
        elif text == "," and depth == 0:
            return i + 1
    return None


def _literal_message(tokens: list[_Token], start: int) -> str | None:
    """Join ``'a' + 'b' ...`` starting at ``start``; None if not all literals."""
    parts: list[str] = []
    i = start
    while i < len(tokens) and tokens[i].kind == "string":
        parts.append(_unquote(tokens[i].text))
        i += 1
        if i < len(tokens) and tokens[i] == _Token("punct", "+"):
            i += 1
            continue
        break
    if not parts or i >= len(tokens) or tokens[i].text not in (",", ")"):
        return None
    return "".join(parts)


def extract_messages(source: str) -> list[str]:
    """Return invariant messages found in ``source``, in order of appearance.

    Only string-literal messages are recognised; adjacent literals joined
    with ``+`` are concatenated.  Calls inside strings and comments, and
    method calls such as ``foo.invariant(...)``, are ignored.
    """
    tokens = _tokenize(source)
    messages: list[str] = []
    for i, (kind, text) in enumerate(tokens):
        if kind != "ident" or text != "invariant":
            continue
        if i > 0 and tokens[i - 1] == _Token("punct", "."):
            continue
        if i + 1 >= len(tokens) or tokens[i + 1] != _Token("punct", "("):
            continue
        start = _message_start(tokens, i + 1)
        if start is None:
            continue
        message = _literal_message(tokens, start)
        if message is not None:
            messages.append(message)
    return messages


def _unquote(literal: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), literal[1:-1])


class ErrorCodeRegistry:
    """In-memory view of the persisted message → code registry."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.codes: dict[str, str] = self._load()
        self._known = set(self.codes.values())
        self.dirty = False

    def _load(self) -> dict[str, str]:
        if not self.path.is_file():
            logger.info("No error code registry at %s — starting fresh", self.path)
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ErrorCodeError(f"Corrupt error code registry {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ErrorCodeError(
                f"Expected a JSON object in {self.path}, got {type(data).__name__}"
            )
        return {str(k): str(v) for k, v in data.items()}

    def _next_code(self) -> str:
        numeric = [int(k) for k in self.codes if k.isdigit()]
        return str(max(numeric) + 1 if numeric else 0)

    def add(self, message: str) -> str | None:
        """Register ``message``; return its new code, or None if already known."""
        if message in self._known:
            return None
        code = self._next_code()
        self.codes[code] = message
        self._known.add(message)
        self.dirty = True
        logger.debug("Assigned error code %s: %s", code, message)
        return code

    def extract(self, file: str) -> None:
        """Read a source file and register every invariant message in it.

        Raises:
            OSError: If the file cannot be read.
        """
        source = Path(file).read_text(encoding="utf-8")
        for message in extract_messages(source):
            self.add(message)

    __call__ = extract

    def save(self) -> bool:
        """Persist the registry if anything changed. Returns True if written."""
        if not self.dirty:
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(self.codes, indent=2, ensure_ascii=False) + "\n"

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".codes_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        self.dirty = False
        logger.info("Saved %d error codes to %s", len(self.codes), self.path)
        return True


@contextmanager
def open_error_code_registry(path: Path) -> Iterator[ErrorCodeRegistry]:
    """Open the registry for a scan and save it when the scan completes.

    Nothing is written if the body raises.
    """
    registry = ErrorCodeRegistry(path)
    yield registry
    registry.save()
