"""Dice instruction notation: recognition, tokenizing and token parsing.

An instruction line is one or more tokens separated by commas and/or
whitespace. Each token reads ``[COUNT]dFACES[PROC]``:

    d20     one twenty-sided die (named "1d20")
    3d6     three six-sided dice
    4d6>    four dice, sorted highest first
    2d10+   two dice plus their sum

PROC is a single character looked up in a ProcessorRegistry.
"""

from __future__ import annotations

import re
from collections.abc import Container
from dataclasses import dataclass

from dicemode.errors import MalformedToken, UnknownProcessor

# PROC is any single non-digit, non-separator character here; whether it is
# actually registered is checked by parse_token.
_TOKEN = r"[0-9]*d[0-9]+[^\s,0-9]?"

_LINE_RE = re.compile(rf"[\s,]*(?P<span>{_TOKEN}(?:[\s,]+{_TOKEN})*)[\s,]*")
_SEPARATOR_RE = re.compile(r"[\s,]+")
_TOKEN_RE = re.compile(r"(?P<count>[0-9]*)d(?P<faces>[0-9]+)(?P<proc>.*)", re.DOTALL)

MAX_DICE = 1000
MAX_FACES = 1_000_000


@dataclass(frozen=True)
class ParsedToken:
    """One parsed instruction token.

    ``name`` always carries an explicit count, so ``d6`` is named ``1d6``.
    """

    name: str
    count: int
    faces: int
    processor: str | None = None

    @property
    def name_length(self) -> int:
        return len(self.name)

    @property
    def dice_count(self) -> int:
        return self.count


def recognize(span: str) -> str | None:
    """Return the dice instruction text if ``span`` holds nothing else.

    Leading and trailing whitespace and commas are ignored. Any other
    character outside the notation makes the whole span a non-match, which
    also keeps already-rendered reports from being picked up again.

    Returns:
        The instruction text without surrounding separators, or None.
    """
    m = _LINE_RE.fullmatch(span)
    if not m:
        return None
    return m.group("span")


def tokenize(span: str) -> list[str]:
    """Split an instruction span into tokens, preserving order."""
    return [token for token in _SEPARATOR_RE.split(span) if token]


def parse_token(token: str, processors: Container[str]) -> ParsedToken:
    """Parse a single ``[COUNT]dFACES[PROC]`` token.

    Args:
        token: Token text, e.g. "3d6+".
        processors: Registered processor symbols (a ProcessorRegistry works).

    Returns:
        The parsed token.

    Raises:
        MalformedToken: If the d/FACES part is missing, more than one
            character trails the face count, or count or faces is zero or
            above MAX_DICE / MAX_FACES.
        UnknownProcessor: If the trailing character is not registered.
    """
    m = _TOKEN_RE.fullmatch(token)
    if not m:
        raise MalformedToken(token)

    count_text = m.group("count")
    faces_text = m.group("faces")
    proc = m.group("proc")

    if len(proc) > 1:
        raise MalformedToken(token, f"unexpected trailing characters {proc!r}")
    # Compare digit lengths first so oversized runs never reach int().
    if len(count_text.lstrip("0")) > len(str(MAX_DICE)):
        raise MalformedToken(token, f"too many dice (max {MAX_DICE})")
    if len(faces_text.lstrip("0")) > len(str(MAX_FACES)):
        raise MalformedToken(token, f"too many faces (max {MAX_FACES})")

    count = int(count_text) if count_text else 1
    faces = int(faces_text)
    if count > MAX_DICE:
        raise MalformedToken(token, f"too many dice: {count} (max {MAX_DICE})")
    if faces > MAX_FACES:
        raise MalformedToken(token, f"too many faces: {faces} (max {MAX_FACES})")
    if count < 1:
        raise MalformedToken(token, "dice count must be at least 1")
    if faces < 1:
        raise MalformedToken(token, "face count must be at least 1")
    if proc and proc not in processors:
        raise UnknownProcessor(proc)

    name = token if count_text else f"1{token}"
    return ParsedToken(name=name, count=count, faces=faces, processor=proc or None)
