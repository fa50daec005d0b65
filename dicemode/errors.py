"""Exceptions raised by the dice notation pipeline.

Every error derives from DiceError (itself a ValueError), so hosts can catch a
single type. A recognizer miss is not an error: ``recognize`` returns None.
"""

from __future__ import annotations


class DiceError(ValueError):
    """Base class for all dice notation errors."""


class MalformedToken(DiceError):
    """Raised when a token's ``d``/face-count portion cannot be parsed."""

    def __init__(self, token: str, reason: str = "missing d/face count") -> None:
        shown = token if len(token) <= 40 else token[:37] + "..."
        super().__init__(f"Malformed dice token {shown!r}: {reason}")
        self.token = token


class UnknownProcessor(DiceError):
    """Raised when a processor symbol is not in the active registry."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unknown processor: {symbol!r}")
        self.symbol = symbol


class MalformedLine(DiceError):
    """Raised by strict wrappers when a line holds no dice instruction."""

    def __init__(self, line: str) -> None:
        super().__init__(f"No dice instruction on line: {line!r}")
        self.line = line
