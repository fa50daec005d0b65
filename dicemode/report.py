"""Report rendering for rolled instructions.

Example output for ``2d6, 1d4+``::

    Rolls:
    - 2d6  :: [ 5, 3 ]
    - 1d4+ :: [ 2 ]
      Σ    :: 2
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from dicemode.notation import ParsedToken
from dicemode.processors import ProcessedResult

AGGREGATE_LABEL = "Σ"


@dataclass(frozen=True)
class Instruction:
    """A rolled and processed token, ready for rendering."""

    name: str
    result: ProcessedResult
    processor: str | None = None


@dataclass(frozen=True)
class ReportMetadata:
    max_name_length: int
    plural: bool

    @classmethod
    def fold(cls, tokens: Iterable[ParsedToken], floor: int = 0) -> ReportMetadata:
        """Combine each token's name length and dice count.

        ``plural`` is set when more than one die is rolled in total.
        """
        width = floor
        dice = 0
        for token in tokens:
            width = max(width, token.name_length)
            dice += token.dice_count
        return cls(max_name_length=width, plural=dice > 1)


def format_report(
    instructions: Sequence[Instruction],
    metadata: ReportMetadata,
    *,
    aggregate_label: str = AGGREGATE_LABEL,
) -> str:
    """Render instructions as a report ending in exactly one newline."""
    width = metadata.max_name_length
    lines = ["Rolls:" if metadata.plural else "Roll:"]
    for instruction in instructions:
        values = ", ".join(str(value) for value in instruction.result.rolls)
        lines.append(f"- {instruction.name.ljust(width)} :: [ {values} ]")
        if instruction.result.aggregate is not None:
            lines.append(f"  {aggregate_label.ljust(width)} :: {instruction.result.aggregate}")
    return "\n".join(lines) + "\n"
