"""The dice pipeline: recognize, tokenize, parse, roll, process, format.

A Pipeline binds a processor registry and a random source together; nothing
else is kept between calls. Hosts (an editor mode, the HTTP API, the CLI) hand
it a line and substitute the returned report themselves.

The module-level functions run against a shared default pipeline built from
``dicemode.config.settings``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from dicemode.config import settings
from dicemode.dice import RandomSource, new_random_source, roll
from dicemode.errors import MalformedLine
from dicemode.notation import parse_token, recognize as _recognize, tokenize
from dicemode.processors import ProcessorRegistry
from dicemode.report import AGGREGATE_LABEL, Instruction, ReportMetadata, format_report

logger = logging.getLogger(__name__)

# Lines end at "\n" only; form feeds and other Unicode breaks stay inside a line.
_LINE_SPLIT_RE = re.compile(r"[^\n]*\n|[^\n]+")


class Pipeline:
    """Turns dice instruction text into a rendered report.

    Args:
        registry: Processors available to tokens. Defaults to a fresh
            ProcessorRegistry with the built-in processors.
        rng: Random source. Defaults to a new unseeded ``random.Random``.
        name_width_floor: Minimum width of the report's name column.
        aggregate_label: Label printed on aggregate lines.
    """

    def __init__(
        self,
        registry: ProcessorRegistry | None = None,
        rng: RandomSource | None = None,
        *,
        name_width_floor: int = 0,
        aggregate_label: str = AGGREGATE_LABEL,
    ) -> None:
        self.registry = registry if registry is not None else ProcessorRegistry()
        self.rng = rng if rng is not None else new_random_source()
        self.name_width_floor = name_width_floor
        self.aggregate_label = aggregate_label

    def recognize(self, span: str) -> str | None:
        return _recognize(span)

    def parse_and_format(self, text: str) -> str:
        """Roll every instruction in ``text`` and return the report.

        All tokens are parsed before anything is rolled, so a bad token
        anywhere fails the whole call with no partial output.

        Raises:
            MalformedToken: If a token cannot be parsed.
            UnknownProcessor: If a token names an unregistered processor.
        """
        tokens = [parse_token(raw, self.registry) for raw in tokenize(text)]
        if not tokens:
            raise MalformedLine(text)
        metadata = ReportMetadata.fold(tokens, self.name_width_floor)

        instructions = []
        for token in tokens:
            rolls = roll(token.count, token.faces, self.rng)
            result = self.registry.apply(token.processor, rolls)
            instructions.append(Instruction(token.name, result, token.processor))

        logger.debug(
            "Rolled %d instruction(s), %s",
            len(instructions),
            "plural" if metadata.plural else "single die",
        )
        return format_report(instructions, metadata, aggregate_label=self.aggregate_label)

    def recognize_and_transform(self, span: str) -> str | None:
        """Return the report for ``span``, or None if it is not a dice line."""
        match = self.recognize(span)
        if match is None:
            return None
        return self.parse_and_format(match)

    def replace_line_if_recognized(
        self,
        line: str,
        replace: Callable[[str], object],
        *,
        strict: bool = False,
    ) -> bool:
        """Hand the report for ``line`` to ``replace`` if it is a dice line.

        Args:
            line: One line of host text, without its line terminator.
            replace: Host callback that substitutes the line with the report.
            strict: Raise MalformedLine instead of returning False on a miss.

        Returns:
            True if ``replace`` was called, False if the line was skipped.

        Raises:
            MalformedLine: In strict mode, when the line is not recognized.
            DiceError: Parse errors propagate and ``replace`` is not called.
        """
        report = self.recognize_and_transform(line)
        if report is None:
            if strict:
                raise MalformedLine(line)
            return False
        replace(report)
        return True

    def expand_text(self, text: str, *, strict: bool = False) -> tuple[str, int]:
        """Replace every dice line of a document with its report.

        Lines keep their own terminator; a report replacing an unterminated
        last line loses its trailing newline. In strict mode blank lines are
        still allowed but any other unrecognized line raises MalformedLine.

        Returns:
            The rewritten text and the number of lines replaced.
        """
        chunks: list[str] = []
        replaced = 0
        for line in _LINE_SPLIT_RE.findall(text):
            content = line.rstrip("\r\n")
            ending = line[len(content):]
            reports: list[str] = []
            if strict and not content.strip():
                chunks.append(line)
            elif self.replace_line_if_recognized(content, reports.append, strict=strict):
                chunks.append(reports[0][:-1] + ending)
                replaced += 1
            else:
                chunks.append(line)
        logger.debug("Expanded %d dice line(s)", replaced)
        return "".join(chunks), replaced


def build_pipeline(registry: ProcessorRegistry | None = None, seed: int | None = None) -> Pipeline:
    """Build a pipeline configured from settings."""
    return Pipeline(
        registry,
        new_random_source(seed if seed is not None else settings.rng_seed),
        name_width_floor=settings.name_width_floor,
        aggregate_label=settings.aggregate_label,
    )


_default: Pipeline | None = None


def default_pipeline() -> Pipeline:
    """Return the shared pipeline, creating it on first use."""
    global _default
    if _default is None:
        _default = build_pipeline()
    return _default


def recognize(span: str) -> str | None:
    return default_pipeline().recognize(span)


def parse_and_format(text: str) -> str:
    return default_pipeline().parse_and_format(text)


def recognize_and_transform(span: str) -> str | None:
    return default_pipeline().recognize_and_transform(span)


def replace_line_if_recognized(
    line: str, replace: Callable[[str], object], *, strict: bool = False
) -> bool:
    return default_pipeline().replace_line_if_recognized(line, replace, strict=strict)


def expand_text(text: str, *, strict: bool = False) -> tuple[str, int]:
    return default_pipeline().expand_text(text, strict=strict)
