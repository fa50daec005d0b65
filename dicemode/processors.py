"""Processor registry: post-processing transforms applied to a roll sequence.

A processor is a one-argument callable taking the list of rolls and returning
``(processed_rolls, aggregate)``, where ``aggregate`` is None unless the
processor computes a scalar. Processors are addressed by a single-character
symbol written after the face count, e.g. ``3d6+``.

Built-in processors:
  <   sort ascending
  >   sort descending
  +   keep order, aggregate = sum
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from dicemode.errors import UnknownProcessor

logger = logging.getLogger(__name__)

Processor = Callable[[list[int]], tuple[list[int], int | None]]

# Characters that can never be processor symbols: they belong to the grammar.
_RESERVED = frozenset("0123456789,")


@dataclass(frozen=True)
class ProcessedResult:
    """Rolls after processing, plus the optional aggregate."""

    rolls: list[int]
    aggregate: int | None = None


def sort_ascending(rolls: list[int]) -> tuple[list[int], int | None]:
    """Sort rolls from lowest to highest."""
    return sorted(rolls), None


def sort_descending(rolls: list[int]) -> tuple[list[int], int | None]:
    """Sort rolls from highest to lowest."""
    return sorted(rolls, reverse=True), None


def total(rolls: list[int]) -> tuple[list[int], int | None]:
    """Keep rolls in order and add up their sum."""
    return list(rolls), sum(rolls)


DEFAULT_PROCESSORS: dict[str, Processor] = {
    "<": sort_ascending,
    ">": sort_descending,
    "+": total,
}


def _check_symbol(symbol: str) -> None:
    if not isinstance(symbol, str) or len(symbol) != 1:
        raise ValueError(f"Processor symbol must be a single character, got {symbol!r}")
    if symbol in _RESERVED or symbol.isspace():
        raise ValueError(f"Processor symbol {symbol!r} clashes with dice notation")


def _check_processor(symbol: str, processor: Processor) -> None:
    if not callable(processor):
        raise ValueError(f"Processor for {symbol!r} is not callable")
    try:
        inspect.signature(processor).bind([])
    except TypeError as exc:
        raise ValueError(
            f"Processor for {symbol!r} must accept exactly one argument (the rolls)"
        ) from exc
    except ValueError:
        # Some builtins expose no signature; accept them and let a bad call fail later.
        pass


class ProcessorRegistry(Mapping[str, Processor]):
    """Symbol to processor mapping bound into a pipeline at construction time.

    Args:
        processors: Extra or overriding entries.
        include_defaults: Start from DEFAULT_PROCESSORS (the default) or empty.
    """

    def __init__(
        self,
        processors: Mapping[str, Processor] | None = None,
        *,
        include_defaults: bool = True,
    ) -> None:
        self._processors: dict[str, Processor] = {}
        if include_defaults:
            self._processors.update(DEFAULT_PROCESSORS)
        for symbol, processor in (processors or {}).items():
            self.register(symbol, processor)

    def __getitem__(self, symbol: str) -> Processor:
        return self._processors[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._processors)

    def __len__(self) -> int:
        return len(self._processors)

    def __repr__(self) -> str:
        return f"ProcessorRegistry({''.join(self._processors)!r})"

    def register(self, symbol: str, processor: Processor) -> None:
        """Add or replace the processor for ``symbol``.

        Raises:
            ValueError: If the symbol is not a usable single character or the
                processor cannot be called with one argument.
        """
        _check_symbol(symbol)
        _check_processor(symbol, processor)
        if symbol in self._processors:
            logger.debug("Overriding processor %r", symbol)
        self._processors[symbol] = processor

    def extended(self, processors: Mapping[str, Processor]) -> ProcessorRegistry:
        """Return a copy of this registry with ``processors`` added."""
        registry = ProcessorRegistry(self._processors, include_defaults=False)
        for symbol, processor in processors.items():
            registry.register(symbol, processor)
        return registry

    def get_processor(self, symbol: str) -> Processor:
        """Return the processor for ``symbol`` or raise UnknownProcessor."""
        try:
            return self._processors[symbol]
        except KeyError:
            raise UnknownProcessor(symbol) from None

    def apply(self, symbol: str | None, rolls: list[int]) -> ProcessedResult:
        """Run the processor for ``symbol`` over ``rolls``.

        A ``None`` symbol passes the rolls through unchanged.

        Raises:
            UnknownProcessor: If the symbol is not registered.
        """
        if symbol is None:
            return ProcessedResult(list(rolls))
        processed, aggregate = self.get_processor(symbol)(list(rolls))
        return ProcessedResult(list(processed), aggregate)

    def describe(self) -> list[tuple[str, str]]:
        """Return ``(symbol, first docstring line)`` pairs in registration order."""
        rows = []
        for symbol, processor in self._processors.items():
            doc = inspect.getdoc(processor) or ""
            rows.append((symbol, doc.splitlines()[0] if doc else ""))
        return rows
