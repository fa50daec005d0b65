"""Jinja2 templates for the dice form page.

The page shows the expanded document and the registered processors; the
``counted`` filter pluralizes the "N lines rolled" heading.
"""

from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, select_autoescape


def counted(count: int, noun: str) -> str:
    """Render ``count`` with ``noun`` pluralized the way report headers are."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


_env = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)
_env.filters["counted"] = counted

templates = Jinja2Templates(env=_env)
