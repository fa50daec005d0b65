"""Pydantic request and response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TextRequest(BaseModel):
    text: str = Field(description="Dice instruction text, e.g. '2d6, 1d4+'.")


class ExpandRequest(BaseModel):
    text: str = Field(description="A document; every line made only of dice is rolled.")
    strict: bool = Field(
        default=False,
        description="Reject the document if a non-blank line is not a dice line.",
    )


class RecognizeResponse(BaseModel):
    match: str | None


class RollResponse(BaseModel):
    report: str


class ExpandResponse(BaseModel):
    text: str
    replaced: int


class ProcessorInfo(BaseModel):
    symbol: str
    description: str


class ProcessorsResponse(BaseModel):
    processors: list[ProcessorInfo]
