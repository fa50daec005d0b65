"""JSON API over the dice pipeline."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from dicemode.dependencies import get_pipeline
from dicemode.errors import DiceError
from dicemode.pipeline import Pipeline
from dicemode.schemas import (
    ExpandRequest,
    ExpandResponse,
    ProcessorInfo,
    ProcessorsResponse,
    RecognizeResponse,
    RollResponse,
    TextRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/processors")
async def list_processors(pipeline: Pipeline = Depends(get_pipeline)) -> ProcessorsResponse:
    return ProcessorsResponse(
        processors=[
            ProcessorInfo(symbol=symbol, description=description)
            for symbol, description in pipeline.registry.describe()
        ]
    )


@router.post("/recognize")
async def recognize(
    body: TextRequest, pipeline: Pipeline = Depends(get_pipeline)
) -> RecognizeResponse:
    return RecognizeResponse(match=pipeline.recognize(body.text))


@router.post("/roll")
async def roll(body: TextRequest, pipeline: Pipeline = Depends(get_pipeline)) -> RollResponse:
    """Roll the instructions in ``text``. Returns 422 if any token is invalid."""
    try:
        report = pipeline.parse_and_format(body.text)
    except DiceError as exc:
        logger.warning("Rejected roll %r: %s", body.text, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RollResponse(report=report)


@router.post("/expand")
async def expand(body: ExpandRequest, pipeline: Pipeline = Depends(get_pipeline)) -> ExpandResponse:
    """Replace every dice line of ``text`` with its report.

    The document is rewritten all-or-nothing: any invalid dice line (or, with
    ``strict``, any non-dice line) returns 422 and no text.
    """
    try:
        text, replaced = pipeline.expand_text(body.text, strict=body.strict)
    except DiceError as exc:
        logger.warning("Rejected expansion: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ExpandResponse(text=text, replaced=replaced)
