from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from dicemode.config import settings
from dicemode.dependencies import get_pipeline
from dicemode.errors import DiceError
from dicemode.pipeline import Pipeline
from dicemode.rendering import templates

router = APIRouter()


def _render(request: Request, pipeline: Pipeline, **context) -> HTMLResponse:
    context.setdefault("text", "")
    context.setdefault("strict", False)
    context.setdefault("result", None)
    context.setdefault("replaced", 0)
    context.setdefault("error", None)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "processors": pipeline.registry.describe(),
            "environment": settings.environment,
            **context,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, pipeline: Pipeline = Depends(get_pipeline)) -> HTMLResponse:
    return _render(request, pipeline)


@router.post("/", response_class=HTMLResponse)
async def index_submit(
    request: Request,
    text: str = Form(""),
    strict: bool = Form(False),
    pipeline: Pipeline = Depends(get_pipeline),
) -> HTMLResponse:
    """Expand the submitted text and show the result on the same page."""
    try:
        result, replaced = pipeline.expand_text(text, strict=strict)
    except DiceError as exc:
        return _render(request, pipeline, text=text, strict=strict, error=str(exc))
    return _render(request, pipeline, text=text, strict=strict, result=result, replaced=replaced)
