"""FastAPI dependencies for dicemode."""

from __future__ import annotations

from dicemode.pipeline import Pipeline, default_pipeline


def get_pipeline() -> Pipeline:
    """Return the pipeline used to serve requests.

    Tests override this dependency with a pipeline on a scripted random source.
    """
    return default_pipeline()
