from __future__ import annotations

import logging

from fastapi import FastAPI

from dicemode.config import settings
from dicemode.routers import pages, rolls

logging.getLogger("dicemode").setLevel(settings.log_level.upper())

app = FastAPI(title="dicemode", debug=settings.debug)

app.include_router(pages.router)
app.include_router(rolls.router)
