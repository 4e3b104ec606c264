"""Health check endpoint."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from hfrelay import __version__

router = APIRouter()

_start_time = time.time()


@router.get("/health")
async def health(request: Request) -> dict:
    """Health check: returns status, uptime, bot identity and inference stats."""
    bot = request.app.state.bot
    inference = request.app.state.inference

    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round(time.time() - _start_time, 1),
        "bot_username": bot.username,
        "inference": inference.stats,
    }
