"""hfrelay: FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from hfrelay import __version__
from hfrelay.config import RelayConfig, get_config, validate_startup
from hfrelay.dispatcher import WebhookDispatcher
from hfrelay.inference.client import InferenceClient
from hfrelay.logging import setup_logging
from hfrelay.telegram.client import TelegramBotClient

logger = structlog.get_logger()


def create_app(
    config: RelayConfig | None = None,
    *,
    bot: TelegramBotClient | None = None,
    inference: InferenceClient | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    ``bot`` and ``inference`` default to real clients built from ``config``
    during startup.
    """
    if config is None:
        config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application startup/shutdown lifecycle."""
        setup_logging(level=config.log_level, fmt=config.log_format)
        logger.info(
            "relay.starting",
            version=__version__,
            webhook_path=config.telegram.webhook_path,
            inference_url=config.inference.api_url,
        )

        # ConfigError propagates so the server refuses to start
        validate_startup(config)
        if not config.inference.api_token:
            logger.warning("relay.inference_token_missing", reason="HF_API_TOKEN is not set")

        bot_client = bot or TelegramBotClient(config.telegram)
        inference_client = inference or InferenceClient(config.inference)
        try:
            await bot_client.authorize()

            app.state.config = config
            app.state.bot = bot_client
            app.state.inference = inference_client
            app.state.dispatcher = WebhookDispatcher(bot=bot_client, inference=inference_client)

            logger.info("relay.ready", bot_username=bot_client.username)
            yield
        finally:
            logger.info("relay.shutting_down")
            await inference_client.close()
            await bot_client.close()
            logger.info("relay.stopped")

    app = FastAPI(
        title="hfrelay",
        version=__version__,
        description="Telegram webhook relay to a hosted text-generation model.",
        lifespan=lifespan,
    )

    # Register routes
    from hfrelay.api.routes.health import router as health_router
    from hfrelay.api.routes.webhook import build_router

    app.include_router(health_router, tags=["health"])
    app.include_router(build_router(config.telegram.webhook_path), tags=["webhook"])

    return app


app = create_app()


def main() -> None:
    """Run the server directly."""
    config = get_config()
    setup_logging(level=config.log_level, fmt=config.log_format)
    uvicorn.run(
        "hfrelay.main:app",
        host=config.host,
        port=config.port,
        log_level="warning",
    )


if __name__ == "__main__":
    main()
