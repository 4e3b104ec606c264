"""Hugging Face Inference API client."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from hfrelay.config import InferenceConfig
from hfrelay.inference.models import InferenceRequest, InferenceResponse

logger = structlog.get_logger()


class InferenceError(RuntimeError):
    """The inference call produced no usable text."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InferenceClient:
    """Sends one prompt per call to the hosted model. No retries."""

    def __init__(
        self,
        config: InferenceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.request_count = 0
        self.failure_count = 0
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_s),
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.api_token}",
                "Content-Type": "application/json",
            },
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def generate(self, prompt: str) -> str:
        """Return the first candidate's text for ``prompt``.

        Raises:
            InferenceError: transport failure or timeout, non-200 status,
                a body that is not a list of candidates, or an empty first
                candidate.
        """
        payload = InferenceRequest.for_prompt(prompt, self.config)

        start = time.monotonic()
        self.request_count += 1
        request_id = self.request_count

        logger.info(
            "inference.request",
            request_id=request_id,
            url=self.config.api_url,
            prompt_chars=len(prompt),
        )

        try:
            # httpx timeouts are per phase; this bounds the whole call
            async with asyncio.timeout(self.config.timeout_s):
                text = await self._generate(payload)
        except TimeoutError as e:
            self.failure_count += 1
            raise InferenceError(
                f"inference request timed out after {self.config.timeout_s:g}s"
            ) from e
        except InferenceError:
            self.failure_count += 1
            raise

        logger.info(
            "inference.response",
            request_id=request_id,
            chars=len(text),
            duration=f"{time.monotonic() - start:.2f}s",
        )
        return text

    async def _generate(self, payload: InferenceRequest) -> str:
        try:
            resp = await self._client.post(self.config.api_url, json=payload.model_dump())
        except httpx.TimeoutException as e:
            raise InferenceError(
                f"inference request timed out after {self.config.timeout_s:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise InferenceError(f"error sending request: {e}") from e

        if resp.status_code != 200:
            raise InferenceError(
                f"non-200 status code: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            decoded = InferenceResponse.model_validate_json(resp.content)
        except ValidationError as e:
            raise InferenceError(
                f"error decoding response: {e.error_count()} validation error(s)",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

        text = decoded.first_text()
        if text is None:
            raise InferenceError(
                "no text in inference response",
                status_code=resp.status_code,
                body=resp.text,
            )
        return text

    @property
    def stats(self) -> dict[str, Any]:
        """Return usage statistics."""
        return {
            "request_count": self.request_count,
            "failure_count": self.failure_count,
            "url": self.config.api_url,
        }
