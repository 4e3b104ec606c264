"""Hosted text-generation access."""

from hfrelay.inference.client import InferenceClient, InferenceError
from hfrelay.inference.models import (
    Candidate,
    GenerationParameters,
    InferenceRequest,
    InferenceResponse,
)

__all__ = [
    "Candidate",
    "GenerationParameters",
    "InferenceClient",
    "InferenceError",
    "InferenceRequest",
    "InferenceResponse",
]
