"""Hugging Face text-generation payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, RootModel

from hfrelay.config import InferenceConfig


class GenerationParameters(BaseModel):
    max_length: int
    temperature: float
    top_p: float


class InferenceRequest(BaseModel):
    """Body sent to the inference endpoint."""

    inputs: str
    parameters: GenerationParameters

    @classmethod
    def for_prompt(cls, prompt: str, config: InferenceConfig) -> InferenceRequest:
        return cls(
            inputs=prompt,
            parameters=GenerationParameters(
                max_length=config.max_length,
                temperature=config.temperature,
                top_p=config.top_p,
            ),
        )


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    generated_text: str


class InferenceResponse(RootModel[list[Candidate]]):
    """Ordered candidates returned by the model; only the first one is used."""

    def first_text(self) -> str | None:
        if not self.root:
            return None
        return self.root[0].generated_text or None
