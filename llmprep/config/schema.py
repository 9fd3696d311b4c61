"""Configuration schema using Pydantic."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from llmprep.messages.types import (
    CHARS_PER_TOKEN,
    DEFAULT_MAX_OUTPUT_TOKENS,
    EMPTY_MESSAGE,
    FIM_COMMENT_MARKER,
    FIM_MAX_TOKENS,
    MAX_TRIM_ITERATIONS,
    TRIM_TO_LEN,
)


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PipelineConfig(Base):
    """Tunables for the message preparation pipeline."""

    chars_per_token: int = Field(default=CHARS_PER_TOKEN, gt=0)
    trim_to_len: int = Field(default=TRIM_TO_LEN, gt=3)
    max_trim_iterations: int = Field(default=MAX_TRIM_ITERATIONS, ge=0)
    default_max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    empty_message: str = Field(default=EMPTY_MESSAGE, min_length=1)
    fim_max_tokens: int = Field(default=FIM_MAX_TOKENS, gt=0)
    fim_comment_marker: str = Field(default=FIM_COMMENT_MARKER, min_length=1)


def load_config(path: Path | None = None) -> PipelineConfig:
    """Load a PipelineConfig from a JSON file; defaults when *path* is None."""
    if path is None:
        return PipelineConfig()
    data = json.loads(path.read_text(encoding="utf-8"))
    return PipelineConfig.model_validate(data)
