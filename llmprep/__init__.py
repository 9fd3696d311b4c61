"""llmprep - prepare chat conversations for LLM provider requests."""

__version__ = "0.1.0"

from llmprep.messages.pipeline import (
    PipelineResult,
    prepare_messages,
    prepare_messages_for_model,
)
from llmprep.messages.fim import prepare_fim_message

__all__ = [
    "PipelineResult",
    "prepare_messages",
    "prepare_messages_for_model",
    "prepare_fim_message",
]
