"""Message preparation stages and entry points."""

from llmprep.messages.empty import ensure_non_empty
from llmprep.messages.fim import prepare_fim_message
from llmprep.messages.fit import fit_into_context
from llmprep.messages.normalize import normalize_messages
from llmprep.messages.pipeline import PipelineResult, prepare_messages, prepare_messages_for_model
from llmprep.messages.reasoning import project_reasoning
from llmprep.messages.system import add_system_instructions
from llmprep.messages.tool_args import parse_object

__all__ = [
    "PipelineResult",
    "add_system_instructions",
    "ensure_non_empty",
    "fit_into_context",
    "normalize_messages",
    "parse_object",
    "prepare_fim_message",
    "prepare_messages",
    "prepare_messages_for_model",
    "project_reasoning",
]
