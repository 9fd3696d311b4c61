"""structlog setup for llmprep.

Events are snake_case names with keyword fields. Message content only ever
reaches a log through ``preview``, which shortens it and masks credentials
that users paste into conversations.
"""

import json
import logging
import re
import sys

import structlog

ROOT_LOGGER = "llmprep"
PREVIEW_CHARS = 80

# API keys, bearer tokens, GitHub PATs, AWS access key ids
_CREDENTIAL_RE = re.compile(
    r"sk-[A-Za-z0-9_-]{10,}"
    r"|Bearer\s+[A-Za-z0-9_\-.]{10,}"
    r"|ghp_[A-Za-z0-9]{10,}"
    r"|AKIA[0-9A-Z]{16}"
)


def _mask(match: re.Match) -> str:
    token = match.group(0)
    return token[:4] + "****" if len(token) > 8 else "****"


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Shorten message content for a log field, masking credentials."""
    short = text[:limit] + "..." if len(text) > limit else text
    return _CREDENTIAL_RE.sub(_mask, short)


def _renderer(json_output: bool) -> structlog.types.Processor:
    if not json_output:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer(
        serializer=lambda obj, **kw: json.dumps(obj, ensure_ascii=False, **kw),
    )


def setup_logging(json_output: bool = True, level: str = "WARNING") -> None:
    """Route the ``llmprep`` logger hierarchy to stderr through structlog.

    Args:
        json_output: JSON lines when True, coloured console output otherwise.
        level: Level name for the ``llmprep`` hierarchy.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdout carries the CLI's JSON payload
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_output),
        ],
    ))

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False


def get_logger(name: str = ROOT_LOGGER) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**fields: object) -> None:
    """Replace the per-invocation context merged into every log event."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**{k: v for k, v in fields.items() if v is not None})
