"""Typer CLI entrypoints."""

from __future__ import annotations

import json
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from pydantic import ValidationError

from llmprep.config.schema import PipelineConfig, load_config
from llmprep.logging import bind_context, get_logger, setup_logging
from llmprep.messages.fim import prepare_fim_message
from llmprep.messages.pipeline import prepare_messages
from llmprep.messages.types import SystemMessageMode

app = typer.Typer(name="llmprep", help="Prepare chat and FIM payloads for LLM providers", add_completion=False)
logger = get_logger(__name__)


class SystemMode(str, Enum):
    none = "none"
    system_role = "system-role"
    developer_role = "developer-role"
    separated = "separated"

    def to_mode(self) -> SystemMessageMode:
        return False if self is SystemMode.none else self.value  # type: ignore[return-value]


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _read_json(source: str) -> Any:
    try:
        if source == "-":
            raw = sys.stdin.read()
        else:
            raw = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"cannot read {source}: {e.strerror or e}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        _fail(f"invalid JSON in {source}: {e.msg} (line {e.lineno})")


def _load_config(path: Path | None) -> PipelineConfig:
    try:
        return load_config(path)
    except (OSError, json.JSONDecodeError) as e:
        _fail(f"cannot load config {path}: {e}")
    except ValidationError as e:
        _fail(f"invalid config {path}: {e.error_count()} error(s): {e.errors()[0]['msg']}")


def _print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.callback()
def _main(
    log_level: Annotated[str, typer.Option("--log-level", envvar="LLMPREP_LOG_LEVEL")] = "WARNING",
    json_logs: Annotated[bool, typer.Option("--json-logs/--console-logs")] = True,
) -> None:
    setup_logging(json_output=json_logs, level=log_level)


@app.command()
def prepare(
    source: Annotated[str, typer.Argument(help="Conversation JSON file, or - for stdin")],
    instructions: Annotated[str, typer.Option("--instructions", "-i", help="Standing instructions (GUIDELINES)")] = "",
    model: Annotated[str | None, typer.Option("--model", help="Resolve capabilities from litellm model info")] = None,
    system_mode: Annotated[SystemMode | None, typer.Option("--system-mode", case_sensitive=False)] = None,
    reasoning_signature: Annotated[
        bool | None,
        typer.Option("--reasoning-signature/--no-reasoning-signature"),
    ] = None,
    context_window: Annotated[int | None, typer.Option("--context-window", min=1)] = None,
    max_output_tokens: Annotated[int | None, typer.Option("--max-output-tokens", min=1)] = None,
    config_path: Annotated[Path | None, typer.Option("--config", "-c", exists=True, dir_okay=False)] = None,
) -> None:
    """Run the chat preparation pipeline and print the result as JSON."""
    from llmprep.capabilities import ModelCapabilities, capabilities_from_litellm

    bind_context(command="prepare", source=source, model=model)

    config = _load_config(config_path)
    data = _read_json(source)
    messages = data.get("messages") if isinstance(data, dict) else data
    if not isinstance(messages, list) or not all(isinstance(m, dict) for m in messages):
        _fail("expected a list of message objects or {\"messages\": [...]}")

    caps = capabilities_from_litellm(model) if model else ModelCapabilities()
    result = prepare_messages(
        messages,
        ai_instructions=instructions,
        supports_system_message=system_mode.to_mode() if system_mode is not None else caps.supports_system_message,
        supports_anthropic_reasoning_signature=(
            reasoning_signature if reasoning_signature is not None
            else caps.supports_anthropic_reasoning_signature
        ),
        context_window=context_window or caps.context_window,
        max_output_tokens=max_output_tokens or caps.max_output_tokens,
        config=config,
    )
    logger.info("prepare_completed", model=model or "(explicit)", messages=len(result.messages))
    _print_json(result.to_dict())


@app.command()
def fim(
    source: Annotated[str, typer.Argument(help="FIM JSON file with prefix/suffix/stop_tokens, or - for stdin")],
    instructions: Annotated[str, typer.Option("--instructions", "-i")] = "",
    comment_marker: Annotated[str | None, typer.Option("--comment-marker")] = None,
    config_path: Annotated[Path | None, typer.Option("--config", "-c", exists=True, dir_okay=False)] = None,
) -> None:
    """Prepare a fill-in-the-middle payload and print it as JSON."""
    bind_context(command="fim", source=source)
    config = _load_config(config_path)
    data = _read_json(source)
    if not isinstance(data, dict) or not isinstance(data.get("prefix"), str) or not isinstance(data.get("suffix"), str):
        _fail("expected an object with string 'prefix' and 'suffix'")

    prepared = prepare_fim_message(
        {
            "prefix": data["prefix"],
            "suffix": data["suffix"],
            "stop_tokens": list(data.get("stop_tokens") or []),
        },
        ai_instructions=instructions,
        comment_marker=comment_marker or config.fim_comment_marker,
        max_tokens=config.fim_max_tokens,
    )
    _print_json(prepared)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
