"""Configuration models and loading."""

from llmprep.config.schema import PipelineConfig, load_config

__all__ = ["PipelineConfig", "load_config"]
