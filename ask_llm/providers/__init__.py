from .base import BaseLLMProvider, should_stream, SINGLE_SHOT_MAX_TOKENS
from .anthropic import AnthropicProvider

__all__ = ["BaseLLMProvider", "AnthropicProvider", "should_stream", "SINGLE_SHOT_MAX_TOKENS"]
