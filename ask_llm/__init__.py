from .client import Client, RequestParameters, oneshot, conversation
from .config import Settings
from .cost import ClaudeModel, CostTableEntry
from .errors import (
    AskLLMError, ConfigurationError, TransportError, DeserializationError, StreamDecodeError,
    ProviderRefusal, AmbiguousOrMissingCodeblock, TagNotFound, UnknownModelIdentifier,
)
from .response import Response, extract_codeblocks, extract_codeblock, extract_html_tag
from .types import (
    Model, Role, Message, Conversation, FileAttachment, MessageContent, ContentPart,
    TextContent, ImageContent, DocumentContent, TextAndImages, MixedContent,
)
from .rich_llm_printer import RichPrinter, RichStreamPrinter

__all__ = [
    "Client",
    "RequestParameters",
    "oneshot",
    "conversation",
    "Settings",
    "ClaudeModel",
    "CostTableEntry",
    "AskLLMError",
    "ConfigurationError",
    "TransportError",
    "DeserializationError",
    "StreamDecodeError",
    "ProviderRefusal",
    "AmbiguousOrMissingCodeblock",
    "TagNotFound",
    "UnknownModelIdentifier",
    "Response",
    "extract_codeblocks",
    "extract_codeblock",
    "extract_html_tag",
    "Model",
    "Role",
    "Message",
    "Conversation",
    "FileAttachment",
    "MessageContent",
    "ContentPart",
    "TextContent",
    "ImageContent",
    "DocumentContent",
    "TextAndImages",
    "MixedContent",
    "RichPrinter",
    "RichStreamPrinter",
]
