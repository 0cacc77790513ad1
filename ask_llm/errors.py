"""Exception hierarchy for ask-llm.

Every error raised by the library derives from AskLLMError, so callers can
catch the whole family at once or pick out a single kind.
"""

from typing import Optional


class AskLLMError(Exception):
    """Base exception for all ask-llm errors."""


class ConfigurationError(AskLLMError):
    """Raised when the credential is missing or the settings are invalid."""


class TransportError(AskLLMError):
    """Raised on network failures and non-success HTTP statuses."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DeserializationError(AskLLMError):
    """Raised when a response body does not have the expected shape.

    The raw body is kept on ``raw_body`` for diagnosis.
    """

    def __init__(self, message: str, raw_body: Optional[str] = None):
        super().__init__(message)
        self.raw_body = raw_body


class StreamDecodeError(DeserializationError):
    """Raised when a streamed response body is not valid UTF-8."""


class ProviderRefusal(AskLLMError):
    """Raised when the provider refuses the request on content-policy grounds."""


class AmbiguousOrMissingCodeblock(AskLLMError):
    """Raised when exactly one code block was expected but zero or several were found."""

    def __init__(self, found: int):
        super().__init__(f"Expected exactly one codeblock, found {found}.")
        self.found = found


class TagNotFound(AskLLMError):
    """Raised when an opening or closing tag is absent from the text."""

    def __init__(self, tag_name: str, missing: str):
        super().__init__(f"Tag <{tag_name}> not found: missing {missing}")
        self.tag_name = tag_name
        self.missing = missing


class UnknownModelIdentifier(AskLLMError, ValueError):
    """Raised when a model id matches no known model family."""

    def __init__(self, model_id: str):
        super().__init__(f"Unknown model: {model_id}")
        self.model_id = model_id
