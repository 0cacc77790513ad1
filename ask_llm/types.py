from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Tuple, Union

# =============================================================================
# Model & Role
# =============================================================================


class Model(Enum):
    """
    Abstract speed/cost tier.

    Resolved to a concrete provider model (and its price and output ceiling)
    at request time.
    """
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"

    @classmethod
    def parse(cls, value: str) -> "Model":
        """
        Parse a tier name case-insensitively ("fast", "Medium", ...).

        Raises:
            ValueError: If the name is not a known tier.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown model tier: {value!r}. Use one of: {choices}") from None


class Role(Enum):
    """
    Message origin.
    """
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# Content Type Definitions
# =============================================================================

@dataclass(frozen=True)
class TextContent:
    """
    Plain text content.
    """
    text: str


@dataclass(frozen=True)
class ImageContent:
    """
    Base64-encoded image content.
    """
    base64_data: str
    media_type: str


@dataclass(frozen=True)
class DocumentContent:
    """
    Base64-encoded document content (pdf, plain text, ...).
    """
    base64_data: str
    media_type: str


@dataclass(frozen=True)
class TextAndImages:
    """
    Text followed by one or more images.
    """
    text: str
    images: Tuple[ImageContent, ...] = ()


# A single part of mixed content
ContentPart = Union[TextContent, ImageContent, DocumentContent]


@dataclass(frozen=True)
class MixedContent:
    """
    Ordered sequence of text, image and document parts.
    """
    parts: Tuple[ContentPart, ...] = ()


MessageContent = Union[TextContent, ImageContent, TextAndImages, DocumentContent, MixedContent]


# =============================================================================
# Message & Conversation
# =============================================================================

@dataclass(frozen=True)
class Message:
    """
    Chat message with a single role and a single content variant.
    """
    role: Role
    content: MessageContent

    @classmethod
    def text(cls, role: Role, text: str) -> "Message":
        return cls(role, TextContent(text))


def _as_content(content: Union[str, MessageContent]) -> MessageContent:
    if isinstance(content, str):
        return TextContent(content)
    return content


class Conversation:
    """
    Ordered, append-only sequence of messages forming one request.

    A System message is only treated as a system prompt when it is the first
    message. Messages are never reordered or removed.
    """

    def __init__(self, messages: Iterable[Message] = ()):
        self._messages: List[Message] = list(messages)

    @classmethod
    def with_system(cls, system_message: str) -> "Conversation":
        return cls([Message.text(Role.SYSTEM, system_message)])

    def add(self, role: Role, content: Union[str, MessageContent]) -> None:
        self._messages.append(Message(role, _as_content(content)))

    def add_message(self, message: Message) -> None:
        self._messages.append(message)

    def add_exchange(self, user_message: str, assistant_message: str) -> None:
        """Append a user turn followed by the assistant's reply."""
        self.add(Role.USER, user_message)
        self.add(Role.ASSISTANT, assistant_message)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __repr__(self) -> str:
        return f"Conversation({self._messages!r})"


# =============================================================================
# Attachments
# =============================================================================

@dataclass(frozen=True)
class FileAttachment:
    """
    File sent along with a request rather than with a specific message.
    """
    base64_data: str
    media_type: str = "application/octet-stream"
