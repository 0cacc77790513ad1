import base64
import mimetypes
from pathlib import Path
from typing import Union, List, Optional, Tuple

from .types import (
    ContentPart, DocumentContent, FileAttachment, ImageContent, Message,
    MessageContent, MixedContent, Role, TextContent,
)

# =============================================================================
# File Helpers
# =============================================================================

# Map file extensions to MIME types
MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".html": "text/html",
}


def guess_media_type(path: Union[str, Path]) -> str:
    """
    Determine the MIME type of a file from its extension.

    Falls back to the platform's mimetypes registry, then to
    'application/octet-stream'.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in MIME_TYPES:
        return MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def encode_file(file_path: Union[str, Path]) -> Tuple[str, str]:
    """
    Encode a local file to base64 for LLM usage.

    Reads the file from the given path, determines its MIME type based on extension,
    and returns a tuple of the base64-encoded data and the MIME type.

    Args:
        file_path (Union[str, Path]): Path to the file.

    Returns:
        Tuple[str, str]: A tuple containing:
            - b64_data (str): The base64-encoded string of the file content.
            - mime_type (str): The MIME type (e.g., 'application/pdf').

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(path, "rb") as f:
        b64_data = base64.b64encode(f.read()).decode("utf-8")

    return b64_data, guess_media_type(path)


def attachment_from_path(file_path: Union[str, Path]) -> FileAttachment:
    """
    Read a local file into a FileAttachment.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    b64_data, mime_type = encode_file(file_path)
    return FileAttachment(base64_data=b64_data, media_type=mime_type)


def _resolve_base64(source: str, mime_type: Optional[str]) -> Tuple[str, str]:
    # Data URI: data:[<mediatype>][;base64],<data>
    if source.startswith("data:"):
        header, data = source.split(",", 1)
        return data, mime_type or header.split(":")[1].split(";")[0]
    # Raw base64 string (if mime_type provided)
    if mime_type:
        return source, mime_type
    # Local file path
    if len(source) < 260 and Path(source).is_file():
        return encode_file(source)
    raise ValueError(
        f"Cannot determine source type for: {source[:50]}... "
        "Provide mime_type for raw base64 data."
    )


# =============================================================================
# Content Helpers
# =============================================================================

def create_image_content(source: str, *, mime_type: Optional[str] = None) -> ImageContent:
    """
    Create an image content part.

    Args:
        source (str): Can be:
            - A local file path (e.g., "/path/to/image.png")
            - A data URI (e.g., "data:image/png;base64,...")
            - Raw base64 data (requires `mime_type` kwarg)
        mime_type (str, optional): Required if `source` is raw base64 data.

    Returns:
        ImageContent: The image part.

    Raises:
        ValueError: If the source type cannot be determined.
    """
    data, media_type = _resolve_base64(source, mime_type)
    return ImageContent(base64_data=data, media_type=media_type)


def create_document_content(source: str, *, mime_type: Optional[str] = None) -> DocumentContent:
    """
    Create a document content part. Accepts the same sources as create_image_content().
    """
    data, media_type = _resolve_base64(source, mime_type)
    return DocumentContent(base64_data=data, media_type=media_type)


def create_text_content(text: str) -> TextContent:
    return TextContent(text)


def create_message(
    role: Union[Role, str],
    content: Union[str, MessageContent, List[Union[str, ContentPart]]],
) -> Message:
    """
    Create a Message.

    Plain strings become TextContent. Lists are normalized to MixedContent,
    with string elements turned into text parts and the order preserved.

    Args:
        role: Role or its name ('system', 'user', 'assistant').
        content: The content of the message.

    Returns:
        Message: The message.
    """
    role = Role(role) if isinstance(role, str) else role

    # Simple text content - no transformation needed
    if isinstance(content, str):
        return Message(role, TextContent(content))

    if isinstance(content, list):
        parts: List[ContentPart] = []
        for item in content:
            if isinstance(item, str):
                parts.append(create_text_content(item))
            else:
                parts.append(item)
        return Message(role, MixedContent(tuple(parts)))

    return Message(role, content)
