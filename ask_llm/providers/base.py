from abc import ABC, abstractmethod
from typing import Dict, Any, AsyncIterator, Optional, Sequence

from ..config import Settings
from ..response import Response
from ..types import Conversation, FileAttachment, Model

# Largest requested output still served by a single-shot request
SINGLE_SHOT_MAX_TOKENS = 4096


def should_stream(requested_max_tokens: Optional[int]) -> bool:
    """
    Choose the transport for a request.

    Single-shot only when a cap was requested and it is at most
    SINGLE_SHOT_MAX_TOKENS; streaming otherwise.
    """
    return requested_max_tokens is None or requested_max_tokens > SINGLE_SHOT_MAX_TOKENS


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    A provider owns the mapping from the Conversation model to its wire
    payload, and both transports.
    """

    name: str = "base"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    @abstractmethod
    def build_payload(
        self,
        conversation: Conversation,
        model: Model,
        requested_max_tokens: Optional[int] = None,
        stop_sequences: Optional[Sequence[str]] = None,
        force_structured_output: bool = False,
        attachments: Sequence[FileAttachment] = (),
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Build the wire payload for one request.

        Args:
            conversation (Conversation): Messages to send.
            model (Model): Requested tier.
            requested_max_tokens (int, optional): Output cap; clamped to the model's ceiling.
            stop_sequences (Sequence[str], optional): Stop sequences.
            force_structured_output (bool): Ask for a single JSON value.
            attachments (Sequence[FileAttachment]): Files to attach.
            temperature (float, optional): Overrides the default temperature.

        Returns:
            Dict[str, Any]: JSON-serializable payload.

        Raises:
            ConfigurationError: If no credential is available.
        """

    @abstractmethod
    async def chat(self, payload: Dict[str, Any]) -> Response:
        """
        Send a payload in a single request and parse the full reply.
        """

    @abstractmethod
    def stream(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        """
        Send a payload as a streaming request.

        Yields:
            Dict[str, Any]: Stream events ('token' events, then one 'done' event).
        """

    async def send(self, payload: Dict[str, Any]) -> Response:
        """
        Dispatch a payload to the transport selected when it was built.
        """
        if not payload.get("stream"):
            return await self.chat(payload)

        response = None
        async for event in self.stream(payload):
            if event["type"] == "done":
                response = Response(event["text"], event["cost_cents"])
        return response
