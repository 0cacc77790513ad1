from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Dict, Any, AsyncIterator, Sequence, Tuple, Union

import httpx

from .config import Settings
from .providers.base import BaseLLMProvider
from .providers.anthropic import AnthropicProvider
from .response import Response
from .types import Conversation, FileAttachment, Model, Role
from .utils import attachment_from_path


@dataclass(frozen=True)
class RequestParameters:
    """
    Options applied to every request sent by a Client.
    """
    model: Model = Model.MEDIUM
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    stop_sequences: Optional[Tuple[str, ...]] = None
    force_structured_output: bool = False
    attachments: Tuple[FileAttachment, ...] = ()


class Client:
    """
    Builder-style client for asking Claude.

    Every option method returns a new Client, so a configured client can be
    shared and specialised without affecting other callers.

    Example:
        >>> response = await Client().model(Model.FAST).max_tokens(100).ask("What day is today?")
        >>> print(response.text)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        provider: Optional[BaseLLMProvider] = None,
        params: Optional[RequestParameters] = None,
    ):
        """
        Initialize the Client.

        Args:
            settings: Configuration. Defaults to Settings(), which reads the
                      credential from CLAUDE_TOKEN at call time.
            http_client: Optional httpx.AsyncClient to reuse across requests.
            provider: Provider to use instead of the default AnthropicProvider.
            params: Initial request parameters.
        """
        self.settings = settings or Settings()
        self.provider = provider or AnthropicProvider(self.settings, http_client=http_client)
        self.params = params or RequestParameters()

    def _with(self, **changes) -> "Client":
        return Client(self.settings, provider=self.provider, params=replace(self.params, **changes))

    # ==========================================================================
    # Options
    # ==========================================================================

    def model(self, model: Model) -> "Client":
        return self._with(model=model)

    def temperature(self, temperature: float) -> "Client":
        return self._with(temperature=temperature)

    def max_tokens(self, max_tokens: int) -> "Client":
        """
        Cap the response length. Caps up to 4096 are served by a single
        request with exact cost; larger caps (or none) are streamed.
        """
        return self._with(max_tokens=max_tokens)

    def stop_sequences(self, stop_sequences: Sequence[str]) -> "Client":
        return self._with(stop_sequences=tuple(stop_sequences))

    def force_structured_output(self) -> "Client":
        """Instruct the model to answer with a single JSON value."""
        return self._with(force_structured_output=True)

    def append_file(self, base64_data: str, media_type: str) -> "Client":
        attachment = FileAttachment(base64_data=base64_data, media_type=media_type)
        return self._with(attachments=self.params.attachments + (attachment,))

    def append_file_from_path(self, path: Union[str, Path]) -> "Client":
        """
        Attach a local file; its media type is derived from the extension.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        attachment = attachment_from_path(path)
        return self._with(attachments=self.params.attachments + (attachment,))

    # ==========================================================================
    # Requests
    # ==========================================================================

    def build_payload(self, conv: Conversation) -> Dict[str, Any]:
        p = self.params
        return self.provider.build_payload(
            conv,
            p.model,
            requested_max_tokens=p.max_tokens,
            stop_sequences=p.stop_sequences,
            force_structured_output=p.force_structured_output,
            attachments=p.attachments,
            temperature=p.temperature,
        )

    async def ask(self, message: str) -> Response:
        """
        Send a single user message.
        """
        conv = Conversation()
        conv.add(Role.USER, message)
        return await self.conversation(conv)

    async def conversation(self, conv: Conversation) -> Response:
        """
        Send a full conversation.

        Returns:
            Response: Text and cost of the reply.

        Raises:
            ConfigurationError: If no credential is available.
            TransportError: On network or HTTP failures.
            DeserializationError: If the reply cannot be parsed.
            ProviderRefusal: If the request was refused.
        """
        return await self.provider.send(self.build_payload(conv))

    async def astream(self, conv: Union[str, Conversation]) -> AsyncIterator[Dict[str, Any]]:
        """
        Stream the reply as events, regardless of max_tokens.

        Yields:
            Dict[str, Any]: 'token' events with a text fragment, then one
            'done' event with the full text and its estimated cost.
        """
        if isinstance(conv, str):
            message = conv
            conv = Conversation()
            conv.add(Role.USER, message)

        payload = self.build_payload(conv)
        payload["stream"] = True
        async for event in self.provider.stream(payload):
            yield event


# ==============================================================================
# Shortcuts
# ==============================================================================

async def oneshot(message: str, model: Model = Model.MEDIUM, settings: Optional[Settings] = None) -> Response:
    """Ask a single question with default options."""
    return await Client(settings).model(model).ask(message)


async def conversation(
    conv: Conversation,
    model: Model,
    max_tokens: Optional[int] = None,
    stop_sequences: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
) -> Response:
    """Send a conversation with the given tier, output cap and stop sequences."""
    client = Client(settings).model(model)
    if max_tokens is not None:
        client = client.max_tokens(max_tokens)
    if stop_sequences is not None:
        client = client.stop_sequences(stop_sequences)
    return await client.conversation(conv)
