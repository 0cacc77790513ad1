import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Any, List, AsyncIterator, Optional, Sequence, Union

import httpx

from .base import BaseLLMProvider, should_stream
from ..config import Settings
from ..cost import ClaudeModel, estimate_tokens, estimated_cost_cents, exact_cost_cents
from ..errors import ConfigurationError, DeserializationError, ProviderRefusal, TransportError
from ..response import Response
from ..streaming import StreamAccumulator
from ..types import (
    Conversation, DocumentContent, FileAttachment, ImageContent, MessageContent,
    MixedContent, Model, Role, TextAndImages, TextContent,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.0
FORCE_JSON_DIRECTIVE = (
    "Respond only with a single valid JSON value. "
    "Do not wrap it in a code block and do not add any text before or after it."
)


class AnthropicProvider(BaseLLMProvider):
    """
    Provider for the Anthropic (Claude) Messages API, spoken over plain HTTP.

    docs: https://docs.claude.com/claude/reference/messages_post
    """

    name = "claude"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Endpoint, headers and credential lookup.
            http_client: Client to reuse for every request. It is never
                         closed by the provider. When omitted, a client is
                         created and closed for each request.
        """
        super().__init__(settings)
        self.http_client = http_client

    # ==========================================================================
    # Payload
    # ==========================================================================

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
        Convert a Conversation to a Messages API payload.

        Handles:
        - System prompt extraction (only from the first message).
        - Content conversion (text, images, documents, mixed parts).
        - Clamping max_tokens to the model's ceiling.
        - Attachments and the structured-output directive.
        - Transport selection (the "stream" flag).
        """
        self.settings.resolve_api_key()

        claude_model = ClaudeModel.from_tier(model)
        if requested_max_tokens is not None:
            max_tokens = min(requested_max_tokens, claude_model.max_tokens)
        else:
            max_tokens = claude_model.max_tokens

        messages = list(conversation)
        system = None
        if messages and messages[0].role is Role.SYSTEM:
            system = self._convert_content(messages.pop(0).content)

        converted = [
            {"role": msg.role.value, "content": self._convert_content(msg.content)}
            for msg in messages
        ]
        if attachments:
            self._attach(converted, attachments)
        if force_structured_output:
            system = self._add_json_directive(system)

        payload: Dict[str, Any] = {
            "model": claude_model.wire_id,
            "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
            "max_tokens": max_tokens,
            "messages": converted,
        }
        if stop_sequences is not None:
            payload["stop_sequences"] = [str(s) for s in stop_sequences]
        if system is not None:
            payload["system"] = system
        payload["stream"] = should_stream(requested_max_tokens)

        logger.debug(
            "payload: model=%s max_tokens=%d messages=%d system=%s stream=%s",
            payload["model"], max_tokens, len(converted), system is not None, payload["stream"],
        )
        return payload

    @classmethod
    def _convert_content(cls, content: MessageContent) -> Union[str, List[Dict[str, Any]]]:
        """
        Encode one message's content.

        Plain text is sent as a string, the API's shorthand for a single text
        block. Every other variant becomes an ordered list of blocks.
        """
        if isinstance(content, TextContent):
            return content.text
        if isinstance(content, TextAndImages):
            blocks = [cls._convert_part(TextContent(content.text))]
            blocks.extend(cls._convert_part(image) for image in content.images)
            return blocks
        if isinstance(content, MixedContent):
            return [cls._convert_part(part) for part in content.parts]
        return [cls._convert_part(content)]

    @staticmethod
    def _convert_part(part) -> Dict[str, Any]:
        if isinstance(part, TextContent):
            return {"type": "text", "text": part.text}
        block_type = "image" if isinstance(part, ImageContent) else "document"
        return {
            "type": block_type,
            "source": {
                "type": "base64",
                "media_type": part.media_type,
                "data": part.base64_data,
            },
        }

    @classmethod
    def _attach(cls, converted: List[Dict[str, Any]], attachments: Sequence[FileAttachment]) -> None:
        """
        Append attachment blocks to the last user message, or add a user
        message carrying them if there is none.
        """
        blocks = []
        for attachment in attachments:
            if attachment.media_type.startswith("image/"):
                part = ImageContent(attachment.base64_data, attachment.media_type)
            else:
                part = DocumentContent(attachment.base64_data, attachment.media_type)
            blocks.append(cls._convert_part(part))

        for i in range(len(converted) - 1, -1, -1):
            if converted[i]["role"] == Role.USER.value:
                content = converted[i]["content"]
                if isinstance(content, str):
                    content = [{"type": "text", "text": content}]
                converted[i] = {"role": Role.USER.value, "content": list(content) + blocks}
                return
        converted.append({"role": Role.USER.value, "content": blocks})

    @staticmethod
    def _add_json_directive(system):
        if system is None:
            return FORCE_JSON_DIRECTIVE
        if isinstance(system, str):
            return f"{system}\n\n{FORCE_JSON_DIRECTIVE}"
        return list(system) + [{"type": "text", "text": FORCE_JSON_DIRECTIVE}]

    # ==========================================================================
    # Transports
    # ==========================================================================

    @asynccontextmanager
    async def _client(self):
        if self.http_client is not None:
            yield self.http_client
        else:
            async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
                yield client

    async def chat(self, payload: Dict[str, Any]) -> Response:
        """
        Single-shot request: one POST, full JSON reply, exact cost.

        Raises:
            ConfigurationError: If no credential is available or the base URL is invalid.
            TransportError: On network failures and non-success statuses.
            DeserializationError: If the body is not a Messages API response.
            ProviderRefusal: If Claude refused the request.
            UnknownModelIdentifier: If the reported model has no price entry.
        """
        headers = self.settings.headers()
        logger.info("getting through a single-shot request")

        start = time.perf_counter()
        async with self._client() as client:
            try:
                resp = await client.post(self.settings.base_url, headers=headers, json=payload)
            except httpx.InvalidURL as exc:
                raise ConfigurationError(f"Invalid base URL {self.settings.base_url!r}: {exc}") from exc
            except httpx.HTTPError as exc:
                raise TransportError(f"Request to {self.settings.base_url} failed: {exc}") from exc
        latency_ms = (time.perf_counter() - start) * 1000.0

        if resp.is_error:
            raise TransportError(
                f"Claude API returned HTTP {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        response = self._parse_response(resp.text)
        logger.debug("single-shot response in %.0f ms, cost %.4f cents", latency_ms, response.cost_cents)
        return response

    @staticmethod
    def _parse_response(raw: str) -> Response:
        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise DeserializationError("Claude response is not valid JSON", raw_body=raw) from exc

        if not isinstance(body, dict):
            raise DeserializationError("Failed to parse Claude response", raw_body=raw)
        content = body.get("content")
        usage = body.get("usage")
        model_id = body.get("model")
        if not isinstance(content, list) or not isinstance(usage, dict) or not isinstance(model_id, str):
            raise DeserializationError("Failed to parse Claude response", raw_body=raw)
        input_tokens = usage.get("input_tokens")
        output_tokens = usage.get("output_tokens")
        if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
            raise DeserializationError("Failed to parse usage in Claude response", raw_body=raw)

        if body.get("stop_reason") == "refusal":
            raise ProviderRefusal(
                "Claude refused to process the request. This may be due to content policy restrictions."
            )

        text = "\n".join(
            block["text"]
            for block in content
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
        )
        cost_cents = exact_cost_cents(ClaudeModel.from_wire_id(model_id), input_tokens, output_tokens)
        return Response(text, cost_cents)

    async def stream(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        """
        Streaming request over server-sent events.

        If the connection drops after the response started, the text received
        so far is kept and reported in the final 'done' event.

        Yields:
            Dict[str, Any]: {"type": "token", "text": ...} for every parsed
            chunk, then a single {"type": "done", "text": ..., "cost_cents": ...}.

        Raises:
            ConfigurationError: If no credential is available or the base URL is invalid.
            TransportError: If the request fails before the stream opens.
            StreamDecodeError: If the stream carries invalid UTF-8.
        """
        headers = self.settings.headers()
        claude_model = ClaudeModel.from_wire_id(payload["model"])
        accumulator = StreamAccumulator()
        opened = False
        logger.info("getting through a stream")

        start = time.perf_counter()
        async with self._client() as client:
            try:
                async with client.stream("POST", self.settings.base_url, headers=headers, json=payload) as resp:
                    if resp.is_error:
                        body = (await resp.aread()).decode("utf-8", errors="replace")
                        raise TransportError(
                            f"Claude API returned HTTP {resp.status_code}: {body}",
                            status_code=resp.status_code,
                            body=body,
                        )
                    opened = True
                    async for chunk in resp.aiter_bytes():
                        piece = accumulator.feed(chunk)
                        if piece:
                            yield {"type": "token", "provider": self.name, "text": piece}
            except httpx.InvalidURL as exc:
                raise ConfigurationError(f"Invalid base URL {self.settings.base_url!r}: {exc}") from exc
            except httpx.HTTPError as exc:
                if not opened:
                    raise TransportError(f"Request to {self.settings.base_url} failed: {exc}") from exc
                logger.warning("stream interrupted after %d characters: %s", len(accumulator.text), exc)
        latency_ms = (time.perf_counter() - start) * 1000.0

        text = accumulator.finish()
        yield {
            "type": "done",
            "provider": self.name,
            "text": text,
            "cost_cents": estimated_cost_cents(claude_model, text),
            "meta": {
                "model": claude_model.wire_id,
                "estimated_output_tokens": estimate_tokens(text),
                "latency_ms": latency_ms,
            },
        }
