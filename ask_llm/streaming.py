"""
Server-sent event accumulator for streamed Messages API responses.

Only ``content_block_delta`` events contribute text. Every other event
(message_start, ping, content_block_stop, message_stop, ...) fails to parse as
a delta record and is dropped without interrupting accumulation.
"""
import codecs
import json
import logging
from enum import Enum
from typing import Iterable, List, Optional

from .errors import StreamDecodeError

logger = logging.getLogger(__name__)

DELTA_EVENT_MARKER = "event: content_block_delta\ndata: "
NEXT_EVENT_MARKER = "\n\nevent: "
FRAME_SEPARATOR = "\n\n"


class StreamState(Enum):
    AWAITING_FRAME = "awaiting_frame"
    PARSING_FRAME = "parsing_frame"
    EMIT_DELTA = "emit_delta"
    DISCARD = "discard"
    DONE = "done"


def parse_delta(segment: str) -> Optional[str]:
    """
    Parse one isolated event body as a content delta record.

    Expected shape: ``{"type": ..., "index": int, "delta": {"type": ..., "text": ...}}``.

    Returns:
        The delta text if the record is a text delta, otherwise None.
    """
    try:
        record = json.loads(segment)
    except ValueError:
        return None
    if not isinstance(record, dict):
        return None

    delta = record.get("delta")
    if not isinstance(delta, dict):
        return None
    text = delta.get("text")
    delta_type = delta.get("type")
    response_type = record.get("type")
    index = record.get("index")
    if not isinstance(text, str) or not isinstance(delta_type, str):
        return None
    if not isinstance(response_type, str) or not isinstance(index, int):
        return None

    if response_type == "content_block_delta" or delta_type == "text_delta":
        return text
    return None


class StreamAccumulator:
    """
    Incremental SSE parser that concatenates text deltas in arrival order.

    Chunks may split or merge events arbitrarily; text is only parsed once a
    frame is complete, so the result does not depend on chunk boundaries.

    Example:
        >>> acc = StreamAccumulator()
        >>> for chunk in chunks:
        ...     acc.feed(chunk)
        >>> text = acc.finish()
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._buffer = ""
        self._parts: List[str] = []
        self.state = StreamState.AWAITING_FRAME

    @property
    def text(self) -> str:
        """Text accumulated so far."""
        return "".join(self._parts)

    def feed(self, chunk: bytes) -> str:
        """
        Consume one byte chunk.

        Returns:
            The text contributed by the frames completed in this chunk.

        Raises:
            StreamDecodeError: If the bytes are not valid UTF-8.
            RuntimeError: If the accumulator was already finished.
        """
        if self.state is StreamState.DONE:
            raise RuntimeError("Cannot feed a finished stream accumulator")

        self._buffer += self._decode(chunk, final=False)
        self._buffer = self._buffer.replace("\r\n", "\n")

        emitted = []
        while True:
            frame, separator, rest = self._buffer.partition(FRAME_SEPARATOR)
            if not separator:
                break
            self._buffer = rest
            emitted.append(self._process_frame(frame))

        piece = "".join(emitted)
        if piece:
            logger.debug("parsed %r", piece)
        return piece

    def finish(self) -> str:
        """
        Flush any trailing partial frame and return the full text.

        Calling finish() again returns the same text.
        """
        if self.state is not StreamState.DONE:
            self._buffer += self._decode(b"", final=True)
            if self._buffer.strip():
                self._process_frame(self._buffer)
            self._buffer = ""
            self.state = StreamState.DONE
        return self.text

    def _decode(self, chunk: bytes, final: bool) -> str:
        try:
            return self._decoder.decode(chunk, final=final)
        except UnicodeDecodeError as exc:
            raise StreamDecodeError(
                f"Found invalid UTF-8 in stream: {exc.reason}",
                raw_body=repr(chunk),
            ) from exc

    def _process_frame(self, frame: str) -> str:
        self.state = StreamState.PARSING_FRAME
        emitted = []
        for segment in frame.split(DELTA_EVENT_MARKER):
            body = segment.split(NEXT_EVENT_MARKER, 1)[0]
            text = parse_delta(body)
            if text is None:
                self.state = StreamState.DISCARD
                continue
            self.state = StreamState.EMIT_DELTA
            self._parts.append(text)
            emitted.append(text)
        self.state = StreamState.AWAITING_FRAME
        return "".join(emitted)


def accumulate(chunks: Iterable[bytes]) -> str:
    """Accumulate a complete, already-received sequence of chunks."""
    accumulator = StreamAccumulator()
    for chunk in chunks:
        accumulator.feed(chunk)
    return accumulator.finish()
