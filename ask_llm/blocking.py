"""
Synchronous wrappers around the async API.

Each call runs on a fresh event loop created and closed by asyncio.run(), so
every call pays the loop start-up cost. They cannot be used from code that is
already running inside an event loop; await the async functions there.
"""
import asyncio
from typing import Optional, Sequence

from . import client
from .config import Settings
from .response import Response
from .types import Conversation, Model


def oneshot(message: str, model: Model = Model.MEDIUM, settings: Optional[Settings] = None) -> Response:
    return asyncio.run(client.oneshot(message, model, settings=settings))


def conversation(
    conv: Conversation,
    model: Model,
    max_tokens: Optional[int] = None,
    stop_sequences: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
) -> Response:
    return asyncio.run(client.conversation(conv, model, max_tokens, stop_sequences, settings=settings))
