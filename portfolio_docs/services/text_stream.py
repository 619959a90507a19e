"""Progressive text reveal for chat-style answers.

``reveal_prefixes`` is the synchronous core: a finite generator of growing
prefixes. ``timed_reveal`` paces it on the event loop and stops as soon as
the caller sets the cancel event.
"""

import asyncio
from typing import AsyncIterator, Iterator, Optional


def reveal_prefixes(text: str, chunk_size: int = 1) -> Iterator[str]:
    """Yield ``text[:n]`` for n = chunk_size, 2*chunk_size, ... up to len(text)."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    for end in range(chunk_size, len(text) + chunk_size, chunk_size):
        yield text[:min(end, len(text))]


async def timed_reveal(
    text: str,
    interval: float = 0.01,
    chunk_size: int = 1,
    cancel_event: Optional[asyncio.Event] = None,
) -> AsyncIterator[str]:
    """Async variant of :func:`reveal_prefixes` waiting *interval* seconds between prefixes."""
    for index, prefix in enumerate(reveal_prefixes(text, chunk_size)):
        if cancel_event is not None and cancel_event.is_set():
            return
        if index and interval > 0:
            await asyncio.sleep(interval)
            if cancel_event is not None and cancel_event.is_set():
                return
        yield prefix
