"""Tests for progressive text reveal."""

import asyncio

import pytest

from portfolio_docs.services.text_stream import reveal_prefixes, timed_reveal


class TestRevealPrefixes:

    def test_one_character_at_a_time(self):
        assert list(reveal_prefixes("abc")) == ["a", "ab", "abc"]

    def test_chunked_reveal_ends_on_full_text(self):
        assert list(reveal_prefixes("abcde", chunk_size=2)) == ["ab", "abcd", "abcde"]

    def test_empty_text(self):
        assert list(reveal_prefixes("")) == []

    def test_not_restartable(self):
        stream = reveal_prefixes("ab")
        assert list(stream) == ["a", "ab"]
        assert list(stream) == []

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            next(reveal_prefixes("abc", chunk_size=0))


class TestTimedReveal:

    def test_yields_every_prefix(self):
        async def collect():
            return [p async for p in timed_reveal("hey", interval=0)]

        assert asyncio.run(collect()) == ["h", "he", "hey"]

    def test_cancel_stops_stream(self):
        async def collect():
            cancel = asyncio.Event()
            seen = []
            async for prefix in timed_reveal("hello", interval=0.001, cancel_event=cancel):
                seen.append(prefix)
                if len(seen) == 2:
                    cancel.set()
            return seen

        assert asyncio.run(collect()) == ["h", "he"]

    def test_already_cancelled(self):
        async def collect():
            cancel = asyncio.Event()
            cancel.set()
            return [p async for p in timed_reveal("hello", cancel_event=cancel)]

        assert asyncio.run(collect()) == []
