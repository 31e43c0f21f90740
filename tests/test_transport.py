"""
Unit tests for payshares.federation.transport

Tests cover size bounded body reads, declared Content-Length checks and the
mapping of aiohttp failures to TransportError.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from aiohttp import ClientConnectionError, ClientSession

from payshares.federation.errors import TransportError
from payshares.federation.transport import (
    LimitedResponse,
    ResponseSizeExceeded,
    fetch_limited,
    read_limited,
)
from tests.test_helpers import create_mock_response, create_mock_session


class TestReadLimited:
    """Test suite for read_limited."""

    @pytest.mark.asyncio
    async def test_reads_whole_body_in_chunks(self):
        """Test body split over several chunks is joined."""
        response = create_mock_response(body=b"a" * 10, chunk_size=3)

        body = await read_limited(response, 100)

        assert body == b"a" * 10

    @pytest.mark.asyncio
    async def test_body_at_limit_is_accepted(self):
        """Test body exactly as large as the limit is accepted."""
        response = create_mock_response(body=b"a" * 100, chunk_size=7)

        body = await read_limited(response, 100)

        assert len(body) == 100

    @pytest.mark.asyncio
    async def test_body_over_limit_raises(self):
        """Test body larger than the limit raises while streaming."""
        response = create_mock_response(body=b"a" * 110, chunk_size=50)

        with pytest.raises(ResponseSizeExceeded) as exc_info:
            await read_limited(response, 100)

        assert exc_info.value.limit == 100
        # Stops at the chunk that crossed the limit.
        assert response.content.read.await_count == 3

    @pytest.mark.asyncio
    async def test_declared_content_length_over_limit_raises(self):
        """Test oversized Content-Length is rejected before reading."""
        response = create_mock_response(body=b"", content_length=101)

        with pytest.raises(ResponseSizeExceeded):
            await read_limited(response, 100)

        response.content.read.assert_not_awaited()


class TestFetchLimited:
    """Test suite for fetch_limited."""

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        """Test successful fetch returns status and body."""
        url = "https://acme.com/file"
        session = create_mock_session({url: create_mock_response(body=b"hello")})

        result = await fetch_limited(session, url, 100)

        assert result == LimitedResponse(url=url, status=200, reason="OK", body=b"hello")
        assert result.ok is True
        assert result.text() == "hello"
        session.get.assert_called_once_with(url)

    @pytest.mark.asyncio
    async def test_fetch_non_2xx_is_returned(self):
        """Test error statuses are returned to the caller, not raised."""
        url = "https://acme.com/file"
        session = create_mock_session(
            {url: create_mock_response(status=404, reason="Not Found", body="nope")}
        )

        result = await fetch_limited(session, url, 100)

        assert result.status == 404
        assert result.ok is False
        assert result.body == b"nope"

    @pytest.mark.asyncio
    async def test_fetch_connection_error(self):
        """Test aiohttp client errors become TransportError."""
        session = AsyncMock(spec=ClientSession)
        session.get.side_effect = ClientConnectionError("connection reset")

        with pytest.raises(TransportError) as exc_info:
            await fetch_limited(session, "https://acme.com/file", 100)

        assert isinstance(exc_info.value.__cause__, ClientConnectionError)
        assert "connection reset" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_fetch_timeout(self):
        """Test timeouts become TransportError."""
        session = AsyncMock(spec=ClientSession)
        session.get.side_effect = asyncio.TimeoutError()

        with pytest.raises(TransportError, match="timed out"):
            await fetch_limited(session, "https://acme.com/file", 100)

    @pytest.mark.asyncio
    async def test_fetch_oversize_propagates_signal(self):
        """Test size signal is not converted to TransportError."""
        url = "https://acme.com/file"
        session = create_mock_session({url: create_mock_response(body=b"a" * 200)})

        with pytest.raises(ResponseSizeExceeded):
            await fetch_limited(session, url, 100)

    def test_limited_response_json(self):
        """Test JSON decoding helper."""
        response = LimitedResponse(
            url="https://acme.com", status=200, reason="OK", body=b'{"a": 1}'
        )
        assert response.json() == {"a": 1}
