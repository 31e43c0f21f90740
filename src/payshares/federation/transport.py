"""Size bounded HTTP GET on top of a caller-owned aiohttp ClientSession."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from aiohttp import ClientError, ClientResponse, ClientSession

from payshares.federation.errors import TransportError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 8 * 1024


class ResponseSizeExceeded(Exception):
    """Raised by fetch_limited when a body is larger than the allowed size."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"response body exceeds {limit} bytes")


@dataclass(frozen=True)
class LimitedResponse:
    url: str
    status: int
    reason: Optional[str]
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    def json(self) -> Any:
        return json.loads(self.body)


async def read_limited(resp: ClientResponse, max_size: int) -> bytes:
    """Read a response body, giving up as soon as it grows past max_size.

    Args:
        resp: Response whose body has not been consumed yet
        max_size: Largest accepted body, in bytes

    Returns:
        The complete body

    Raises:
        ResponseSizeExceeded: If the declared or actual body is too large
    """
    if resp.content_length is not None and resp.content_length > max_size:
        raise ResponseSizeExceeded(max_size)

    body = bytearray()
    while True:
        chunk = await resp.content.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        body.extend(chunk)
        if len(body) > max_size:
            raise ResponseSizeExceeded(max_size)
    return bytes(body)


async def fetch_limited(
    session: ClientSession, url: str, max_size: int
) -> LimitedResponse:
    """Issue a single GET and return the status and a size bounded body.

    Non-2xx responses are returned, not raised; callers decide what a bad
    status means for them.

    Raises:
        ResponseSizeExceeded: If the body is larger than max_size
        TransportError: On connection errors and timeouts
    """
    logger.debug("GET %s (max %d bytes)", url, max_size)
    try:
        async with session.get(url) as resp:
            body = await read_limited(resp, max_size)
            return LimitedResponse(
                url=url, status=resp.status, reason=resp.reason, body=body
            )
    except ClientError as e:
        raise TransportError(f"Request to {url} failed: {e}") from e
    except asyncio.TimeoutError as e:
        raise TransportError(f"Request to {url} timed out") from e
