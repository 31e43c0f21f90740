"""payshares.toml discovery.

Fetches https://{domain}/.well-known/payshares.toml with a response size
ceiling and parses it into an immutable PaysharesToml.
"""

import logging
import re
import tomllib
from typing import Any, Dict, Optional

from aiohttp import ClientSession
from pydantic import BaseModel, ConfigDict

from payshares.federation.app.config import Settings
from payshares.federation.errors import (
    ConfigParseError,
    ResponseTooLarge,
    TransportError,
)
from payshares.federation.transport import ResponseSizeExceeded, fetch_limited

logger = logging.getLogger(__name__)

PAYSHARES_TOML_NAME = "payshares.toml"

# tomllib renders positions as "(at line 3, column 1)"; Python 3.14 also
# exposes them as attributes.
_TOML_POSITION = re.compile(r"\s*\(at line (\d+), column (\d+)\)$")


class PaysharesToml(BaseModel):
    """Parsed payshares.toml document for a domain."""

    model_config = ConfigDict(frozen=True)

    domain: str
    values: Dict[str, Any]

    @property
    def federation_server(self) -> Optional[str]:
        value = self.values.get("FEDERATION_SERVER")
        if isinstance(value, str) and len(value) > 0:
            return value
        return None

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


def payshares_toml_url(domain: str, allow_http: bool) -> str:
    protocol = "http" if allow_http else "https"
    return f"{protocol}://{domain}/.well-known/{PAYSHARES_TOML_NAME}"


def parse_payshares_toml(domain: str, text: str) -> PaysharesToml:
    """Parse payshares.toml text.

    Raises:
        ConfigParseError: With the line and column reported by the parser
    """
    try:
        values = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        line = getattr(e, "lineno", None)
        column = getattr(e, "colno", None)
        detail = getattr(e, "msg", None) or str(e)
        match = _TOML_POSITION.search(detail)
        if match is not None:
            line, column = int(match.group(1)), int(match.group(2))
            detail = detail[: match.start()]
        if line is None:
            # "(at end of document)"
            line = text.count("\n") + 1
            column = len(text) - text.rfind("\n")
            detail = detail.replace(" (at end of document)", "")
        raise ConfigParseError(line, column, detail) from e
    return PaysharesToml(domain=domain, values=values)


async def resolve_payshares_toml(
    session: ClientSession,
    settings: Settings,
    domain: str,
    allow_http: Optional[bool] = None,
) -> PaysharesToml:
    """Fetch and parse the payshares.toml file of a domain.

    Args:
        session: HTTP client session
        settings: Resolver settings (size ceiling, default allow-http)
        domain: Domain to get payshares.toml for
        allow_http: Per-call override of settings.allow_http

    Returns:
        PaysharesToml for the domain

    Raises:
        ResponseTooLarge: Body is larger than settings.toml_max_size
        TransportError: Connection failure or non-2xx status
        ConfigParseError: Body is not valid TOML
    """
    url = payshares_toml_url(domain, settings.is_allow_http(allow_http))
    try:
        response = await fetch_limited(session, url, settings.toml_max_size)
    except ResponseSizeExceeded as e:
        raise ResponseTooLarge(f"{PAYSHARES_TOML_NAME} file", e.limit) from e

    if not response.ok:
        raise TransportError(
            f"{url} responded: {response.status} {response.reason or ''}".rstrip(),
            status=response.status,
        )

    try:
        text = response.text()
    except UnicodeDecodeError as e:
        head = response.body[: e.start]
        line = head.count(b"\n") + 1
        column = len(head) - head.rfind(b"\n")
        raise ConfigParseError(
            line, column, f"{PAYSHARES_TOML_NAME} is not valid UTF-8"
        ) from e

    return parse_payshares_toml(domain, text)
