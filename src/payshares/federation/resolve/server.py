"""Federation server client.

A FederationServer wraps the federation endpoint advertised by a domain (or
supplied directly) and exposes name, account id and transaction id lookups.
Responses are read with a size ceiling and validated before being returned.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from aiohttp import ClientSession
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from payshares.federation.app.config import Settings
from payshares.federation.errors import (
    BadResponse,
    InsecureEndpoint,
    InvalidEndpoint,
    InvalidMemoType,
    MissingFederationServer,
    ResponseTooLarge,
    UnknownDomain,
)
from payshares.federation.resolve.well_known import resolve_payshares_toml
from payshares.federation.transport import ResponseSizeExceeded, fetch_limited

logger = logging.getLogger(__name__)


class QueryType(str, Enum):
    """Federation query types (the ``type`` query parameter)."""

    name = "name"
    id = "id"
    txid = "txid"


class FederationRecord(BaseModel):
    """Federation record returned for a resolved address, account or transaction.

    Unknown fields sent by the server are kept as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    account_id: StrictStr
    memo_type: Optional[Any] = None
    memo: Optional[StrictStr] = None

    def as_dict(self) -> Dict[str, Any]:
        """Fields as sent by the server, without unset optional fields."""
        return self.model_dump(exclude_unset=True)


class FederationServer:
    """Client for a single federation server.

    Args:
        session: HTTP client session used for queries
        server_url: Federation server URL (ex. ``https://acme.com/federation``)
        domain: Domain this server represents, used to qualify bare usernames
        settings: Resolver settings; defaults are loaded when omitted
        allow_http: Per-call override of settings.allow_http

    Raises:
        InsecureEndpoint: server_url is not https and http is not allowed
        InvalidEndpoint: server_url has no scheme or host while http is allowed
    """

    def __init__(
        self,
        session: ClientSession,
        server_url: str,
        domain: Optional[str] = None,
        settings: Optional[Settings] = None,
        allow_http: Optional[bool] = None,
    ) -> None:
        self.session = session
        self.settings = settings if settings is not None else Settings()
        self.domain = domain

        parsed = urlparse(server_url)
        if parsed.scheme != "https" and not self.settings.is_allow_http(allow_http):
            raise InsecureEndpoint(server_url)
        if not parsed.scheme or not parsed.netloc:
            raise InvalidEndpoint(server_url)

        self.server_url = server_url

    @classmethod
    async def for_domain(
        cls,
        session: ClientSession,
        settings: Settings,
        domain: str,
        allow_http: Optional[bool] = None,
    ) -> "FederationServer":
        """Create a FederationServer from the payshares.toml of a domain.

        Raises:
            MissingFederationServer: payshares.toml has no FEDERATION_SERVER
            ConfigParseError, ResponseTooLarge, TransportError: fetching failed
        """
        payshares_toml = await resolve_payshares_toml(
            session, settings, domain, allow_http=allow_http
        )
        federation_server = payshares_toml.federation_server
        if federation_server is None:
            raise MissingFederationServer(domain)
        return cls(
            session,
            federation_server,
            domain=domain,
            settings=settings,
            allow_http=allow_http,
        )

    def query_url(self, query_type: QueryType, q: str) -> str:
        parsed = urlparse(self.server_url)
        query = parse_qsl(parsed.query, keep_blank_values=True)
        query.extend([("type", query_type.value), ("q", q)])
        return urlunparse(parsed._replace(query=urlencode(query)))

    async def resolve_address(self, address: str) -> FederationRecord:
        """Look up a payment address. A bare username is qualified with the
        server's domain.

        Raises:
            UnknownDomain: address has no domain and the server has none
        """
        if "*" not in address:
            if not self.domain:
                raise UnknownDomain(address)
            address = f"{address}*{self.domain}"
        return await self._send_request(self.query_url(QueryType.name, address))

    async def resolve_account_id(self, account_id: str) -> FederationRecord:
        return await self._send_request(self.query_url(QueryType.id, account_id))

    async def resolve_transaction_id(self, transaction_id: str) -> FederationRecord:
        """Look up the sender of a transaction."""
        return await self._send_request(
            self.query_url(QueryType.txid, transaction_id)
        )

    async def _send_request(self, url: str) -> FederationRecord:
        max_size = self.settings.federation_response_max_size
        try:
            response = await fetch_limited(self.session, url, max_size)
        except ResponseSizeExceeded as e:
            raise ResponseTooLarge("federation response", e.limit) from e

        if not response.ok:
            raise BadResponse(response.status, response.reason, response.body)

        try:
            body = response.json()
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BadResponse(
                response.status,
                response.reason,
                response.body,
                msg="Federation server response is not valid JSON",
            ) from e

        return validate_record(body, response.status, response.reason, response.body)


def validate_record(
    body: Any, status: int, reason: Optional[str], raw: bytes
) -> FederationRecord:
    """Turn a decoded federation response into a FederationRecord.

    Raises:
        InvalidMemoType: memo is present and not a string
        BadResponse: body is not an object or account_id is missing
    """
    if not isinstance(body, dict):
        raise BadResponse(
            status, reason, raw, msg="Federation server response is not an object"
        )

    if "memo" in body and not isinstance(body["memo"], str):
        raise InvalidMemoType(body["memo"])

    try:
        return FederationRecord.model_validate(body)
    except ValidationError as e:
        raise BadResponse(
            status,
            reason,
            raw,
            msg=f"Federation server response is malformed: {e.error_count()} invalid field(s)",
        ) from e
