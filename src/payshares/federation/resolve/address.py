"""Resolve user supplied destinations.

A destination is either an account ID (``GB5X...``), which is validated
locally, or a Payshares address (``bob*payshares.org``), which is resolved
through the federation server advertised by the domain's payshares.toml.
"""

import logging
from enum import IntEnum
from typing import Optional, cast

from aiohttp import ClientSession
from pydantic import BaseModel

from payshares.federation.app.config import Settings
from payshares.federation.errors import (
    InvalidAccountIdentifier,
    InvalidAddressFormat,
)
from payshares.federation.resolve.keys import is_valid_account_id
from payshares.federation.resolve.server import FederationRecord, FederationServer

logger = logging.getLogger(__name__)


class AddressType(IntEnum):
    account_id = 1
    payment_address = 2


class ParsedAddress(BaseModel):
    """Classified destination.

    ``domain`` is only set for payment addresses.
    """

    address_type: AddressType
    value: str
    domain: Optional[str] = None


def parse_input(value: str) -> ParsedAddress:
    """Classify a destination without touching the network.

    Args:
        value: Account ID or Payshares address

    Returns:
        ParsedAddress with type, original value and domain

    Raises:
        InvalidAccountIdentifier: no ``*`` and not a valid account ID
        InvalidAddressFormat: more than one ``*`` or an empty domain
    """
    if "*" not in value:
        if not is_valid_account_id(value):
            raise InvalidAccountIdentifier(value)
        return ParsedAddress(address_type=AddressType.account_id, value=value)

    parts = value.split("*")
    if len(parts) != 2 or not parts[1]:
        raise InvalidAddressFormat(value)

    return ParsedAddress(
        address_type=AddressType.payment_address, value=value, domain=parts[1]
    )


async def resolve_address(
    session: ClientSession,
    settings: Settings,
    value: str,
    allow_http: Optional[bool] = None,
) -> FederationRecord:
    """Resolve an account ID or Payshares address to a federation record.

    Account IDs are returned as ``{account_id: value}`` without any network
    call. This does not check that the account exists in the ledger.

    Args:
        session: HTTP client session
        settings: Resolver settings
        value: Account ID or Payshares address
        allow_http: Per-call override of settings.allow_http

    Returns:
        FederationRecord for the destination
    """
    parsed = parse_input(value)
    if parsed.address_type == AddressType.account_id:
        return FederationRecord(account_id=parsed.value)

    domain = cast(str, parsed.domain)
    logger.debug("resolving %s via %s", parsed.value, domain)
    federation_server = await FederationServer.for_domain(
        session, settings, domain, allow_http=allow_http
    )
    return await federation_server.resolve_address(parsed.value)
