"""
Federation error taxonomy.

Every failure raised by the resolver derives from FederationException. Each
kind carries a stable message code (``error-federation-NNNN``) so callers can
tell the kinds apart from the message alone, plus structured attributes for
programmatic handling. None of these errors are retried.
"""

from typing import Optional


class FederationException(Exception):
    """Base class for all federation resolution failures."""

    code: str = "error-federation-1999"

    def __init__(self, msg: str) -> None:
        super().__init__(f"{self.code} {msg}")


class InsecureEndpoint(FederationException):
    """Federation server URL is not https and insecure connections are off."""

    code = "error-federation-1000"

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Cannot connect to insecure federation server {url}")


class InvalidAddressFormat(FederationException):
    """Malformed payment address (separator count or empty domain)."""

    code = "error-federation-1001"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid Payshares address: {value!r}")


class InvalidAccountIdentifier(FederationException):
    code = "error-federation-1002"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid Account ID: {value!r}")


class UnknownDomain(FederationException):
    """Address has no domain part and the server has no bound domain."""

    code = "error-federation-1003"

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(
            f"Unknown domain for {address!r}. Make sure the address contains a "
            "domain (ex. bob*payshares.org) or pass a domain when creating "
            "the federation server."
        )


class MissingFederationServer(FederationException):
    code = "error-federation-1004"

    def __init__(self, domain: str) -> None:
        self.domain = domain
        super().__init__(
            f"payshares.toml for {domain} does not contain FEDERATION_SERVER field"
        )


class ConfigParseError(FederationException):
    """payshares.toml could not be parsed."""

    code = "error-federation-1005"

    def __init__(
        self, line: Optional[int], column: Optional[int], detail: str
    ) -> None:
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(
            f"Parsing error on line {line}, column {column}: {detail}"
        )


class ResponseTooLarge(FederationException):
    code = "error-federation-1006"

    def __init__(self, resource: str, limit: int) -> None:
        self.resource = resource
        self.limit = limit
        super().__init__(f"{resource} exceeds allowed size of {limit}")


class BadResponse(FederationException):
    """Federation server answered with a non-2xx status or an unusable body."""

    code = "error-federation-1007"

    def __init__(
        self,
        status: int,
        reason: Optional[str],
        body: bytes,
        msg: Optional[str] = None,
    ) -> None:
        self.status = status
        self.reason = reason
        self.body = body
        if msg is None:
            msg = f"Server query failed. Server responded: {status} {reason or ''}".rstrip()
        super().__init__(msg)


class InvalidMemoType(FederationException):
    code = "error-federation-1008"

    def __init__(self, memo: object) -> None:
        self.memo = memo
        super().__init__(
            f"memo value should be of type string, got {type(memo).__name__}"
        )


class TransportError(FederationException):
    """Connection level failure: DNS, TLS, timeout, reset or a non-2xx fetch."""

    code = "error-federation-1009"

    def __init__(self, msg: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(msg)


class InvalidEndpoint(FederationException):
    """Federation server URL has no host."""

    code = "error-federation-1010"

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Federation server URL must be absolute: {url!r}")
