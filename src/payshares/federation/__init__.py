"""
Payshares Federation

This package resolves Payshares destinations to federation records. A destination is
either an account ID, which is validated locally, or a Payshares address of the form
``user*domain``, which is resolved by discovering and querying the domain's federation
server.

Key Components:
- resolve: payshares.toml discovery, the federation server client and the
  destination resolver
- transport: size bounded HTTP GET over aiohttp
- errors: the FederationException hierarchy
- app: settings, logging and error reporting bootstrap

Resolution Flow:
1. Classify the destination (account ID or Payshares address)
2. For account IDs, validate the key format and return it without network access
3. For addresses, fetch https://{domain}/.well-known/payshares.toml
4. Query the advertised FEDERATION_SERVER with type=name&q={address}
5. Validate and return the federation record

No result is cached and no request is retried.
"""
