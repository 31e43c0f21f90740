"""
Destination Resolution

This package resolves Payshares destinations (account IDs and ``user*domain``
addresses) to federation records.

Key Components:
- address.py: destination classification and the top level resolver
- well_known.py: payshares.toml fetching and parsing
- server.py: federation server client (name, id and txid queries)
- keys.py: account ID format validation
- __main__.py: CLI interface for resolution

Account IDs are validated locally. Addresses require two sequential requests:
the domain's payshares.toml, then the federation server it advertises.
"""
