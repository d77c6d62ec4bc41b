"""HTTP API for the exchange service."""
