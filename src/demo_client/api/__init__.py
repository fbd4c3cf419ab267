"""HTTP access to the demo generation API."""

from demo_client.api.client import APIClient

__all__ = ["APIClient"]
