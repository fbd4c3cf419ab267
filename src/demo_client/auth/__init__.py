"""Credential storage and the login/logout flow."""

from demo_client.auth.session import AuthSession
from demo_client.auth.store import MemoryTokenStore, StorageTokenStore, TokenStore

__all__ = ["AuthSession", "MemoryTokenStore", "StorageTokenStore", "TokenStore"]
