"""
Credential storage for the API client.

The TokenStore protocol is the single process-wide credential slot:
- empty at startup (or holding the credential persisted by a previous login)
- set by AuthSession.login()
- read, never mutated, by APIClient on every request
- cleared by AuthSession.logout()

There is no background refresh and no client-managed expiry. Last writer
wins; no further locking is needed on a single event loop.
"""

from typing import Protocol, runtime_checkable

from demo_client.storage import LocalStorage, StorageKeys
from demo_client.types import Credential


@runtime_checkable
class TokenStore(Protocol):
    """
    Protocol for credential storage.

    Implementations hold at most one Credential at a time.
    """

    def get(self) -> Credential | None:
        """Return the current credential, or None when logged out."""
        ...

    def set(self, credential: Credential) -> None:
        """Replace the current credential."""
        ...

    def clear(self) -> None:
        """Forget the current credential. Clearing an empty store is a no-op."""
        ...


class MemoryTokenStore:
    """In-process credential slot. Nothing survives the process."""

    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    def get(self) -> Credential | None:
        return self._credential

    def set(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None


class StorageTokenStore:
    """
    Credential slot persisted in LocalStorage.

    Tokens are kept under the access_token and refresh_token keys so they
    remain readable across sessions until logout.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def get(self) -> Credential | None:
        access_token = self.storage.get_item(StorageKeys.ACCESS_TOKEN)
        if not access_token:
            return None
        refresh_token = self.storage.get_item(StorageKeys.REFRESH_TOKEN)
        return Credential(access_token=access_token, refresh_token=refresh_token)

    def set(self, credential: Credential) -> None:
        self.storage.set_item(StorageKeys.ACCESS_TOKEN, credential.access_token)
        if credential.refresh_token:
            self.storage.set_item(StorageKeys.REFRESH_TOKEN, credential.refresh_token)
        else:
            self.storage.remove_item(StorageKeys.REFRESH_TOKEN)

    def clear(self) -> None:
        self.storage.remove_item(StorageKeys.ACCESS_TOKEN)
        self.storage.remove_item(StorageKeys.REFRESH_TOKEN)
