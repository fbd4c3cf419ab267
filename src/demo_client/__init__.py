"""
Demo Client Library

Async client for the AI demo generation service. This package provides:

- APIClient: HTTP access with bearer auth and normalized errors
- AuthSession / TokenStore: login, logout and credential storage
- DemoLifecycleController: submit a prompt and poll until the demo is ready
- StepViewModel: active-step selection for the viewer
- HistoryListController: paginated history with client-side sort and delete
- CLI infrastructure: Typer-based command structure
"""

__version__ = "0.1.0"

# Re-export public types for convenient imports
from demo_client.api.client import APIClient
from demo_client.auth.session import AuthSession
from demo_client.auth.store import MemoryTokenStore, StorageTokenStore, TokenStore
from demo_client.config import Settings
from demo_client.exceptions import (
    ClientError,
    DemoClientError,
    InvalidStateError,
    NotFoundError,
    ServerError,
    TransientError,
    ValidationError,
)
from demo_client.history.controller import HistoryListController, SortCriterion
from demo_client.lifecycle.controller import (
    DemoLifecycleController,
    LifecycleSnapshot,
    LifecycleState,
)
from demo_client.lifecycle.steps import StepViewModel
from demo_client.types import (
    Credential,
    Credits,
    Demo,
    DemoId,
    DemoStatus,
    GenerationOptions,
    HistoryPage,
    Step,
    UserProfile,
)

__all__ = [
    "__version__",
    # Clients
    "APIClient",
    "AuthSession",
    "Settings",
    # Token storage
    "TokenStore",
    "MemoryTokenStore",
    "StorageTokenStore",
    # Controllers
    "DemoLifecycleController",
    "LifecycleSnapshot",
    "LifecycleState",
    "StepViewModel",
    "HistoryListController",
    "SortCriterion",
    # Data types
    "Credential",
    "Credits",
    "Demo",
    "DemoId",
    "DemoStatus",
    "GenerationOptions",
    "HistoryPage",
    "Step",
    "UserProfile",
    # Errors
    "DemoClientError",
    "ValidationError",
    "TransientError",
    "ClientError",
    "NotFoundError",
    "ServerError",
    "InvalidStateError",
]
