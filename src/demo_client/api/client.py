"""
HTTP client for the demo generation API.

This module provides the APIClient class for every endpoint the client
consumes: demo generation and status, history, download/share, credits,
account and password recovery.

APIClient receives an injected httpx.AsyncClient with base_url set to the
API root, and a TokenStore it reads (never writes) on every request.

Error normalization:
- httpx.RequestError (connect, read, timeout, body decoding...) -> TransientError
- 404 -> NotFoundError
- other 4xx -> ClientError
- 5xx -> ServerError
- payload failing validation -> ServerError
"""

import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
import pydantic

from demo_client.api.types import (
    CreditsResponse,
    DemoPayload,
    ErrorPayload,
    GenerateResponse,
    HistoryResponse,
    ShareResponse,
    TokenResponse,
    UserResponse,
)
from demo_client.auth.store import MemoryTokenStore, TokenStore
from demo_client.exceptions import (
    ClientError,
    NotFoundError,
    ServerError,
    TransientError,
    ValidationError,
)
from demo_client.types import (
    Credential,
    Credits,
    Demo,
    DemoId,
    GenerationOptions,
    HistoryPage,
    UserProfile,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _error_message(response: httpx.Response) -> str | None:
    """Pull the user-facing message out of an error response, if any."""
    try:
        return ErrorPayload.model_validate(response.json()).user_message()
    except (ValueError, pydantic.ValidationError):
        return None


@dataclass
class APIClient:
    """
    Demo API client with injected httpx client and token store.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the API root.
        tokens: Credential slot read on every request. Requests are sent
            anonymously while it is empty.

    Example:
        async with httpx.AsyncClient(base_url="http://localhost:8000/api/v1") as http:
            client = APIClient(http=http, tokens=store)
            demo_id = await client.generate_demo("Teach me Jollof rice")
            demo = await client.get_demo(demo_id)
            print(f"{demo.id}: {demo.status.value} {demo.progress_percent}%")
    """

    http: httpx.AsyncClient
    tokens: TokenStore = field(default_factory=MemoryTokenStore)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        credential = self.tokens.get()
        if credential is None:
            return {}
        return {"Authorization": f"Bearer {credential.access_token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and normalize failures.

        Args:
            method: HTTP method.
            path: Path relative to the client's base_url.
            **kwargs: Passed through to httpx (json, params...).

        Returns:
            The successful (2xx) response.

        Raises:
            TransientError: On network, timeout or body decoding failures.
            NotFoundError: On 404.
            ClientError: On other 4xx responses.
            ServerError: On 5xx (and any other non-2xx) responses.
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self.http.request(
                method, path, headers=self._auth_headers(), **kwargs
            )
        except httpx.RequestError as e:
            logger.warning("%s %s request failure: %r", method, path, e)
            raise TransientError(method, path, str(e) or type(e).__name__) from e

        if response.is_success:
            return response

        status = response.status_code
        message = _error_message(response)
        logger.warning("%s %s returned %d: %s", method, path, status, message)

        if status == 404:
            raise NotFoundError(path, message)
        if 400 <= status < 500:
            raise ClientError(status, message)
        raise ServerError(status, message)

    def _parse(self, model: type[ModelT], response: httpx.Response) -> ModelT:
        """Validate a JSON body, treating a malformed payload as a server fault."""
        try:
            return model.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            logger.warning(
                "Malformed %s from %s: %s", model.__name__, response.request.url, e
            )
            raise ServerError(
                response.status_code, f"Malformed response from {response.request.url.path}"
            ) from e

    # -------------------------------------------------------------------------
    # Demos
    # -------------------------------------------------------------------------

    async def generate_demo(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> DemoId:
        """
        Submit a learning request for generation.

        Calls POST /generate with the prompt and generation options.

        Args:
            prompt: Natural-language request, e.g. "Teach me Jollof rice".
            options: Language, quality and voice; defaults when None.

        Returns:
            Identifier of the newly created demo.

        Raises:
            ValidationError: If the prompt is empty (no request is sent).
        """
        if not prompt or not prompt.strip():
            raise ValidationError("prompt", "Please enter a query")

        payload: dict[str, Any] = {"prompt": prompt}
        payload.update((options or GenerationOptions()).to_payload())

        response = await self._request("POST", "/generate", json=payload)
        data = self._parse(GenerateResponse, response)
        return str(data.demo_id)

    async def get_demo(self, demo_id: DemoId) -> Demo:
        """
        Get the current snapshot of a demo.

        Calls GET /demo/{id}. Steps in the returned snapshot are sorted by
        step_number.

        Raises:
            NotFoundError: If the demo does not exist.
        """
        response = await self._request("GET", f"/demo/{demo_id}")
        return self._parse(DemoPayload, response).to_demo()

    async def get_history(self, page: int = 1, page_size: int = 10) -> HistoryPage:
        """
        Get one page of the user's demo history.

        Calls GET /history?page=&limit=.

        Args:
            page: 1-indexed page number.
            page_size: Items per page.
        """
        response = await self._request(
            "GET", "/history", params={"page": page, "limit": page_size}
        )
        return self._parse(HistoryResponse, response).to_page(page)

    async def delete_demo(self, demo_id: DemoId) -> None:
        """
        Delete a demo.

        Calls DELETE /demo/{id}. Returning without an exception is the
        server's acknowledgment; the body carries no guarantees.
        """
        await self._request("DELETE", f"/demo/{demo_id}")

    async def download_demo(self, demo_id: DemoId) -> bytes:
        """
        Download the rendered video.

        Calls GET /demo/{id}/download and returns the raw bytes.
        """
        response = await self._request("GET", f"/demo/{demo_id}/download")
        return response.content

    async def share_demo(self, demo_id: DemoId) -> str:
        """
        Create a share link for a demo.

        Calls POST /demo/{id}/share.

        Returns:
            The public share URL.
        """
        response = await self._request("POST", f"/demo/{demo_id}/share")
        return self._parse(ShareResponse, response).share_url

    async def get_credits(self) -> Credits:
        """Get the remaining generation quota via GET /user/credits."""
        response = await self._request("GET", "/user/credits")
        return self._parse(CreditsResponse, response).to_credits()

    # -------------------------------------------------------------------------
    # Account - raw calls, the token store is written by AuthSession
    # -------------------------------------------------------------------------

    async def register(self, email: str, password: str, name: str) -> UserProfile:
        response = await self._request(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        return self._parse(UserResponse, response).to_profile()

    async def login(self, email: str, password: str) -> Credential:
        response = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._parse(TokenResponse, response).to_credential()

    async def get_current_user(self) -> UserProfile:
        response = await self._request("GET", "/auth/me")
        return self._parse(UserResponse, response).to_profile()

    # -------------------------------------------------------------------------
    # Password recovery - pass-throughs, no client-side state
    # -------------------------------------------------------------------------

    async def request_password_reset(self, email: str) -> None:
        """
        Ask the server to email a reset link.

        Raises:
            ValidationError: If email is empty (no request is sent).
        """
        if not email or not email.strip():
            raise ValidationError("email", "Please enter your email address")
        await self._request(
            "POST", "/auth/password-reset/request", json={"email": email.strip()}
        )

    async def validate_reset_token(self, token: str) -> None:
        """
        Check that a reset token is still valid.

        Raises:
            ValidationError: If token is empty (no request is sent).
            ClientError: If the server rejects the token as invalid or expired.
        """
        if not token:
            raise ValidationError("token", "Invalid or missing reset token")
        await self._request(
            "POST", "/auth/password-reset/validate-token", json={"token": token}
        )

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            ValidationError: If token or new_password is empty (no request is sent).
        """
        if not token:
            raise ValidationError("token", "Invalid or missing reset token")
        if not new_password:
            raise ValidationError("new_password", "Please fill in all password fields")
        await self._request(
            "POST",
            "/auth/password-reset/reset",
            json={"token": token, "new_password": new_password},
        )
