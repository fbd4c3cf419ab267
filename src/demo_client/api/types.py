"""
Pydantic response types for the demo generation API.

These are API response types for external data validation. Internal
types (Demo, Step, etc.) are dataclasses in demo_client.types; each
response model converts itself with a to_*() method.

Notes:
- Identifiers may arrive as int or str; they are always str internally
- steps are sorted by step_number here, and duplicate numbers reject the payload
- An unknown status value rejects the payload instead of falling through
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from demo_client.types import (
    Credential,
    Credits,
    Demo,
    DemoStatus,
    HistoryPage,
    Step,
    UserProfile,
)


class StepPayload(BaseModel):
    """Single entry of a demo's steps array."""

    step_number: int = Field(gt=0)
    title: str = ""
    description: str = ""
    media: str | None = None

    def to_step(self) -> Step:
        return Step(
            step_number=self.step_number,
            title=self.title,
            description=self.description,
            media=self.media,
        )


class DemoPayload(BaseModel):
    """
    A demo as returned by GET /demo/{id} and inside GET /history.

    Example response:
    {
        "id": "d-42",
        "prompt": "Teach me Jollof rice",
        "status": "processing",
        "progress_percent": 40,
        "steps": [{"step_number": 1, "title": "Wash the rice"}],
        "created_at": "2026-03-01T12:00:00Z"
    }
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str
    prompt: str = ""
    status: DemoStatus
    progress_percent: float | None = Field(default=None, ge=0, le=100)
    video_url: str | None = None
    thumbnail_url: str | None = None
    duration: float | None = Field(default=None, ge=0)
    file_size: int | None = Field(default=None, ge=0)
    steps: list[StepPayload] = Field(default_factory=list)
    created_at: datetime

    @field_validator("steps", mode="before")
    @classmethod
    def _null_steps(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("steps")
    @classmethod
    def _sorted_unique_steps(cls, steps: list[StepPayload]) -> list[StepPayload]:
        ordered = sorted(steps, key=lambda s: s.step_number)
        numbers = [s.step_number for s in ordered]
        if len(set(numbers)) != len(numbers):
            raise ValueError(f"duplicate step_number in {numbers}")
        return ordered

    def to_demo(self) -> Demo:
        return Demo(
            id=str(self.id),
            prompt=self.prompt,
            status=self.status,
            created_at=self.created_at,
            progress_percent=int(self.progress_percent or 0),
            video_url=self.video_url,
            thumbnail_url=self.thumbnail_url,
            duration=self.duration,
            file_size=self.file_size,
            steps=tuple(s.to_step() for s in self.steps),
        )


class GenerateResponse(BaseModel):
    """Response from POST /generate."""

    demo_id: int | str


class HistoryResponse(BaseModel):
    """
    Response from GET /history?page=&limit=.

    Example response:
    {"demos": [{...demo...}], "total_pages": 4}
    """

    demos: list[DemoPayload] = Field(default_factory=list)
    total_pages: int = Field(default=1, ge=0)

    def to_page(self, page: int) -> HistoryPage:
        # An empty history reports zero pages; page 1 still exists
        return HistoryPage(
            items=[d.to_demo() for d in self.demos],
            total_pages=max(self.total_pages, 1),
            page=page,
        )


class ShareResponse(BaseModel):
    """Response from POST /demo/{id}/share."""

    share_url: str


class CreditsResponse(BaseModel):
    """Response from GET /user/credits."""

    remaining: int = Field(ge=0)
    limit: int | None = None

    def to_credits(self) -> Credits:
        return Credits(remaining=self.remaining, limit=self.limit)


class TokenResponse(BaseModel):
    """Response from POST /auth/login."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"

    def to_credential(self) -> Credential:
        return Credential(
            access_token=self.access_token, refresh_token=self.refresh_token
        )


class UserResponse(BaseModel):
    """Response from GET /auth/me and POST /auth/register."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    email: str
    name: str = ""

    def to_profile(self) -> UserProfile:
        return UserProfile(id=str(self.id), email=self.email, name=self.name)


class ErrorPayload(BaseModel):
    """
    Error body returned with 4xx/5xx responses.

    The API sends {"message": ...}; framework-level errors use {"detail": ...}.
    """

    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    detail: Any = None

    def user_message(self) -> str | None:
        if self.message:
            return self.message
        if isinstance(self.detail, str) and self.detail:
            return self.detail
        return None
