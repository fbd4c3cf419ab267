"""
Shared data types for the demo client.

This module defines the core data structures used to represent generated
demos, their steps, history pages and account state. These are internal types
used by the controllers and the CLI - not API models.

All types use @dataclass for simplicity. Pydantic models are reserved for
parsing API responses (see demo_client.api.types).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, assert_never

# Type aliases for common patterns
DemoId = str
"""Server-assigned identifier for a generated demo."""


class DemoStatus(str, Enum):
    """Generation status reported by the server for a demo."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True once no further transitions are possible."""
        match self:
            case DemoStatus.PENDING | DemoStatus.PROCESSING:
                return False
            case DemoStatus.COMPLETED | DemoStatus.FAILED:
                return True
            case _:
                assert_never(self)

    @property
    def rank(self) -> int:
        """
        Position in the pending -> processing -> terminal ordering.

        Both terminal statuses share the highest rank; a demo never moves
        from one terminal status to the other.
        """
        match self:
            case DemoStatus.PENDING:
                return 0
            case DemoStatus.PROCESSING:
                return 1
            case DemoStatus.COMPLETED | DemoStatus.FAILED:
                return 2
            case _:
                assert_never(self)


class Quality(str, Enum):
    """Rendered video quality."""

    SD = "sd"
    HD = "hd"
    FULL_HD = "fullhd"


class Voice(str, Enum):
    """Narration voice."""

    DEFAULT = "default"
    FEMALE_NIGERIAN = "female-nigerian"
    MALE_NIGERIAN = "male-nigerian"
    FEMALE_BRITISH = "female-british"
    MALE_BRITISH = "male-british"


class Language(str, Enum):
    """Narration language."""

    ENGLISH = "en"
    YORUBA = "yo"
    IGBO = "ig"
    HAUSA = "ha"


@dataclass(frozen=True)
class Step:
    """
    One step of a generated demonstration.

    Attributes:
        step_number: Positive, unique within one demo.
        title: Short step heading.
        description: Full step text.
        media: Optional image URL illustrating the step.
    """

    step_number: int
    title: str
    description: str = ""
    media: str | None = None


@dataclass(frozen=True)
class Demo:
    """
    Snapshot of a demo at one point in time.

    The client never constructs demos on its own; every instance comes from
    a GET /demo/{id} or GET /history response.

    Attributes:
        id: Server-assigned identifier, immutable for the demo's lifetime.
        prompt: The natural-language request that produced the demo.
        status: Current generation status.
        progress_percent: 0-100, only meaningful while processing.
        created_at: When the demo was submitted.
        video_url: Video location once available.
        thumbnail_url: Poster image once available.
        duration: Video length in seconds, once known.
        file_size: Video size in bytes, once known.
        steps: Steps sorted by step_number ascending.
    """

    id: DemoId
    prompt: str
    status: DemoStatus
    created_at: datetime
    progress_percent: int = 0
    video_url: str | None = None
    thumbnail_url: str | None = None
    duration: float | None = None
    file_size: int | None = None
    steps: tuple[Step, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass
class HistoryPage:
    """
    One page of the user's demo history.

    Attributes:
        items: Demo summaries in server order.
        total_pages: Number of pages available (at least 1).
        page: 1-indexed page number these items belong to.
    """

    items: list[Demo]
    total_pages: int
    page: int


@dataclass(frozen=True)
class Credential:
    """Bearer credential issued at login."""

    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Account returned by GET /auth/me."""

    id: str
    email: str
    name: str = ""


@dataclass(frozen=True)
class Credits:
    """
    Remaining generation quota for the current period.

    Attributes:
        remaining: Demos the user may still submit.
        limit: Period allowance, None when unlimited.
    """

    remaining: int
    limit: int | None = None


@dataclass
class GenerationOptions:
    """
    Options sent alongside a prompt to POST /generate.

    Attributes:
        language: Narration language.
        quality: Rendered video quality.
        voice: Narration voice.
        extra: Additional fields merged into the request body as-is.
    """

    language: Language = Language.ENGLISH
    quality: Quality = Quality.HD
    voice: Voice = Voice.DEFAULT
    extra: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Request body fields, with extra keys taking precedence."""
        payload: dict[str, Any] = {
            "language": self.language.value,
            "quality": self.quality.value,
            "voice": self.voice.value,
        }
        payload.update(self.extra)
        return payload


@dataclass
class UserPreferences:
    """Generation defaults remembered between sessions."""

    language: Language = Language.ENGLISH
    quality: Quality = Quality.HD
    voice: Voice = Voice.DEFAULT

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(
            language=self.language, quality=self.quality, voice=self.voice
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dict for JSON persistence."""
        return {
            "language": self.language.value,
            "quality": self.quality.value,
            "voice": self.voice.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """Build from persisted data, falling back to defaults per field."""
        defaults = cls()
        return cls(
            language=_enum_or(Language, data.get("language"), defaults.language),
            quality=_enum_or(Quality, data.get("quality"), defaults.quality),
            voice=_enum_or(Voice, data.get("voice"), defaults.voice),
        )


def _enum_or(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return default
