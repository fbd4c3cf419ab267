"""Shared fixtures for demo client tests."""

from datetime import datetime, timedelta, timezone

import pytest

from demo_client.types import Demo, DemoStatus, Step

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_demo():
    """
    Factory for Demo snapshots.

    Usage:
        make_demo(DemoStatus.PROCESSING, progress=40)
        make_demo(id="d-2", duration=90, age_minutes=5)
    """

    def _make(
        status: DemoStatus = DemoStatus.PENDING,
        progress: int = 0,
        id: str = "demo-1",
        steps: int = 0,
        duration: float | None = None,
        age_minutes: int = 0,
        prompt: str = "Teach me Jollof rice",
    ) -> Demo:
        return Demo(
            id=id,
            prompt=prompt,
            status=status,
            created_at=BASE_TIME - timedelta(minutes=age_minutes),
            progress_percent=progress,
            video_url="https://cdn.test/v.mp4" if status is DemoStatus.COMPLETED else None,
            duration=duration,
            steps=tuple(
                Step(step_number=n, title=f"Step {n}") for n in range(1, steps + 1)
            ),
        )

    return _make


@pytest.fixture
def demo_json():
    """Sample GET /demo/{id} payload for a demo still processing."""
    return {
        "id": 42,
        "prompt": "Teach me Jollof rice",
        "status": "processing",
        "progress_percent": 40,
        "video_url": None,
        "thumbnail_url": None,
        "duration": None,
        "file_size": None,
        "steps": [
            {"step_number": 2, "title": "Fry the tomato base", "description": "..."},
            {"step_number": 1, "title": "Wash the rice", "description": "..."},
            {
                "step_number": 3,
                "title": "Simmer",
                "description": "...",
                "media": "https://cdn.test/step3.png",
            },
        ],
        "created_at": "2026-03-01T12:00:00Z",
    }
