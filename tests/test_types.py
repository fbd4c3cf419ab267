"""Tests for data types and API payload conversion."""

import pydantic
import pytest

from demo_client.api.types import DemoPayload, ErrorPayload, HistoryResponse
from demo_client.types import (
    DemoStatus,
    GenerationOptions,
    Language,
    Quality,
    Voice,
)


class TestDemoStatus:
    """Tests for status ordering."""

    def test_terminal_statuses(self):
        assert not DemoStatus.PENDING.is_terminal
        assert not DemoStatus.PROCESSING.is_terminal
        assert DemoStatus.COMPLETED.is_terminal
        assert DemoStatus.FAILED.is_terminal

    def test_rank_is_monotonic(self):
        assert DemoStatus.PENDING.rank < DemoStatus.PROCESSING.rank
        assert DemoStatus.PROCESSING.rank < DemoStatus.COMPLETED.rank
        assert DemoStatus.COMPLETED.rank == DemoStatus.FAILED.rank


class TestGenerationOptions:
    """Tests for request payload building."""

    def test_defaults(self):
        assert GenerationOptions().to_payload() == {
            "language": "en",
            "quality": "hd",
            "voice": "default",
        }

    def test_extra_overrides(self):
        options = GenerationOptions(
            language=Language.HAUSA,
            quality=Quality.SD,
            voice=Voice.MALE_NIGERIAN,
            extra={"quality": "4k", "budget": "5000 NGN"},
        )
        payload = options.to_payload()

        assert payload["language"] == "ha"
        assert payload["voice"] == "male-nigerian"
        assert payload["quality"] == "4k"
        assert payload["budget"] == "5000 NGN"


class TestDemoPayload:
    """Tests for DemoPayload validation and conversion."""

    def test_to_demo(self, demo_json):
        demo = DemoPayload.model_validate(demo_json).to_demo()

        assert demo.id == "42"
        assert demo.status is DemoStatus.PROCESSING
        assert demo.progress_percent == 40
        assert [s.step_number for s in demo.steps] == [1, 2, 3]
        assert demo.created_at.year == 2026

    def test_missing_progress_is_zero(self, demo_json):
        demo_json["progress_percent"] = None
        demo = DemoPayload.model_validate(demo_json).to_demo()

        assert demo.progress_percent == 0

    def test_progress_out_of_range_rejected(self, demo_json):
        demo_json["progress_percent"] = 140
        with pytest.raises(pydantic.ValidationError):
            DemoPayload.model_validate(demo_json)

    def test_non_positive_step_number_rejected(self, demo_json):
        demo_json["steps"] = [{"step_number": 0, "title": "Zero"}]
        with pytest.raises(pydantic.ValidationError):
            DemoPayload.model_validate(demo_json)

    def test_unknown_fields_ignored(self, demo_json):
        demo_json["render_node"] = "gpu-7"
        demo = DemoPayload.model_validate(demo_json).to_demo()

        assert demo.id == "42"


class TestHistoryResponse:
    """Tests for HistoryResponse."""

    def test_to_page(self, demo_json):
        page = HistoryResponse.model_validate(
            {"demos": [demo_json], "total_pages": 3}
        ).to_page(2)

        assert page.page == 2
        assert page.total_pages == 3
        assert page.items[0].id == "42"

    def test_missing_fields_default(self):
        page = HistoryResponse.model_validate({}).to_page(1)

        assert page.items == []
        assert page.total_pages == 1


class TestErrorPayload:
    """Tests for user-facing error messages."""

    def test_message_preferred(self):
        payload = ErrorPayload.model_validate({"message": "Out of credits", "detail": "x"})

        assert payload.user_message() == "Out of credits"

    def test_string_detail(self):
        assert ErrorPayload(detail="Bad credentials").user_message() == "Bad credentials"

    def test_structured_detail_ignored(self):
        payload = ErrorPayload(detail=[{"loc": ["body", "email"], "msg": "field required"}])

        assert payload.user_message() is None
