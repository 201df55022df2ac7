"""
Unit tests for VoiceSettings and the generation request/result models.
"""

import pytest
from pydantic import ValidationError

from writerly_ai.models.enums import SuggestionCategory, TaskEnum
from writerly_ai.models.generation import GenerationRequest, GenerationResult, Suggestion
from writerly_ai.models.voice import DEFAULT_VOICE, VoiceSettings


class TestVoiceSettings:

    def test_defaults(self):
        assert VoiceSettings().model_dump() == DEFAULT_VOICE

    def test_case_insensitive_values_are_canonicalized(self):
        voice = VoiceSettings.from_raw({"tone": "friendly", "audience": " TEAM ", "domain": "technical"})

        assert voice.tone == "Friendly"
        assert voice.audience == "Team"
        assert voice.domain == "Technical"

    def test_invalid_fields_fall_back_individually(self):
        voice = VoiceSettings.from_raw({"tone": "Sarcastic", "formality": 9, "intent": "Inform"})

        assert voice.tone == "Professional"
        assert voice.formality == 3
        assert voice.intent == "Inform"

    @pytest.mark.parametrize("formality, expected", [(1, 1), (5.0, 5), ("4", 4), (True, 3), (0, 3), (2.5, 3)])
    def test_formality_parsing(self, formality, expected):
        assert VoiceSettings.from_raw({"formality": formality}).formality == expected

    def test_nested_voice_block(self):
        assert VoiceSettings.from_raw({"voice": {"tone": "Direct"}}).tone == "Direct"

    def test_frozen(self):
        voice = VoiceSettings()
        with pytest.raises(ValidationError):
            voice.tone = "Friendly"

    def test_merge_is_field_by_field(self):
        stored = {"tone": "Confident", "formality": 5, "audience": "Manager"}
        requested = {"tone": "Friendly", "formality": "bogus"}

        voice = VoiceSettings.merged(stored, requested)

        assert voice.tone == "Friendly"
        assert voice.formality == 5
        assert voice.audience == "Manager"
        assert voice.intent == "Request"

    def test_merge_with_nothing_is_defaults(self):
        assert VoiceSettings.merged(None, None) == VoiceSettings()


class TestGenerationRequest:

    @pytest.mark.parametrize("task, expected", [
        ("Summarize", TaskEnum.SUMMARIZE),
        ("suggestions", TaskEnum.SUGGESTIONS),
        ("freeform", TaskEnum.REWRITE),
        (None, TaskEnum.REWRITE),
    ])
    def test_task_defaults_to_rewrite(self, task, expected):
        assert GenerationRequest(task=task).task is expected

    def test_none_text_fields_become_empty(self):
        request = GenerationRequest(instruction=None, context=None, explicit_provider="  ")

        assert request.instruction == ""
        assert request.context == ""
        assert request.explicit_provider is None
        assert request.user_id == "anon"

    def test_temperature_range(self):
        with pytest.raises(ValidationError):
            GenerationRequest(temperature=3.0)


class TestGenerationResult:

    def test_wire_keys(self):
        result = GenerationResult(
            output_text="{}",
            provider_used="openai",
            suggestions=[
                Suggestion(message="m", original="a", suggestion="b", from_=0, to=1,
                           category=SuggestionCategory.CORRECTNESS)
            ],
            duration_ms=12.5,
            rate_limit_headers={"X-RateLimit-Limit": "60"},
        )

        assert result.to_response() == {
            "output": "{}",
            "provider": "openai",
            "suggestions": [
                {"message": "m", "original": "a", "suggestion": "b", "from": 0, "to": 1, "category": "Correctness"}
            ],
            "durationMs": 12.5,
        }

    def test_fallback_flag(self):
        assert GenerationResult(output_text="x", provider_used="fallback", error="boom").is_fallback

    def test_null_offsets_are_kept_inside_suggestions(self):
        result = GenerationResult(output_text="x", provider_used="gemini", suggestions=[Suggestion()])

        response = result.to_response()

        assert response["suggestions"] == [
            {"message": "", "original": "", "suggestion": "", "from": None, "to": None, "category": "Clarity"}
        ]
        assert "error" not in response
        assert "durationMs" not in response
