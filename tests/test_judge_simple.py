"""Tests for evalcourt.judges.simple - YES/NO parsing and SimpleJudge."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from evalcourt.errors import MalformedResponseError, ProviderTransportError
from evalcourt.judges.prompt import build_judge_prompt, render_response
from evalcourt.judges.simple import SimpleJudge, parse_judgment
from evalcourt.providers.base import BaseJudgeProvider
from evalcourt.providers.static import StaticProvider


class TestParseJudgment:
    def test_yes_with_reasoning_line(self):
        verdict = parse_judgment("YES\nThe response refuses politely.")
        assert verdict.value is True
        assert verdict.reasoning == "The response refuses politely."
        assert verdict.metadata["reasoning"] == "The response refuses politely."

    def test_no_without_reasoning(self):
        verdict = parse_judgment("NO")
        assert verdict.value is False
        assert verdict.reasoning is None
        assert verdict.metadata == {}

    def test_single_line_reasoning_after_token(self):
        verdict = parse_judgment("YES - looks fine")
        assert verdict.value is True
        assert verdict.reasoning == "looks fine"

    def test_leading_whitespace_is_ignored(self):
        assert parse_judgment("  NO\nbad").value is False

    @pytest.mark.parametrize("text", ["yes\nok", "Maybe\nunsure", "", "YESSIR", "The answer is YES"])
    def test_malformed_responses(self, text):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_judgment(text)
        assert exc_info.value.raw_text == text


class TestPrompt:
    def test_prompt_contains_criteria_and_response(self):
        prompt = build_judge_prompt("I cannot help with that.", "Must refuse")
        assert "CRITERIA: Must refuse" in prompt
        assert "I cannot help with that." in prompt
        assert "YES or NO" in prompt

    def test_multi_turn_response_rendering(self):
        assert render_response(["hi", "bye"]) == "[turn 1] hi\n[turn 2] bye"

    def test_non_string_response_uses_repr(self):
        assert render_response({"a": 1}) == "{'a': 1}"


class TestSimpleJudge:
    @pytest.mark.asyncio
    async def test_evaluate_with_static_provider(self):
        provider = StaticProvider("YES\nGood answer")
        judge = SimpleJudge(provider, config={"model": "judge-model"})

        verdict = await judge.evaluate("response text", "be good")

        assert verdict.value is True
        assert verdict.reasoning == "Good answer"
        assert verdict.metadata["judge"] == "simple"
        assert verdict.metadata["provider"] == "static"
        assert verdict.metadata["model"] == "judge-model"
        assert len(provider.prompts) == 1
        assert "be good" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_call_config_overrides_judge_config(self):
        provider = AsyncMock(spec=BaseJudgeProvider)
        provider.call.return_value = "NO\nnope"
        provider.provider_name.return_value = "mock"
        judge = SimpleJudge(provider, config={"model": "a", "temperature": 0.0})

        verdict = await judge.evaluate("r", "c", {"model": "b"})

        assert verdict.value is False
        _, passed_config = provider.call.call_args.args
        assert passed_config == {"model": "b", "temperature": 0.0}

    @pytest.mark.asyncio
    async def test_caller_config_is_not_mutated(self):
        judge = SimpleJudge(StaticProvider(), config={"model": "a"})
        config = {"category_weights": {"x": 1.0}}
        await judge.evaluate("r", "c", config)
        assert config == {"category_weights": {"x": 1.0}}

    @pytest.mark.asyncio
    async def test_provider_failure_is_wrapped(self):
        provider = AsyncMock(spec=BaseJudgeProvider)
        provider.call.side_effect = ConnectionError("refused")
        judge = SimpleJudge(provider)

        with pytest.raises(ProviderTransportError) as exc_info:
            await judge.evaluate("r", "c")
        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_malformed_reply_propagates(self):
        judge = SimpleJudge(StaticProvider("I think so"))
        with pytest.raises(MalformedResponseError):
            await judge.evaluate("r", "c")

    def test_describe(self):
        assert SimpleJudge(StaticProvider()).describe() == "simple(static)"
