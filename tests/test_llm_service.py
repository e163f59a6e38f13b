import json
from unittest.mock import AsyncMock, MagicMock, patch

from papercatcher.config.config import ChatLiteLLMConfig
from papercatcher.service.llm_service import Translator, parse_translation


def _response(content) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _translator() -> Translator:
    return Translator(llm_config=ChatLiteLLMConfig(model="gpt-4o-mini", api_key="test-key"), target_language="ja")


async def test_translate_returns_both_fields() -> None:
    content = json.dumps({"titleTranslated": "機械学習", "abstractTranslated": "要旨です"})
    mock = AsyncMock(return_value=_response(content))

    with patch("papercatcher.service.llm_service.litellm.acompletion", mock):
        result = await _translator().translate("Machine Learning", "An abstract")

    assert result.title_translated == "機械学習"
    assert result.abstract_translated == "要旨です"

    kwargs = mock.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["api_key"] == "test-key"
    assert kwargs["response_format"]["type"] == "json_schema"
    assert kwargs["response_format"]["json_schema"]["strict"] is True
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
    assert "Japanese" in kwargs["messages"][0]["content"]
    assert "Machine Learning" in kwargs["messages"][1]["content"]


async def test_translate_call_error_degrades_to_empty() -> None:
    mock = AsyncMock(side_effect=RuntimeError("provider down"))

    with patch("papercatcher.service.llm_service.litellm.acompletion", mock):
        result = await _translator().translate("Title", "Abstract")

    assert result.title_translated == ""
    assert result.abstract_translated == ""
    assert result.is_empty


async def test_translate_bad_json_degrades_to_empty() -> None:
    mock = AsyncMock(return_value=_response("Sure! Here is the translation: ..."))

    with patch("papercatcher.service.llm_service.litellm.acompletion", mock):
        result = await _translator().translate("Title", "Abstract")

    assert result.is_empty


async def test_translate_empty_content_degrades_to_empty() -> None:
    mock = AsyncMock(return_value=_response(None))

    with patch("papercatcher.service.llm_service.litellm.acompletion", mock):
        result = await _translator().translate("Title", "Abstract")

    assert result.is_empty


def test_parse_translation_requires_both_string_fields() -> None:
    assert parse_translation(json.dumps({"titleTranslated": "only title"})).is_empty
    assert parse_translation(json.dumps({"titleTranslated": 1, "abstractTranslated": "x"})).is_empty
    assert parse_translation(json.dumps(["titleTranslated", "abstractTranslated"])).is_empty


def test_parse_translation_accepts_conforming_object() -> None:
    result = parse_translation('{"titleTranslated": " 題 ", "abstractTranslated": "要旨"}')
    assert result.title_translated == "題"
    assert result.abstract_translated == "要旨"
