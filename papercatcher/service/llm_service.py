"""
llm_service.py

Translation of paper title + abstract through litellm.

The model is asked for a strict two-field JSON object. Anything else
(call error, empty content, bad JSON, missing fields) degrades to an
empty TranslationResult: translation is advisory and never blocks
ingestion.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import litellm

from ..config import Config
from ..config.config import ChatLiteLLMConfig
from ..model.paper import TranslationResult

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "ja": "Japanese",
    "zh": "Simplified Chinese",
    "en": "English",
}

TRANSLATION_SCHEMA: Dict[str, Any] = {
    "name": "translation",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "titleTranslated": {"type": "string", "description": "Translated title"},
            "abstractTranslated": {"type": "string", "description": "Translated abstract"},
        },
        "required": ["titleTranslated", "abstractTranslated"],
        "additionalProperties": False,
    },
}


class Translator:
    def __init__(
        self,
        llm_config: Optional[ChatLiteLLMConfig] = None,
        target_language: Optional[str] = None,
    ):
        self.llm_config = llm_config or Config.chat_litellm
        code = target_language or Config.language
        self.target_language = LANGUAGE_NAMES.get(code, code)

    def build_messages(self, title: str, abstract: str) -> List[Dict[str, str]]:
        system = f"""
You are a translator of academic papers. Translate the given English paper
title and abstract into accurate, academic {self.target_language}.
- Keep technical terms precise
- Keep mathematical notation unchanged
- Do not add commentary
Answer in JSON.
"""
        user = f"""
Translate the following paper title and abstract into {self.target_language}.

Title: {title}

Abstract: {abstract}

Answer in JSON:
{{
  "titleTranslated": "translated title",
  "abstractTranslated": "translated abstract"
}}
"""
        return [
            {"role": "system", "content": system.strip()},
            {"role": "user", "content": user.strip()},
        ]

    async def translate(self, title: str, abstract: str) -> TranslationResult:
        logger.info(f"[LLM] Starting translation for: {title[:50]}...")
        try:
            response = await litellm.acompletion(
                messages=self.build_messages(title, abstract),
                response_format={"type": "json_schema", "json_schema": TRANSLATION_SCHEMA},
                **self.llm_config.to_litellm_params(),
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"[LLM] Translation failed: {e}")
            return TranslationResult()

        result = parse_translation(content)
        if result.is_empty:
            logger.warning("[LLM] No usable translation in response")
        else:
            logger.info(f"[LLM] Translation successful: {result.title_translated[:50]}...")
        return result


def parse_translation(content: Any) -> TranslationResult:
    """
    Only a JSON object with both fields as strings is accepted.
    """
    if not isinstance(content, str) or not content.strip():
        return TranslationResult()

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        return TranslationResult()

    if not isinstance(parsed, dict):
        return TranslationResult()

    title = parsed.get("titleTranslated")
    abstract = parsed.get("abstractTranslated")
    if not isinstance(title, str) or not isinstance(abstract, str):
        return TranslationResult()

    return TranslationResult(title_translated=title.strip(), abstract_translated=abstract.strip())
