"""English to Swahili translation."""

from __future__ import annotations

from portfolio_ai.clients.llm_client import DEFAULT_MODEL, LLMClient

SOURCE_LANGUAGE = "en"
TARGET_LANGUAGE = "sw"

SYSTEM_PROMPT = """\
You are a professional English to Swahili translator.
Translate the user's text into natural, standard Swahili (Kiswahili sanifu).
Preserve meaning, tone, names, numbers and line breaks.
Output only the translation: no notes, no quotes, no transliteration."""


class Translator:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL, translator_name: str = ""):
        self.llm = llm
        self.model = model
        self.translator_name = translator_name

    async def translate(self, text: str) -> str:
        response = await self.llm.generate(
            prompt=text,
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=0.0,
            max_tokens=4096,
        )
        return response.text.strip()
