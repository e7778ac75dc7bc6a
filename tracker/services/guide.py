"""Guide assistant: answers questions about the F1 settings menu via Groq."""

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import httpx
import openai
import structlog

from tracker.config import Settings
from tracker.core.exceptions import InternalError, UpstreamError, ValidationError

logger = structlog.get_logger()

TEMPERATURE = 0.3
MAX_TOKENS = 500

SYSTEM_PROMPT = """You are a helpful assistant for the Azeroth Bug Tracker's F1 Menu Guide. \
This guide documents all the settings available in the F1 custom menu for a World of Warcraft add-on.

Your job is to answer questions about the add-on's settings, explain what options do, \
and help users configure their class correctly.

RULES:
- Only answer questions related to the guide data provided below.
- If the answer isn't in the data, say so honestly.
- Keep answers concise but thorough (2-4 sentences is ideal).
- Use the setting names exactly as they appear in the data.
- When mentioning settings, format them in bold.
- You may reference other classes/tabs if relevant to the question.

GUIDE DATA:
{context}"""


@lru_cache
def load_guides(path: str = "") -> list[dict[str, Any]]:
    """Load guide data from ``path`` or the bundled ``guides.json``."""
    if path:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    bundled = resources.files("tracker.data").joinpath("guides.json")
    return json.loads(bundled.read_text(encoding="utf-8"))


def _describe_option(option: dict[str, Any]) -> str:
    default = f", default: {option['default']}" if option.get("default") else ""
    return f"- {option['name']} ({option['type']}{default}): {option['description']}\n"


def _find(items: list[dict[str, Any]], key: str, name: Optional[str]) -> Optional[dict[str, Any]]:
    if not name:
        return None
    wanted = name.lower()
    return next((item for item in items if item[key].lower() == wanted), None)


def build_context(
    guides: list[dict[str, Any]],
    class_name: Optional[str] = None,
    tab_name: Optional[str] = None,
) -> str:
    """
    Build the prompt context, narrowest first.

    A known class and tab give just that tab's settings, a known class gives
    every tab of the class, anything else gives a summary of all classes.
    """
    class_guide = _find(guides, "className", class_name)

    if class_guide:
        tab = _find(class_guide["tabs"], "name", tab_name)
        if tab:
            context = f"Class: {class_guide['className']}\nTab: {tab['name']}\nSettings:\n"
            return context + "".join(_describe_option(opt) for opt in tab["options"])

        context = f"Class: {class_guide['className']}\n\n"
        for tab in class_guide["tabs"]:
            context += f"## {tab['name']}\n"
            context += "".join(_describe_option(opt) for opt in tab["options"])
            context += "\n"
        return context

    context = "Available classes and their tabs:\n\n"
    for guide in guides:
        tabs = ", ".join(tab["name"] for tab in guide["tabs"])
        context += f"{guide['icon']} {guide['className']}: Tabs - {tabs}\n"
    return context


class GuideService:
    """Service for guide assistant questions."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _completions(self) -> openai.AsyncOpenAI:
        # Groq speaks the OpenAI chat completions protocol
        return openai.AsyncOpenAI(
            api_key=self.settings.groq_api_key,
            base_url=self.settings.groq_base_url,
            http_client=self.client,
            max_retries=0,
        )

    async def ask(
        self,
        question: str,
        class_name: Optional[str] = None,
        tab_name: Optional[str] = None,
    ) -> str:
        """
        Answer a question about the settings menu.

        Raises:
            ValidationError: Empty question
            InternalError: No Groq API key configured
            UpstreamError: The completion call failed
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError(message="Question is required")

        if not self.settings.groq_api_key:
            raise InternalError(
                message="Groq API key is not configured",
                code="CONFIGURATION_ERROR",
            )

        context = build_context(load_guides(self.settings.guides_path), class_name, tab_name)

        try:
            completion = await self._completions().chat.completions.create(
                model=self.settings.groq_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT.format(context=context)},
                    {"role": "user", "content": question},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
            answer = completion.choices[0].message.content or ""
        except (openai.APIError, IndexError) as exc:
            logger.error("guide_completion_failed", error=str(exc), error_type=type(exc).__name__)
            raise UpstreamError(message="Failed to generate answer") from exc

        logger.info("guide_question_answered", class_name=class_name, tab_name=tab_name)
        return answer.strip()
