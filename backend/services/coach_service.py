"""
AI coach service.
Thin wrapper over the Gemini API. Every call degrades to fixed fallback
content instead of raising.
"""
import json
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from backend.constants import (
    GEMINI_API_KEY, GEMINI_MODEL, COACH_PLAN_SIZE, CATEGORIES, FREQUENCIES,
    CATEGORY_PERSONAL, FREQUENCY_DAILY,
    FALLBACK_QUOTE, FALLBACK_QUOTE_EMPTY, FALLBACK_CHAT_REPLY, FALLBACK_CHAT_EMPTY
)

logger = logging.getLogger("habit_tracker.coach")

QUOTE_PROMPT = """
You are a professional psychologist and coach. User details: {context}.
Write a short, powerful and inspiring piece of advice or a quote.
Be warm rather than formal. Two sentences at most.
"""

PLAN_PROMPT = """
User goal: "{goal}".
Suggest {size} concrete, measurable habits that help reach this goal.
Return only a JSON array in this format:
[
  {{ "title": "Habit name", "category": "Work" | "Study" | "Fitness" | "Personal", "frequency": "Daily" | "Weekly" }}
]
"""

CHAT_PROMPT = """
You are the assistant of a habit tracking platform.
Conversation so far:
{history}

User question: {message}

Give short, precise and useful advice on building habits, managing time and staying motivated.
"""


class CoachService:
    """Generates coaching text through the Gemini API"""

    def __init__(self, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL, client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate(self, prompt: str, json_output: bool = False) -> str:
        config = None
        if json_output:
            config = types.GenerateContentConfig(response_mime_type="application/json")
        response = self._get_client().models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )
        return response.text or ""

    def motivational_quote(self, context: str) -> str:
        """Short motivational message for the user"""
        try:
            text = self._generate(QUOTE_PROMPT.format(context=context))
            return text.strip() or FALLBACK_QUOTE_EMPTY
        except Exception as e:
            logger.error(f"Gemini quote error: {e}")
            return FALLBACK_QUOTE

    def habit_plan(self, goal: str) -> List[dict]:
        """
        Suggest habits for a goal.

        Returns:
            Up to COACH_PLAN_SIZE dicts with title, category and frequency,
            or an empty list if the answer is unusable
        """
        try:
            text = self._generate(PLAN_PROMPT.format(goal=goal, size=COACH_PLAN_SIZE), json_output=True)
        except Exception as e:
            logger.error(f"Gemini plan error: {e}")
            return []
        return self.parse_plan(text)

    @staticmethod
    def parse_plan(text: Optional[str]) -> List[dict]:
        """Parse a JSON habit list, tolerating markdown code fences"""
        if not text:
            return []
        clean = text.replace("```json", "").replace("```", "").strip()
        try:
            items = json.loads(clean)
        except json.JSONDecodeError:
            logger.warning("Gemini plan answer is not valid JSON")
            return []
        if not isinstance(items, list):
            return []

        plan = []
        for item in items:
            if not isinstance(item, dict):
                continue
            title = str(item.get("title") or "").strip()
            if not title:
                continue
            category = item.get("category")
            frequency = item.get("frequency")
            plan.append({
                "title": title,
                "category": category if category in CATEGORIES else CATEGORY_PERSONAL,
                "frequency": frequency if frequency in FREQUENCIES else FREQUENCY_DAILY,
            })
        return plan[:COACH_PLAN_SIZE]

    def chat(self, message: str, history: List[str]) -> str:
        """Answer a coaching question given prior conversation lines"""
        try:
            text = self._generate(CHAT_PROMPT.format(history="\n".join(history or []), message=message))
            return text.strip() or FALLBACK_CHAT_EMPTY
        except Exception as e:
            logger.error(f"Gemini chat error: {e}")
            return FALLBACK_CHAT_REPLY
