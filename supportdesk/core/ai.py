"""AI advisory adapter.

Sends a ticket's subject and description to Gemini and turns the answer into
a tagged result: ``Analyzed`` when the model produced a usable analysis,
``Unavailable`` otherwise. ``analyze`` never raises; every upstream problem
degrades to ``Unavailable`` carrying the fallback values.
"""
import json
import logging
from dataclasses import dataclass
from typing import Union

import requests

from supportdesk.core.config import settings
from supportdesk.core.errors import AdapterUnavailable
from supportdesk.models.ticket import DEFAULT_CATEGORY, TicketPriority

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
Analyze the following customer support ticket.
Subject: {subject}
Description: {description}

Determine the following:
1. A short category (e.g. Billing, Technical, API, Account).
2. Priority (LOW, MEDIUM, HIGH, CRITICAL).
3. A one-sentence summary.
4. Customer sentiment (e.g. Frustrated, Satisfied, Confused).
5. A brief suggested solution for the support agent.
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "category": {"type": "STRING"},
        "priority": {"type": "STRING", "enum": [p.value for p in TicketPriority]},
        "summary": {"type": "STRING"},
        "sentiment": {"type": "STRING"},
        "suggestedSolution": {"type": "STRING"},
    },
    "required": ["category", "priority", "summary", "sentiment", "suggestedSolution"],
}


@dataclass(frozen=True)
class Analyzed:
    category: str
    priority: TicketPriority
    summary: str
    sentiment: str
    solution: str

    available = True


@dataclass(frozen=True)
class Unavailable:
    reason: str

    available = False
    category = DEFAULT_CATEGORY
    priority = TicketPriority.MEDIUM
    summary = "analysis unavailable"
    sentiment = "neutral"
    solution = ""


Analysis = Union[Analyzed, Unavailable]


def coerce_priority(value) -> TicketPriority:
    try:
        return TicketPriority(str(value).upper())
    except ValueError:
        return TicketPriority.MEDIUM


class TicketAdvisor:
    def __init__(self, api_key: str, model: str, api_url: str, timeout: float = 10.0):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "TicketAdvisor":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            api_url=settings.GEMINI_API_URL,
            timeout=settings.AI_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def analyze(self, subject: str, description: str) -> Analysis:
        try:
            data = self._generate(PROMPT_TEMPLATE.format(subject=subject, description=description))
            return Analyzed(
                category=str(data.get("category") or "").strip() or DEFAULT_CATEGORY,
                priority=coerce_priority(data.get("priority")),
                summary=data.get("summary") or "",
                sentiment=data.get("sentiment") or "",
                solution=data.get("suggestedSolution") or "",
            )
        except AdapterUnavailable as exc:
            logger.warning("Ticket analysis unavailable: %s", exc.message)
            return Unavailable(reason=exc.message)

    def _generate(self, prompt: str) -> dict:
        if not self.configured:
            raise AdapterUnavailable("AI advisory service is not configured")
        url = f"{self.api_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        try:
            r = requests.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
            r.raise_for_status()
            text = r.json()["candidates"][0]["content"]["parts"][0]["text"]
            data = json.loads(text)
        except requests.Timeout as exc:
            raise AdapterUnavailable("AI advisory service timed out") from exc
        except requests.RequestException as exc:
            raise AdapterUnavailable(f"AI advisory request failed: {exc}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise AdapterUnavailable("AI advisory returned an unreadable response") from exc
        if not isinstance(data, dict):
            raise AdapterUnavailable("AI advisory returned an unreadable response")
        return data
