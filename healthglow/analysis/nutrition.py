# -*- coding: utf-8 -*-
"""Food analysis — image/text nutrition estimates via the Anthropic Messages API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

_RESPONSE_SHAPE = """{
  "foodItems": [
    {
      "name": "food name",
      "quantity": "estimated portion size",
      "calories": number,
      "protein": number,
      "carbs": number,
      "fat": number,
      "fiber": number
    }
  ],
  "totalCalories": number,
  "summary": "brief description of the meal",
  "confidence": number between 0 and 1
}"""

IMAGE_SYSTEM_PROMPT = (
    "You are a nutritionist AI that analyzes food images. Identify all food items in the image "
    "and provide nutritional information. Always respond in JSON format with this exact structure:\n"
    + _RESPONSE_SHAPE
)

TEXT_SYSTEM_PROMPT = (
    "You are a nutritionist AI that analyzes food descriptions. Parse the food description "
    "and provide nutritional information. Always respond in JSON format with this exact structure:\n"
    + _RESPONSE_SHAPE
)

IMAGE_USER_PROMPT = (
    "Please analyze this food image and provide detailed nutritional information for each food item "
    "you can identify. Include portion sizes and nutritional values."
)


class FoodAnalysisError(RuntimeError):
    """Raised when the provider call or its reply cannot produce an analysis."""


def _extract_json(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```$", "", cleaned)

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("Model output does not contain a JSON object")
    return cleaned[start : end + 1]


def _first_text_block(data: object) -> str:
    if not isinstance(data, dict):
        raise ValueError("Unexpected response body")
    content = data.get("content")
    if not isinstance(content, list) or not content:
        raise ValueError("Response contains no content")
    first = content[0]
    text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(text, str):
        raise ValueError("First content block is not text")
    return text


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and isinstance(err.get("message"), str):
        return f"HTTP {resp.status_code}: {err['message']}"
    return f"HTTP {resp.status_code}"


def parse_analysis(text: str) -> Dict[str, Any]:
    """Parse the model reply as a JSON object; the shape itself is not checked."""
    try:
        parsed = json.loads(_extract_json(text))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse model JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Model output is not a JSON object")
    return parsed


class FoodAnalyzer:
    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str,
        model: str,
        max_tokens: int = 1500,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.BaseTransport | None = None) -> "FoodAnalyzer":
        return cls(
            api_key=settings.anthropic_api_key,
            base_url=settings.anthropic_base_url,
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            timeout=settings.anthropic_timeout,
            transport=transport,
        )

    def analyze_image(self, base64_image: str, media_type: str = "image/jpeg") -> Dict[str, Any]:
        content: List[Dict[str, Any]] = [
            {"type": "text", "text": IMAGE_USER_PROMPT},
            {
                "type": "image",
                "source": {"type": "base64", "media_type": media_type, "data": base64_image},
            },
        ]
        return self._analyze(IMAGE_SYSTEM_PROMPT, content, what="food image")

    def analyze_text(self, description: str) -> Dict[str, Any]:
        content = (
            "Please analyze this food description and provide detailed nutritional information: "
            f'"{description}"'
        )
        return self._analyze(TEXT_SYSTEM_PROMPT, content, what="food description")

    def _analyze(self, system: str, content: Any, *, what: str) -> Dict[str, Any]:
        try:
            text = self._complete(system, content)
            return parse_analysis(text)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("%s analysis failed: %s", what, exc, exc_info=True)
            raise FoodAnalysisError(f"Failed to analyze {what}: {exc}") from exc

    def _complete(self, system: str, content: Any) -> str:
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY is not configured")

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": content}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        client_kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        with httpx.Client(**client_kwargs) as client:
            resp = client.post(f"{self.base_url}/v1/messages", headers=headers, json=payload)
            if resp.status_code >= 400:
                raise ValueError(f"Provider error ({_error_message(resp)})")
            try:
                data: Optional[object] = resp.json()
            except ValueError as exc:
                snippet = (resp.text or "").replace("\n", " ").strip()[:200]
                raise ValueError(f"Provider returned non-JSON response: {snippet}") from exc
        return _first_text_block(data)
