"""Gemini chat client for the admin assistant."""

import logging

import httpx

from transcript_hub.errors import UpstreamError

logger = logging.getLogger(__name__)


class AssistantClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ):
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"x-goog-api-key": api_key} if api_key else {},
            timeout=60.0,
        )

    async def generate(
        self,
        model: str,
        messages: list[dict],
        system_prompt: str | None = None,
    ) -> str:
        """Send the conversation so far and return the model's reply text.

        ``messages`` are ``{"role": "user" | "model", "content": str}`` dicts.
        """
        if not self._api_key:
            raise UpstreamError("Gemini API key not configured")

        body = {
            "contents": [
                {"role": m["role"], "parts": [{"text": m["content"]}]} for m in messages
            ],
        }
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        try:
            resp = await self._client.post(f"/models/{model}:generateContent", json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error ({model}): {e.response.status_code}")
            raise UpstreamError(f"Gemini API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini API request failed ({model}): {e}")
            raise UpstreamError("Gemini API request failed") from e

        candidates = resp.json().get("candidates") or []
        if not candidates:
            raise UpstreamError("Gemini returned no candidates")
        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts).strip()
        if not text:
            raise UpstreamError("Gemini returned an empty reply")
        return text

    async def close(self) -> None:
        await self._client.aclose()
