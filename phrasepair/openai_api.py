"""Async client for the OpenAI REST endpoints used by translation and speech."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

import httpx

from phrasepair.errors import (
    ServiceErrorKind,
    ServiceUnauthorizedError,
    ServiceUnknownError,
    error_for_status,
)

OPENAI_BASE_URL = "https://api.openai.com/v1"

_TRANSLATE_KINDS = (
    ServiceErrorKind.UNAUTHORIZED,
    ServiceErrorKind.RATE_LIMITED,
    ServiceErrorKind.BAD_REQUEST,
    ServiceErrorKind.NOT_FOUND,
)
_SPEECH_KINDS = (ServiceErrorKind.UNAUTHORIZED, ServiceErrorKind.RATE_LIMITED)

_FIXED_MESSAGES = {
    401: "Invalid API key. Please check your OpenAI API key.",
    429: "Rate limit exceeded. Please wait a moment and try again.",
    404: "Model not found. The model may not be available for your account.",
}


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, Mapping):
        return None
    error = payload.get("error")
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    return None


class OpenAIClient:
    """Thin wrapper over `httpx.AsyncClient` that speaks the phrasepair error taxonomy."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: str = OPENAI_BASE_URL,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY", "")
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._logger = logger or logging.getLogger(__name__)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ServiceUnauthorizedError("API key is required")
        return {"Authorization": f"Bearer {self.api_key}"}

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, payload: Mapping[str, Any]) -> httpx.Response:
        headers = self._headers()
        try:
            return await self._http().post(path, json=dict(payload), headers=headers)
        except httpx.HTTPError as e:
            raise ServiceUnknownError(f"Request to {path} failed: {e}") from e

    async def chat_translate(
        self,
        text: str,
        *,
        model: str,
        source_language: str,
        target_language: str,
    ) -> str:
        response = await self._post(
            "/chat/completions",
            {
                "model": model,
                "messages": [
                    {
                        "role": "system",
                        "content": (
                            f"You are a {source_language} to {target_language} translator. "
                            f"Translate the following {source_language} text to natural, fluent "
                            f"{target_language}. Return only the translation, no explanations or notes."
                        ),
                    },
                    {"role": "user", "content": text},
                ],
                "temperature": 0.3,
                "max_tokens": 500,
            },
        )
        if response.is_error:
            detail = _error_detail(response)
            self._logger.error(
                "translation_api_error",
                extra={"status": response.status_code, "detail": detail},
            )
            if response.status_code in _FIXED_MESSAGES:
                message = _FIXED_MESSAGES[response.status_code]
            elif response.status_code == 400:
                message = detail or "Bad request - check model name or input"
            else:
                message = detail or f"Translation failed: {response.status_code}"
            raise error_for_status(response.status_code, message, allowed=_TRANSLATE_KINDS)

        try:
            data = response.json()
            return str(data["choices"][0]["message"]["content"]).strip()
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ServiceUnknownError("Translation response was malformed") from e

    async def speech(
        self,
        text: str,
        *,
        voice: str,
        speed: float = 1.0,
        model: str = "tts-1",
        response_format: str = "mp3",
    ) -> bytes:
        response = await self._post(
            "/audio/speech",
            {
                "model": model,
                "voice": voice,
                "input": text,
                "response_format": response_format,
                "speed": speed,
            },
        )
        if response.is_error:
            status = response.status_code
            if status in (401, 429):
                message = _FIXED_MESSAGES[status]
            else:
                message = _error_detail(response) or f"TTS generation failed: {status}"
            raise error_for_status(status, message, allowed=_SPEECH_KINDS)
        return response.content

    async def validate_key(self) -> bool:
        if not self.api_key:
            return False
        try:
            response = await self._http().get("/models", headers=self._headers())
        except httpx.HTTPError:
            self._logger.warning("key_validation_unreachable", exc_info=True)
            return False
        return response.is_success
