# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from realityshift.infrastructure.http import run_with_deadline
from realityshift.shared.errors import ConfigurationError, UpstreamError
from realityshift.shared.logging import logger

CHALLENGE_SYSTEM_PROMPT = "You are a challenge generator. Output JSON only."


class OpenAIGateway:
    """Challenge generation, transcription and speech through the OpenAI SDK.

    Every SDK call runs under the same deadline contract as Bounded Fetch and
    the SDK's own retries are disabled.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        challenge_model: str = "gpt-4o",
        transcription_model: str = "whisper-1",
        speech_model: str = "tts-1",
        timeout_ms: int = 30_000,
        transcription_timeout_ms: int = 60_000,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._challenge_model = challenge_model
        self._transcription_model = transcription_model
        self._speech_model = speech_model
        self._timeout_ms = timeout_ms
        self._transcription_timeout_ms = transcription_timeout_ms

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise ConfigurationError("Missing OpenAI Key")
        # One client per call: each request drives its own event loop
        return AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)

    async def generate_challenge(self, prompt: str) -> dict[str, Any]:
        client = self._client()
        try:
            completion = await run_with_deadline(
                client.chat.completions.create(
                    model=self._challenge_model,
                    messages=[
                        {"role": "system", "content": CHALLENGE_SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    response_format={"type": "json_object"},
                ),
                target="openai:chat.completions",
                timeout_ms=self._timeout_ms,
            )
        except OpenAIError as exc:
            raise UpstreamError(str(exc) or "Challenge generation failed", provider="openai") from exc
        finally:
            await client.close()

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise UpstreamError("No content received from AI", provider="openai")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise UpstreamError(f"Invalid JSON from AI: {exc.msg}", provider="openai") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Invalid JSON from AI: expected an object", provider="openai")
        logger.debug(f"openai: challenge generated keys={sorted(data)}")
        return data

    async def transcribe(self, filename: str, content: bytes, content_type: str | None = None) -> str:
        client = self._client()
        upload = (filename or "audio.webm", content, content_type or "application/octet-stream")
        try:
            transcription = await run_with_deadline(
                client.audio.transcriptions.create(model=self._transcription_model, file=upload),
                target="openai:audio.transcriptions",
                timeout_ms=self._transcription_timeout_ms,
            )
        except OpenAIError as exc:
            raise UpstreamError(str(exc) or "Transcription failed", provider="openai") from exc
        finally:
            await client.close()
        return transcription.text

    async def synthesize(self, text: str, *, voice: str = "nova") -> bytes:
        client = self._client()
        try:
            response = await run_with_deadline(
                client.audio.speech.create(
                    model=self._speech_model,
                    voice=voice,
                    input=text,
                    response_format="wav",
                ),
                target="openai:audio.speech",
                timeout_ms=self._timeout_ms,
            )
        except OpenAIError as exc:
            raise UpstreamError(str(exc) or "Text-to-speech conversion failed", provider="openai") from exc
        finally:
            await client.close()
        return response.content


__all__ = ["CHALLENGE_SYSTEM_PROMPT", "OpenAIGateway"]
