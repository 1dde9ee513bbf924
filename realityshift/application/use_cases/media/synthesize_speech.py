# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from realityshift.application.interfaces import SpeechPort
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError

MAX_TTS_CHARS = 4096
DEFAULT_VOICE = "nova"


class SynthesizeSpeechUseCase:
    def __init__(self, *, speech: SpeechPort) -> None:
        self._speech = speech

    async def execute(self, text: str | None, voice: str | None = None) -> bytes:
        if not text or not isinstance(text, str):
            raise ValidationError("No text provided")
        if len(text) > MAX_TTS_CHARS:
            raise ValidationError(f"Text too long. Maximum {MAX_TTS_CHARS} characters.")
        try:
            return await self._speech.synthesize(text, voice=voice or DEFAULT_VOICE)
        except RequestTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc
