# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from realityshift.application.interfaces import TranscriptionPort
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError
from realityshift.shared.logging import logger


class TranscribeAudioUseCase:
    def __init__(self, *, transcriber: TranscriptionPort) -> None:
        self._transcriber = transcriber

    async def execute(self, filename: str | None, content: bytes | None, content_type: str | None = None) -> str:
        if not content:
            raise ValidationError("No file provided")
        try:
            text = await self._transcriber.transcribe(filename or "audio.webm", content, content_type)
        except RequestTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc
        logger.info(f"media.transcribe: bytes={len(content)} chars={len(text)}")
        return text
