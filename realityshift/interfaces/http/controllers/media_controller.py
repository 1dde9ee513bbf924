# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, request

from realityshift.application.use_cases.media.synthesize_speech import SynthesizeSpeechUseCase
from realityshift.application.use_cases.media.transcribe_audio import TranscribeAudioUseCase
from realityshift.interfaces.http.auth import auth_required
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.media import SpeechRequestDTO
from realityshift.interfaces.http.presenters import ok
from realityshift.utils.asyncio_utils import run_async


class MediaController:
    """Speech to text and text to speech, both proxied to the provider."""

    def __init__(
        self,
        *,
        transcribe_use_case: TranscribeAudioUseCase,
        speech_use_case: SynthesizeSpeechUseCase,
    ) -> None:
        self._transcribe = transcribe_use_case
        self._speech = speech_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("media", __name__, url_prefix="/api")
        bp.add_url_rule("/transcribe", view_func=self.transcribe, methods=["POST"], endpoint="transcribe")
        bp.add_url_rule("/tts", view_func=self.tts, methods=["POST"], endpoint="tts")
        return bp

    @auth_required
    def transcribe(self):
        upload = request.files.get("file")
        content = upload.read() if upload is not None else None
        text = run_async(
            self._transcribe.execute(
                upload.filename if upload is not None else None,
                content,
                upload.mimetype if upload is not None else None,
            )
        )
        return ok({"text": text})

    @auth_required
    def tts(self):
        dto = parse_json(SpeechRequestDTO)
        audio = run_async(self._speech.execute(dto.text, dto.voice))
        return Response(
            audio,
            mimetype="audio/wav",
            headers={"Content-Length": str(len(audio))},
        )
