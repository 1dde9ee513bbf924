# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from .base import CamelModel


class SpeechRequestDTO(CamelModel):
    text: str | None = None
    voice: str | None = None
