# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Minimal client for the Anthropic messages endpoint over Bounded Fetch."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from realityshift.infrastructure.http import fetch_json_with_deadline
from realityshift.shared.errors import ConfigurationError
from realityshift.shared.logging import logger


class AnthropicMessagesClient:
    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.anthropic.com/v1",
        version: str = "2023-06-01",
        model: str = "claude-3-haiku-20240307",
        timeout_ms: int = 30_000,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/messages"
        self._version = version
        self._model = model
        self._timeout_ms = timeout_ms
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def complete(
        self,
        *,
        system: str,
        messages: Sequence[Mapping[str, str]],
        max_tokens: int,
        timeout_ms: int | None = None,
    ) -> str:
        """Send one messages request and return the first text block, or ``""``."""

        if not self._api_key:
            raise ConfigurationError("Missing Anthropic Key")
        payload: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [dict(message) for message in messages],
        }
        logger.debug(f"anthropic: POST messages model={self._model} max_tokens={max_tokens}")
        data = await fetch_json_with_deadline(
            self._url,
            method="POST",
            timeout_ms=timeout_ms or self._timeout_ms,
            client=self._http_client,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "x-api-key": self._api_key,
                "anthropic-version": self._version,
            },
        )
        content = data.get("content") or []
        if not content:
            return ""
        return str(content[0].get("text") or "")


__all__ = ["AnthropicMessagesClient"]
