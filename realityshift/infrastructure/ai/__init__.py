# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .anthropic_client import AnthropicMessagesClient
from .openai_client import OpenAIGateway

__all__ = ["AnthropicMessagesClient", "OpenAIGateway"]
