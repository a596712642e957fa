"""Chat-completions client (OpenAI-compatible HTTP API)."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger("MCP_Client")


class CompletionError(RuntimeError):
    """The completion service could not produce a reply."""


@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    arguments: str = "{}"

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class CompletionReply:
    content: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)


class OpenAIChatClient:
    def __init__(self, base_url: str, api_key: str, model: str, timeout_s: int = 60):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s

    def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        model: Optional[str] = None,
    ) -> CompletionReply:
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.debug("Completion request: model=%s messages=%d tools=%d", payload["model"], len(messages), len(tools or []))
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout_s)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise CompletionError(f"Completion response was not JSON: {response.text[:200]}") from exc

        return _parse_reply(data)


def _parse_reply(data: Dict[str, Any]) -> CompletionReply:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices[0], dict):
        raise CompletionError(f"Completion response missing choices: {data}")
    message = choices[0].get("message") or {}

    content = message.get("content")
    if not isinstance(content, str):
        content = None

    tool_calls: List[ToolCall] = []
    for raw in message.get("tool_calls") or []:
        if not isinstance(raw, dict):
            continue
        func = raw.get("function") or {}
        name = func.get("name")
        if not isinstance(name, str):
            continue
        arguments = func.get("arguments")
        tool_calls.append(
            ToolCall(
                id=str(raw.get("id", "")),
                name=name,
                arguments=arguments if isinstance(arguments, str) else json.dumps(arguments or {}),
            )
        )
    return CompletionReply(content=content, tool_calls=tool_calls)
