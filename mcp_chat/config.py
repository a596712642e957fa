"""Configuration helpers for the chat client."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import load_dotenv


DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


class ConfigError(ValueError):
    """Required configuration is missing or malformed."""


@dataclass(frozen=True)
class ClientConfig:
    openai_api_key: str
    openai_base_url: str
    openai_model: str
    followup_model: str
    openai_timeout_s: int
    max_history_pairs: int = 10
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_config(
    openai_model: Optional[str] = None,
    followup_model: Optional[str] = None,
    openai_timeout_s: Optional[int] = None,
    max_history_pairs: Optional[int] = None,
    load_env_file: bool = True,
) -> ClientConfig:
    if load_env_file:
        load_dotenv()

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ConfigError("OPENAI_API_KEY is not set")

    model = openai_model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    followup = followup_model or os.getenv("OPENAI_FOLLOWUP_MODEL") or model
    timeout_s = openai_timeout_s or _env_int("OPENAI_TIMEOUT_S", 60)
    if max_history_pairs is None:
        max_history_pairs = _env_int("MCP_MAX_HISTORY_PAIRS", 10)

    return ClientConfig(
        openai_api_key=api_key,
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        openai_model=model,
        followup_model=followup,
        openai_timeout_s=timeout_s,
        max_history_pairs=max_history_pairs,
        system_prompt=os.getenv("MCP_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
    )
