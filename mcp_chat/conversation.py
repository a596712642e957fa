"""Conversation transcript and trimming."""

from __future__ import annotations

from typing import Any, Dict, List

Message = Dict[str, Any]


class Transcript:
    """Ordered chat history whose first entry is always the system message."""

    def __init__(self, system_prompt: str) -> None:
        self.system_message: Message = {"role": "system", "content": system_prompt}
        self.messages: List[Message] = [self.system_message]

    def __len__(self) -> int:
        return len(self.messages)

    def append(self, role: str, content: str, **extra: Any) -> Message:
        message: Message = {"role": role, "content": content, **extra}
        self.messages.append(message)
        return message

    def snapshot(self) -> List[Message]:
        return list(self.messages)

    def rollback(self, length: int) -> None:
        """Drop everything appended after ``length`` messages."""
        if length < 1:
            length = 1
        del self.messages[length:]

    def trim(self, max_pairs: int) -> None:
        """Keep the system message plus the newest ``2 * max_pairs`` messages."""
        if max_pairs <= 0:
            return
        keep = max_pairs * 2
        if len(self.messages) > keep + 1:
            self.messages = [self.system_message] + self.messages[-keep:]
