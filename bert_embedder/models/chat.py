# =============================================================================
# File: chat.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from enum import Enum
from typing import Iterable, List, Tuple

from pydantic import BaseModel, Field


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Map a role name to a Role; unknown names become SYSTEM."""
        try:
            return cls(value)
        except ValueError:
            return cls.SYSTEM

    def __str__(self) -> str:
        return self.value


class Message(BaseModel):
    role: Role = Field(..., description="The message role (system, user, assistant, function).")
    message: str = Field(..., description="The message text.")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> List["Message"]:
        return [cls(role=Role.parse(role), message=text) for role, text in pairs]

    def __str__(self) -> str:
        return f"[{self.role}] {self.message}"


class ChatRequestMessage(BaseModel):
    role: Role
    content: str


class ChatCompletionRequest(BaseModel):
    """
    Chat-completion request document, ready to be serialized as JSON.
    """

    model: str = Field(..., min_length=1)
    max_tokens: int = Field(..., ge=1, le=65535)
    temperature: float = Field(..., ge=0.0, le=2.0)
    top_p: float = Field(..., ge=0.0, le=1.0)
    stream: bool = False
    messages: List[ChatRequestMessage] = Field(..., min_length=1)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")
