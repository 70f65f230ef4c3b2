# =============================================================================
# File: chat_service.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Builder for chat-completion requests. Produces request documents only."""

from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from bert_embedder.exceptions import InvalidInputError
from bert_embedder.logger import get_logger
from bert_embedder.models.chat import ChatCompletionRequest, ChatRequestMessage, Message

logger = get_logger("chat_service")


class ChatCompletionClient(BaseModel):
    """Holds sampling parameters and an optional stored prompt.

    ``with_*`` methods return an updated copy and leave the original as is.
    """

    model: str = Field(default="gpt-3.5-turbo", min_length=1)
    prompt: Optional[List[Message]] = None
    # We generally recommend altering temperature or top_p but not both.
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    top_p: float = Field(default=1.0, ge=0.0, le=1.0)
    stream: bool = False
    max_tokens: int = Field(default=1024, ge=1, le=65535)

    def _with(self, **changes) -> "ChatCompletionClient":
        try:
            return ChatCompletionClient.model_validate({**self.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid chat parameter: {e}")

    def with_model(self, model: str) -> "ChatCompletionClient":
        return self._with(model=model)

    def with_prompt(self, prompt: List[Message]) -> "ChatCompletionClient":
        return self._with(prompt=prompt)

    def with_temperature(self, temperature: float) -> "ChatCompletionClient":
        return self._with(temperature=temperature)

    def with_top_p(self, top_p: float) -> "ChatCompletionClient":
        return self._with(top_p=top_p)

    def with_stream(self, stream: bool) -> "ChatCompletionClient":
        return self._with(stream=stream)

    def with_max_tokens(self, max_tokens: int) -> "ChatCompletionClient":
        return self._with(max_tokens=max_tokens)

    def generate_request(self, messages: Optional[List[Message]] = None) -> ChatCompletionRequest:
        """Build the request from ``messages`` or, when omitted, the stored prompt.

        Raises:
            InvalidInputError: if there are no messages.
        """
        source = messages if messages is not None else self.prompt
        if not source:
            raise InvalidInputError("A chat-completion request needs at least one message")

        logger.debug("Building chat request for model %s with %d messages", self.model, len(source))
        return ChatCompletionRequest(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
            stream=self.stream,
            messages=[ChatRequestMessage(role=m.role, content=m.message) for m in source],
        )
