# =============================================================================
# File: tokenizer.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Tokenizer adapter: batch encoding with a one-shot batch-longest padding switch."""

import threading
from enum import Enum
from typing import List, Sequence

from tokenizers import Tokenizer

from bert_embedder.exceptions import TokenizeError, TokenizerError
from bert_embedder.logger import get_logger
from bert_embedder.utils.constants import (
    DEFAULT_PAD_DIRECTION,
    DEFAULT_PAD_ID,
    DEFAULT_PAD_TOKEN,
    DEFAULT_PAD_TYPE_ID,
)
from bert_embedder.utils.log_sanitizer import describe_batch, sanitize_for_log

logger = get_logger("embedder.tokenizer")


class PaddingState(str, Enum):
    UNCONFIGURED = "unconfigured"
    BATCH_LONGEST = "batch_longest"


class TokenizerAdapter:
    """Wraps a ``tokenizers.Tokenizer`` loaded from an in-memory document."""

    def __init__(self, tokenizer: Tokenizer):
        self._tokenizer = tokenizer
        self._padding_state = PaddingState.UNCONFIGURED
        self._padding_lock = threading.Lock()

    @classmethod
    def from_bytes(cls, data: bytes) -> "TokenizerAdapter":
        """Build an adapter from a serialized ``tokenizer.json`` buffer.

        Raises:
            TokenizerError: if the buffer is not a valid tokenizer document.
        """
        try:
            tokenizer = Tokenizer.from_buffer(bytes(data))
        except Exception as e:
            logger.error("Failed to load tokenizer: %s", sanitize_for_log(e))
            raise TokenizerError(f"Cannot load tokenizer: {e}") from e
        logger.info("Loaded tokenizer with vocabulary size %d", tokenizer.get_vocab_size())
        return cls(tokenizer)

    @property
    def padding_state(self) -> PaddingState:
        return self._padding_state

    @property
    def vocab_size(self) -> int:
        return self._tokenizer.get_vocab_size()

    def _ensure_batch_longest_padding(self) -> None:
        """Switch padding to batch-longest once; later calls are no-ops."""
        if self._padding_state is PaddingState.BATCH_LONGEST:
            return
        with self._padding_lock:
            if self._padding_state is PaddingState.BATCH_LONGEST:
                return
            current = self._tokenizer.padding
            if current is not None:
                # keep the document's pad token/id, only drop a fixed length
                self._tokenizer.enable_padding(
                    direction=current.get("direction", DEFAULT_PAD_DIRECTION),
                    pad_id=current.get("pad_id", DEFAULT_PAD_ID),
                    pad_type_id=current.get("pad_type_id", DEFAULT_PAD_TYPE_ID),
                    pad_token=current.get("pad_token", DEFAULT_PAD_TOKEN),
                    length=None,
                    pad_to_multiple_of=current.get("pad_to_multiple_of"),
                )
            else:
                self._tokenizer.enable_padding(
                    direction=DEFAULT_PAD_DIRECTION,
                    pad_id=DEFAULT_PAD_ID,
                    pad_type_id=DEFAULT_PAD_TYPE_ID,
                    pad_token=DEFAULT_PAD_TOKEN,
                    length=None,
                )
            self._padding_state = PaddingState.BATCH_LONGEST
            logger.debug("Padding strategy set to batch-longest")

    def encode_batch(self, sentences: Sequence[str]) -> List[List[int]]:
        """Encode sentences with special tokens, padded to the batch's longest.

        Raises:
            TokenizeError: if any sentence cannot be encoded; no partial
                result is returned.
        """
        if len(sentences) == 0:
            return []

        self._ensure_batch_longest_padding()
        try:
            encodings = self._tokenizer.encode_batch(list(sentences), add_special_tokens=True)
        except Exception as e:
            logger.error(
                "Tokenization failed for %s: %s",
                describe_batch(sentences),
                sanitize_for_log(e),
            )
            raise TokenizeError(f"Failed to tokenize batch: {e}") from e
        return [list(encoding.ids) for encoding in encodings]
