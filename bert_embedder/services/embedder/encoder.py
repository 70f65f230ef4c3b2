# =============================================================================
# File: encoder.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Encoder model: immutable config plus a runtime with bound weights."""

from bert_embedder.config.model_config import ModelConfig
from bert_embedder.exceptions import InferenceError
from bert_embedder.logger import get_logger
from bert_embedder.runtime.base import FloatTensor, IntTensor, TensorRuntime

logger = get_logger("embedder.encoder")


class EncoderModel:
    def __init__(self, config: ModelConfig, runtime: TensorRuntime):
        self._config = config
        self._runtime = runtime

    @property
    def config(self) -> ModelConfig:
        return self._config

    @property
    def runtime(self) -> TensorRuntime:
        return self._runtime

    @property
    def hidden_size(self) -> int:
        return self._config.hidden_size

    def forward(self, token_ids: IntTensor) -> FloatTensor:
        """Run the encoder on an (N, T) id matrix with all-zero token types.

        Returns:
            (N, T, H) hidden states, H being the configured hidden size.

        Raises:
            InferenceError: if the runtime fails or returns a tensor of the
                wrong shape.
        """
        try:
            n_sentences, n_tokens = self._runtime.dims(token_ids)
            token_type_ids = self._runtime.zeros_like(token_ids)
            hidden_states = self._runtime.forward(token_ids, token_type_ids)
            dims = self._runtime.dims(hidden_states)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"Model inference failed: {e}") from e

        if dims != (n_sentences, n_tokens, self.hidden_size):
            raise InferenceError(
                f"Encoder returned shape {dims}, expected "
                f"({n_sentences}, {n_tokens}, {self.hidden_size})"
            )
        return hidden_states
