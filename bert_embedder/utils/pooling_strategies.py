# =============================================================================
# File: pooling_strategies.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from bert_embedder.logger import get_logger
from bert_embedder.runtime.base import FloatTensor, TensorRuntime

logger = get_logger("pooling_strategies")


class PoolingStrategies:

    @staticmethod
    def mean_pooling(runtime: TensorRuntime, hidden_states: FloatTensor) -> FloatTensor:
        """Mean over all T positions of an (N, T, H) tensor, padding included.

        The divisor is the padded batch length, so a sentence's vector
        depends on the longest sentence it was batched with.
        """
        _n_sentences, n_tokens, _hidden_size = runtime.dims(hidden_states)
        return runtime.div_scalar(runtime.sum(hidden_states, axis=1), float(n_tokens))

    @staticmethod
    def l2_normalize(runtime: TensorRuntime, embeddings: FloatTensor) -> FloatTensor:
        """Scale each row of an (N, H) tensor to unit Euclidean norm.

        A row whose norm is exactly zero divides by zero and comes out as NaN.
        """
        norms = runtime.sqrt(runtime.sum(runtime.sqr(embeddings), axis=1, keepdims=True))
        return runtime.broadcast_div(embeddings, norms)

    @staticmethod
    def apply(
        runtime: TensorRuntime, hidden_states: FloatTensor, normalize: bool = False
    ) -> FloatTensor:
        logger.debug("Applying mean pooling (normalize=%s)", normalize)
        pooled = PoolingStrategies.mean_pooling(runtime, hidden_states)
        if normalize:
            pooled = PoolingStrategies.l2_normalize(runtime, pooled)
        return pooled
