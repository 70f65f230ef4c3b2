# =============================================================================
# File: __init__.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Sentence embeddings from BERT encoders loaded out of in-memory buffers."""

from bert_embedder.exceptions import (
    ConfigError,
    EmbeddingError,
    InferenceError,
    LoadError,
    TokenizeError,
    TokenizerError,
    WeightLoadError,
)
from bert_embedder.services.embedder import EmbeddingPipeline


def from_buffers(weights: bytes, tokenizer: bytes, config: bytes) -> EmbeddingPipeline:
    """Load a pipeline from safetensors weights, tokenizer.json and config.json bytes."""
    return EmbeddingPipeline.from_buffers(weights, tokenizer, config)


__all__ = [
    "ConfigError",
    "EmbeddingError",
    "EmbeddingPipeline",
    "InferenceError",
    "LoadError",
    "TokenizeError",
    "TokenizerError",
    "WeightLoadError",
    "from_buffers",
]
