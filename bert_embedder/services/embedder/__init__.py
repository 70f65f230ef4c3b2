# =============================================================================
# File: __init__.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedder service for sentence embeddings from a BERT encoder.

This package provides the embedding pipeline with the following components:
- tokenizer: Tokenizer adapter with the one-shot batch-longest padding switch
- encoder: Encoder model over a pluggable tensor runtime
- loader: Builds encoder and tokenizer from byte buffers
- pipeline: Tokenize, encode, mean-pool and normalize

Public API:
- EmbeddingPipeline: Main class for sentence embedding
- ModelLoader: Buffer loader returning a LoadedModel
"""

from bert_embedder.services.embedder.encoder import EncoderModel
from bert_embedder.services.embedder.loader import LoadedModel, ModelLoader
from bert_embedder.services.embedder.pipeline import EmbeddingPipeline
from bert_embedder.services.embedder.tokenizer import PaddingState, TokenizerAdapter

__all__ = [
    "EmbeddingPipeline",
    "EncoderModel",
    "LoadedModel",
    "ModelLoader",
    "PaddingState",
    "TokenizerAdapter",
]
