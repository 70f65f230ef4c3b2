# =============================================================================
# File: embedding_request.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List, Optional

from pydantic import BaseModel, Field


class EmbeddingRequest(BaseModel):
    """
    Request model for batch sentence embedding.
    """

    sentences: List[str] = Field(
        ...,
        description="Sentences to embed, in order. An empty list yields an empty result.",
    )
    normalize_embeddings: Optional[bool] = Field(
        None,
        description="L2-normalize each vector. Falls back to the configured default when omitted.",
    )
