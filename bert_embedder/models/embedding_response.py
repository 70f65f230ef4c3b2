# =============================================================================
# File: embedding_response.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List, Optional

from pydantic import Field

from bert_embedder.models.base_response import BaseResponse


class EmbeddingResponse(BaseResponse):
    """
    Response model for batch sentence embedding.
    """

    data: List[List[float]] = Field(
        default_factory=list, description="One vector per input sentence, in input order."
    )
    dimension: Optional[int] = Field(None, description="Length of every vector (hidden size).")
    stage: Optional[str] = Field(None, description="Failing stage when success is False.")
