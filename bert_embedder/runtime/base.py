# =============================================================================
# File: base.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Numeric backend contract used by the encoder and the embedding pipeline.

The pipeline never touches a concrete tensor library: it only calls the
operations below. A backend binds the encoder weights at construction time
and exposes ``forward`` plus the handful of reductions needed for pooling
and normalization.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Tuple

IntTensor = Any
FloatTensor = Any


class TensorRuntime(ABC):
    """Opaque numeric execution capability."""

    name: str = "abstract"

    @abstractmethod
    def matrix_from_ids(self, ids: Sequence[Sequence[int]]) -> IntTensor:
        """Stack equally long token id rows into an (N, T) integer tensor."""

    @abstractmethod
    def zeros_like(self, tensor: IntTensor) -> IntTensor:
        """All-zero integer tensor with the shape of ``tensor``."""

    @abstractmethod
    def forward(self, token_ids: IntTensor, token_type_ids: IntTensor) -> FloatTensor:
        """Run the bound encoder: (N, T) ids -> (N, T, H) hidden states."""

    @abstractmethod
    def dims(self, tensor: Any) -> Tuple[int, ...]:
        """Shape of ``tensor``."""

    @abstractmethod
    def sum(self, tensor: FloatTensor, axis: int, keepdims: bool = False) -> FloatTensor:
        """Sum over one axis."""

    @abstractmethod
    def div_scalar(self, tensor: FloatTensor, value: float) -> FloatTensor:
        """Divide every element by a scalar."""

    @abstractmethod
    def sqr(self, tensor: FloatTensor) -> FloatTensor:
        """Elementwise square."""

    @abstractmethod
    def sqrt(self, tensor: FloatTensor) -> FloatTensor:
        """Elementwise square root."""

    @abstractmethod
    def broadcast_div(self, tensor: FloatTensor, divisor: FloatTensor) -> FloatTensor:
        """Divide with broadcasting of ``divisor`` over ``tensor``."""

    @abstractmethod
    def to_list(self, tensor: FloatTensor) -> List[List[float]]:
        """Convert a 2-D float tensor to nested Python floats."""
