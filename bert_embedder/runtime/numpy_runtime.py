# =============================================================================
# File: numpy_runtime.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from numpy import ndarray

from bert_embedder.runtime.base import TensorRuntime
from bert_embedder.runtime.bert import BertEncoder


class NumpyTensorRuntime(TensorRuntime):
    """Float64 numpy backend; ``forward`` runs the bound ``BertEncoder``."""

    name = "numpy"

    def __init__(self, encoder: Optional[BertEncoder] = None):
        self._encoder = encoder

    def matrix_from_ids(self, ids: Sequence[Sequence[int]]) -> ndarray:
        rows = [list(row) for row in ids]
        if not rows:
            return np.zeros((0, 0), dtype=np.int64)
        lengths = {len(row) for row in rows}
        if len(lengths) > 1:
            raise ValueError(f"Token id rows have different lengths: {sorted(lengths)}")
        return np.asarray(rows, dtype=np.int64).reshape(len(rows), -1)

    def zeros_like(self, tensor: ndarray) -> ndarray:
        return np.zeros_like(tensor, dtype=np.int64)

    def forward(self, token_ids: ndarray, token_type_ids: ndarray) -> ndarray:
        if self._encoder is None:
            raise RuntimeError("No encoder is bound to this runtime")
        return self._encoder.forward(token_ids, token_type_ids)

    def dims(self, tensor: Any) -> Tuple[int, ...]:
        return tuple(np.shape(tensor))

    def sum(self, tensor: ndarray, axis: int, keepdims: bool = False) -> ndarray:
        return np.sum(tensor, axis=axis, keepdims=keepdims)

    def div_scalar(self, tensor: ndarray, value: float) -> ndarray:
        return tensor / float(value)

    def sqr(self, tensor: ndarray) -> ndarray:
        return np.square(tensor)

    def sqrt(self, tensor: ndarray) -> ndarray:
        return np.sqrt(tensor)

    def broadcast_div(self, tensor: ndarray, divisor: ndarray) -> ndarray:
        return tensor / divisor

    def to_list(self, tensor: ndarray) -> List[List[float]]:
        return np.asarray(tensor, dtype=np.float64).tolist()
