# =============================================================================
# File: __init__.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Numeric backends for the embedder.

- base: the ``TensorRuntime`` contract
- bert: numpy BERT encoder and weight validation
- numpy_runtime: float64 numpy backend (safetensors weights)
- onnx_runtime: onnxruntime backend (ONNX graph bytes)
"""

from bert_embedder.runtime.base import TensorRuntime
from bert_embedder.runtime.numpy_runtime import NumpyTensorRuntime

__all__ = ["TensorRuntime", "NumpyTensorRuntime"]
