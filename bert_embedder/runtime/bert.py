# =============================================================================
# File: bert.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""BERT encoder forward pass in numpy (float64).

Parameter names follow the Hugging Face BERT layout
(``embeddings.word_embeddings.weight``, ``encoder.layer.0.attention.self.query.weight``
and so on). Attention is not masked: every position, padding included,
attends to every other position of the padded batch.
"""

import math
from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy import ndarray

from bert_embedder.config.model_config import ModelConfig
from bert_embedder.logger import get_logger

logger = get_logger("runtime.bert")

_erf = np.frompyfunc(math.erf, 1, 1)


def _softmax(x: ndarray) -> ndarray:
    """Numerically stable softmax over the last axis."""
    x_max = np.max(x, axis=-1, keepdims=True)
    e_x = np.exp(x - x_max)
    return e_x / np.sum(e_x, axis=-1, keepdims=True)


def _gelu(x: ndarray) -> ndarray:
    return 0.5 * x * (1.0 + _erf(x / math.sqrt(2.0)).astype(np.float64))


def _gelu_tanh(x: ndarray) -> ndarray:
    return 0.5 * x * (1.0 + np.tanh(math.sqrt(2.0 / math.pi) * (x + 0.044715 * x**3)))


def _relu(x: ndarray) -> ndarray:
    return np.maximum(x, 0.0)


ACTIVATIONS = {
    "gelu": _gelu,
    "gelu_approximate": _gelu_tanh,
    "gelu_new": _gelu_tanh,
    "gelu_pytorch_tanh": _gelu_tanh,
    "relu": _relu,
}


def _layer_norm(x: ndarray, weight: ndarray, bias: ndarray, eps: float) -> ndarray:
    mean = x.mean(axis=-1, keepdims=True)
    var = ((x - mean) ** 2).mean(axis=-1, keepdims=True)
    return (x - mean) / np.sqrt(var + eps) * weight + bias


def _linear(x: ndarray, weight: ndarray, bias: ndarray) -> ndarray:
    # weight is stored (out_features, in_features)
    return x @ weight.T + bias


def expected_weight_shapes(config: ModelConfig) -> Dict[str, Tuple[int, ...]]:
    """Every parameter the encoder needs, with its required shape."""
    h = config.hidden_size
    i = config.intermediate_size
    shapes: Dict[str, Tuple[int, ...]] = {
        "embeddings.word_embeddings.weight": (config.vocab_size, h),
        "embeddings.position_embeddings.weight": (config.max_position_embeddings, h),
        "embeddings.token_type_embeddings.weight": (config.type_vocab_size, h),
        "embeddings.LayerNorm.weight": (h,),
        "embeddings.LayerNorm.bias": (h,),
    }
    for n in range(config.num_hidden_layers):
        p = f"encoder.layer.{n}"
        for proj in ("query", "key", "value"):
            shapes[f"{p}.attention.self.{proj}.weight"] = (h, h)
            shapes[f"{p}.attention.self.{proj}.bias"] = (h,)
        shapes[f"{p}.attention.output.dense.weight"] = (h, h)
        shapes[f"{p}.attention.output.dense.bias"] = (h,)
        shapes[f"{p}.attention.output.LayerNorm.weight"] = (h,)
        shapes[f"{p}.attention.output.LayerNorm.bias"] = (h,)
        shapes[f"{p}.intermediate.dense.weight"] = (i, h)
        shapes[f"{p}.intermediate.dense.bias"] = (i,)
        shapes[f"{p}.output.dense.weight"] = (h, i)
        shapes[f"{p}.output.dense.bias"] = (h,)
        shapes[f"{p}.output.LayerNorm.weight"] = (h,)
        shapes[f"{p}.output.LayerNorm.bias"] = (h,)
    return shapes


def _candidate_names(name: str, prefixes: List[str]) -> List[str]:
    names = [f"{prefix}{name}" for prefix in prefixes]
    if name.endswith("LayerNorm.weight"):
        names += [f"{prefix}{name[: -len('weight')]}gamma" for prefix in prefixes]
    elif name.endswith("LayerNorm.bias"):
        names += [f"{prefix}{name[: -len('bias')]}beta" for prefix in prefixes]
    return names


def resolve_weights(
    tensors: Dict[str, ndarray], config: ModelConfig
) -> Tuple[Dict[str, ndarray], List[str], List[str]]:
    """Map archive tensors onto canonical parameter names.

    Accepts an optional ``bert.`` / ``<model_type>.`` prefix and the legacy
    ``gamma``/``beta`` LayerNorm names. Extra tensors are ignored.

    Returns:
        (resolved float64 weights, missing names, shape mismatch descriptions)
    """
    prefixes = [""]
    for prefix in (config.model_type, "bert"):
        if prefix and f"{prefix}." not in prefixes:
            prefixes.append(f"{prefix}.")

    resolved: Dict[str, ndarray] = {}
    missing: List[str] = []
    mismatched: List[str] = []
    for name, shape in expected_weight_shapes(config).items():
        found: Optional[str] = None
        for candidate in _candidate_names(name, prefixes):
            if candidate in tensors:
                found = candidate
                break
        if found is None:
            missing.append(name)
            continue
        tensor = tensors[found]
        if tuple(tensor.shape) != shape:
            mismatched.append(f"{found}: expected {shape}, got {tuple(tensor.shape)}")
            continue
        resolved[name] = np.asarray(tensor, dtype=np.float64)
    return resolved, missing, mismatched


class BertEncoder:
    """Read-only BERT encoder bound to a validated weight set."""

    def __init__(self, weights: Dict[str, ndarray], config: ModelConfig):
        self.config = config
        self._w = weights
        self._act = ACTIVATIONS[config.hidden_act]
        for arr in self._w.values():
            arr.setflags(write=False)

    def _embeddings(self, input_ids: ndarray, token_type_ids: ndarray) -> ndarray:
        seq_len = input_ids.shape[1]
        if seq_len > self.config.max_position_embeddings:
            raise ValueError(
                f"Sequence length {seq_len} exceeds max_position_embeddings "
                f"({self.config.max_position_embeddings})"
            )
        w = self._w
        x = (
            w["embeddings.word_embeddings.weight"][input_ids]
            + w["embeddings.token_type_embeddings.weight"][token_type_ids]
            + w["embeddings.position_embeddings.weight"][np.arange(seq_len)][None, :, :]
        )
        return _layer_norm(
            x,
            w["embeddings.LayerNorm.weight"],
            w["embeddings.LayerNorm.bias"],
            self.config.layer_norm_eps,
        )

    def _self_attention(self, x: ndarray, p: str) -> ndarray:
        w = self._w
        n, t, h = x.shape
        heads = self.config.num_attention_heads
        head_size = self.config.head_size

        def split_heads(y: ndarray) -> ndarray:
            return y.reshape(n, t, heads, head_size).transpose(0, 2, 1, 3)

        q = split_heads(_linear(x, w[f"{p}.self.query.weight"], w[f"{p}.self.query.bias"]))
        k = split_heads(_linear(x, w[f"{p}.self.key.weight"], w[f"{p}.self.key.bias"]))
        v = split_heads(_linear(x, w[f"{p}.self.value.weight"], w[f"{p}.self.value.bias"]))

        scores = (q @ k.transpose(0, 1, 3, 2)) / math.sqrt(head_size)
        context = (_softmax(scores) @ v).transpose(0, 2, 1, 3).reshape(n, t, h)

        out = _linear(context, w[f"{p}.output.dense.weight"], w[f"{p}.output.dense.bias"])
        return _layer_norm(
            out + x,
            w[f"{p}.output.LayerNorm.weight"],
            w[f"{p}.output.LayerNorm.bias"],
            self.config.layer_norm_eps,
        )

    def _layer(self, x: ndarray, index: int) -> ndarray:
        w = self._w
        p = f"encoder.layer.{index}"
        attn = self._self_attention(x, f"{p}.attention")
        inter = self._act(
            _linear(attn, w[f"{p}.intermediate.dense.weight"], w[f"{p}.intermediate.dense.bias"])
        )
        out = _linear(inter, w[f"{p}.output.dense.weight"], w[f"{p}.output.dense.bias"])
        return _layer_norm(
            out + attn,
            w[f"{p}.output.LayerNorm.weight"],
            w[f"{p}.output.LayerNorm.bias"],
            self.config.layer_norm_eps,
        )

    def forward(self, input_ids: ndarray, token_type_ids: ndarray) -> ndarray:
        """(N, T) ids and token types -> (N, T, H) float64 hidden states."""
        x = self._embeddings(input_ids, token_type_ids)
        for index in range(self.config.num_hidden_layers):
            x = self._layer(x, index)
        return x
