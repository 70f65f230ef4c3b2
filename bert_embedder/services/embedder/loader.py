# =============================================================================
# File: loader.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Builds the encoder and tokenizer from in-memory byte buffers."""

import json
import struct
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np
from safetensors.numpy import load as load_safetensors

from bert_embedder.config.model_config import ModelConfig, parse_model_config
from bert_embedder.exceptions import WeightLoadError
from bert_embedder.logger import get_logger
from bert_embedder.runtime.bert import BertEncoder, resolve_weights
from bert_embedder.runtime.numpy_runtime import NumpyTensorRuntime
from bert_embedder.runtime.onnx_runtime import (
    OnnxTensorRuntime,
    create_session,
    get_native_dimension_from_session,
)
from bert_embedder.services.embedder.encoder import EncoderModel
from bert_embedder.services.embedder.tokenizer import TokenizerAdapter
from bert_embedder.utils.log_sanitizer import sanitize_for_log

logger = get_logger("embedder.loader")

# safetensors layout: little-endian u64 header length, JSON header, tensor bytes
_HEADER_LEN = struct.Struct("<Q")


class LoadedModel(NamedTuple):
    encoder: EncoderModel
    tokenizer: TokenizerAdapter


class ModelLoader:
    """Parses configuration, tokenizer and weights, in that order."""

    @staticmethod
    def load(weights: bytes, tokenizer: bytes, config: bytes) -> LoadedModel:
        """Load a safetensors BERT checkpoint onto the numpy runtime.

        Raises:
            ConfigError: malformed or incompatible configuration.
            TokenizerError: malformed tokenizer document.
            WeightLoadError: unreadable archive or parameters that do not
                match the configuration.
        """
        model_config = parse_model_config(config)
        adapter = TokenizerAdapter.from_bytes(tokenizer)
        ModelLoader._check_vocabulary(adapter, model_config)

        tensors = ModelLoader._read_weights(weights)
        resolved, missing, mismatched = resolve_weights(tensors, model_config)
        if missing or mismatched:
            problems = []
            if missing:
                problems.append(f"missing parameters: {', '.join(missing)}")
            if mismatched:
                problems.append(f"shape mismatches: {'; '.join(mismatched)}")
            message = "Weights do not match model configuration (" + "; ".join(problems) + ")"
            logger.error(sanitize_for_log(message, max_length=500))
            raise WeightLoadError(message)

        encoder = BertEncoder(resolved, model_config)
        logger.info(
            "Loaded %d encoder parameters (%d tensors in archive)", len(resolved), len(tensors)
        )
        return LoadedModel(EncoderModel(model_config, NumpyTensorRuntime(encoder)), adapter)

    @staticmethod
    def load_onnx(
        model: bytes,
        tokenizer: bytes,
        config: bytes,
        provider: Optional[str] = None,
        intra_op_num_threads: int = 0,
    ) -> LoadedModel:
        """Load an exported ONNX encoder graph onto onnxruntime.

        Raises:
            ConfigError, TokenizerError: as for ``load``.
            WeightLoadError: the session cannot be created or its static
                output dimension disagrees with ``hidden_size``.
        """
        model_config = parse_model_config(config)
        adapter = TokenizerAdapter.from_bytes(tokenizer)
        ModelLoader._check_vocabulary(adapter, model_config)

        try:
            session = create_session(model, provider, intra_op_num_threads)
            runtime = OnnxTensorRuntime(session)
        except Exception as e:
            logger.error("Failed to create ONNX session: %s", sanitize_for_log(e))
            raise WeightLoadError(f"ONNX session creation failed: {e}") from e

        native_dim = get_native_dimension_from_session(session, runtime.output_index)
        if native_dim is not None and native_dim != model_config.hidden_size:
            raise WeightLoadError(
                f"ONNX output dimension ({native_dim}) does not match "
                f"hidden_size ({model_config.hidden_size})"
            )
        logger.info("Created ONNX encoder session")
        return LoadedModel(EncoderModel(model_config, runtime), adapter)

    @staticmethod
    def _read_weights(weights: bytes) -> Dict[str, np.ndarray]:
        """Read every tensor of a safetensors archive as a numpy array.

        numpy has no bfloat16, so BF16 entries are read as their raw 16-bit
        patterns and widened to float32, which holds every bf16 value exactly.
        """
        data, bf16_names = _relabel_bf16(bytes(weights))
        try:
            tensors = load_safetensors(data)
        except Exception as e:
            logger.error("Failed to read weight archive: %s", sanitize_for_log(e))
            raise WeightLoadError(f"Cannot read weight archive: {e}") from e

        for name in bf16_names:
            tensors[name] = _bf16_bits_to_float32(tensors[name])
        if bf16_names:
            logger.debug("Widened %d bf16 tensors to float32", len(bf16_names))
        return tensors

    @staticmethod
    def _check_vocabulary(adapter: TokenizerAdapter, model_config: ModelConfig) -> None:
        if adapter.vocab_size > model_config.vocab_size:
            logger.warning(
                "Tokenizer vocabulary (%d) is larger than the model vocabulary (%d); "
                "out-of-range ids will fail at inference",
                adapter.vocab_size,
                model_config.vocab_size,
            )


def _relabel_bf16(weights: bytes) -> Tuple[bytes, List[str]]:
    """Rewrite BF16 header entries as U16, keeping the tensor bytes as they are.

    An archive without BF16 entries, or whose header cannot be parsed, is
    returned unchanged so the safetensors reader reports the problem.
    """
    try:
        (header_len,) = _HEADER_LEN.unpack_from(weights, 0)
        header = json.loads(weights[_HEADER_LEN.size : _HEADER_LEN.size + header_len])
    except (struct.error, ValueError):
        return weights, []
    if not isinstance(header, dict):
        return weights, []

    bf16_names = [
        name
        for name, info in header.items()
        if name != "__metadata__" and isinstance(info, dict) and info.get("dtype") == "BF16"
    ]
    if not bf16_names:
        return weights, []

    for name in bf16_names:
        header[name]["dtype"] = "U16"
    new_header = json.dumps(header, separators=(",", ":")).encode("utf-8")
    new_header += b" " * (-len(new_header) % 8)
    body = weights[_HEADER_LEN.size + header_len :]
    return _HEADER_LEN.pack(len(new_header)) + new_header + body, bf16_names


def _bf16_bits_to_float32(bits: np.ndarray) -> np.ndarray:
    # bf16 is the upper half of an IEEE float32
    return (bits.astype(np.uint32) << 16).view(np.float32)
