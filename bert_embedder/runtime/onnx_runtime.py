# =============================================================================
# File: onnx_runtime.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""ONNX Runtime backend: the encoder is an exported ONNX graph held in memory."""

import logging
from typing import Any, Dict, List, Optional

import numpy as np
import onnxruntime as ort
from numpy import ndarray

from bert_embedder.logger import get_logger
from bert_embedder.runtime.numpy_runtime import NumpyTensorRuntime
from bert_embedder.utils.constants import ONNX_HIDDEN_STATE_OUTPUTS
from bert_embedder.utils.log_sanitizer import sanitize_for_log

logger = get_logger("runtime.onnx")


def create_session(
    model: bytes, provider: Optional[str] = None, intra_op_num_threads: int = 0
) -> ort.InferenceSession:
    """Create an inference session from serialized ONNX bytes."""
    provider = provider or "CPUExecutionProvider"
    available_providers = ort.get_available_providers()
    if provider not in available_providers:
        logger.warning(
            "Provider %s not available, using CPUExecutionProvider",
            sanitize_for_log(provider),
        )
        provider = "CPUExecutionProvider"

    options = ort.SessionOptions()
    if intra_op_num_threads > 0:
        options.intra_op_num_threads = intra_op_num_threads
    return ort.InferenceSession(model, sess_options=options, providers=[provider])


def select_name(candidates: List[str], names: List[str]) -> Optional[str]:
    """Pick a tensor name: exact, then case-insensitive, then substring match."""
    for cand in candidates:
        if cand in names:
            return cand

    names_lc = [n.lower() for n in names]
    for cand in candidates:
        lc = cand.lower()
        if lc in names_lc:
            return names[names_lc.index(lc)]

    for cand in candidates:
        lc = cand.lower()
        for name, name_lc in zip(names, names_lc):
            if lc in name_lc:
                return name

    return None


def get_native_dimension_from_session(session: Any, output_index: int = 0) -> Optional[int]:
    """Hidden size from the static last axis of output ``output_index``, if known."""
    try:
        outputs = session.get_outputs()
        if len(outputs) > output_index:
            output_shape = outputs[output_index].shape
            if output_shape and len(output_shape) >= 3:
                last_dim = output_shape[-1]
                if isinstance(last_dim, (int, np.integer)):
                    return int(last_dim)
    except Exception as e:
        logger.warning(f"Could not auto-detect dimension from ONNX session: {e}")
    return None


class OnnxTensorRuntime(NumpyTensorRuntime):
    """Numpy reductions with the forward pass delegated to onnxruntime."""

    name = "onnx"

    def __init__(self, session: Any):
        super().__init__(encoder=None)
        self._session = session
        self._input_names = [inp.name for inp in session.get_inputs()]
        self._output_names = [out.name for out in session.get_outputs()]
        self._output_index = self._resolve_output_index()

    @property
    def output_index(self) -> int:
        """Index of the session output read as the hidden states."""
        return self._output_index

    def _resolve_output_index(self) -> int:
        name = select_name(list(ONNX_HIDDEN_STATE_OUTPUTS), self._output_names)
        return self._output_names.index(name) if name else 0

    def _build_inputs(self, token_ids: ndarray, token_type_ids: ndarray) -> Dict[str, ndarray]:
        ids_name = select_name(["input_ids", "input"], self._input_names) or "input_ids"
        inputs: Dict[str, ndarray] = {ids_name: token_ids.astype(np.int64)}

        mask_name = select_name(["attention_mask", "mask"], self._input_names)
        if mask_name:
            # every position attends, padding included
            inputs[mask_name] = np.ones_like(token_ids, dtype=np.int64)

        type_name = select_name(["token_type_ids", "segment_ids"], self._input_names)
        if type_name:
            inputs[type_name] = token_type_ids.astype(np.int64)

        position_name = select_name(["position_ids"], self._input_names)
        if position_name:
            n, t = token_ids.shape
            inputs[position_name] = np.broadcast_to(np.arange(t, dtype=np.int64), (n, t)).copy()
        return inputs

    def forward(self, token_ids: ndarray, token_type_ids: ndarray) -> ndarray:
        inputs = self._build_inputs(token_ids, token_type_ids)
        outputs = self._session.run(None, inputs)
        hidden = outputs[self._output_index]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "ONNX output %s: shape=%s dtype=%s",
                sanitize_for_log(self._output_names[self._output_index]),
                hidden.shape,
                hidden.dtype,
            )
        return np.asarray(hidden, dtype=np.float64)
