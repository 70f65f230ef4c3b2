# =============================================================================
# File: test_runtime.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from bert_embedder.config.model_config import ModelConfig
from bert_embedder.runtime.bert import (
    BertEncoder,
    _softmax,
    expected_weight_shapes,
    resolve_weights,
)
from bert_embedder.runtime.numpy_runtime import NumpyTensorRuntime
from bert_embedder.runtime.onnx_runtime import (
    OnnxTensorRuntime,
    get_native_dimension_from_session,
    select_name,
)
from tests.toy_model import TOY_CONFIG, build_weights


@pytest.fixture
def config():
    return ModelConfig(**TOY_CONFIG)


@pytest.fixture
def encoder(config):
    resolved, missing, mismatched = resolve_weights(build_weights(TOY_CONFIG), config)
    assert not missing and not mismatched
    return BertEncoder(resolved, config)


class TestNumpyTensorRuntime:
    def test_matrix_from_ids(self):
        runtime = NumpyTensorRuntime()
        ids = runtime.matrix_from_ids([[2, 4, 3], [2, 5, 3]])

        assert ids.shape == (2, 3)
        assert ids.dtype == np.int64

    def test_matrix_from_ragged_ids_fails(self):
        with pytest.raises(ValueError, match="different lengths"):
            NumpyTensorRuntime().matrix_from_ids([[1, 2, 3], [1]])

    def test_zeros_like_keeps_shape(self):
        runtime = NumpyTensorRuntime()
        zeros = runtime.zeros_like(np.array([[7, 8], [9, 10]]))

        assert zeros.shape == (2, 2)
        assert not zeros.any()

    def test_reductions(self):
        runtime = NumpyTensorRuntime()
        t = np.array([[3.0, 4.0], [6.0, 8.0]])

        assert runtime.sum(t, axis=1).tolist() == [7.0, 14.0]
        assert runtime.sum(t, axis=1, keepdims=True).shape == (2, 1)
        assert runtime.div_scalar(t, 2).tolist() == [[1.5, 2.0], [3.0, 4.0]]
        assert runtime.sqr(t)[0].tolist() == [9.0, 16.0]
        assert runtime.sqrt(np.array([9.0, 16.0])).tolist() == [3.0, 4.0]
        assert runtime.broadcast_div(t, np.array([[1.0], [2.0]])).tolist() == [
            [3.0, 4.0],
            [3.0, 4.0],
        ]
        assert runtime.dims(t) == (2, 2)

    def test_to_list_returns_python_floats(self):
        out = NumpyTensorRuntime().to_list(np.array([[1, 2]], dtype=np.float32))
        assert out == [[1.0, 2.0]]
        assert isinstance(out[0][0], float)

    def test_forward_without_encoder_fails(self):
        runtime = NumpyTensorRuntime()
        ids = np.zeros((1, 2), dtype=np.int64)
        with pytest.raises(RuntimeError):
            runtime.forward(ids, ids)


class TestBertEncoder:
    def test_forward_shape_and_dtype(self, encoder):
        ids = np.array([[2, 4, 5, 3], [2, 4, 3, 0]])
        hidden = encoder.forward(ids, np.zeros_like(ids))

        assert hidden.shape == (2, 4, 8)
        assert hidden.dtype == np.float64
        assert np.isfinite(hidden).all()

    def test_rows_are_independent_of_each_other(self, encoder):
        ids = np.array([[2, 4, 5, 3], [2, 4, 3, 0]])
        batched = encoder.forward(ids, np.zeros_like(ids))
        alone = encoder.forward(ids[:1], np.zeros_like(ids[:1]))

        assert np.allclose(batched[0], alone[0])

    def test_padding_positions_are_attended(self, encoder):
        short = np.array([[2, 4, 3]])
        padded = np.array([[2, 4, 3, 0]])
        h_short = encoder.forward(short, np.zeros_like(short))
        h_padded = encoder.forward(padded, np.zeros_like(padded))

        assert not np.allclose(h_short[0, :3], h_padded[0, :3])

    def test_sequence_longer_than_positions_fails(self, encoder):
        ids = np.full((1, 40), 4)
        with pytest.raises(ValueError, match="max_position_embeddings"):
            encoder.forward(ids, np.zeros_like(ids))

    def test_weights_are_read_only(self, encoder):
        with pytest.raises(ValueError):
            encoder._w["embeddings.LayerNorm.bias"][0] = 1.0

    @pytest.mark.parametrize("act", ["gelu_new", "relu"])
    def test_alternative_activations(self, act):
        config = ModelConfig(**dict(TOY_CONFIG, hidden_act=act))
        resolved, _, _ = resolve_weights(build_weights(TOY_CONFIG), config)
        hidden = BertEncoder(resolved, config).forward(np.array([[2, 4, 3]]), np.zeros((1, 3), int))
        assert hidden.shape == (1, 3, 8)


class TestWeightResolution:
    def test_expected_shapes_cover_all_layers(self, config):
        shapes = expected_weight_shapes(config)

        assert shapes["embeddings.word_embeddings.weight"] == (6, 8)
        assert shapes["encoder.layer.1.intermediate.dense.weight"] == (16, 8)
        assert shapes["encoder.layer.1.output.dense.weight"] == (8, 16)
        assert not any(name.startswith("encoder.layer.2.") for name in shapes)

    def test_model_prefix_is_accepted(self, config):
        tensors = build_weights(TOY_CONFIG, prefix="bert.")
        resolved, missing, mismatched = resolve_weights(tensors, config)

        assert missing == [] and mismatched == []
        assert "embeddings.word_embeddings.weight" in resolved

    def test_gamma_beta_layer_norm_names(self, config):
        tensors = build_weights(TOY_CONFIG)
        tensors["embeddings.LayerNorm.gamma"] = tensors.pop("embeddings.LayerNorm.weight")
        tensors["embeddings.LayerNorm.beta"] = tensors.pop("embeddings.LayerNorm.bias")
        resolved, missing, _ = resolve_weights(tensors, config)

        assert missing == []
        assert resolved["embeddings.LayerNorm.weight"].shape == (8,)

    def test_extra_tensors_ignored_and_cast_to_float64(self, config):
        tensors = build_weights(TOY_CONFIG)
        tensors["pooler.dense.weight"] = np.zeros((8, 8), dtype=np.float32)
        resolved, _, _ = resolve_weights(tensors, config)

        assert "pooler.dense.weight" not in resolved
        assert all(arr.dtype == np.float64 for arr in resolved.values())

    def test_missing_and_mismatched_reported(self, config):
        tensors = build_weights(TOY_CONFIG)
        del tensors["encoder.layer.0.attention.self.key.bias"]
        tensors["embeddings.word_embeddings.weight"] = np.zeros((5, 8), dtype=np.float32)
        _, missing, mismatched = resolve_weights(tensors, config)

        assert missing == ["encoder.layer.0.attention.self.key.bias"]
        assert len(mismatched) == 1
        assert "embeddings.word_embeddings.weight" in mismatched[0]


def test_softmax_is_stable_and_normalized():
    probs = _softmax(np.array([[1000.0, 1000.0], [0.0, np.log(3.0)]]))

    assert np.allclose(probs.sum(axis=-1), 1.0)
    assert np.allclose(probs[0], [0.5, 0.5])
    assert np.allclose(probs[1], [0.25, 0.75])


class TestOnnxTensorRuntime:
    def make_session(self, input_names, output_names, hidden=None):
        session = MagicMock()
        session.get_inputs.return_value = [SimpleNamespace(name=n) for n in input_names]
        session.get_outputs.return_value = [
            SimpleNamespace(name=n, shape=["batch", "seq", 8]) for n in output_names
        ]
        session.run.return_value = hidden
        return session

    def test_inputs_include_all_ones_mask(self):
        session = self.make_session(
            ["input_ids", "attention_mask", "token_type_ids"],
            ["last_hidden_state"],
            [np.zeros((2, 3, 8), dtype=np.float32)],
        )
        runtime = OnnxTensorRuntime(session)
        ids = np.array([[2, 4, 3], [2, 3, 0]])

        hidden = runtime.forward(ids, np.zeros_like(ids))

        _, feeds = session.run.call_args[0]
        assert set(feeds) == {"input_ids", "attention_mask", "token_type_ids"}
        assert feeds["attention_mask"].tolist() == [[1, 1, 1], [1, 1, 1]]
        assert feeds["input_ids"].dtype == np.int64
        assert hidden.dtype == np.float64

    def test_position_ids_fed_when_declared(self):
        session = self.make_session(
            ["input_ids", "position_ids"], ["out"], [np.zeros((2, 3, 8))]
        )
        OnnxTensorRuntime(session).forward(np.ones((2, 3), int), np.zeros((2, 3), int))

        _, feeds = session.run.call_args[0]
        assert feeds["position_ids"].tolist() == [[0, 1, 2], [0, 1, 2]]

    def test_hidden_state_output_selected_by_name(self):
        pooled = np.zeros((1, 8))
        hidden = np.ones((1, 3, 8))
        session = self.make_session(
            ["input_ids"], ["pooler_output", "last_hidden_state"], [pooled, hidden]
        )

        out = OnnxTensorRuntime(session).forward(np.ones((1, 3), int), np.zeros((1, 3), int))
        assert out.shape == (1, 3, 8)

    def test_select_name_fallbacks(self):
        assert select_name(["input_ids"], ["Input_IDS"]) == "Input_IDS"
        assert select_name(["mask"], ["input_ids", "attention_mask"]) == "attention_mask"
        assert select_name(["position_ids"], ["input_ids"]) is None

    def test_native_dimension(self):
        session = self.make_session(["input_ids"], ["last_hidden_state"])
        assert get_native_dimension_from_session(session) == 8

        session.get_outputs.return_value = [SimpleNamespace(name="x", shape=["b", "s", "h"])]
        assert get_native_dimension_from_session(session) is None

    def test_native_dimension_of_selected_output(self):
        session = self.make_session(["input_ids"], ["pooler_output", "last_hidden_state"])
        session.get_outputs.return_value[0].shape = ["b", "s", 384]
        runtime = OnnxTensorRuntime(session)

        assert runtime.output_index == 1
        assert get_native_dimension_from_session(session, runtime.output_index) == 8
        assert get_native_dimension_from_session(session, 5) is None
