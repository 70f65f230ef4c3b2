# =============================================================================
# File: test_error_handling.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import pytest

from bert_embedder.exceptions import (
    BertEmbedderBaseException,
    ConfigError,
    EmbeddingError,
    InferenceError,
    InvalidConfigError,
    InvalidInputError,
    LoadError,
    ModelException,
    TokenizeError,
    TokenizerError,
    WeightLoadError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize("exc_class", [ConfigError, TokenizerError, WeightLoadError])
    def test_load_errors(self, exc_class):
        error = exc_class("boom")
        assert isinstance(error, LoadError)
        assert isinstance(error, BertEmbedderBaseException)

    @pytest.mark.parametrize("exc_class", [TokenizeError, InferenceError])
    def test_stage_errors(self, exc_class):
        assert isinstance(exc_class("boom"), ModelException)

    def test_embedding_error_is_not_a_load_error(self):
        assert not isinstance(EmbeddingError("boom", stage="tokenize"), LoadError)

    def test_settings_and_input_errors_share_base(self):
        assert isinstance(InvalidConfigError("x"), BertEmbedderBaseException)
        assert isinstance(InvalidInputError("x"), BertEmbedderBaseException)


class TestExceptionProperties:
    def test_message_and_default_error_code(self):
        error = WeightLoadError("missing parameters: a.b")

        assert error.message == "missing parameters: a.b"
        assert str(error) == "missing parameters: a.b"
        assert error.error_code == "WeightLoadError"

    def test_custom_error_code(self):
        assert ConfigError("bad", error_code="CFG001").error_code == "CFG001"

    def test_embedding_error_carries_stage_and_cause(self):
        cause = InferenceError("index out of range")
        error = EmbeddingError("Inference failed", stage="inference", cause=cause)

        assert error.stage == "inference"
        assert error.cause is cause
        assert error.message == "Inference failed"

    def test_embedding_error_without_cause(self):
        error = EmbeddingError("bad input", stage="tokenize")
        assert error.cause is None
