# =============================================================================
# File: conftest.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import logging
import os

# Keep test runs from writing log files; set before any package import.
os.environ.setdefault("BERT_EMBEDDER_LOG_PATH", "")

import pytest
from safetensors.numpy import save as save_safetensors

from bert_embedder.config.config_loader import ConfigLoader
from tests.toy_model import TOY_CONFIG, build_tokenizer, build_weights


@pytest.fixture
def config_dict():
    return dict(TOY_CONFIG)


@pytest.fixture
def config_bytes(config_dict):
    return json.dumps(config_dict).encode("utf-8")


@pytest.fixture
def tokenizer_bytes():
    return build_tokenizer().to_str().encode("utf-8")


@pytest.fixture
def weight_tensors(config_dict):
    return build_weights(config_dict)


@pytest.fixture
def weights_bytes(weight_tensors):
    return save_safetensors(weight_tensors)


@pytest.fixture
def toy_buffers(weights_bytes, tokenizer_bytes, config_bytes):
    return weights_bytes, tokenizer_bytes, config_bytes


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    for var in (
        "BERT_EMBEDDER_ENV",
        "BERT_EMBEDDER_NORMALIZE",
        "BERT_EMBEDDER_SESSION_PROVIDER",
        "BERT_EMBEDDER_INTRA_OP_THREADS",
        "BERT_EMBEDDER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    ConfigLoader.clear_cache()
    yield
    ConfigLoader.clear_cache()


@pytest.fixture(autouse=True, scope="session")
def silence_noisy_loggers():
    """Raise log level for loggers that report expected failures during tests."""
    noisy_loggers = [
        "config_loader",
        "model_config",
        "embedder.loader",
        "embedder.tokenizer",
        "embedder.pipeline",
    ]
    previous_levels = {}
    for name in noisy_loggers:
        logger = logging.getLogger(name)
        previous_levels[name] = logger.level
        logger.setLevel(logging.CRITICAL)

    yield

    for name, level in previous_levels.items():
        logging.getLogger(name).setLevel(level)
