# =============================================================================
# File: model_config.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from bert_embedder.exceptions import ConfigError
from bert_embedder.logger import get_logger
from bert_embedder.utils.constants import LAYER_NORM_EPS
from bert_embedder.utils.log_sanitizer import sanitize_for_log

logger = get_logger("model_config")

HiddenAct = Literal["gelu", "gelu_approximate", "gelu_new", "gelu_pytorch_tanh", "relu"]


class ModelConfig(BaseModel):
    """Architecture hyperparameters of a BERT encoder (``config.json``)."""

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    vocab_size: int = Field(..., gt=0)
    hidden_size: int = Field(..., gt=0)
    num_hidden_layers: int = Field(..., gt=0)
    num_attention_heads: int = Field(..., gt=0)
    intermediate_size: int = Field(..., gt=0)
    max_position_embeddings: int = Field(..., gt=0)
    type_vocab_size: int = Field(..., gt=0)
    hidden_act: HiddenAct = Field(default="gelu")
    layer_norm_eps: float = Field(default=LAYER_NORM_EPS, gt=0)
    pad_token_id: int = Field(default=0, ge=0)
    position_embedding_type: Literal["absolute"] = Field(default="absolute")
    model_type: Optional[str] = None

    @model_validator(mode="after")
    def _check_heads(self) -> "ModelConfig":
        if self.hidden_size % self.num_attention_heads != 0:
            raise ValueError(
                f"hidden_size ({self.hidden_size}) is not a multiple of "
                f"num_attention_heads ({self.num_attention_heads})"
            )
        return self

    @property
    def head_size(self) -> int:
        return self.hidden_size // self.num_attention_heads


def parse_model_config(data: bytes) -> ModelConfig:
    """Deserialize a JSON configuration buffer into a ``ModelConfig``.

    Raises:
        ConfigError: if the buffer is not valid JSON, misses a required
            field, or describes an impossible architecture.
    """
    try:
        config = ModelConfig.model_validate_json(data)
    except ValidationError as e:
        logger.error("Invalid model config: %s", sanitize_for_log(e))
        raise ConfigError(f"Invalid model configuration: {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Model configuration is not readable: {e}") from e

    logger.info(
        "Loaded model config: hidden_size=%d layers=%d heads=%d vocab=%d",
        config.hidden_size,
        config.num_hidden_layers,
        config.num_attention_heads,
        config.vocab_size,
    )
    return config
