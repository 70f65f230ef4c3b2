# =============================================================================
# File: exceptions.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Custom exceptions for the BERT embedder."""
from typing import Optional


class BertEmbedderBaseException(Exception):
    """Base exception for all embedder errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)


class LoadError(BertEmbedderBaseException):
    """Failed to build a pipeline from the supplied buffers."""

    pass


class ConfigError(LoadError):
    """Model configuration document is malformed or incompatible."""

    pass


class TokenizerError(LoadError):
    """Tokenizer document could not be deserialized."""

    pass


class WeightLoadError(LoadError):
    """Weights are unreadable or do not match the model configuration."""

    pass


class ModelException(BertEmbedderBaseException):
    """Exceptions raised while embedding a batch."""

    pass


class TokenizeError(ModelException):
    """A batch of sentences could not be encoded."""

    pass


class InferenceError(ModelException):
    """Model inference failed."""

    pass


class EmbeddingError(BertEmbedderBaseException):
    """Call-time failure of the embedding pipeline.

    Wraps the stage error (``TokenizeError`` or ``InferenceError``) in
    ``cause`` and names the failing stage in ``stage``.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        cause: Optional[ModelException] = None,
        error_code: Optional[str] = None,
    ):
        self.stage = stage
        self.cause = cause
        super().__init__(message, error_code)


class ConfigurationException(BertEmbedderBaseException):
    """Application settings errors."""

    pass


class InvalidConfigError(ConfigurationException):
    """Invalid configuration parameters."""

    pass


class MissingConfigError(ConfigurationException):
    """Required configuration missing."""

    pass


class ValidationException(BertEmbedderBaseException):
    """Input validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Invalid input parameters."""

    pass
