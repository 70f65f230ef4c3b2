# =============================================================================
# File: pipeline.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedding pipeline: tokenize, encode, mean-pool, optionally normalize."""

import logging
import time
from typing import List, Optional, Sequence

from bert_embedder.config.appsettings import AppSettings
from bert_embedder.config.config_loader import ConfigLoader
from bert_embedder.exceptions import EmbeddingError, InferenceError, TokenizeError
from bert_embedder.logger import get_logger
from bert_embedder.models.embedding_request import EmbeddingRequest
from bert_embedder.models.embedding_response import EmbeddingResponse
from bert_embedder.services.embedder.encoder import EncoderModel
from bert_embedder.services.embedder.loader import LoadedModel, ModelLoader
from bert_embedder.services.embedder.tokenizer import TokenizerAdapter
from bert_embedder.utils.log_sanitizer import describe_batch
from bert_embedder.utils.pooling_strategies import PoolingStrategies

logger = get_logger("embedder.pipeline")


class EmbeddingPipeline:
    """Sentence embeddings from a loaded BERT encoder.

    The encoder and tokenizer are fixed for the lifetime of the pipeline.
    The only state that ever changes is the tokenizer's padding strategy,
    switched to batch-longest by the first non-empty call.
    """

    def __init__(
        self,
        encoder: EncoderModel,
        tokenizer: TokenizerAdapter,
        settings: Optional[AppSettings] = None,
    ):
        self._encoder = encoder
        self._tokenizer = tokenizer
        self._settings = settings

    @classmethod
    def from_loaded(
        cls, loaded: LoadedModel, settings: Optional[AppSettings] = None
    ) -> "EmbeddingPipeline":
        return cls(loaded.encoder, loaded.tokenizer, settings)

    @classmethod
    def from_buffers(
        cls,
        weights: bytes,
        tokenizer: bytes,
        config: bytes,
        settings: Optional[AppSettings] = None,
    ) -> "EmbeddingPipeline":
        """Build a pipeline from safetensors weights, tokenizer.json and config.json bytes.

        Raises:
            ConfigError, TokenizerError, WeightLoadError
        """
        return cls.from_loaded(ModelLoader.load(weights, tokenizer, config), settings)

    @classmethod
    def from_onnx_buffers(
        cls,
        model: bytes,
        tokenizer: bytes,
        config: bytes,
        settings: Optional[AppSettings] = None,
    ) -> "EmbeddingPipeline":
        """Build a pipeline whose encoder is an ONNX graph run by onnxruntime."""
        settings = settings or ConfigLoader.get_app_settings()
        loaded = ModelLoader.load_onnx(
            model,
            tokenizer,
            config,
            provider=settings.runtime.session_provider,
            intra_op_num_threads=settings.runtime.intra_op_num_threads,
        )
        return cls.from_loaded(loaded, settings)

    @property
    def hidden_size(self) -> int:
        return self._encoder.hidden_size

    @property
    def tokenizer(self) -> TokenizerAdapter:
        return self._tokenizer

    @property
    def encoder(self) -> EncoderModel:
        return self._encoder

    def get_embeddings(
        self, sentences: Sequence[str], normalize_embeddings: bool = False
    ) -> List[List[float]]:
        """Embed a batch of sentences, one H-length vector per sentence.

        Mean pooling averages over every padded position, so a sentence's
        vector depends on the other sentences in the same batch. With
        ``normalize_embeddings`` a vector whose norm is zero comes back as NaN.

        Raises:
            EmbeddingError: wrapping the ``TokenizeError`` or
                ``InferenceError`` of the failing stage.
        """
        if isinstance(sentences, (str, bytes)):
            cause = TokenizeError("Expected a sequence of sentences, got a single string")
            raise EmbeddingError(cause.message, stage="tokenize", cause=cause)
        if len(sentences) == 0:
            return []

        try:
            token_rows = self._tokenizer.encode_batch(sentences)
        except TokenizeError as e:
            raise EmbeddingError(
                f"Tokenization failed: {e.message}", stage="tokenize", cause=e
            ) from e

        runtime = self._encoder.runtime
        try:
            try:
                token_ids = runtime.matrix_from_ids(token_rows)
                logger.info("running inference on batch %s", runtime.dims(token_ids))
                hidden_states = self._encoder.forward(token_ids)
                logger.info("generated embeddings %s", runtime.dims(hidden_states))
                pooled = PoolingStrategies.apply(runtime, hidden_states, normalize_embeddings)
                result = runtime.to_list(pooled)
            except InferenceError:
                raise
            except Exception as e:
                raise InferenceError(f"Error generating embedding: {e}") from e
        except InferenceError as e:
            logger.error("Inference failed for %s: %s", describe_batch(sentences), e.message)
            raise EmbeddingError(
                f"Inference failed: {e.message}", stage="inference", cause=e
            ) from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Embedded %s", describe_batch(sentences))
        return result

    def embed(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Request/response wrapper around ``get_embeddings``.

        Call-time errors are reported in the response instead of raised.
        """
        response = EmbeddingResponse(
            data=[], success=True, message="", time_taken=0.0, dimension=self.hidden_size
        )
        start_time = time.time()

        normalize = request.normalize_embeddings
        if normalize is None:
            settings = self._settings or ConfigLoader.get_app_settings()
            normalize = settings.embedding.normalize_embeddings

        try:
            response.data = self.get_embeddings(request.sentences, normalize)
            response.message = "Embeddings generated successfully"
        except EmbeddingError as e:
            response.success = False
            response.message = e.message
            response.stage = e.stage
        response.time_taken = time.time() - start_time
        return response
