from pydantic import BaseModel, Field

from bert_embedder.utils.constants import DEFAULT_LOG_LEVEL


class AppConfig(BaseModel):
    name: str = Field(default="BERT Embedder")
    version: str = Field(default="0.1.0")


class RuntimeConfig(BaseModel):
    session_provider: str = Field(default="CPUExecutionProvider")
    intra_op_num_threads: int = Field(default=0, ge=0)


class EmbeddingConfig(BaseModel):
    normalize_embeddings: bool = Field(default=True)


class LoggingConfig(BaseModel):
    level: str = Field(default=DEFAULT_LOG_LEVEL)


class AppSettings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
