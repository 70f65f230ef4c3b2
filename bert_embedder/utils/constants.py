"""Project-wide constants for tokenization and numeric stability.

Keep this module minimal and import-safe to avoid circular imports.
"""

# Padding defaults used when the tokenizer document carries no padding section
DEFAULT_PAD_TOKEN: str = "[PAD]"
DEFAULT_PAD_ID: int = 0
DEFAULT_PAD_TYPE_ID: int = 0
DEFAULT_PAD_DIRECTION: str = "right"

# Default epsilon for BERT layer normalization
LAYER_NORM_EPS: float = 1e-12

# Output tensor names tried on ONNX encoders, in order of preference
ONNX_HIDDEN_STATE_OUTPUTS = ("last_hidden_state", "token_embeddings", "hidden_states")

# Level every package logger starts at when nothing else is configured
DEFAULT_LOG_LEVEL: str = "INFO"
