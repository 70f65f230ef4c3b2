# =============================================================================
# File: log_sanitizer.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import re
from typing import Any, Sequence

_CONTROL_CHARS = re.compile(r"[\r\n\t\x00-\x1f\x7f-\x9f]")


def sanitize_for_log(value: Any, max_length: int = 200) -> str:
    """
    Sanitize input for safe logging by replacing control characters.

    Args:
        value: Input value to sanitize
        max_length: Longest string kept before truncation

    Returns:
        str: Sanitized string safe for logging
    """
    if value is None:
        return "None"

    sanitized = _CONTROL_CHARS.sub("_", str(value))

    # Limit length to prevent log flooding
    if len(sanitized) > max_length:
        sanitized = sanitized[: max_length - 3] + "..."

    return sanitized


def describe_batch(sentences: Sequence[Any], preview: int = 3) -> str:
    """Short, sanitized summary of a sentence batch for log lines."""
    shown = ", ".join(repr(sanitize_for_log(s, 40)) for s in list(sentences)[:preview])
    if len(sentences) > preview:
        shown += f", ... (+{len(sentences) - preview} more)"
    return f"{len(sentences)} sentence(s) [{shown}]"
