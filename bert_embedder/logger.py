import logging
import os
from typing import Optional, Set

from bert_embedder.utils.constants import DEFAULT_LOG_LEVEL

_logger_names: Set[str] = set()


def get_logger(
    name: str = "bert_embedder",
    log_file: Optional[str] = "bert_embedder.log",
    log_dir: Optional[str] = None,
) -> logging.Logger:
    if log_dir is None:
        log_dir = os.getenv("BERT_EMBEDDER_LOG_PATH", "logs")
    level = os.getenv("BERT_EMBEDDER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level, logging.INFO))
    _logger_names.add(name)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Console handler
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    # File handler; an empty folder turns file logging off
    if not log_dir:
        return logger
    if not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)
    if log_file is None:
        log_file = f"{name}.log"
    log_path = os.path.join(log_dir, log_file)

    if not any(
        isinstance(h, logging.FileHandler)
        and h.baseFilename == os.path.abspath(log_path)
        for h in logger.handlers
    ):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def set_log_level(level: str) -> None:
    """Apply ``level`` to every logger created through ``get_logger``."""
    numeric = getattr(logging, str(level).upper(), logging.INFO)
    for name in _logger_names:
        logging.getLogger(name).setLevel(numeric)
