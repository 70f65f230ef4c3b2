# =============================================================================
# File: config_loader.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from bert_embedder.config.appsettings import AppSettings
from bert_embedder.exceptions import InvalidConfigError, MissingConfigError
from bert_embedder.logger import get_logger, set_log_level
from bert_embedder.utils.constants import DEFAULT_LOG_LEVEL
from bert_embedder.utils.log_sanitizer import sanitize_for_log

logger = get_logger("config_loader")


class ConfigLoader:
    __appsettings: Optional[AppSettings] = None

    @staticmethod
    def get_app_settings() -> AppSettings:
        """
        Loads AppSettings from appsettings.json and environment-specific override in the same folder.
        Performs a deep merge for nested config sections, then applies environment variables.
        """
        if ConfigLoader.__appsettings is not None:
            return ConfigLoader.__appsettings

        data = ConfigLoader._load_config_data("appsettings.json", True)
        try:
            settings = AppSettings(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid application settings: {e}")

        settings.runtime.session_provider = os.getenv(
            "BERT_EMBEDDER_SESSION_PROVIDER", settings.runtime.session_provider
        )
        try:
            settings.runtime.intra_op_num_threads = int(
                os.getenv(
                    "BERT_EMBEDDER_INTRA_OP_THREADS", settings.runtime.intra_op_num_threads
                )
            )
        except ValueError as e:
            raise InvalidConfigError(f"BERT_EMBEDDER_INTRA_OP_THREADS must be an integer: {e}")
        settings.embedding.normalize_embeddings = (
            os.getenv(
                "BERT_EMBEDDER_NORMALIZE",
                str(settings.embedding.normalize_embeddings),
            ).lower()
            == "true"
        )
        level_override = os.getenv("BERT_EMBEDDER_LOG_LEVEL")
        if level_override:
            settings.logging.level = level_override
        settings.logging.level = settings.logging.level.upper()
        # loggers already start at the default; leave levels set elsewhere alone
        if level_override or settings.logging.level != DEFAULT_LOG_LEVEL:
            set_log_level(settings.logging.level)

        ConfigLoader.__appsettings = settings
        return settings

    @staticmethod
    def _load_config_data(
        config_file_name: str, check_env_file: bool = False, base_dir: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Reads ``config_file_name`` from ``base_dir`` (the loader's folder by default).
        With ``check_env_file`` and BERT_EMBEDDER_ENV set, ``<name>.<env><ext>`` is
        deep-merged over it; a missing override is only logged.
        """
        base_dir = base_dir or os.path.dirname(os.path.abspath(__file__))
        data = _read_json(os.path.join(base_dir, config_file_name), config_file_name)

        env = os.getenv("BERT_EMBEDDER_ENV")
        if not (check_env_file and env):
            return data

        name, ext = os.path.splitext(config_file_name)
        env_file = f"{name}.{env.lower()}{ext}"
        try:
            env_data = _read_json(os.path.join(base_dir, env_file), env_file)
        except MissingConfigError:
            logger.warning(
                "Environment config %s not found, using %s only",
                sanitize_for_log(env_file),
                config_file_name,
            )
            return data
        _deep_update(data, env_data)
        return data

    @staticmethod
    def clear_cache():
        """Drop the cached settings so the next call re-reads files and environment."""
        ConfigLoader.__appsettings = None
        logger.info("Configuration cache cleared")


def _read_json(path: str, display_name: str) -> Dict[str, Any]:
    logger.debug("Loading config from %s", display_name)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise MissingConfigError(f"Cannot access config file {display_name}: {e}")
    except ValueError as e:
        logger.error(
            "Invalid config format in %s: %s",
            sanitize_for_log(display_name),
            sanitize_for_log(str(e)),
        )
        raise InvalidConfigError(f"Config file format error in {display_name}: {e}")


def _deep_update(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
