
from pathlib import Path
from typing import Dict, Any, List
import logging

logger = logging.getLogger(__name__)

PATH_KEYS = ["download_dir", "preview_dir", "thumbnail_dir", "extra_dir"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

class ConfigValidator:
    """
    Validates configuration structure and types.
    The artifact directories are only read, so they are never created here.
    """

    @staticmethod
    def validate(config: Dict[str, Any]) -> List[str]:
        errors = []

        # 1. Top-Level Sections
        if "paths" not in config:
            errors.append("Missing required section: 'paths'")

        # 2. Paths (type, existence is only reported)
        paths = config.get("paths", {})
        if not isinstance(paths, dict):
            errors.append("'paths' must be a dictionary")
        else:
            if "download_dir" not in paths:
                errors.append("Missing path config: 'paths.download_dir'")
            for p in PATH_KEYS:
                if p not in paths or paths[p] is None:
                    continue
                val = paths[p]
                if not isinstance(val, str):
                    errors.append(f"'paths.{p}' must be a string")
                    continue
                if val and not Path(val).is_dir():
                    logger.warning(f"Path 'paths.{p}' ({val}) does not exist")

        # 3. Extraction
        extraction = config.get("extraction", {})
        if extraction:
            if not isinstance(extraction, dict):
                errors.append("'extraction' must be a dictionary")
            else:
                ConfigValidator._check_bool(extraction, "external_tools", errors)
                for key in ["max_bytes", "max_output_bytes", "list_limit", "timeout_seconds"]:
                    ConfigValidator._check_positive_int(extraction, key, errors)
                for key in ["scratch_root", "app_name"]:
                    if extraction.get(key) is not None and not isinstance(extraction[key], str):
                        errors.append(f"'extraction.{key}' must be a string")
                if extraction.get("app_name") == "":
                    errors.append("'extraction.app_name' must not be empty")
                tools = extraction.get("tools")
                if tools is not None and not isinstance(tools, dict):
                    errors.append("'extraction.tools' must be a dictionary")

        # 4. Logging
        logging_cfg = config.get("logging", {})
        if logging_cfg:
            level = logging_cfg.get("level") if isinstance(logging_cfg, dict) else None
            if not isinstance(logging_cfg, dict):
                errors.append("'logging' must be a dictionary")
            elif level is not None and str(level).upper() not in LOG_LEVELS:
                errors.append(f"'logging.level' must be one of {LOG_LEVELS}, got {level}")

        if errors:
            logger.error(f"Config Validation Failed: {errors}")
        else:
            logger.info("Config OK: Extraction=%s", extraction)

        return errors

    @staticmethod
    def _check_bool(section: dict, key: str, errors: list):
        if key in section and not isinstance(section[key], bool):
            errors.append(f"Field '{key}' must be boolean, got {type(section[key]).__name__}")

    @staticmethod
    def _check_positive_int(section: dict, key: str, errors: list):
        if key not in section:
            return
        val = section[key]
        if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
            errors.append(f"Field '{key}' must be a positive integer, got {val!r}")
