
import shutil
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Unpackers for the legacy formats the standard library cannot read.
PROGRAMS = ("7z", "arc", "arj", "bsdtar", "lha", "unrar", "unzip")

class ExternalTools:
    """
    Locates external archive programs.
    Lookup order:
    1. extraction.tools.<name> from the config, when that file exists
    2. tools/<name>/<name> or tools/<name> under the working directory
    3. the system PATH
    """

    @staticmethod
    def check_binaries(config: Dict[str, Any] = None) -> Dict[str, bool]:
        config = config or {}
        found = {name: ExternalTools.find(name, config) for name in PROGRAMS}

        missing = [name for name, path in found.items() if path is None]
        if missing and config.get("extraction", {}).get("external_tools", True):
            logger.warning(f"Archive programs not found (looked in tools/ and PATH): {missing}")
        for name, path in found.items():
            if path:
                logger.debug(f"{name} found: {path}")
        return {name: path is not None for name, path in found.items()}

    @staticmethod
    def find(name: str, config: Dict[str, Any] = None) -> Optional[str]:
        config = config or {}
        tools = config.get("extraction", {}).get("tools") or {}
        return ExternalTools._find_binary(name, f"{name}.exe", tools.get(name))

    @staticmethod
    def _find_binary(name: str, win_name: str, config_path: Optional[str] = None) -> Optional[str]:
        if config_path and os.path.exists(config_path):
            return config_path

        executable = win_name if os.name == 'nt' else name
        tools_dir = Path.cwd() / "tools"
        for candidate in (tools_dir / name / executable, tools_dir / executable):
            if candidate.is_file():
                return str(candidate)

        return shutil.which(executable)
