
import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Tuple
from app.core.config_validator import ConfigValidator, PATH_KEYS

logger = logging.getLogger(__name__)

ENV_VAR = "ARTIFACT_INSPECTOR_ENV"
CONFIG_FILE_VAR = "ARTIFACT_INSPECTOR_CONFIG_FILE"
CONFIG_DIR_VAR = "ARTIFACT_INSPECTOR_CONFIG_DIR"

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


def load_config() -> Dict[str, Any]:
    """
    Loads configuration from YAML files and environment variables.
    Returns a status dictionary: status ("OK"/"ERROR"), error, env,
    source, config_path and the merged data.
    """
    env = get_env()
    config_dir, files, source, explicit = config_files(env)
    config_status = {
        "status": "OK",
        "error": None,
        "env": env,
        "source": source,
        "config_path": str(files[0]) if explicit else None,
        "data": {},
    }

    try:
        found = [p for p in files if p.exists()]
        if not found:
            config_status["status"] = "ERROR"
            config_status["error"] = f"No config files found in {config_dir} (tried: {[str(p) for p in files]})"
            return config_status

        data: Dict[str, Any] = {}
        for path in found:
            merge(data, read_yaml(path))
        if not explicit:
            config_status["config_path"] = str(found[-1])

        map_legacy_keys(data)

        errors = ConfigValidator.validate(data)
        config_status["data"] = data
        if errors:
            config_status["status"] = "ERROR"
            config_status["error"] = "Invalid Configuration:\n" + "\n".join(errors)
            return config_status

        resolve_paths(data, config_dir)
        extraction = data.get("extraction", {})
        logger.info(
            f"Config Loaded: download_dir={data['paths'].get('download_dir')}, "
            f"external_tools={extraction.get('external_tools', True)}"
        )
    except (OSError, yaml.YAMLError) as e:
        config_status["status"] = "ERROR"
        config_status["error"] = str(e)

    return config_status


def config_files(env: str) -> Tuple[Path, List[Path], str, bool]:
    """
    Picks the files to merge: an explicit file, or general.yaml plus
    <env>.yaml from the override or default directory.
    """
    override_file = os.environ.get(CONFIG_FILE_VAR)
    if override_file:
        path = Path(override_file)
        return path.parent, [path], f"ENV_FILE ({CONFIG_FILE_VAR})", True

    override_dir = os.environ.get(CONFIG_DIR_VAR)
    if override_dir:
        config_dir, source = Path(override_dir), f"ENV_DIR ({CONFIG_DIR_VAR})"
    else:
        config_dir, source = DEFAULT_CONFIG_DIR, "DEFAULT (repo/site-packages)"
    return config_dir, [config_dir / "general.yaml", config_dir / f"{env.lower()}.yaml"], source, False


def read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def merge(base: Dict[str, Any], override: Dict[str, Any]):
    """Environment files override single keys of a section, not the whole section."""
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(base.get(key), dict):
            merge(base[key], val)
        else:
            base[key] = val


def map_legacy_keys(data: Dict[str, Any]):
    # Older files set download_dir at the top level.
    if "download_dir" not in data:
        return
    val = data.pop("download_dir")
    paths = data.setdefault("paths", {})
    if not isinstance(paths, dict):
        return
    if "download_dir" in paths:
        logger.info("Ignoring top-level 'download_dir' because 'paths.download_dir' is set.")
        return
    paths["download_dir"] = val
    logger.warning("DEPRECATED: Top-level 'download_dir' found. Mapped to 'paths.download_dir'.")


def resolve_paths(data: Dict[str, Any], config_dir: Path):
    """Relative artifact directories are taken relative to the config directory."""
    paths = data.get("paths", {})
    for key in PATH_KEYS:
        raw = paths.get(key)
        if raw and not Path(raw).is_absolute():
            paths[key] = str(config_dir / raw)


def get_env() -> str:
    """Current environment from ARTIFACT_INSPECTOR_ENV, DEV by default."""
    return os.environ.get(ENV_VAR, "DEV").upper()
