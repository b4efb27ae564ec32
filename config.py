import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".typingzone"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"
DEFAULT_SEED_PATH = Path(__file__).parent / "data" / "words.json"

def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}

def load_config() -> Dict[str, Any]:
    """Load config from ~/.typingzone/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., TYPINGZONE_DB_PATH env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    database_cfg = config.get("database", {})
    db_path = os.getenv("TYPINGZONE_DB_PATH", database_cfg.get("path") or "")
    config["database"] = {
        "path": Path(db_path).expanduser() if db_path else CONFIG_DIR / "typingzone.db",
    }
    seed_cfg = config.get("seed", {})
    seed_path = os.getenv("TYPINGZONE_SEED_PATH", seed_cfg.get("path") or "")
    config["seed"] = {
        "path": Path(seed_path).expanduser() if seed_path else DEFAULT_SEED_PATH,
    }
    search_cfg = config.get("search", {})
    config["search"] = {
        "default_limit": int(os.getenv("TYPINGZONE_SEARCH_LIMIT", search_cfg.get("default_limit", 20))),
        "diagnostic_commands": _as_bool(os.getenv(
            "TYPINGZONE_SEARCH_DIAGNOSTICS",
            search_cfg.get("diagnostic_commands", False),
        )),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("TYPINGZONE_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('search', 'default_limit')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
