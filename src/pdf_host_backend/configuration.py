from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

CONFIG_ENV_VAR = "PDF_HOST_CONFIG"

DEFAULTS: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
        "cors_origins": ["*"],
    },
    "mongo": {
        "uri": "mongodb://localhost:27017/test",
        "database": "test",
        "collection": "books",
        "server_selection_timeout_ms": 5000,
    },
    "storage": {
        "upload_dir": "uploads",
        "chunk_size": 8 * 1024 * 1024,
    },
    "snapshot": {
        "path": "pdfFilesData.json",
    },
}

# Environment variable -> dotted config key
ENV_OVERRIDES: Dict[str, str] = {
    "HOST": "server.host",
    "PORT": "server.port",
    "CORS_ORIGINS": "server.cors_origins",
    "MONGO_URI": "mongo.uri",
    "MONGO_DB": "mongo.database",
    "MONGO_COLLECTION": "mongo.collection",
    "UPLOAD_DIR": "storage.upload_dir",
    "SNAPSHOT_PATH": "snapshot.path",
}


def _split_origins(value: str) -> List[str]:
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def _env_overrides(environ: Dict[str, str]) -> DictConfig:
    overrides = OmegaConf.create({})
    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        if key == "server.cors_origins":
            OmegaConf.update(overrides, key, _split_origins(value))
        elif key == "server.port":
            OmegaConf.update(overrides, key, int(value))
        else:
            OmegaConf.update(overrides, key, value)
    return overrides


def load_settings(config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> DictConfig:
    """
    Build the service configuration.

    Layers, lowest precedence first: built-in defaults, an optional YAML file
    (``config_path`` or the ``PDF_HOST_CONFIG`` environment variable), then
    individual environment variables listed in ``ENV_OVERRIDES``.
    """
    environ = dict(os.environ if environ is None else environ)
    base = OmegaConf.create(DEFAULTS)
    OmegaConf.set_struct(base, True)

    layers = [base]
    path = config_path or (Path(environ[CONFIG_ENV_VAR]) if environ.get(CONFIG_ENV_VAR) else None)
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found at {path}")
        layers.append(OmegaConf.load(path))
    layers.append(_env_overrides(environ))

    return DictConfig(OmegaConf.merge(*layers))


@lru_cache(maxsize=1)
def get_settings() -> DictConfig:
    load_dotenv()
    return load_settings()
