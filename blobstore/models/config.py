"""
Store configuration.

Loaded from environment variables (with an optional .env file) or a YAML
file. The config only names the medium; credentials are left to the
medium's own client library.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from blobstore.deletion import DEFAULT_MAX_CONCURRENCY
from blobstore.errors.models import ConfigurationError

logger = logging.getLogger("blobstore.config")

BACKENDS = ("local", "s3")

# Maps config fields to the environment variables that set them
ENV_KEYS = {
    "backend": "BLOBSTORE_BACKEND",
    "base_path": "BLOBSTORE_BASE_PATH",
    "bucket": "BLOBSTORE_S3_BUCKET",
    "prefix": "BLOBSTORE_PREFIX",
    "endpoint_url": "BLOBSTORE_S3_ENDPOINT_URL",
    "max_delete_concurrency": "BLOBSTORE_DELETE_CONCURRENCY",
    "timeout": "BLOBSTORE_TIMEOUT_SECONDS",
}


def load_env_file(env_file: str = ".env") -> None:
    """Load a .env file into os.environ without overriding variables already set."""
    path = Path(env_file)
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                os.environ.setdefault(key.strip(), value.strip())


@dataclass
class StoreConfig:
    """Which medium to use and how to address it."""

    backend: str = "local"              # local, s3
    base_path: str = "data/blobs"       # local only
    bucket: str = ""                    # s3 only
    prefix: str = ""                    # namespace root inside the medium
    region: Optional[str] = None        # s3 only; None lets boto3 resolve it
    endpoint_url: Optional[str] = None  # s3-compatible endpoints (MinIO, LocalStack)
    max_delete_concurrency: int = DEFAULT_MAX_CONCURRENCY
    timeout: Optional[float] = None     # per medium call, in seconds

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "StoreConfig":
        load_env_file(env_file)

        values: dict = {}
        for field_name, env_var in ENV_KEYS.items():
            value = os.getenv(env_var, "").strip()
            if value:
                values[field_name] = value

        region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        if region:
            values["region"] = region.strip()

        return cls._build(values, source="environment")

    @classmethod
    def from_yaml(cls, path: Path) -> "StoreConfig":
        path = Path(path)
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Can't load store config from {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Store config in {path} must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown store config keys in {path}: {sorted(unknown)}"
            )
        return cls._build(raw, source=str(path))

    @classmethod
    def _build(cls, values: dict, source: str) -> "StoreConfig":
        try:
            if values.get("max_delete_concurrency") is not None:
                values["max_delete_concurrency"] = int(values["max_delete_concurrency"])
            if values.get("timeout") is not None:
                values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric store setting in {source}: {e}") from e

        config = cls(**values)
        config.validate()
        logger.debug(f"Loaded store config from {source}: backend={config.backend}")
        return config

    def validate(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend '{self.backend}'. Known: {list(BACKENDS)}"
            )
        if self.backend == "s3" and not self.bucket:
            raise ConfigurationError("BLOBSTORE_S3_BUCKET is required for the s3 backend")
        if self.backend == "local" and not self.base_path:
            raise ConfigurationError("BLOBSTORE_BASE_PATH is required for the local backend")
        if self.max_delete_concurrency < 1:
            raise ConfigurationError(
                f"max_delete_concurrency must be >= 1, got {self.max_delete_concurrency}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
