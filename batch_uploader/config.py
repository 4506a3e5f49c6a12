"""Upload configuration, read once at startup."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

MB = 1024 * 1024

DEFAULT_BYTE_BUDGET = 10 * MB
DEFAULT_COOLDOWN_SECONDS = 3.0
DEFAULT_MAX_FILE_SIZE = 10 * MB
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for batch uploads."""
    endpoint_url: str = ""
    byte_budget: int = DEFAULT_BYTE_BUDGET
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    timeout: float = DEFAULT_TIMEOUT
    field_name: str = "files"

    def validate(self, require_endpoint: bool = True) -> "UploadConfig":
        """Raise ConfigError unless every value is usable."""
        if require_endpoint and not self.endpoint_url:
            raise ConfigError("upload endpoint is not set (UPLOAD_API_URL)")
        if require_endpoint and not self.endpoint_url.startswith(("http://", "https://")):
            raise ConfigError(f"upload endpoint must be an http(s) URL: {self.endpoint_url}")
        if isinstance(self.byte_budget, bool) or not isinstance(self.byte_budget, int) or self.byte_budget <= 0:
            raise ConfigError(f"byte budget must be a positive integer: {self.byte_budget!r}")
        if self.cooldown_seconds < 0:
            raise ConfigError(f"cooldown must not be negative: {self.cooldown_seconds!r}")
        if self.max_file_size <= 0:
            raise ConfigError(f"max file size must be positive: {self.max_file_size!r}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive: {self.timeout!r}")
        return self


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{key} is not a valid integer: {raw}") from exc


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{key} is not a valid number: {raw}") from exc


def load_config(
    env: Optional[Mapping[str, str]] = None,
    require_endpoint: bool = True,
    **overrides,
) -> UploadConfig:
    """
    Build configuration from environment variables.

    Args:
        env: Variables to read (defaults to os.environ)
        require_endpoint: Fail when UPLOAD_API_URL is missing
        **overrides: Explicit values (e.g. from CLI flags) taking precedence;
            None values are ignored

    Returns:
        Validated UploadConfig

    Raises:
        ConfigError: On missing or invalid values
    """
    env = os.environ if env is None else env

    values = {
        "endpoint_url": (env.get("UPLOAD_API_URL") or "").strip(),
        "byte_budget": _parse_int(env, "UPLOAD_BYTE_BUDGET", DEFAULT_BYTE_BUDGET),
        "cooldown_seconds": _parse_float(env, "UPLOAD_COOLDOWN_SECONDS", DEFAULT_COOLDOWN_SECONDS),
        "max_file_size": _parse_int(env, "UPLOAD_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
        "timeout": _parse_float(env, "UPLOAD_TIMEOUT", DEFAULT_TIMEOUT),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    return UploadConfig(**values).validate(require_endpoint=require_endpoint)
