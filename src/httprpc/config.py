# httprpc/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# ──────────────────────────────────────────────────────────────
# Defaults
# ──────────────────────────────────────────────────────────────
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_MOUNT_PATH = "/rpc"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ──────────────────────────────────────────────────────────────
# Settings
# ──────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ServerSettings:
    warn_on_duplicate: bool = True
    strict_errors: bool = False
    log_level: str | int = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    mount_path: str = DEFAULT_MOUNT_PATH

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Build settings from ``HTTPRPC_*`` variables (a ``.env`` file is loaded first)."""
        load_dotenv()
        return cls(
            warn_on_duplicate=_env_bool("HTTPRPC_WARN_ON_DUPLICATE", True),
            strict_errors=_env_bool("HTTPRPC_STRICT_ERRORS", False),
            log_level=os.getenv("HTTPRPC_LOG_LEVEL", "INFO"),
            host=os.getenv("HTTPRPC_HOST", DEFAULT_HOST),
            port=int(os.getenv("HTTPRPC_PORT", DEFAULT_PORT)),
            mount_path=os.getenv("HTTPRPC_MOUNT_PATH", DEFAULT_MOUNT_PATH),
        )
