# ============================================================================
# scanconsole/base/config.py
# Console Configuration Management
# ============================================================================
#
# PURPOSE:
# Every tunable the console uses lives here: where the platform API is, how
# long a request may take, which header carries the workspace scope, where
# local state is kept, and how verbose logging is.
#
# KEY CONCEPTS:
# 1. Frozen dataclasses: each section is an immutable value
# 2. Environment variables: SCANCONSOLE_* overrides (e.g. SCANCONSOLE_API_URL)
# 3. Singleton: get_config() builds once, set_config() swaps it in tests
#
# ============================================================================

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


# ============================================================================
# Platform API Configuration
# ============================================================================

@dataclass(frozen=True)
class ApiConfig:
    # Every endpoint path is relative to this prefix
    base_url: str = "http://localhost:8888/api/v1"

    # Upper bound on any single call (seconds); exceeding it is a transport failure
    timeout: float = 30.0

    # Header the server reads the tenant filter from
    workspace_header: str = "X-Workspace-Id"

    # Paths containing this fragment are server-push log tails
    stream_path_pattern: str = "/worker/logs/stream"

    # Large enough to fetch every workspace in one page
    workspace_page_size: int = 100

    # Endpoint of the credential exchange
    login_path: str = "/login"


# ============================================================================
# Local State Storage Configuration
# ============================================================================

@dataclass(frozen=True)
class StorageConfig:
    # Hidden per-user folder, e.g. /home/alice/.scanconsole
    base_dir: Path = field(default_factory=lambda: Path.home() / ".scanconsole")

    # SQLite file holding the persisted session and workspace selection
    state_file: str = "state.db"

    @property
    def state_path(self) -> Path:
        return self.base_dir / self.state_file

    def ensure_dirs(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)


# ============================================================================
# Logging Configuration
# ============================================================================

@dataclass(frozen=True)
class LogConfig:
    # DEBUG / INFO / WARNING / ERROR
    level: str = "INFO"

    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    # Console output is always on; the file is optional
    file_enabled: bool = False
    file_name: str = "console.log"
    max_file_size_mb: int = 5
    backup_count: int = 3


# ============================================================================
# Master Configuration Container
# ============================================================================

@dataclass
class ConsoleConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log: LogConfig = field(default_factory=LogConfig)

    # Verbose logging and extra diagnostics
    debug: bool = False

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Build a ConsoleConfig from SCANCONSOLE_* environment variables."""
        api = ApiConfig(
            base_url=os.getenv("SCANCONSOLE_API_URL", "http://localhost:8888/api/v1").rstrip("/"),
            # Env vars are strings; timeouts and sizes need numbers
            timeout=float(os.getenv("SCANCONSOLE_API_TIMEOUT", "30")),
            workspace_header=os.getenv("SCANCONSOLE_WORKSPACE_HEADER", "X-Workspace-Id"),
            stream_path_pattern=os.getenv("SCANCONSOLE_STREAM_PATTERN", "/worker/logs/stream"),
            workspace_page_size=int(os.getenv("SCANCONSOLE_WORKSPACE_PAGE_SIZE", "100")),
        )

        base_dir = Path(os.getenv("SCANCONSOLE_DATA_DIR", str(Path.home() / ".scanconsole")))
        storage = StorageConfig(base_dir=base_dir)

        log = LogConfig(
            level=os.getenv("SCANCONSOLE_LOG_LEVEL", "INFO"),
            file_enabled=os.getenv("SCANCONSOLE_LOG_FILE", "false").lower() == "true",
        )

        return cls(
            api=api,
            storage=storage,
            log=log,
            debug=os.getenv("SCANCONSOLE_DEBUG", "false").lower() == "true",
        )


# ============================================================================
# Global Configuration Singleton
# ============================================================================

_config: Optional[ConsoleConfig] = None


def get_config() -> ConsoleConfig:
    """
    Get the global configuration instance.

    Built from the environment on first call, then reused.

    Returns:
        The shared ConsoleConfig instance
    """
    global _config
    if _config is None:
        _config = ConsoleConfig.from_env()
    return _config


def set_config(config: Optional[ConsoleConfig]) -> None:
    """
    Replace the global configuration (mainly used for testing).

    Passing None drops the cached instance so the next get_config()
    re-reads the environment.
    """
    global _config
    _config = config


def setup_logging(config: Optional[ConsoleConfig] = None) -> None:
    """
    Configure Python's logging system from LogConfig.

    Call this once at startup (the CLI does).

    Args:
        config: Optional config to use (defaults to global config)
    """
    cfg = config or get_config()

    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if cfg.log.file_enabled:
        from logging.handlers import RotatingFileHandler
        cfg.storage.ensure_dirs()
        file_handler = RotatingFileHandler(
            cfg.storage.base_dir / cfg.log.file_name,
            maxBytes=cfg.log.max_file_size_mb * 1024 * 1024,
            backupCount=cfg.log.backup_count,
        )
        handlers.append(file_handler)

    level = "DEBUG" if cfg.debug else cfg.log.level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=cfg.log.format,
        handlers=handlers,
        force=True,
    )
