"""Application settings -- reads from environment and ``.env`` file.

All configuration is consolidated here.  Values are re-read on
``reload()`` so tests and the admin server can pick up edits without a
restart.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings:
    """Runtime configuration sourced from environment variables and ``.env``."""

    _DATA_DIR_ENV: ClassVar[str] = "INTERMEDIARY_DATA_DIR"

    def __init__(self) -> None:
        self.rebind()

    def rebind(self) -> None:
        """Re-resolve the ``.env`` location, then reload every value."""
        # Resolve .env path: explicit DOTENV_PATH > data_dir/.env > CWD/.env
        dotenv = os.getenv("DOTENV_PATH")
        if not dotenv:
            data_dir = os.getenv(self._DATA_DIR_ENV)
            dotenv = str(Path(data_dir) / ".env") if data_dir else ".env"
        self.env = EnvFile(dotenv)
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        e = self._read

        self.admin_port: int = int(e("ADMIN_PORT") or "8000")
        self.admin_secret: str = e("ADMIN_SECRET")

        raw_prompt = e("REALTIME_PROMPT_PATH")
        self.realtime_prompt_path: Path | None = Path(raw_prompt).expanduser() if raw_prompt else None

        level = (e("LOG_LEVEL") or "INFO").upper()
        self.log_level: str = level if level in _LOG_LEVELS else "INFO"

    # -- derived paths -----------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return Path(os.getenv(self._DATA_DIR_ENV, str(Path.home() / ".intermediary")))

    @property
    def prompts_dir(self) -> Path:
        return self.data_dir / "prompts"

    @property
    def plugins_config_path(self) -> Path:
        return self.data_dir / "plugins.json"

    @property
    def templates_dir(self) -> Path:
        return Path(__file__).resolve().parent.parent / "templates"

    # -- helpers -----------------------------------------------------------

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")

    def ensure_dirs(self) -> None:
        for d in (self.data_dir, self.prompts_dir):
            d.mkdir(parents=True, exist_ok=True)

    def write_env(self, **kwargs: str) -> None:
        self.env.write(**kwargs)
        self.reload()

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
        )


# Module-level singleton
cfg = Settings()


def _reset_cfg() -> None:
    # Modules bind ``cfg`` at import time, so refresh the shared instance in place.
    cfg.rebind()


register_singleton(_reset_cfg)
