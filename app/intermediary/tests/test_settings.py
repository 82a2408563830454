"""Tests for the Settings object."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.intermediary.config.settings import Settings, cfg


class TestSettings:
    def test_defaults(self, data_dir: Path) -> None:
        s = Settings()
        assert s.admin_port == 8000
        assert s.admin_secret == ""
        assert s.realtime_prompt_path is None
        assert s.log_level == "INFO"
        assert s.data_dir == data_dir
        assert s.prompts_dir == data_dir / "prompts"
        assert s.plugins_config_path == data_dir / "plugins.json"
        assert (s.templates_dir / "realtime_backend_prompt.md").is_file()

    def test_env_vars(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("ADMIN_PORT", "9100")
        monkeypatch.setenv("REALTIME_PROMPT_PATH", str(tmp_path / "p.md"))
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = Settings()
        assert s.admin_port == 9100
        assert s.realtime_prompt_path == tmp_path / "p.md"
        assert s.log_level == "DEBUG"

    def test_unknown_log_level_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert Settings().log_level == "INFO"

    def test_dotenv_file_wins_over_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("ADMIN_PORT=7000\n", encoding="utf-8")
        monkeypatch.setenv("ADMIN_PORT", "9100")
        assert Settings().admin_port == 7000

    def test_write_env_reloads(self, tmp_path: Path) -> None:
        cfg.write_env(ADMIN_SECRET="abc")
        assert cfg.admin_secret == "abc"
        assert "ADMIN_SECRET=abc" in (tmp_path / ".env").read_text(encoding="utf-8")

    def test_ensure_dirs(self, data_dir: Path) -> None:
        cfg.ensure_dirs()
        assert (data_dir / "prompts").is_dir()
