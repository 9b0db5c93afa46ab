"""Tests for the kodapost command line."""

from __future__ import annotations

import sys

import pytest
from typer.testing import CliRunner

from kodapost.cli import app
from kodapost.config import Settings
from kodapost.jobs import GenerateConfig, JsonFileJobStore, create_job

from conftest import JPEG_STUB

runner = CliRunner()


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    settings = Settings(log_dir=tmp_path / "logs", jobs_dir=tmp_path / "jobs")
    monkeypatch.setattr(sys.modules["kodapost.cli.app"], "setup_logging", lambda log_dir=None: None)
    monkeypatch.setattr("kodapost.cli.commands.load_settings", lambda: settings)
    for platform in ("INSTAGRAM", "TIKTOK", "LINKEDIN"):
        monkeypatch.delenv(f"{platform}_ACCESS_TOKEN", raising=False)
    return settings


class TestPlatformsCommand:

    def test_lists_adapters(self, settings):
        result = runner.invoke(app, ["platforms"])

        assert result.exit_code == 0
        assert "instagram" in result.output
        assert "linkedin" in result.output


class TestPublishCommand:

    def test_unknown_platform(self, settings, tmp_path):
        image = tmp_path / "a.jpg"
        image.write_bytes(JPEG_STUB)

        result = runner.invoke(app, ["publish", str(image), "-p", "myspace"])

        assert result.exit_code == 1
        assert "Unknown platform: myspace" in result.output

    def test_missing_image(self, settings, tmp_path):
        result = runner.invoke(app, ["publish", str(tmp_path / "nope.jpg"), "-p", "tiktok"])

        assert result.exit_code == 1
        assert "Image file not found" in result.output

    def test_nothing_connected(self, settings, tmp_path):
        image = tmp_path / "a.jpg"
        image.write_bytes(JPEG_STUB)

        result = runner.invoke(app, ["publish", str(image), str(image), "-p", "tiktok"])

        assert result.exit_code == 1
        assert "Nothing was published" in result.output


class TestJobCommands:

    def test_show_job(self, settings):
        store = JsonFileJobStore(settings.jobs_dir)
        job = create_job(
            store, "user_1", GenerateConfig(theme="Coffee", platforms=["tiktok"]), image_count=2
        )

        result = runner.invoke(app, ["job", job.id, "--owner", "user_1"])

        assert result.exit_code == 0
        assert '"pending"' in result.output

    def test_other_owner_sees_nothing(self, settings):
        store = JsonFileJobStore(settings.jobs_dir)
        job = create_job(
            store, "user_1", GenerateConfig(theme="Coffee", platforms=["tiktok"]), image_count=2
        )

        result = runner.invoke(app, ["job", job.id, "--owner", "user_2"])

        assert result.exit_code == 1
        assert "Job not found" in result.output

    def test_sweep_with_nothing_expired(self, settings):
        result = runner.invoke(app, ["sweep-jobs"])

        assert result.exit_code == 0
        assert "No expired jobs" in result.output
