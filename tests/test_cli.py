"""Tests for the typer CLI."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from portfolio_ai.cli import app

runner = CliRunner()

PROFILE = Path(__file__).resolve().parent.parent / "data" / "profile.yaml"


class TestPoliciesCommand:
    def test_lists_policies(self):
        result = runner.invoke(app, ["policies"])
        assert result.exit_code == 0
        for name in ("chat", "optimizer", "translate"):
            assert name in result.output


class TestPdfCommand:
    def test_writes_pdf(self, tmp_path):
        out = tmp_path / "resume.pdf"
        result = runner.invoke(app, ["pdf", "--profile", str(PROFILE), "--track", "it", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_bytes().startswith(b"%PDF")

    def test_unknown_track(self, tmp_path):
        result = runner.invoke(app, ["pdf", "--profile", str(PROFILE), "--track", "design"])
        assert result.exit_code == 1
        assert "Unknown track" in result.output

    def test_missing_profile(self, tmp_path):
        result = runner.invoke(app, ["pdf", "--profile", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestLayoutCommand:
    def test_prints_page_table(self):
        result = runner.invoke(app, ["layout", "--profile", str(PROFILE), "--verbose"])
        assert result.exit_code == 0, result.output
        assert "Layout" in result.output
        assert "Page 1" in result.output
