"""
Tests for CLI Commands
======================
Tests for the phonogen CLI interface in phonogen/cli.py.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from phonogen import __version__
from phonogen.cli import main
from phonogen.settings import CONFIG_ENV_VAR, reload_settings


def run_cli(*args, env=None):
    environ = {k: v for k, v in os.environ.items() if k != CONFIG_ENV_VAR}
    environ.update(env or {})
    return subprocess.run(
        [sys.executable, "-m", "phonogen", *args],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        env=environ,
    )


class TestCLIBasic:
    """Basic CLI tests."""

    def test_version_flag(self):
        result = run_cli("--version")
        assert result.returncode == 0
        assert f"phonogen {__version__}" in result.stdout

    def test_help_flag(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "generate" in result.stdout
        assert "varieties" in result.stdout
        assert "bench" in result.stdout

    def test_no_command_prints_help(self):
        result = run_cli()
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_one_word_per_line(self):
        result = run_cli("generate", "12", "3", "--seed", "7")
        assert result.returncode == 0, result.stderr
        words = result.stdout.splitlines()
        assert len(words) == 12
        for word in words:
            assert word
            assert word == word.lower()
            assert " " not in word

    def test_seed_replays(self):
        first = run_cli("gen", "8", "2", "-l", "fr", "--seed", "99")
        second = run_cli("g", "8", "2", "-l", "french", "--seed", "99")
        assert first.returncode == 0, first.stderr
        assert first.stdout == second.stdout

    def test_defaults_from_config(self, tmp_path):
        config = tmp_path / "app.yaml"
        config.write_text("""
generation:
  default_variety: metropolitan_french
  count: 4
  max_syllables: 1
  onset_probability: 0.5
  coda_probability: 0.5
  silent_letter_probability: 0.5
logging:
  level: WARNING
""", encoding="utf-8")
        result = run_cli("generate", "--seed", "1", env={CONFIG_ENV_VAR: str(config)})
        assert result.returncode == 0, result.stderr
        assert len(result.stdout.splitlines()) == 4

    def test_zero_max_syllables(self):
        result = run_cli("generate", "3", "0", "--seed", "1")
        assert result.returncode == 1
        assert "Error:" in result.stderr
        assert "max_syllables" in result.stderr

    def test_unknown_variety(self):
        result = run_cli("generate", "3", "1", "-l", "klingon")
        assert result.returncode == 1
        assert "Unknown variety" in result.stderr

    def test_quiet_verbose_prints_words(self):
        result = run_cli("-q", "generate", "5", "2", "--seed", "3", "-v")
        assert result.returncode == 0, result.stderr
        assert len(result.stdout.splitlines()) == 5


class TestOtherCommands:
    """Tests for varieties and bench."""

    def test_varieties_quiet(self):
        result = run_cli("-q", "varieties")
        assert result.returncode == 0
        assert result.stdout.splitlines() == ["american_english", "metropolitan_french"]

    def test_bench_quiet(self):
        result = run_cli("-q", "bench", "-n", "200", "-s", "2", "--seed", "1")
        assert result.returncode == 0, result.stderr
        assert float(result.stdout.strip()) > 0

    def test_bench_saves_json(self, tmp_path):
        target = tmp_path / "bench.json"
        result = run_cli("-q", "bench", "-n", "50", "--seed", "1", "--output", str(target))
        assert result.returncode == 0, result.stderr
        data = json.loads(target.read_text())
        assert data["stages"]["generate"]["items"] == 50
        assert data["stages"]["construct"]["count"] == 1
        assert data["total_seconds"] > 0

    def test_bench_report(self):
        result = run_cli("bench", "-n", "50", "--seed", "1", "--report")
        assert result.returncode == 0, result.stderr
        assert "PROFILING REPORT" in result.stdout
        assert "generate" in result.stdout


class TestMainInProcess:
    """Tests calling main() directly."""

    @pytest.fixture(autouse=True)
    def bundled_config(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        reload_settings()
        yield
        reload_settings()

    def test_generate(self, capsys):
        assert main(["generate", "3", "1", "--seed", "5"]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 3

    def test_first_word_matches_engine(self, capsys):
        from phonogen.phonology import Engine
        assert main(["generate", "1", "2", "-l", "en", "--seed", "11"]) == 0
        expected = Engine('en', seed=11).generate_word(2)
        assert capsys.readouterr().out.strip() == expected

    def test_error_exit_code(self, capsys):
        assert main(["generate", "1", "1", "-l", "nowhere"]) == 1
        assert "Error:" in capsys.readouterr().err
