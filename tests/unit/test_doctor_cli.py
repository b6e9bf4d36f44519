"""Tests for the configuration doctor CLI."""

import pytest

from deprecations.__main__ import main, run_doctor

CONFIG = """
referral_contact: team lead
reporters:
  development:
    type: log
  test:
    type: "null"
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "deprecations.yaml"
    path.write_text(CONFIG)
    return path


class TestRunDoctor:
    """Tests for run_doctor."""

    def test_all_environments(self, config_file, capsys):
        """Should list every configured environment."""
        assert run_doctor(str(config_file), check_all=True) == 0

        out = capsys.readouterr().out
        assert "Configuration: OK" in out
        assert "development: LogReporter" in out
        assert "test: NullReporter" in out
        assert "RESULT: PASSED" in out

    def test_missing_environment(self, config_file, capsys):
        """Unmapped environments fail the check."""
        assert run_doctor(str(config_file), environments=["production"]) == 1

        out = capsys.readouterr().out
        assert "production: MISSING" in out
        assert "RESULT: FAILED" in out

    def test_current_environment(self, config_file, capsys, monkeypatch):
        """Without arguments the current environment is checked."""
        monkeypatch.setenv("DEPRECATIONS_ENV", "test")

        assert run_doctor(str(config_file)) == 0
        assert "test: NullReporter" in capsys.readouterr().out

    def test_invalid_configuration(self, tmp_path, capsys):
        """Invalid files are reported, not raised."""
        path = tmp_path / "broken.yaml"
        path.write_text("reporters:\n  production:\n    type: remote\n")

        assert run_doctor(str(path)) == 1

        out = capsys.readouterr().out
        assert "Configuration: INVALID" in out
        assert "endpoint" in out


def test_main_exit_code(config_file, monkeypatch):
    """main() exits with run_doctor's code."""
    monkeypatch.setattr("deprecations.__main__.setup_logging", lambda **kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        main([str(config_file), "-e", "development", "-e", "staging"])

    assert exc_info.value.code == 1
