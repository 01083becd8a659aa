"""Tests for gh_actions module."""

from pathlib import Path

import pytest

from gh_actions import error, escape_data, get_input, input_flag, mask, set_outputs


class TestInputs:
    """Test reading action inputs from the environment."""

    def test_get_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that INPUT_<NAME> is read and trimmed."""
        monkeypatch.setenv("INPUT_MOD_FOLDER_PATH", "  MyMod ")
        assert get_input("mod_folder_path") == "MyMod"

    def test_get_input_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that empty inputs fall back to the default."""
        monkeypatch.setenv("INPUT_NUGET_SERVER", "")
        assert get_input("nuget_server", "https://default") == "https://default"

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("TRUE", True), ("false", False), ("no", False)])
    def test_input_flag(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        """Test that only 'true' (any case) enables a flag."""
        monkeypatch.setenv("INPUT_PUSH", raw)
        assert input_flag("push", False) is expected

    def test_input_flag_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unset flag uses its default."""
        monkeypatch.delenv("INPUT_PUSH", raising=False)
        assert input_flag("push", True) is True


class TestCommands:
    """Test workflow command output."""

    def test_escape_data(self) -> None:
        """Test that newlines and percent signs are escaped."""
        assert escape_data("50%\r\nnext") == "50%25%0D%0Anext"

    def test_error_is_single_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that multiline errors stay on one command line."""
        error("a\nb")
        assert capsys.readouterr().out == "::error::a%0Ab\n"

    def test_mask_skips_blank(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that blank secrets are not registered."""
        mask("")
        mask("key")
        assert capsys.readouterr().out == "::add-mask::key\n"


class TestSetOutputs:
    """Test writing step outputs."""

    def test_writes_github_output(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test single-line and multiline outputs."""
        output = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))
        set_outputs({"success": "false", "error": "Validation failed:\n  - bad"})

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "success=false"
        assert lines[1].startswith("error<<ghadelimiter_")
        delimiter = lines[1].split("<<", 1)[1]
        assert lines[2:] == ["Validation failed:", "  - bad", delimiter]

    def test_appends(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that existing outputs are kept."""
        output = tmp_path / "output"
        output.write_text("earlier=1\n", encoding="utf-8")
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))
        set_outputs({"version": "1.0.0"})
        assert output.read_text(encoding="utf-8") == "earlier=1\nversion=1.0.0\n"

    def test_without_github_output(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that outputs are logged when not running in Actions."""
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        set_outputs({"success": "true"})
        assert "output success=true" in capsys.readouterr().out
