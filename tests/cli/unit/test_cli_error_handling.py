"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from host_provisioner.cli import main


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option" in captured.err
    assert "--bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_configuration_returns_diagnostic(tmp_path: Path, capsys) -> None:
    exit_code = main(["--config", str(tmp_path / "configuration.properties")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Provisioning failed: configuration.properties not found!" in captured.err
    assert "Tip: Create" in captured.err
    assert "Traceback" not in captured.err
    assert "Setup complete!" not in captured.out
