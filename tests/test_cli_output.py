# tests/test_cli_output.py
from unittest.mock import patch

import pytest

from provisioner import cli
from provisioner.config import get_settings


@pytest.fixture
def fresh_settings(monkeypatch, tmp_path):
    """Real settings loading, without a .env file or cached instance."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_status_output_is_only_the_status(provisioner, registry, fresh_settings, capsys):
    registry.installed.add("billing-sync")

    with patch("provisioner.cli.build_provisioner", return_value=provisioner):
        code = cli.run(["billing-sync", "--status"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "SERVICE_STOPPED\n"
    assert "settings_loaded" not in captured.out
