"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from sondeview.__main__ import create_parser, main
from sondeview.config import ChartConfig
from sondeview.settings import reset_settings


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
    monkeypatch.delenv("SONDE_SETTINGS_PATH", raising=False)
    reset_settings()
    yield
    reset_settings()


class TestParser:
    def test_convert_args(self):
        args = create_parser().parse_args(["convert", "20", "850", "--zoom", "2", "--size", "640", "480"])
        assert args.temperature == 20.0
        assert args.pressure == 850.0
        assert args.zoom == 2.0
        assert args.size == [640, 480]

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            create_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "sondeview" in capsys.readouterr().out


class TestCommands:
    def test_no_command(self):
        assert main([]) == 0

    def test_background_json(self, tmp_path):
        out = tmp_path / "curves.json"
        assert main(["-q", "background", "--output", str(out), "--space", "xy"]) == 0
        data = json.loads(out.read_text())
        assert data["space"] == "xy"
        assert len(data["isentrops"]) == 17

    def test_background_with_config(self, tmp_path):
        config_path = tmp_path / "chart.json"
        ChartConfig(name="small").to_json(config_path)
        out = tmp_path / "curves.json"
        assert main(["-q", "background", "--config", str(config_path), "--output", str(out)]) == 0
        assert json.loads(out.read_text())["space"] == "tp"

    def test_background_missing_config(self, tmp_path):
        assert main(["-q", "background", "--config", str(tmp_path / "none.json")]) == 1

    def test_convert(self):
        assert main(["-q", "convert", "20", "850", "--dew-point", "10"]) == 0

    def test_convert_relative_humidity_in_percent(self, capsys):
        assert main(["-q", "convert", "20", "850", "--dew-point", "10"]) == 0
        line = next(l for l in capsys.readouterr().out.splitlines() if "Relative humidity" in l)
        assert "52.5" in line
        assert line.rstrip().endswith("%")

    def test_convert_warns_outside_chart(self, capsys):
        assert main(["-q", "convert", "60", "1000"]) == 0
        assert "outside the chart" in capsys.readouterr().out

    def test_settings_generate(self, tmp_path):
        path = tmp_path / "settings.toml"
        assert main(["-q", "settings", "--generate", str(path)]) == 0
        assert path.exists()

    def test_settings_show(self):
        assert main(["-q", "settings", "--show"]) == 0

    def test_config_generate_and_validate(self, tmp_path):
        path = tmp_path / "chart.json"
        assert main(["-q", "config", "--generate", str(path)]) == 0
        assert ChartConfig.from_json(path) == ChartConfig()
        assert main(["-q", "config", "--validate", str(path)]) == 0

    def test_config_validate_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"bounds": {"min_pressure": 2000.0}}))
        assert main(["-q", "config", "--validate", str(path)]) == 1

    def test_bad_settings_file(self, tmp_path):
        (tmp_path / "sonde_settings.toml").write_text("[window]\nnot_a_field = 1\n")
        assert main(["-q", "settings", "--show"]) == 1
