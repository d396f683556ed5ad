# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the command-line interface: sub-commands, output files, exit codes."""
import csv
import json
import logging

import pytest

from orbitwright.cli import (
    EXIT_FILE_ERROR,
    EXIT_VALIDATION_ERROR,
    _parse_overrides,
    _parse_station,
    build_parser,
    main,
)
from orbitwright.domain.errors import ValidationError

EPOCH = "2026-03-20T00:00:00Z"


def _mission_file(tmp_path, **extra):
    data = {
        "epoch": EPOCH,
        "orbit": {"altitude_km": 550, "inclination_deg": 97.6, "raan_deg": 10},
        "ground_stations": [{"name": "Svalbard", "lat_deg": 78.23, "lon_deg": 15.39, "min_elevation_deg": 5}],
    }
    data.update(extra)
    path = tmp_path / "mission.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


# ── Argument helpers ─────────────────────────────────────────────────

class TestHelpers:

    def test_overrides(self):
        assert _parse_overrides(["drag=off", "srp=true", "solar_activity=high"]) == {
            "drag": False, "srp": True, "solar_activity": "high",
        }

    def test_override_without_value(self):
        with pytest.raises(ValidationError):
            _parse_overrides(["drag"])

    def test_station(self):
        gs = _parse_station("Delft, 52.0, 4.37, 5, 20")
        assert gs.name == "Delft"
        assert gs.min_elevation_deg == 5.0
        assert gs.alt_m == 20.0

    def test_station_default_mask(self):
        assert _parse_station("Delft,52,4.37").min_elevation_deg == 10.0

    @pytest.mark.parametrize("text", ["Delft,52", "Delft,north,4.37"])
    def test_station_invalid(self, text):
        with pytest.raises(ValidationError):
            _parse_station(text)

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ── Sub-commands ─────────────────────────────────────────────────────

class TestPropagate:

    def test_keplerian_from_flags(self, capsys):
        main(["propagate", "--altitude", "500", "--inclination", "53", "--epoch", EPOCH,
              "--duration", "600"])
        out = capsys.readouterr().out
        assert "Mode: keplerian (Keplerian)" in out
        assert "Samples: 21 over 600 s" in out

    def test_numerical_with_output(self, tmp_path, capsys):
        output = tmp_path / "traj.json"
        main(["propagate", "--mission", _mission_file(tmp_path), "--mode", "numerical-j2",
              "--orbits", "1", "--step", "60", "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["mode"] == "numerical-j2"
        assert data["force_models"] == ["TwoBodyGravity", "J2Perturbation"]
        assert data["samples"][0]["time"].startswith("2026-03-20T00:00:00")
        assert len(data["ground_track"]) == len(data["samples"])
        assert "Wrote" in capsys.readouterr().out

    def test_perturbation_override(self, tmp_path):
        output = tmp_path / "traj.json"
        main(["propagate", "--mission", _mission_file(tmp_path), "--mode", "numerical-j2",
              "--perturb", "drag=on", "--duration", "120", "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert "AtmosphericDragForce" in data["force_models"]

    def test_missing_orbit(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["propagate", "--altitude", "500"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
        assert "--inclination" in capsys.readouterr().err

    def test_invalid_duration(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["propagate", "--altitude", "500", "--inclination", "53", "--duration", "-5"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR

    def test_missing_mission_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["propagate", "--mission", str(tmp_path / "absent.json")])
        assert exc_info.value.code == EXIT_FILE_ERROR
        assert "not found" in capsys.readouterr().err.lower()

    def test_verbose_logs_mission_load(self, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="orbitwright.cli"):
            main(["-v", "propagate", "--mission", _mission_file(tmp_path), "--duration", "60"])
        assert "Loaded mission" in caplog.text


class TestConstellation:

    def test_preset(self, capsys):
        main(["constellation", "--preset", "iridium-like"])
        out = capsys.readouterr().out
        assert "Walker star 86.4:66/6/2" in out
        assert "Satellites: 66 (11 per plane)" in out

    def test_explicit_with_csv(self, tmp_path, capsys):
        path = tmp_path / "sats.csv"
        main(["constellation", "--total", "12", "--planes", "3", "--phasing", "1",
              "--altitude", "700", "--inclination", "60", "--export-csv", str(path)])
        with open(path, newline="", encoding="utf-8") as f:
            assert len(list(csv.reader(f))) == 13
        assert "Exported 12 satellites" in capsys.readouterr().out

    def test_missing_fields(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["constellation", "--total", "12"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
        assert "--planes" in capsys.readouterr().err

    def test_invalid_pattern(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["constellation", "--total", "10", "--planes", "3",
                  "--altitude", "700", "--inclination", "60"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR

    def test_from_mission_file(self, tmp_path, capsys):
        path = _mission_file(
            tmp_path,
            constellation={"preset": "small-sso"},
            spacecraft={"mass_kg": 6.0, "size": "6U"},
        )
        main(["constellation", "--mission", path])
        out = capsys.readouterr().out
        assert "Walker delta 97.4:12/4/1" in out
        assert "Total mass: 72.0 kg" in out

    def test_flags_override_mission(self, tmp_path, capsys):
        path = _mission_file(
            tmp_path,
            constellation={"preset": "small-sso"},
            spacecraft={"mass_kg": 6.0},
        )
        main(["constellation", "--mission", path, "--preset", "iridium-like", "--mass", "10"])
        out = capsys.readouterr().out
        assert "Walker star 86.4:66/6/2" in out
        assert "Total mass: 660.0 kg" in out

    def test_mission_without_constellation_section(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["constellation", "--mission", _mission_file(tmp_path)])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
        assert "constellation section" in capsys.readouterr().err


class TestThermal:

    def test_summary(self, capsys):
        main(["thermal", "--altitude", "500"])
        out = capsys.readouterr().out
        assert "Black Anodized Aluminum" in out
        assert "Consider heater or MLI for cold survival" in out

    def test_transient_output(self, tmp_path):
        output = tmp_path / "thermal.json"
        main(["thermal", "--altitude", "500", "--material", "white-paint", "--transient",
              "--size", "6U", "--mass", "10", "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert len(data["profile"]) == 360
        assert len(data["eclipse_intervals"]) == 1

    def test_bad_size(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["thermal", "--altitude", "500", "--size", "27U"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR

    def test_from_mission_file(self, tmp_path, capsys):
        path = _mission_file(
            tmp_path,
            spacecraft={"mass_kg": 8.0, "size": "6U"},
            thermal={"material": "white-paint", "internal_power_w": 5.0},
        )
        from_mission = tmp_path / "mission_thermal.json"
        from_flags = tmp_path / "flag_thermal.json"
        main(["thermal", "--mission", path, "-o", str(from_mission)])
        assert "White Paint" in capsys.readouterr().out
        main(["thermal", "--altitude", "550", "--material", "white-paint",
              "--internal-power", "5", "--size", "6U", "--mass", "8", "-o", str(from_flags)])

        a = json.loads(from_mission.read_text(encoding="utf-8"))
        b = json.loads(from_flags.read_text(encoding="utf-8"))
        assert a["summary"]["hot_case_c"] == pytest.approx(b["summary"]["hot_case_c"])
        assert a["summary"]["cold_case_c"] == pytest.approx(b["summary"]["cold_case_c"])
        assert a["eclipse_fraction"] == pytest.approx(b["eclipse_fraction"])

    def test_flags_override_mission(self, tmp_path, capsys):
        path = _mission_file(tmp_path, thermal={"material": "white-paint"})
        main(["thermal", "--mission", path, "--material", "black-anodized", "--altitude", "500"])
        assert "Black Anodized Aluminum" in capsys.readouterr().out

    def test_altitude_or_mission_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["thermal"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
        assert "--altitude" in capsys.readouterr().err

    def test_unknown_material_in_mission(self, tmp_path):
        path = _mission_file(tmp_path, thermal={"material": "vantablack"})
        with pytest.raises(SystemExit) as exc_info:
            main(["thermal", "--mission", path])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR


class TestLifetime:

    def test_compliant(self, capsys):
        main(["lifetime", "--altitude", "300"])
        assert "Compliant" in capsys.readouterr().out

    def test_capped(self, capsys):
        main(["lifetime", "--altitude", "1000"])
        out = capsys.readouterr().out
        assert "Lifetime: > 100 years" in out
        assert "Fails the 25-year and 5-year rules" in out

    def test_output(self, tmp_path):
        output = tmp_path / "life.json"
        main(["lifetime", "--altitude", "550", "--activity", "high", "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["compliance"]["solar_activity"] == "high"

    def test_bad_activity(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["lifetime", "--altitude", "550", "--activity", "extreme"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR

    def test_bad_mass(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["lifetime", "--altitude", "550", "--mass", "0"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR


class TestLink:

    def test_waterfall(self, capsys):
        main(["link", "--altitude", "500"])
        out = capsys.readouterr().out
        assert "FSPL" in out
        assert "(nominal)" in out

    def test_bad_elevation(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["link", "--altitude", "500", "--elevation", "120"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR


class TestPasses:

    def test_stations_from_mission(self, tmp_path, capsys):
        csv_path = tmp_path / "passes.csv"
        output = tmp_path / "passes.json"
        main(["passes", "--mission", _mission_file(tmp_path), "--export-csv", str(csv_path),
              "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["metrics"]["total_passes"] == len(data["passes"]) > 0
        assert data["passes"][0]["link"] is not None
        with open(csv_path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert len(rows) == len(data["passes"]) + 1
        assert "Svalbard" in capsys.readouterr().out

    def test_station_flag(self, capsys):
        main(["passes", "--altitude", "550", "--inclination", "97.6", "--epoch", EPOCH,
              "--station", "Svalbard,78.23,15.39,5", "--days", "0.5", "--preset", "CubeSat S-band"])
        assert "passes," in capsys.readouterr().out

    def test_no_station(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["passes", "--altitude", "550", "--inclination", "97.6"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
        assert "--station" in capsys.readouterr().err


class TestLunar:

    def test_orbit_budget(self, capsys):
        main(["lunar"])
        out = capsys.readouterr().out
        assert "TLI:" in out
        assert "Lunar orbit period: 117.8 min" in out

    def test_free_return_output(self, tmp_path, capsys):
        output = tmp_path / "lunar.json"
        main(["lunar", "--mission-type", "free-return", "-o", str(output)])
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["params"]["mission_type"] == "free-return"
        assert data["result"]["loi_delta_v_ms"] == 0.0
        assert data["result"]["free_return_period_days"] == 10.0
        assert "Free-return loop: 10 days" in capsys.readouterr().out

    def test_bad_isp(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["lunar", "--isp", "0"])
        assert exc_info.value.code == EXIT_VALIDATION_ERROR
