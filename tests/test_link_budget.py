# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for link budget and pass-level link quality."""
import math

import pytest

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.link_budget import (
    COMM_PRESETS,
    CommConfig,
    FrequencyBand,
    LinkBudgetParams,
    Modulation,
    PassLinkResult,
    atmospheric_loss_db,
    compute_link_budget,
    compute_link_margin_profile,
    compute_pass_link_budget,
    compute_waterfall_steps,
    free_space_path_loss_db,
    get_default_link_params,
    margin_status,
    slant_range_km,
    w_to_dbw,
)

UHF = COMM_PRESETS["CubeSat UHF"]


# ── Primitives ───────────────────────────────────────────────────────

class TestPrimitives:

    def test_w_to_dbw(self):
        assert w_to_dbw(1.0) == pytest.approx(0.0)
        assert w_to_dbw(2.0) == pytest.approx(3.0103, abs=1e-4)
        assert w_to_dbw(0.0) == pytest.approx(-300.0)

    def test_slant_range_at_zenith_is_altitude(self):
        assert slant_range_km(500.0, 90.0) == pytest.approx(500.0)

    def test_slant_range_grows_toward_horizon(self):
        assert slant_range_km(500.0, 5.0) == pytest.approx(2077.9, abs=1.0)
        assert slant_range_km(500.0, 0.0) > slant_range_km(500.0, 5.0)

    def test_fspl_reference(self):
        assert free_space_path_loss_db(1.0, 1e9) == pytest.approx(92.45, abs=0.01)

    def test_fspl_inverse_square(self):
        near = free_space_path_loss_db(500.0, 437e6)
        far = free_space_path_loss_db(1000.0, 437e6)
        assert far - near == pytest.approx(20 * math.log10(2))

    @pytest.mark.parametrize("freq,el,expected", [
        (437.0, 90.0, 0.5),
        (2200.0, 30.0, 2.0),
        (8200.0, 90.0, 2.0),
        (437.0, 0.0, 5.0),
        (25000.0, 90.0, 5.0),
    ])
    def test_atmospheric_loss(self, freq, el, expected):
        assert atmospheric_loss_db(freq, el) == pytest.approx(expected)

    @pytest.mark.parametrize("margin,status", [
        (10.0, "nominal"), (3.0, "nominal"), (1.5, "warning"), (0.0, "warning"), (-0.1, "critical"),
    ])
    def test_margin_status(self, margin, status):
        assert margin_status(margin) == status


class TestEnums:

    def test_band_frequencies(self):
        assert FrequencyBand.UHF.centre_frequency_hz == 437e6
        assert FrequencyBand.X.centre_frequency_hz == 8.2e9
        assert FrequencyBand.KA.noise_temperature_k == 75.0

    def test_modulation_thresholds(self):
        assert Modulation.BPSK.required_ebn0_db < Modulation.QPSK.required_ebn0_db < Modulation.PSK8.required_ebn0_db

    def test_presets(self):
        assert set(COMM_PRESETS) == {"CubeSat UHF", "CubeSat S-band", "SmallSat X-band", "LEO Broadband"}
        assert UHF == CommConfig()


# ── Itemised budget ──────────────────────────────────────────────────

class TestComputeLinkBudget:

    def _params(self) -> LinkBudgetParams:
        return get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 9.6)

    def test_default_params(self):
        p = self._params()
        assert p.rx_antenna_gain_dbi == 12.0
        assert p.system_noise_temp_k == 400.0
        assert p.fixed_losses_db == pytest.approx(3.5)

    def test_uhf_zenith(self):
        r = compute_link_budget(self._params(), 500.0, 90.0)
        assert r.eirp_dbw == pytest.approx(5.01, abs=0.01)
        assert r.fspl_db == pytest.approx(139.24, abs=0.02)
        assert r.total_loss_db - r.fspl_db == pytest.approx(3.5)
        assert r.link_margin_db == pytest.approx(27.4, abs=0.1)
        assert r.margin_status == "nominal"
        assert r.frequency_hz == 437e6

    def test_ebn0_equals_cn(self):
        r = compute_link_budget(self._params(), 500.0, 45.0)
        assert r.ebn0_db == r.cn_db
        assert r.cn_db == pytest.approx(r.rx_power_dbw - r.noise_floor_dbw)

    def test_higher_rate_costs_margin(self):
        slow = compute_link_budget(self._params(), 500.0, 45.0)
        fast = compute_link_budget(get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 96.0), 500.0, 45.0)
        assert slow.link_margin_db - fast.link_margin_db == pytest.approx(10.0)

    @pytest.mark.parametrize("altitude,elevation", [(0.0, 45.0), (500.0, -1.0), (500.0, 91.0)])
    def test_rejects_geometry(self, altitude, elevation):
        with pytest.raises(ValidationError):
            compute_link_budget(self._params(), altitude, elevation)

    def test_rejects_data_rate(self):
        with pytest.raises(ValidationError, match="data_rate_kbps"):
            compute_link_budget(get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 0.0), 500.0, 45.0)


class TestMarginProfile:

    def test_default_sweep(self):
        points = compute_link_margin_profile(get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 9.6), 500.0)
        assert len(points) == 86
        assert points[0].elevation_deg == 5.0
        assert points[-1].elevation_deg == 90.0

    def test_margin_improves_with_elevation(self):
        points = compute_link_margin_profile(get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 9.6), 500.0)
        margins = [p.link_margin_db for p in points]
        assert margins == sorted(margins)

    def test_max_rate_consistent_with_margin(self):
        params = get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 9.6)
        (point,) = compute_link_margin_profile(params, 500.0, 90.0, 90.0)
        assert point.max_data_rate_kbps == pytest.approx(9.6 * 10 ** (point.link_margin_db / 10), rel=1e-9)

    def test_rejects_step(self):
        with pytest.raises(ValidationError):
            compute_link_margin_profile(get_default_link_params(2.0, 2.0, FrequencyBand.UHF, 9.6), 500.0, step_deg=0.0)


# ── Pass budget ──────────────────────────────────────────────────────

class TestPassLinkBudget:

    def test_uhf_zenith_pass(self):
        r = compute_pass_link_budget(UHF, 500.0, 90.0, 600.0)
        assert isinstance(r, PassLinkResult)
        assert r.fspl_db == pytest.approx(139.24, abs=0.02)
        assert r.atmospheric_loss_db == pytest.approx(0.5)
        assert r.link_margin_db == pytest.approx(31.4, abs=0.1)
        assert r.margin_status == "nominal"

    def test_data_volume_excludes_overhead(self):
        r = compute_pass_link_budget(UHF, 500.0, 90.0, 600.0)
        assert r.data_volume_mb == pytest.approx(9600 * 585 / 8 / 1024**2)

    def test_short_pass_has_no_volume(self):
        assert compute_pass_link_budget(UHF, 500.0, 45.0, 10.0).data_volume_mb == 0.0

    def test_negative_margin_carries_nothing(self):
        r = compute_pass_link_budget(COMM_PRESETS["LEO Broadband"], 500.0, 5.0, 600.0)
        assert r.link_margin_db == pytest.approx(-21.5, abs=0.3)
        assert r.margin_status == "critical"
        assert r.data_volume_mb == 0.0

    def test_rejects_bad_config(self):
        with pytest.raises(ValidationError, match="frequency_mhz"):
            compute_pass_link_budget(CommConfig(frequency_mhz=0.0), 500.0, 45.0, 600.0)


class TestWaterfall:

    def test_uhf_steps(self):
        steps = compute_waterfall_steps(UHF, 500.0, 90.0)
        assert [s.label for s in steps] == [
            "Tx Power", "Sat Antenna", "FSPL", "Atm Loss", "GS Antenna", "Link Margin",
        ]
        fspl = steps[2]
        assert fspl.value_db < 0 and not fspl.is_gain
        assert steps[1].is_gain

    def test_cumulative_sum(self):
        steps = compute_waterfall_steps(UHF, 500.0, 45.0)
        assert steps[-2].cumulative_db == pytest.approx(sum(s.value_db for s in steps[:-1]))

    def test_margin_matches_pass_budget(self):
        steps = compute_waterfall_steps(UHF, 500.0, 60.0)
        r = compute_pass_link_budget(UHF, 500.0, 60.0, 600.0)
        assert steps[-1].value_db == pytest.approx(r.link_margin_db)
        assert steps[-1].cumulative_db == steps[-1].value_db

    def test_rain_fade_step(self):
        steps = compute_waterfall_steps(COMM_PRESETS["SmallSat X-band"], 500.0, 30.0)
        rain = next(s for s in steps if s.label == "Rain Fade")
        assert rain.value_db == -2.0
