# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Space-to-ground link budget.

Free-space path loss over the slant range to a ground station,
elevation-dependent atmospheric loss, received power against the kTB
noise floor, Eb/N0 margin and achievable data rate.
"""
import math
from dataclasses import dataclass
from enum import Enum

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import R_EARTH_KM

SPEED_OF_LIGHT = 299792458.0   # m/s
K_BOLTZMANN = 1.380649e-23     # J/K
BOLTZMANN_DBW = 228.6          # −10·log10(k), dBW/K/Hz

NOMINAL_MARGIN_DB = 3.0
PASS_OVERHEAD_S = 15.0
MIN_AIRMASS_ELEVATION_DEG = 5.0
MAX_AIRMASS = 10.0


class FrequencyBand(Enum):
    UHF = "UHF"
    S = "S-band"
    X = "X-band"
    KA = "Ka-band"

    @property
    def centre_frequency_hz(self) -> float:
        return _BAND_FREQUENCIES[self]

    @property
    def noise_temperature_k(self) -> float:
        return _BAND_NOISE_TEMPS[self]


_BAND_FREQUENCIES = {
    FrequencyBand.UHF: 437e6,
    FrequencyBand.S: 2.2e9,
    FrequencyBand.X: 8.2e9,
    FrequencyBand.KA: 26.5e9,
}

_BAND_NOISE_TEMPS = {
    FrequencyBand.UHF: 290.0,
    FrequencyBand.S: 150.0,
    FrequencyBand.X: 75.0,
    FrequencyBand.KA: 75.0,
}


class Modulation(Enum):
    BPSK = "BPSK"
    QPSK = "QPSK"
    PSK8 = "8PSK"

    @property
    def required_ebn0_db(self) -> float:
        """Eb/N0 for ~1e-5 BER including implementation margin."""
        return _MODULATION_EBN0[self]


_MODULATION_EBN0 = {
    Modulation.BPSK: 10.0,
    Modulation.QPSK: 12.0,
    Modulation.PSK8: 14.0,
}


@dataclass(frozen=True)
class CommConfig:
    """Satellite transmitter, ground receiver and data link settings."""
    frequency_mhz: float = 437.0
    frequency_band: FrequencyBand = FrequencyBand.UHF
    tx_power_w: float = 2.0
    sat_antenna_gain_dbi: float = 2.0
    gs_antenna_gain_dbi: float = 12.0
    gs_noise_temp_k: float = 290.0
    min_operational_el_deg: float = 10.0
    data_rate_kbps: float = 9.6
    modulation: Modulation = Modulation.BPSK
    rain_fade_db: float = 0.0


COMM_PRESETS: dict[str, CommConfig] = {
    "CubeSat UHF": CommConfig(),
    "CubeSat S-band": CommConfig(
        frequency_mhz=2200.0, frequency_band=FrequencyBand.S, tx_power_w=5.0,
        sat_antenna_gain_dbi=6.0, gs_antenna_gain_dbi=20.0, gs_noise_temp_k=150.0,
        data_rate_kbps=1000.0, modulation=Modulation.QPSK,
    ),
    "SmallSat X-band": CommConfig(
        frequency_mhz=8200.0, frequency_band=FrequencyBand.X, tx_power_w=10.0,
        sat_antenna_gain_dbi=18.0, gs_antenna_gain_dbi=34.0, gs_noise_temp_k=75.0,
        data_rate_kbps=50000.0, modulation=Modulation.QPSK, rain_fade_db=2.0,
    ),
    "LEO Broadband": CommConfig(
        frequency_mhz=12000.0, frequency_band=FrequencyBand.KA, tx_power_w=20.0,
        sat_antenna_gain_dbi=30.0, gs_antenna_gain_dbi=38.0, gs_noise_temp_k=75.0,
        data_rate_kbps=100000.0, modulation=Modulation.PSK8, rain_fade_db=3.0,
    ),
}


@dataclass(frozen=True)
class LinkBudgetParams:
    """Itemised link budget inputs."""
    tx_power_w: float
    tx_antenna_gain_dbi: float
    frequency_band: FrequencyBand
    data_rate_kbps: float
    rx_antenna_gain_dbi: float = 12.0
    system_noise_temp_k: float = 400.0
    required_ebn0_db: float = 9.6
    atmospheric_loss_db: float = 0.5
    rain_loss_db: float = 0.0
    pointing_loss_db: float = 1.0
    misc_loss_db: float = 2.0

    @property
    def fixed_losses_db(self) -> float:
        return self.atmospheric_loss_db + self.rain_loss_db + self.pointing_loss_db + self.misc_loss_db


def get_default_link_params(
    tx_power_w: float,
    tx_antenna_gain_dbi: float,
    frequency_band: FrequencyBand,
    data_rate_kbps: float,
) -> LinkBudgetParams:
    """Budget for a spacecraft radio against a typical 12 dBi, 400 K ground station."""
    return LinkBudgetParams(
        tx_power_w=tx_power_w,
        tx_antenna_gain_dbi=tx_antenna_gain_dbi,
        frequency_band=frequency_band,
        data_rate_kbps=data_rate_kbps,
    )


@dataclass(frozen=True)
class LinkBudgetResult:
    eirp_dbw: float
    fspl_db: float
    total_loss_db: float
    rx_power_dbw: float
    noise_floor_dbw: float
    cn_db: float
    ebn0_db: float
    link_margin_db: float
    slant_range_km: float
    frequency_hz: float
    margin_status: str


@dataclass(frozen=True)
class LinkMarginPoint:
    elevation_deg: float
    link_margin_db: float
    ebn0_db: float
    slant_range_km: float
    fspl_db: float
    max_data_rate_kbps: float


@dataclass(frozen=True)
class PassLinkResult:
    link_margin_db: float
    cn0_dbhz: float
    max_data_rate_kbps: float
    fspl_db: float
    slant_range_km: float
    atmospheric_loss_db: float
    data_volume_mb: float
    margin_status: str


@dataclass(frozen=True)
class WaterfallStep:
    label: str
    value_db: float
    cumulative_db: float
    is_gain: bool


# --- Primitives ---

def w_to_dbw(watts: float) -> float:
    """Watts to dBW, floored at 1e-30 W."""
    return 10.0 * math.log10(max(watts, 1e-30))


def slant_range_km(altitude_km: float, elevation_deg: float) -> float:
    """Ground station to satellite distance.

    d = −Re·sin(el) + √(Re²·sin²(el) + 2·Re·h + h²)
    """
    re = R_EARTH_KM
    sin_el = math.sin(math.radians(elevation_deg))
    return -re * sin_el + math.sqrt(re * re * sin_el * sin_el + 2.0 * re * altitude_km + altitude_km**2)


def free_space_path_loss_db(distance_km: float, frequency_hz: float) -> float:
    """FSPL(dB) = 20·log10(4π·d·f/c)."""
    return 20.0 * math.log10(4.0 * math.pi * distance_km * 1000.0 * frequency_hz / SPEED_OF_LIGHT)


def atmospheric_loss_db(frequency_mhz: float, elevation_deg: float) -> float:
    """Zenith attenuation by band scaled by airmass 1/sin(el).

    Elevation is floored at 5° and airmass capped at 10.
    """
    el = math.radians(max(elevation_deg, MIN_AIRMASS_ELEVATION_DEG))
    airmass = min(1.0 / math.sin(el), MAX_AIRMASS)
    if frequency_mhz < 1000:
        zenith = 0.5
    elif frequency_mhz < 4000:
        zenith = 1.0
    elif frequency_mhz < 12000:
        zenith = 2.0
    elif frequency_mhz < 20000:
        zenith = 3.5
    else:
        zenith = 5.0
    return zenith * airmass


def margin_status(margin_db: float) -> str:
    if margin_db >= NOMINAL_MARGIN_DB:
        return "nominal"
    if margin_db >= 0.0:
        return "warning"
    return "critical"


def _validate_geometry(altitude_km: float, elevation_deg: float) -> None:
    if not math.isfinite(altitude_km) or altitude_km <= 0:
        raise ValidationError(f"altitude_km must be positive, got {altitude_km}")
    if not 0.0 <= elevation_deg <= 90.0:
        raise ValidationError(f"elevation_deg must be in [0, 90], got {elevation_deg}")


def _validate_params(params: LinkBudgetParams) -> None:
    if not params.data_rate_kbps > 0:
        raise ValidationError(f"data_rate_kbps must be > 0, got {params.data_rate_kbps}")
    if not params.system_noise_temp_k > 0:
        raise ValidationError(f"system_noise_temp_k must be > 0, got {params.system_noise_temp_k}")


def _validate_comm(comm: CommConfig) -> None:
    if not comm.frequency_mhz > 0:
        raise ValidationError(f"frequency_mhz must be > 0, got {comm.frequency_mhz}")
    if not comm.data_rate_kbps > 0:
        raise ValidationError(f"data_rate_kbps must be > 0, got {comm.data_rate_kbps}")
    if not comm.gs_noise_temp_k > 0:
        raise ValidationError(f"gs_noise_temp_k must be > 0, got {comm.gs_noise_temp_k}")


# --- Itemised budget ---

def compute_link_budget(
    params: LinkBudgetParams,
    altitude_km: float,
    elevation_deg: float,
) -> LinkBudgetResult:
    """Full downlink budget at one elevation.

    Noise bandwidth equals the data rate, so Eb/N0 equals C/N.
    """
    _validate_geometry(altitude_km, elevation_deg)
    _validate_params(params)

    frequency_hz = params.frequency_band.centre_frequency_hz
    dist_km = slant_range_km(altitude_km, elevation_deg)
    eirp = w_to_dbw(params.tx_power_w) + params.tx_antenna_gain_dbi
    fspl = free_space_path_loss_db(dist_km, frequency_hz)
    total_loss = fspl + params.fixed_losses_db
    rx_power = eirp - total_loss + params.rx_antenna_gain_dbi
    noise = w_to_dbw(K_BOLTZMANN * params.system_noise_temp_k * params.data_rate_kbps * 1000.0)
    cn = rx_power - noise
    margin = cn - params.required_ebn0_db

    return LinkBudgetResult(
        eirp_dbw=eirp,
        fspl_db=fspl,
        total_loss_db=total_loss,
        rx_power_dbw=rx_power,
        noise_floor_dbw=noise,
        cn_db=cn,
        ebn0_db=cn,
        link_margin_db=margin,
        slant_range_km=dist_km,
        frequency_hz=frequency_hz,
        margin_status=margin_status(margin),
    )


def compute_link_margin_profile(
    params: LinkBudgetParams,
    altitude_km: float,
    min_el_deg: float = 5.0,
    max_el_deg: float = 90.0,
    step_deg: float = 1.0,
) -> tuple[LinkMarginPoint, ...]:
    """Margin and achievable rate across an elevation sweep."""
    if not step_deg > 0:
        raise ValidationError(f"step_deg must be > 0, got {step_deg}")
    points = []
    n = int(math.floor((max_el_deg - min_el_deg) / step_deg + 1e-9))
    for i in range(n + 1):
        el = min_el_deg + i * step_deg
        result = compute_link_budget(params, altitude_km, el)
        cn0 = result.rx_power_dbw - w_to_dbw(K_BOLTZMANN * params.system_noise_temp_k)
        max_bps = 10.0 ** ((cn0 - params.required_ebn0_db) / 10.0)
        points.append(LinkMarginPoint(
            elevation_deg=el,
            link_margin_db=result.link_margin_db,
            ebn0_db=result.ebn0_db,
            slant_range_km=result.slant_range_km,
            fspl_db=result.fspl_db,
            max_data_rate_kbps=max_bps / 1000.0,
        ))
    return tuple(points)


# --- Pass-level budget from a CommConfig ---

def _carrier_to_noise_density(comm: CommConfig, altitude_km: float, elevation_deg: float):
    dist = slant_range_km(altitude_km, elevation_deg)
    fspl = free_space_path_loss_db(dist, comm.frequency_mhz * 1e6)
    atm = atmospheric_loss_db(comm.frequency_mhz, elevation_deg)
    eirp = w_to_dbw(comm.tx_power_w) + comm.sat_antenna_gain_dbi
    g_over_t = comm.gs_antenna_gain_dbi - 10.0 * math.log10(comm.gs_noise_temp_k)
    cn0 = eirp - fspl - atm - comm.rain_fade_db + g_over_t + BOLTZMANN_DBW
    return cn0, dist, fspl, atm


def _required_cn0(comm: CommConfig) -> float:
    return comm.modulation.required_ebn0_db + 10.0 * math.log10(comm.data_rate_kbps * 1000.0)


def compute_pass_link_budget(
    comm: CommConfig,
    altitude_km: float,
    max_elevation_deg: float,
    duration_s: float,
) -> PassLinkResult:
    """Link quality at a pass's peak elevation and the data it can carry.

    The data volume uses the configured rate over the pass minus 15 s of
    acquisition overhead, and is zero when the margin is negative.
    """
    _validate_geometry(altitude_km, max_elevation_deg)
    _validate_comm(comm)

    cn0, dist, fspl, atm = _carrier_to_noise_density(comm, altitude_km, max_elevation_deg)
    margin = cn0 - _required_cn0(comm)
    max_bps = 10.0 ** ((cn0 - comm.modulation.required_ebn0_db) / 10.0)
    effective_s = max(0.0, duration_s - PASS_OVERHEAD_S)
    volume_mb = comm.data_rate_kbps * 1000.0 * effective_s / 8.0 / (1024.0 * 1024.0)

    return PassLinkResult(
        link_margin_db=margin,
        cn0_dbhz=cn0,
        max_data_rate_kbps=max_bps / 1000.0,
        fspl_db=fspl,
        slant_range_km=dist,
        atmospheric_loss_db=atm,
        data_volume_mb=volume_mb if margin >= 0 else 0.0,
        margin_status=margin_status(margin),
    )


def compute_waterfall_steps(
    comm: CommConfig,
    altitude_km: float,
    elevation_deg: float,
) -> tuple[WaterfallStep, ...]:
    """Gains and losses in chain order, ending with the link margin."""
    _validate_geometry(altitude_km, elevation_deg)
    _validate_comm(comm)

    cn0, _, fspl, atm = _carrier_to_noise_density(comm, altitude_km, elevation_deg)
    margin = cn0 - _required_cn0(comm)
    tx_dbw = w_to_dbw(comm.tx_power_w)

    entries = [
        ("Tx Power", tx_dbw),
        ("Sat Antenna", comm.sat_antenna_gain_dbi),
        ("FSPL", -fspl),
        ("Atm Loss", -atm),
    ]
    if comm.rain_fade_db > 0:
        entries.append(("Rain Fade", -comm.rain_fade_db))
    entries.append(("GS Antenna", comm.gs_antenna_gain_dbi))

    steps = []
    cumulative = 0.0
    for label, value in entries:
        cumulative += value
        steps.append(WaterfallStep(label, value, cumulative, value >= 0 and label != "FSPL"))
    steps.append(WaterfallStep("Link Margin", margin, margin, margin >= 0))
    return tuple(steps)
