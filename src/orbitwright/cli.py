# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for mission analysis.

Usage:
    # Propagate a circular orbit for 10 orbits with J2
    orbitwright propagate --altitude 500 --inclination 97.4 --mode numerical-j2

    # Everything from a mission file, result written as JSON
    orbitwright propagate --mission mission.json --mode numerical-full -o traj.json

    # Walker constellation metrics and element table
    orbitwright constellation --preset starlink-like --export-csv sats.csv
    orbitwright constellation --type star --total 66 --planes 6 --phasing 2 \\
        --altitude 780 --inclination 86.4
    orbitwright constellation --mission mission.json

    # One-orbit thermal profile, decay lifetime, link budget
    orbitwright thermal --altitude 500 --material white-paint --internal-power 2
    orbitwright thermal --mission mission.json --beta 30
    orbitwright lifetime --altitude 550 --mass 4 --area 0.03 --activity high
    orbitwright link --preset "CubeSat S-band" --altitude 500 --elevation 30

    # Lunar orbit insertion budget from a 200 km parking orbit
    orbitwright lunar --mission-type orbit --departure-alt 200 --mass 1000 --isp 320

    # Ground station passes over three days
    orbitwright passes --altitude 500 --inclination 97.4 \\
        --station Svalbard,78.23,15.39 --days 3 --export-csv passes.csv
"""
import argparse
import logging
import sys
from datetime import timedelta

from orbitwright.adapters.csv_exporter import CsvConstellationExporter, CsvPassExporter
from orbitwright.adapters.json_io import (
    JsonResultWriter,
    MissionDescription,
    load_mission,
    parse_epoch,
)
from orbitwright.domain.atmosphere import parse_solar_activity
from orbitwright.domain.constellation import (
    CONSTELLATION_PRESETS,
    WalkerParams,
    WalkerType,
    compute_constellation_metrics,
    generate_walker_constellation,
)
from orbitwright.domain.eclipse import eclipse_fraction
from orbitwright.domain.elements import circular_elements
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.lifetime import check_compliance, compute_ballistic_coefficient
from orbitwright.domain.link_budget import (
    COMM_PRESETS,
    compute_pass_link_budget,
    compute_waterfall_steps,
)
from orbitwright.domain.lunar_transfer import (
    LunarMissionType,
    LunarParams,
    LunarTransferType,
    compute_lunar_result,
)
from orbitwright.domain.passes import (
    GroundStation,
    compute_contact_gaps,
    compute_pass_metrics,
    enrich_passes_with_link_budget,
    predict_passes,
)
from orbitwright.domain.propagation import (
    PropagationMode,
    config_for_mode,
    ground_track,
    propagate,
    propagate_orbits,
)
from orbitwright.domain.spacecraft import DEFAULT_SPACECRAFT, parse_bus_size
from orbitwright.domain.thermal import (
    DEFAULT_MATERIAL,
    SURFACE_MATERIALS,
    compute_thermal_profile,
    compute_thermal_summary,
    extract_eclipse_intervals,
    get_material,
)

logger = logging.getLogger(__name__)

EXIT_FILE_ERROR = 1
EXIT_VALIDATION_ERROR = 2


def _load_mission(path: str | None) -> MissionDescription | None:
    if not path:
        return None
    mission = load_mission(path)
    logger.info("Loaded mission from %s (epoch %s)", path, mission.epoch.isoformat())
    return mission


def _mission(args: argparse.Namespace) -> MissionDescription:
    """Mission from ``--mission`` when given, else from the orbit flags."""
    mission = _load_mission(args.mission)
    if mission is not None:
        return mission
    if args.altitude is None or args.inclination is None:
        raise ValidationError("either --mission or both --altitude and --inclination are required")
    return MissionDescription(
        epoch=parse_epoch(args.epoch),
        elements=circular_elements(args.altitude, args.inclination, args.raan),
    )


def _write_output(args: argparse.Namespace, result: dict) -> None:
    if args.output:
        JsonResultWriter().write_result(result, args.output)
        print(f"Wrote {args.output}")


def _parse_overrides(items: list[str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for item in items:
        name, sep, value = item.partition('=')
        if not sep:
            raise ValidationError(f"perturbation override must be name=value, got {item!r}")
        if name == 'solar_activity':
            overrides[name] = value
        else:
            overrides[name] = value.strip().lower() in ('1', 'true', 'yes', 'on')
    return overrides


def _parse_station(text: str) -> GroundStation:
    """``name,lat,lon[,min_el[,alt_m]]``."""
    parts = [p.strip() for p in text.split(',')]
    if len(parts) < 3:
        raise ValidationError(f"station must be name,lat,lon[,min_el[,alt_m]], got {text!r}")
    try:
        numbers = [float(p) for p in parts[1:]]
    except ValueError:
        raise ValidationError(f"station coordinates must be numbers, got {text!r}") from None
    return GroundStation(
        name=parts[0],
        lat_deg=numbers[0],
        lon_deg=numbers[1],
        min_elevation_deg=numbers[2] if len(numbers) > 2 else 10.0,
        alt_m=numbers[3] if len(numbers) > 3 else 0.0,
    )


# ── Sub-commands ──────────────────────────────────────────────────


def cmd_propagate(args: argparse.Namespace) -> None:
    mission = _mission(args)
    mode = PropagationMode(args.mode)
    overrides = _parse_overrides(args.perturb)
    overrides.setdefault('solar_activity', mission.solar_activity)
    perturbations = config_for_mode(mode, overrides)

    if args.duration is not None:
        trajectory = propagate(
            mission.elements, mission.epoch, args.duration,
            mode=mode, perturbations=perturbations,
            spacecraft=mission.spacecraft, step_s=args.step,
        )
    else:
        trajectory = propagate_orbits(
            mission.elements, mission.epoch, args.orbits,
            mode=mode, perturbations=perturbations,
            spacecraft=mission.spacecraft, step_s=args.step,
        )
    track = ground_track(trajectory)
    last = track[-1]
    print(f"Mode: {mode.value} ({', '.join(trajectory.force_model_names)})")
    print(f"Samples: {len(trajectory.samples)} over {trajectory.duration_s:.0f} s")
    print(f"Final sub-satellite point: {last.lat_deg:.3f}°, {last.lon_deg:.3f}°, {last.alt_km:.1f} km")
    _write_output(args, {
        'mode': mode,
        'force_models': trajectory.force_model_names,
        'samples': trajectory.samples,
        'ground_track': track,
    })


def cmd_constellation(args: argparse.Namespace) -> None:
    mission = _load_mission(args.mission)
    if args.preset:
        params = CONSTELLATION_PRESETS[args.preset]
    elif args.total is None and mission is not None and mission.walker is not None:
        params = mission.walker
    else:
        missing = [n for n in ('total', 'planes', 'altitude', 'inclination') if getattr(args, n) is None]
        if missing:
            raise ValidationError(
                f"missing --{', --'.join(missing)} (or use --preset, or a mission "
                f"file with a constellation section)"
            )
        params = WalkerParams(
            walker_type=WalkerType(args.type),
            total_sats=args.total,
            planes=args.planes,
            phasing=args.phasing,
            altitude_km=args.altitude,
            inclination_deg=args.inclination,
            raan_offset_deg=args.raan_offset,
        )

    spacecraft = mission.spacecraft if mission is not None else DEFAULT_SPACECRAFT
    mass_kg = args.mass if args.mass is not None else spacecraft.mass_kg

    satellites = generate_walker_constellation(params)
    metrics = compute_constellation_metrics(params, mass_kg)
    print(f"Walker {params.walker_type.value} {metrics.walker_notation}")
    print(f"Satellites: {metrics.total_satellites} ({metrics.sats_per_plane} per plane)")
    print(f"Period: {metrics.orbital_period_min:.2f} min")
    print(f"Coverage: {metrics.coverage_lat_min_deg:.1f}° to {metrics.coverage_lat_max_deg:.1f}°")
    print(f"Total mass: {metrics.total_mass_kg:.1f} kg")

    if args.export_csv:
        n = CsvConstellationExporter().export(satellites, args.export_csv)
        print(f"Exported {n} satellites to {args.export_csv}")
    _write_output(args, {'metrics': metrics, 'satellites': satellites})


def cmd_thermal(args: argparse.Namespace) -> None:
    """Flags win; anything not given falls back to the mission file, then defaults."""
    mission = _load_mission(args.mission)
    if args.altitude is not None:
        altitude_km = args.altitude
    elif mission is not None:
        altitude_km = mission.elements.mean_altitude_km
    else:
        raise ValidationError("either --altitude or --mission is required")

    spacecraft = mission.spacecraft if mission is not None else DEFAULT_SPACECRAFT
    if args.material is not None:
        material = get_material(args.material)
    else:
        material = get_material(mission.material if mission is not None else DEFAULT_MATERIAL)
    if args.internal_power is not None:
        internal_power_w = args.internal_power
    else:
        internal_power_w = mission.internal_power_w if mission is not None else 0.0
    geometry = parse_bus_size(args.size if args.size is not None else spacecraft.size)
    mass_kg = args.mass if args.mass is not None else spacecraft.mass_kg

    fraction = eclipse_fraction(altitude_km, args.beta)
    profile = compute_thermal_profile(
        material, altitude_km, fraction, internal_power_w,
        geometry=geometry, mass_kg=mass_kg, transient=args.transient,
    )
    summary = compute_thermal_summary(material, altitude_km, internal_power_w, geometry)
    temps = [s.temperature_c for s in profile]

    print(f"Material: {material.name} (α={material.absorptivity}, ε={material.emissivity})")
    print(f"Eclipse fraction: {fraction:.3f}")
    print(f"Orbit range: {min(temps):.1f} °C to {max(temps):.1f} °C")
    print(f"Hot case: {summary.hot_case_c:.1f} °C ({summary.hot_case_status})")
    print(f"Cold case: {summary.cold_case_c:.1f} °C ({summary.cold_case_status})")
    print(summary.recommendation)
    _write_output(args, {
        'eclipse_fraction': fraction,
        'summary': summary,
        'eclipse_intervals': extract_eclipse_intervals(profile),
        'profile': profile,
    })


def cmd_lifetime(args: argparse.Namespace) -> None:
    bc = compute_ballistic_coefficient(args.mass, args.area, args.cd)
    activity = parse_solar_activity(args.activity)
    result = check_compliance(args.altitude, bc, activity)

    if result.exceeds_threshold:
        print(f"Lifetime: > {result.lifetime_years:.0f} years")
    else:
        print(f"Lifetime: {result.lifetime_years:.2f} years ({result.lifetime_days:.0f} days)")
    print(f"Ballistic coefficient: {bc:.5f} m²/kg, solar activity {activity.value}")
    print(f"Deorbit Δv: {result.deorbit_delta_v_ms:.1f} m/s")
    print(result.recommendation)
    _write_output(args, {'compliance': result})


def cmd_link(args: argparse.Namespace) -> None:
    comm = COMM_PRESETS[args.preset]
    result = compute_pass_link_budget(comm, args.altitude, args.elevation, args.duration)
    steps = compute_waterfall_steps(comm, args.altitude, args.elevation)

    for step in steps:
        print(f"{step.label:<12} {step.value_db:+8.2f} dB  {step.cumulative_db:+8.2f} dB")
    print(f"Margin: {result.link_margin_db:.2f} dB ({result.margin_status})")
    print(f"Max data rate: {result.max_data_rate_kbps:.1f} kbps")
    print(f"Data volume over {args.duration:.0f} s: {result.data_volume_mb:.3f} MB")
    _write_output(args, {'link': result, 'waterfall': steps})


def cmd_passes(args: argparse.Namespace) -> None:
    mission = _mission(args)
    stations = tuple(_parse_station(s) for s in args.station) or mission.ground_stations
    if not stations:
        raise ValidationError("at least one --station (or ground_stations in the mission file) is required")
    comm = COMM_PRESETS[args.preset] if args.preset else mission.comm
    altitude_km = mission.elements.mean_altitude_km

    passes = predict_passes(
        mission.elements, mission.epoch, stations, args.days, step_s=args.step,
    )
    passes = enrich_passes_with_link_budget(passes, comm, altitude_km)
    metrics = compute_pass_metrics(passes, args.days, comm.data_rate_kbps)
    gaps = compute_contact_gaps(passes)

    for p in passes:
        print(
            f"{p.station_name:<12} {p.aos:%Y-%m-%d %H:%M:%S}  "
            f"{timedelta(seconds=p.duration_s)}  max el {p.max_elevation_deg:5.1f}°  "
            f"[{p.quality}]  margin {p.link.link_margin_db:+.1f} dB"
        )
    print(f"{metrics.total_passes} passes, {metrics.passes_per_day:.1f}/day, "
          f"{metrics.daily_contact_min:.1f} min/day, {metrics.daily_data_mb:.2f} MB/day, "
          f"max gap {metrics.max_gap_hours:.1f} h")

    if args.export_csv:
        n = CsvPassExporter().export_passes(passes, args.export_csv)
        print(f"Exported {n} passes to {args.export_csv}")
    _write_output(args, {'metrics': metrics, 'gaps': gaps, 'passes': passes})


def cmd_lunar(args: argparse.Namespace) -> None:
    params = LunarParams(
        mission_type=LunarMissionType(args.mission_type),
        transfer_type=LunarTransferType(args.transfer),
        departure_alt_km=args.departure_alt,
        target_orbit_alt_km=args.target_alt,
        spacecraft_mass_kg=args.mass,
        isp_s=args.isp,
    )
    result = compute_lunar_result(params)

    print(f"TLI: {result.tli_delta_v_ms:.1f} m/s, LOI: {result.loi_delta_v_ms:.1f} m/s, "
          f"total: {result.total_delta_v_ms:.1f} m/s")
    print(f"Transfer: {result.transfer_time_days:g} days, phase angle {result.phase_angle_deg:.1f}°")
    print(f"Propellant: {result.propellant_required_kg:.1f} kg")
    if result.lunar_orbit_period_min:
        print(f"Lunar orbit period: {result.lunar_orbit_period_min:.1f} min")
    if result.free_return_period_days:
        print(f"Free-return loop: {result.free_return_period_days:g} days")
    _write_output(args, {'params': params, 'result': result})


# ── Parser ────────────────────────────────────────────────────────


def _add_orbit_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group('orbit')
    group.add_argument('--mission', '-m', help="Path to a mission JSON file")
    group.add_argument('--altitude', type=float, help="Circular orbit altitude (km)")
    group.add_argument('--inclination', type=float, help="Inclination (deg)")
    group.add_argument('--raan', type=float, default=0.0, help="RAAN (deg, default: 0)")
    group.add_argument('--epoch', help="ISO 8601 epoch (default: now, UTC)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='orbitwright',
        description="Spacecraft mission analysis: propagation, constellations, "
                    "thermal, lifetime, link budget, passes and lunar transfers",
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true', default=False,
        help="Log engine diagnostics to stderr",
    )
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('propagate', help="Propagate an orbit")
    _add_orbit_arguments(p)
    p.add_argument(
        '--mode', choices=[m.value for m in PropagationMode],
        default=PropagationMode.KEPLERIAN.value,
        help="Propagation mode (default: keplerian)",
    )
    p.add_argument(
        '--perturb', action='append', default=[], metavar='NAME=VALUE',
        help="Override one perturbation toggle, e.g. drag=off (repeatable)",
    )
    p.add_argument('--duration', type=float, help="Duration (s); overrides --orbits")
    p.add_argument('--orbits', type=float, default=10.0, help="Number of orbits (default: 10)")
    p.add_argument('--step', type=float, default=30.0, help="Output step (s, default: 30)")
    p.add_argument('--output', '-o', help="Write the trajectory as JSON")
    p.set_defaults(func=cmd_propagate)

    p = sub.add_parser('constellation', help="Generate a Walker constellation")
    p.add_argument('--mission', '-m', help="Mission JSON file; its constellation section and "
                                           "spacecraft mass apply when flags are absent")
    p.add_argument('--preset', choices=sorted(CONSTELLATION_PRESETS))
    p.add_argument('--type', choices=[t.value for t in WalkerType], default=WalkerType.DELTA.value)
    p.add_argument('--total', type=int, help="Total satellites T")
    p.add_argument('--planes', type=int, help="Orbital planes P")
    p.add_argument('--phasing', type=int, default=0, help="Phasing factor F (default: 0)")
    p.add_argument('--altitude', type=float, help="Altitude (km)")
    p.add_argument('--inclination', type=float, help="Inclination (deg)")
    p.add_argument('--raan-offset', type=float, default=0.0, help="RAAN offset (deg)")
    p.add_argument('--mass', type=float, help="Mass per satellite (kg, default: 4)")
    p.add_argument('--export-csv', help="Write the element table as CSV")
    p.add_argument('--output', '-o', help="Write metrics and satellites as JSON")
    p.set_defaults(func=cmd_constellation)

    p = sub.add_parser('thermal', help="One-orbit thermal profile")
    p.add_argument('--mission', '-m', help="Mission JSON file; its orbit, thermal and "
                                           "spacecraft sections apply when flags are absent")
    p.add_argument('--altitude', type=float, help="Altitude (km)")
    p.add_argument('--material', choices=sorted(SURFACE_MATERIALS),
                   help=f"Surface material (default: {DEFAULT_MATERIAL})")
    p.add_argument('--internal-power', type=float, help="Internal dissipation (W, default: 0)")
    p.add_argument('--size', help="Bus size, e.g. 1U, 3U, 6U (default: 3U)")
    p.add_argument('--beta', type=float, default=0.0, help="Beta angle (deg, default: 0)")
    p.add_argument('--mass', type=float, help="Bus mass (kg, default: 4)")
    p.add_argument('--transient', action='store_true', help="Integrate thermal inertia")
    p.add_argument('--output', '-o', help="Write the profile as JSON")
    p.set_defaults(func=cmd_thermal)

    p = sub.add_parser('lifetime', help="Orbit lifetime and disposal compliance")
    p.add_argument('--altitude', type=float, required=True, help="Altitude (km)")
    p.add_argument('--mass', type=float, default=DEFAULT_SPACECRAFT.mass_kg, help="Mass (kg)")
    p.add_argument('--area', type=float, default=DEFAULT_SPACECRAFT.cross_section_m2,
                   help="Drag cross-section (m²)")
    p.add_argument('--cd', type=float, default=DEFAULT_SPACECRAFT.drag_coefficient,
                   help="Drag coefficient (default: 2.2)")
    p.add_argument('--activity', default='moderate', help="Solar activity: low, moderate, high")
    p.add_argument('--output', '-o', help="Write the result as JSON")
    p.set_defaults(func=cmd_lifetime)

    p = sub.add_parser('link', help="Pass link budget at peak elevation")
    p.add_argument('--preset', choices=sorted(COMM_PRESETS), default='CubeSat UHF')
    p.add_argument('--altitude', type=float, required=True, help="Altitude (km)")
    p.add_argument('--elevation', type=float, default=90.0, help="Elevation (deg, default: 90)")
    p.add_argument('--duration', type=float, default=600.0, help="Pass duration (s, default: 600)")
    p.add_argument('--output', '-o', help="Write the result as JSON")
    p.set_defaults(func=cmd_link)

    p = sub.add_parser('passes', help="Predict ground station passes")
    _add_orbit_arguments(p)
    p.add_argument(
        '--station', action='append', default=[], metavar='NAME,LAT,LON[,MIN_EL[,ALT_M]]',
        help="Ground station (repeatable)",
    )
    p.add_argument('--days', type=float, default=1.0, help="Prediction window (days, default: 1)")
    p.add_argument('--step', type=float, default=30.0, help="Sampling step (s, default: 30)")
    p.add_argument('--preset', choices=sorted(COMM_PRESETS), help="Comm preset for link budgets")
    p.add_argument('--export-csv', help="Write the pass schedule as CSV")
    p.add_argument('--output', '-o', help="Write passes and metrics as JSON")
    p.set_defaults(func=cmd_passes)

    p = sub.add_parser('lunar', help="Lunar transfer Δv and propellant budget")
    p.add_argument('--mission-type', choices=[m.value for m in LunarMissionType],
                   default=LunarMissionType.ORBIT.value)
    p.add_argument('--transfer', choices=[t.value for t in LunarTransferType],
                   default=LunarTransferType.HOHMANN.value)
    p.add_argument('--departure-alt', type=float, default=200.0,
                   help="Parking orbit altitude (km, default: 200)")
    p.add_argument('--target-alt', type=float, default=100.0,
                   help="Lunar orbit altitude (km, default: 100)")
    p.add_argument('--mass', type=float, default=1000.0, help="Dry mass (kg, default: 1000)")
    p.add_argument('--isp', type=float, default=320.0, help="Specific impulse (s, default: 320)")
    p.add_argument('--output', '-o', help="Write the result as JSON")
    p.set_defaults(func=cmd_lunar)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        args.func(args)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_VALIDATION_ERROR)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        sys.exit(EXIT_FILE_ERROR)


if __name__ == '__main__':
    main()
