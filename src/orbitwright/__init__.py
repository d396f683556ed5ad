# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbitwright

Mission analysis engine for small-spacecraft design: Keplerian and
perturbed orbit propagation, Walker constellation generation, one-orbit
thermal profiles, decay lifetime and disposal-rule compliance, link
budgets, ground-station pass prediction and lunar transfer budgets.
"""

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import (
    OrbitalConstants,
    kepler_to_cartesian,
    cartesian_to_kepler,
)
from orbitwright.domain.elements import (
    OrbitalElements,
    StateVector,
    circular_elements,
    validate_elements,
    elements_to_state,
    state_to_elements,
)
from orbitwright.domain.anomaly import (
    solve_kepler_equation,
    mean_to_true,
    true_to_mean,
)
from orbitwright.domain.propagation import (
    PropagationMode,
    PerturbationConfig,
    Trajectory,
    config_for_mode,
    propagate,
    propagate_orbits,
    interpolate_trajectory,
    ground_track,
)
from orbitwright.domain.spacecraft import (
    BusSize,
    SpacecraftProperties,
    DEFAULT_SPACECRAFT,
)
from orbitwright.domain.atmosphere import (
    SolarActivity,
    atmospheric_density,
)
from orbitwright.domain.constellation import (
    WalkerType,
    WalkerParams,
    Satellite,
    ConstellationMetrics,
    CONSTELLATION_PRESETS,
    generate_walker_constellation,
    compute_constellation_metrics,
)
from orbitwright.domain.thermal import (
    SurfaceMaterial,
    SURFACE_MATERIALS,
    compute_steady_state,
    compute_thermal_profile,
    extract_eclipse_intervals,
    compute_thermal_summary,
)
from orbitwright.domain.eclipse import eclipse_fraction
from orbitwright.domain.lifetime import (
    LifetimeEstimate,
    ComplianceResult,
    compute_ballistic_coefficient,
    estimate_lifetime,
    compute_deorbit_delta_v,
    check_compliance,
)
from orbitwright.domain.link_budget import (
    FrequencyBand,
    Modulation,
    CommConfig,
    COMM_PRESETS,
    LinkBudgetParams,
    compute_link_budget,
    compute_link_margin_profile,
    compute_pass_link_budget,
    compute_waterfall_steps,
)
from orbitwright.domain.lunar_transfer import (
    LunarMissionType,
    LunarTransferType,
    LunarParams,
    LunarResult,
    compute_lunar_result,
)
from orbitwright.domain.passes import (
    GroundStation,
    Pass,
    predict_passes,
    enrich_passes_with_link_budget,
    compute_pass_metrics,
    compute_contact_gaps,
)

__version__ = "1.0.0"
