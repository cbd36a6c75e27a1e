"""
CLI modes for headless simulation runs and configuration checks.
"""

import sys

from tqdm import tqdm

from ..config import EngineSettings
from ..diagnostics import check_system_readiness, highest_severity, sort_warnings
from ..hardware.catalog import InitializationError, find_defaults
from ..hardware.models import HardwareCatalog
from ..power.display import ClockJitter
from .simulation import ManualClock, Simulation

HARDWARE_OPTIONS = ("cpu", "gpu", "memory", "psu", "cooling")


def _print_readiness(simulation: Simulation) -> bool:
    report = check_system_readiness(simulation.state.config)
    marker = "✓" if report.can_simulate else "✗"
    print(f"{marker} {report.message} ({report.level.value})")
    for detail in report.details:
        print(f"  - {detail}")
    return report.can_simulate


def _print_summary(simulation: Simulation) -> None:
    state = simulation.state
    config = state.config
    power, psu, thermal = state.power, state.psu, state.thermal
    cpu_clock, gpu_clock = simulation.display_clocks()

    print("\n" + "=" * 70)
    print("SIMULATION SUMMARY")
    print("=" * 70)
    print(f"Simulated time: {state.simulated_time:.1f}s at {state.speed}x")
    print(f"Workload:       {config.workload.profile.name}")

    print("\n" + "-" * 70)
    print("POWER")
    print("-" * 70)
    for name, watts in power.components.items():
        print(f"  {name:<12} {watts:7.1f} W")
    print(f"  {'sustained':<12} {power.sustained_total:7.1f} W")
    print(f"  {'transient':<12} {power.transient_peak:7.1f} W")
    print(f"  CPU clock {cpu_clock:.2f} GHz ({power.cpu_mode}){' [boost]' if power.cpu_is_boost else ''}")
    print(f"  GPU clock {gpu_clock:.0f} MHz ({power.gpu_mode})")

    print("\n" + "-" * 70)
    print("PSU")
    print("-" * 70)
    print(f"  Load {psu.load_percent:.1f}%  efficiency {psu.efficiency * 100:.1f}%")
    print(f"  Wall {psu.wall_power:.1f} W  waste heat {psu.heat_waste:.1f} W")
    stable = "stable" if psu.transient_stable else "UNSTABLE"
    print(f"  Transient {psu.transient_load:.1f}% (limit {psu.transient_limit:.0f}%, {stable})")

    print("\n" + "-" * 70)
    print("THERMAL")
    print("-" * 70)
    print(f"  CPU {thermal.cpu_temp:.1f}°C -> equilibrium {thermal.equilibrium_temp:.1f}°C")
    print(f"  Case {thermal.case_temp:.1f}°C  GPU {thermal.gpu_temp:.1f}°C  ambient {thermal.ambient_temp:.1f}°C")
    print(f"  Fans {thermal.fan_speed:.0f}%  noise {thermal.noise_level:.1f} dBA")
    print(f"  Cooling capacity {thermal.cooling_capacity:.0f} W  headroom {thermal.thermal_headroom:.1f}°C")
    if thermal.is_throttling:
        print(f"  Throttling {thermal.throttle_percent:.1f}%")
    print(f"  {thermal.explanation}")

    print("\n" + "-" * 70)
    severity = highest_severity(state.warnings)
    print(f"WARNINGS ({severity.value if severity else 'none'})")
    print("-" * 70)
    if state.compatibility_warning:
        print(f"  ! {state.compatibility_warning}")
    for warning in sort_warnings(state.warnings):
        print(f"  [{warning.severity.value}] {warning.title}: {warning.message}")
    if not state.warnings:
        print("  ✓ No warnings")

    history = simulation.history.to_frame()
    if not history.empty:
        print("\n" + "-" * 70)
        print(f"HISTORY ({len(history)} samples)")
        print("-" * 70)
        print(history[["power", "cpu_temp"]].describe().loc[["mean", "min", "max"]].round(1).to_string())


def _apply_overrides(simulation: Simulation, args) -> None:
    for category in HARDWARE_OPTIONS:
        item_id = getattr(args, category, None)
        if item_id and not simulation.select_hardware(category, item_id):
            print(f"✗ Unknown {category} id: {item_id}")
            sys.exit(1)

    knobs = {
        "workload": getattr(args, "workload", None),
        "ambient_temp": getattr(args, "ambient", None),
        "fan_count": getattr(args, "fans", None),
        "airflow_quality": getattr(args, "airflow", None),
    }
    knobs = {k: v for k, v in knobs.items() if v is not None}
    if knobs:
        try:
            simulation.update_config(**knobs)
        except ValueError as e:
            print(f"✗ {e}")
            sys.exit(1)


def run_mode(args, settings: EngineSettings, catalog: HardwareCatalog) -> None:
    """
    Run the simulation headless for a fixed duration and print a summary.
    """
    print("\n" + "=" * 70)
    print("PC POWER & THERMAL SIMULATION")
    print("=" * 70 + "\n")

    realtime = bool(getattr(args, "realtime", False))
    clock = None if realtime else ManualClock()
    jitter = ClockJitter(seed=getattr(args, "seed", None), enabled=getattr(args, "jitter", False))

    try:
        kwargs = {"jitter": jitter}
        if clock is not None:
            kwargs["clock"] = clock
        simulation = Simulation.from_catalog(catalog, settings, **kwargs)
    except InitializationError as e:
        print(f"✗ Initialization failed: {e}")
        sys.exit(1)

    _apply_overrides(simulation, args)

    config = simulation.state.config
    for category in HARDWARE_OPTIONS:
        part = getattr(config, category)
        print(f"  {category:<8} {part.name if part else '-'}")
    print()

    if not _print_readiness(simulation):
        print("  Continuing anyway; results reflect an invalid configuration.")

    speed = getattr(args, "speed", None)
    if speed is not None:
        simulation.set_speed(speed)

    duration: float = args.duration
    print(f"\nSimulating {duration:.0f}s wall time at {simulation.state.speed}x...")

    try:
        if realtime:
            print("(Press Ctrl+C to stop)")
            simulation.run(duration)
        else:
            _run_synthetic(simulation, clock, duration, settings.tick_interval)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        simulation.stop()

    _print_summary(simulation)


def _run_synthetic(
    simulation: Simulation, clock: ManualClock, duration: float, tick_interval: float
) -> None:
    """Fixed-step run on a manual clock; as fast as the CPU allows."""
    steps = max(1, int(round(duration / tick_interval)))
    simulation.start()
    for _ in tqdm(range(steps), desc="Simulating", unit="tick"):
        clock.advance(tick_interval)
        simulation.tick()
    simulation.stop()


def check_mode(args, settings: EngineSettings, catalog: HardwareCatalog) -> bool:
    """
    Validate the catalog, show default selection and the readiness report.
    """
    print("\n" + "=" * 70)
    print("CONFIGURATION CHECK")
    print("=" * 70 + "\n")

    print("✓ Catalog valid")
    for name, count in catalog.counts().items():
        print(f"  {name:<8} {count}")

    try:
        defaults = find_defaults(catalog, settings.defaults.preferred)
    except InitializationError as e:
        print(f"✗ No usable defaults: {e}")
        sys.exit(1)

    print("\nDefault selection:")
    for category in HARDWARE_OPTIONS:
        print(f"  {category:<8} {defaults[category].name}")
    print()

    simulation = Simulation.from_catalog(catalog, settings, clock=ManualClock())
    _apply_overrides(simulation, args)
    ok = _print_readiness(simulation)
    if not ok:
        sys.exit(1)
    return ok
