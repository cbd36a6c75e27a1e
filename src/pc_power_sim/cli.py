"""Command-line interface for the PC power and thermal simulator."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .config import EngineSettings, load_config
from .hardware.catalog import load_catalog
from .hardware.models import CatalogError, HardwareCatalog
from .simulate.cli import check_mode, run_mode
from .workloads import Workload


def load_settings(config_path: Optional[str]) -> EngineSettings:
    """Load settings, exiting with a ✗ line on any error."""
    try:
        return load_config(Path(config_path) if config_path else None)
    except FileNotFoundError:
        print(f"✗ Config file not found: {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"✗ Error parsing config file: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"✗ Invalid config: {e}")
        sys.exit(1)


def load_hardware(settings: EngineSettings, catalog_path: Optional[str]) -> HardwareCatalog:
    """Load the hardware catalog, exiting with a ✗ line on validation failure."""
    path = Path(catalog_path) if catalog_path else settings.catalog_path
    try:
        return load_catalog(path)
    except CatalogError as e:
        print(f"✗ {e}")
        for detail in e.details:
            print(f"  - {detail}")
        sys.exit(1)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="Path to configuration YAML file (default: $PC_SIM_CONFIG or built-in defaults)",
    )
    parser.add_argument(
        "--catalog",
        help="Path to hardware catalog YAML (default: catalog.path from config, else packaged)",
    )
    for category in ("cpu", "gpu", "memory", "psu", "cooling"):
        parser.add_argument(f"--{category}", help=f"{category} id from the catalog")
    parser.add_argument(
        "--workload",
        choices=[w.value for w in Workload],
        help="Workload to simulate",
    )
    parser.add_argument("--ambient", type=float, help="Ambient temperature (°C)")
    parser.add_argument("--fans", type=int, help="Number of case fans")
    parser.add_argument("--airflow", type=float, help="Case airflow quality in [0, 1]")


def main() -> None:
    """Main entry point."""
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="PC Power & Thermal Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  # Simulate 2 minutes of rendering on the default build
  pc-power-sim run --workload rendering --duration 120

  # Check a custom catalog and a specific build
  pc-power-sim check --catalog my_parts.yaml --cpu i5-12600k --gpu rtx-4090
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run", required=True)

    run_parser = subparsers.add_parser("run", help="Run a headless simulation and print a summary")
    _add_common_arguments(run_parser)
    run_parser.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Wall-clock seconds to simulate (default: 60)",
    )
    run_parser.add_argument("--speed", type=float, help="Simulation speed multiplier [0.25, 10]")
    run_parser.add_argument(
        "--realtime",
        action="store_true",
        help="Tick on the real clock instead of a synthetic fixed-step clock",
    )
    run_parser.add_argument(
        "--jitter",
        action="store_true",
        help="Add cosmetic jitter to reported clock speeds",
    )
    run_parser.add_argument("--seed", type=int, help="Seed for clock jitter")

    check_parser = subparsers.add_parser("check", help="Validate catalog and configuration")
    _add_common_arguments(check_parser)

    args = parser.parse_args()

    settings = load_settings(args.config)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    catalog = load_hardware(settings, args.catalog)

    if args.command == "run":
        run_mode(args, settings, catalog)
    elif args.command == "check":
        check_mode(args, settings, catalog)


if __name__ == "__main__":
    main()
