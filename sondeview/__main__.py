"""
sondeview Command Line Interface.

Tools around the chart core: generate background curves, trace a point
through the coordinate spaces, and write default settings and chart
configuration files.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from rich.table import Table

from sondeview import __version__
from sondeview.background import generate_background
from sondeview.config import ChartConfig
from sondeview.coords import TPCoords, XYCoords, XYRect
from sondeview.formula import (
    mixing_ratio,
    relative_humidity,
    theta_e_kelvin,
    theta_e_saturated_kelvin,
    theta_kelvin,
    wet_bulb_c,
)
from sondeview.settings import (
    generate_default_settings_file,
    get_settings,
    get_settings_manager,
)
from sondeview.utils.logging import (
    console,
    get_logger,
    log_exception,
    print_error,
    print_info,
    print_metric,
    print_section,
    print_success,
    print_warning,
    setup_logging,
)
from sondeview.view.contexts import SkewTContext

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sondeview",
        description="Skew-T/log-P sounding chart core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sondeview background --output curves.json      Write background curves
  sondeview convert 20 850                       Trace a point through all spaces
  sondeview settings --generate settings.toml    Write default settings
  sondeview config --generate chart.json         Write default chart config
        """,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # -------------------------------------------------------------------------
    # background command
    # -------------------------------------------------------------------------
    background_parser = subparsers.add_parser(
        "background",
        help="Generate skew-T background curves",
    )
    background_parser.add_argument(
        "--config",
        type=Path,
        help="Chart configuration JSON file (default: settings chart.config_path or built-in)",
    )
    background_parser.add_argument(
        "--output",
        type=Path,
        help="Write curves as JSON to this file",
    )
    background_parser.add_argument(
        "--space",
        choices=["tp", "xy"],
        default="tp",
        help="Coordinate space of the written points (default: tp)",
    )

    # -------------------------------------------------------------------------
    # convert command
    # -------------------------------------------------------------------------
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a temperature/pressure point through every coordinate space",
    )
    convert_parser.add_argument("temperature", type=float, help="Temperature (C)")
    convert_parser.add_argument("pressure", type=float, help="Pressure (hPa)")
    convert_parser.add_argument(
        "--dew-point",
        type=float,
        help="Dew point (C), adds moisture quantities to the readout",
    )
    convert_parser.add_argument("--zoom", type=float, default=1.0, help="Zoom factor (default: 1)")
    convert_parser.add_argument(
        "--translate",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        default=(0.0, 0.0),
        help="View translation in XY (default: 0 0)",
    )
    convert_parser.add_argument(
        "--size",
        type=int,
        nargs=2,
        metavar=("W", "H"),
        default=(100, 100),
        help="Device size in pixels (default: 100 100)",
    )

    # -------------------------------------------------------------------------
    # settings command
    # -------------------------------------------------------------------------
    settings_parser = subparsers.add_parser(
        "settings",
        help="Show or generate application settings",
    )
    settings_group = settings_parser.add_mutually_exclusive_group(required=True)
    settings_group.add_argument(
        "--generate",
        type=Path,
        metavar="PATH",
        help="Write a commented default settings file",
    )
    settings_group.add_argument(
        "--show",
        action="store_true",
        help="Print the current settings",
    )

    # -------------------------------------------------------------------------
    # config command
    # -------------------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        help="Generate or validate a chart configuration file",
    )
    config_group = config_parser.add_mutually_exclusive_group(required=True)
    config_group.add_argument(
        "--generate",
        type=Path,
        metavar="PATH",
        help="Write the default chart configuration as JSON",
    )
    config_group.add_argument(
        "--validate",
        type=Path,
        metavar="PATH",
        help="Load a chart configuration and print its summary",
    )

    return parser


def _load_chart_config(path: Path | None) -> ChartConfig:
    if path is None:
        configured = get_settings().chart.config_path
        path = Path(configured) if configured else None
    if path is None:
        return ChartConfig()
    config = ChartConfig.from_json(path)
    logger.info(f"Loaded chart configuration from {path}")
    return config


def cmd_background(args: argparse.Namespace) -> int:
    """Generate background curves."""
    config = _load_chart_config(args.config)

    print_section("Background Curves")
    curves = generate_background(config)

    table = Table(title=config.name)
    table.add_column("Family", style="cyan")
    table.add_column("Curves", justify="right")
    table.add_column("Points", justify="right")
    for name in curves.FAMILIES:
        family = getattr(curves, name)
        table.add_row(name, str(len(family)), str(sum(len(c) for c in family)))
    console.print(table)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump(curves.to_dict(space=args.space, config=config), f)
        print_success(f"Wrote {args.space} curves to {args.output}")

    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    """Trace one skew-T point through every coordinate space."""
    ctx = SkewTContext()
    view = ctx.view
    view.set_device_size(*args.size)
    view.set_zoom(args.zoom)
    view.set_translate(XYCoords(*args.translate))

    tp = TPCoords(args.temperature, args.pressure)
    xy = ctx.convert_tp_to_xy(tp)
    screen = ctx.to_screen(xy)
    device = view.convert_screen_to_device(screen)
    back = ctx.convert_device_to_tp(device)

    print_section("Coordinate Spaces")
    table = Table()
    table.add_column("Space", style="cyan")
    table.add_column("First")
    table.add_column("Second")
    table.add_row("temperature/pressure", f"{tp.temperature:.3f} C", f"{tp.pressure:.3f} hPa")
    table.add_row("xy", f"{xy.x:.6f}", f"{xy.y:.6f}")
    table.add_row("screen", f"{screen.x:.6f}", f"{screen.y:.6f}")
    table.add_row("device", f"{device.col:.2f}", f"{device.row:.2f}")
    table.add_row("inverse", f"{back.temperature:.3f} C", f"{back.pressure:.3f} hPa")
    console.print(table)
    if not XYRect.unit().contains(xy):
        print_warning("Point lies outside the chart area")

    print_section("Thermodynamics")
    print_metric("Potential temperature", f"{float(theta_kelvin(tp.pressure, tp.temperature)):.2f}", "K")
    print_metric(
        "Saturated theta-e",
        f"{float(theta_e_saturated_kelvin(tp.pressure, tp.temperature)):.2f}",
        "K",
    )
    print_metric(
        "Saturation mixing ratio",
        f"{float(mixing_ratio(tp.temperature, tp.pressure)):.3f}",
        "g/kg",
    )
    if args.dew_point is not None:
        td = args.dew_point
        print_metric(
            "Relative humidity", f"{100.0 * float(relative_humidity(tp.temperature, td)):.1f}", "%"
        )
        print_metric("Theta-e", f"{float(theta_e_kelvin(tp.pressure, tp.temperature, td)):.2f}", "K")
        print_metric("Wet bulb", f"{wet_bulb_c(tp.pressure, tp.temperature, td):.2f}", "C")

    return 0


def cmd_settings(args: argparse.Namespace) -> int:
    """Show or generate application settings."""
    if args.generate is not None:
        generate_default_settings_file(args.generate)
        print_success(f"Created settings file: {args.generate}")
        return 0

    manager = get_settings_manager()
    print_section("Settings")
    print_info(f"Source: {manager.path or 'defaults'}")
    for section, values in manager.settings.to_dict().items():
        console.print(f"[bold]\\[{section}][/bold]")
        for key, value in values.items():
            print_info(f"  {key} = {value!r}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Generate or validate a chart configuration."""
    if args.generate is not None:
        ChartConfig().to_json(args.generate)
        print_success(f"Created chart configuration: {args.generate}")
        return 0

    print_section("Validating Chart Configuration")
    config = ChartConfig.from_json(args.validate)
    print_success("Configuration is valid.")
    for key, value in config.get_summary().items():
        print_info(f"  {key}: {value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    manager = get_settings_manager()
    try:
        manager.auto_load()
    except (OSError, ValueError, TypeError) as e:
        print_error(f"Failed to load settings: {e}")
        return 1

    # Set up logging, command line flags override settings
    log_settings = manager.settings.logging
    log_level = "DEBUG" if args.verbose else ("WARNING" if args.quiet else log_settings.level)
    log_file = args.log_file or (Path(log_settings.log_file) if log_settings.log_file else None)
    setup_logging(level=log_level, log_file=log_file, rich_tracebacks=log_settings.rich_tracebacks)

    # Dispatch to command handler
    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "background": cmd_background,
        "convert": cmd_convert,
        "settings": cmd_settings,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler is None:
        print_error(f"Unknown command: {args.command}")
        return 1

    try:
        return handler(args)
    except KeyboardInterrupt:
        print_info("\nOperation cancelled by user.")
        return 130
    except Exception as e:
        print_error(f"{args.command} failed: {e}")
        log_exception(logger, e, context=args.command)
        if args.verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
