#!/usr/bin/env python3
"""CLI tool for inspecting network normalization.

Runs the normalizers of a configured network against hand-entered raw
values, which is handy when adding or debugging a network configuration.

Usage:
    # List configured networks
    python -m transit_norm.cli list-networks

    # Classify a line
    python -m transit_norm.cli normalize-line mvv --mode 0 --symbol "ICE 599" --category-number 599

    # Split a station name
    python -m transit_norm.cli split-name avv_aachen "AC, Hauptbahnhof"

    # Resolve a line style
    python -m transit_norm.cli resolve-style vrs 12 --product B
"""

import argparse
import sys

from transit_norm.core.config import settings
from transit_norm.core.exceptions import NormalizationError
from transit_norm.core.logging import configure_logging
from transit_norm.core.telemetry import install_tracer_provider, shutdown_tracer_provider
from transit_norm.schemas.taxonomy import Product
from transit_norm.services.adapter_registry import AdapterRegistry, get_registry
from transit_norm.types.raw_feed import LocationKind, RawLineHints


def cmd_list_networks(args: argparse.Namespace, registry: AdapterRegistry) -> int:
    """
    List all configured networks.

    Args:
        args: Parsed command-line arguments
        registry: Adapter registry

    Returns:
        Exit code (0 for success, 1 for error)
    """
    networks = registry.available_networks()
    if not networks:
        print("No networks configured")
        return 0

    print(f"Found {len(networks)} network(s):\n")
    print(f"{'Network':<16} {'Products':<20} {'Rules':<6} {'Styles':<7} Split Template")
    print("-" * 70)
    for network_id in networks:
        config = registry.get(network_id).config
        codes = "".join(product.code for product in config.products.root)
        template = config.name_split.template.value if config.name_split.template else "-"
        print(f"{network_id:<16} {codes:<20} {len(config.category_rules):<6} {len(config.styles):<7} {template}")
    return 0


def cmd_normalize_line(args: argparse.Namespace, registry: AdapterRegistry) -> int:
    """
    Normalize one line from raw hints.

    Args:
        args: Parsed command-line arguments
        registry: Adapter registry

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        adapter = registry.get(args.network)
        hints = RawLineHints(
            mode=args.mode,
            symbol=args.symbol,
            short_name=args.short_name,
            long_name=args.long_name,
            category_type=args.category_type,
            category_number=args.category_number,
            category_name=args.category_name,
        )
        line = adapter.normalize_line(hints)
        style = adapter.resolve_style(line)
    except NormalizationError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    status = "filtered" if line.is_filtered else "ok"
    print(f"✅ Normalized line ({status})")
    print(f"   Network: {line.network}")
    print(f"   Product: {line.product.value} ({line.product.code})")
    print(f"   Label:   {line.label or '-'}")
    print(f"   Name:    {line.name or '-'}")
    print(f"   Style:   {_format_style(style.to_hex())}")
    return 0


def cmd_split_name(args: argparse.Namespace, registry: AdapterRegistry) -> int:
    """
    Split a display name into place and name.

    Args:
        args: Parsed command-line arguments
        registry: Adapter registry

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        adapter = registry.get(args.network)
    except NormalizationError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    pair = adapter.split_name(args.name, LocationKind(args.kind))
    print(f"✅ Split {args.kind} name")
    print(f"   Place: {pair.place if pair.has_place else '(unknown)'}")
    print(f"   Name:  {pair.name}")
    return 0


def cmd_resolve_style(args: argparse.Namespace, registry: AdapterRegistry) -> int:
    """
    Resolve the style for a line label.

    Args:
        args: Parsed command-line arguments
        registry: Adapter registry

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        adapter = registry.get(args.network)
        product = Product.from_code(args.product) if args.product else None
    except (NormalizationError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    style = adapter.resolve_label_style(args.label, product)
    print(f"✅ Style for '{args.label}'")
    print(f"   {_format_style(style.to_hex())}")
    return 0


def _format_style(rendered: dict[str, str | None]) -> str:
    return ", ".join(f"{key}={value}" for key, value in rendered.items() if value is not None)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Transit feed normalization CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List configured networks
  python -m transit_norm.cli list-networks

  # Classify an EFA train line by its mode index and symbol
  python -m transit_norm.cli normalize-line mvv --mode 0 --symbol "ICE 599" --category-number 599

  # Split a station name
  python -m transit_norm.cli split-name sf "Powell St, San Francisco"

  # Split an address with its own rules
  python -m transit_norm.cli split-name db "Berlin, Invalidenstr. 1" --kind address

  # Resolve a style by label and product code
  python -m transit_norm.cli resolve-style vrs 12 --product B
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # list-networks command
    subparsers.add_parser(
        "list-networks",
        help="List configured networks",
        description="Display all built-in and file-configured networks.",
    )

    # normalize-line command
    normalize_parser = subparsers.add_parser(
        "normalize-line",
        help="Normalize a line from raw hints",
        description="Classify raw line hints into a canonical line and show its style.",
    )
    normalize_parser.add_argument("network", type=str, help="Network id (see list-networks)")
    normalize_parser.add_argument("--mode", type=int, help="Raw mode-of-transport index")
    normalize_parser.add_argument("--symbol", type=str, help="Line symbol (e.g., 'ICE 599')")
    normalize_parser.add_argument("--short-name", type=str, help="Short line name (e.g., '12')")
    normalize_parser.add_argument("--long-name", type=str, help="Long line name")
    normalize_parser.add_argument("--category-type", type=str, help="Category abbreviation (e.g., 'RE')")
    normalize_parser.add_argument("--category-number", type=str, help="Category number (e.g., '599')")
    normalize_parser.add_argument("--category-name", type=str, help="Category name (e.g., 'S-Bahn')")

    # split-name command
    split_parser = subparsers.add_parser(
        "split-name",
        help="Split a display name into place and name",
        description="Apply the network's place list and split template to a display name.",
    )
    split_parser.add_argument("network", type=str, help="Network id (see list-networks)")
    split_parser.add_argument("name", type=str, help="Display name from the feed")
    split_parser.add_argument(
        "--kind",
        choices=[kind.value for kind in LocationKind],
        default=LocationKind.STATION.value,
        help="Location kind (default: station)",
    )

    # resolve-style command
    style_parser = subparsers.add_parser(
        "resolve-style",
        help="Resolve the style for a line label",
        description="Look up a label in the network, shared and default style tables.",
    )
    style_parser.add_argument("network", type=str, help="Network id (see list-networks)")
    style_parser.add_argument("label", type=str, help="Line label, or a full style key such as 'B12'")
    style_parser.add_argument("--product", type=str, help="Product code (I, R, S, U, T, B, P, F, C, ?)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Args:
        argv: Arguments to parse (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if no command provided
    if not args.command:
        parser.print_help()
        return 1

    configure_logging(log_level=settings.LOG_LEVEL)
    install_tracer_provider()

    # Dispatch to command handler
    command_handlers = {
        "list-networks": cmd_list_networks,
        "normalize-line": cmd_normalize_line,
        "split-name": cmd_split_name,
        "resolve-style": cmd_resolve_style,
    }

    if handler := command_handlers.get(args.command):
        try:
            return handler(args, get_registry())
        except Exception as e:
            print(f"❌ Unexpected error: {e}", file=sys.stderr)
            return 1
        finally:
            shutdown_tracer_provider()

    print(f"❌ Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
