"""
CLI interface for host network configuration
"""

import re
import sys
import time
import logging
import argparse
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.prompt import Confirm
from rich.table import Table
from rich import box

from . import __version__
from .config import AddressingMode, Interface, InterfaceName
from .factory import BackendFactory
from .normalizer import normalize
from .notices import ConsoleNotifier
from .policy import EditabilityPolicy
from .settings import BACKENDS, load_settings, init_config, get_config_paths, Settings
from .sources import DryRunApplier
from .synchronizer import SessionState, StateSynchronizer

# PendingEdit fields settable from the command line
EDIT_FIELDS = ("mode", "address", "subnet", "gateway", "dns", "routes", "metric", "new_name")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def positive_float(text: str) -> float:
    """argparse type for intervals in seconds"""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{text}'") from None
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {text}")
    return value


def create_parser(settings: Settings) -> argparse.ArgumentParser:
    """Create CLI argument parser with defaults from settings."""
    parser = argparse.ArgumentParser(
        prog="hostnet",
        description="Inspect and reconfigure host network interfaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show interfaces
  %(prog)s --show

  # Keep the table refreshing
  %(prog)s --watch

  # Switch eth1 to a static address (preview only)
  %(prog)s --edit eth1 --mode Manual --address 10.0.0.5 --subnet 255.255.255.0 --dry-run

  # Static routes need a gateway
  %(prog)s --edit eth1 --gateway 10.0.0.1 --routes "192.168.1.0/24, 10.10.0.0/16"

  # Use a saved profile
  %(prog)s --profile edge-01
        """
    )

    # Config management
    parser.add_argument("--profile", metavar="NAME", help="Use named profile from config file")
    parser.add_argument("--show-config", action="store_true",
                        help="Show current configuration and available profiles")
    parser.add_argument("--init-config", action="store_true",
                        help="Initialize user config file with defaults")
    parser.add_argument("--list-profiles", action="store_true", help="List available profiles")

    # Backend
    parser.add_argument("--api-url", default=settings.api_url,
                        help=f"Host agent base URL (default: {settings.api_url})")
    parser.add_argument("--backend", choices=BACKENDS, default=settings.backend,
                        help=f"Observation backend (default: {settings.backend})")
    parser.add_argument("--poll-interval", type=positive_float, default=settings.poll_interval,
                        help=f"Seconds between refreshes in --watch (default: {settings.poll_interval:g})")

    # Actions (showing the table is the default)
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--show", action="store_true", help="Show the interface table and exit")
    action.add_argument("--watch", action="store_true",
                        help="Keep refreshing the interface table until interrupted")
    action.add_argument("--edit", metavar="IFACE", help="Interface to reconfigure")

    # Edit fields (unset fields keep the observed value)
    edit = parser.add_argument_group("edit options")
    edit.add_argument("--mode", choices=[m.value for m in AddressingMode], help="Addressing mode")
    edit.add_argument("--address", help="IPv4 address (Manual mode)")
    edit.add_argument("--subnet", help="Subnet mask or CIDR prefix (Manual mode)")
    edit.add_argument("--gateway", help="Gateway; pass \"\" to remove it")
    edit.add_argument("--dns", help="Comma-separated DNS servers")
    edit.add_argument("--routes", help="Comma-separated routes in ip/prefix format")
    edit.add_argument("--metric", help="Default route metric")
    edit.add_argument("--rename", dest="new_name", metavar="NAME", help="New interface name")
    edit.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    parser.add_argument("--dry-run", action="store_true", default=settings.dry_run,
                        help="Show the request that would be sent without applying it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"hostnet {__version__}")

    return parser


def build_interface_table(
    interfaces: dict[InterfaceName, Interface],
    policy: EditabilityPolicy
) -> Table:
    """Render observed interfaces; subnet, gateway and DNS only for Up links"""
    table = Table(title="Available Interfaces", box=box.SIMPLE)
    table.add_column("Interface", style="cyan")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("IP Address")
    table.add_column("Subnet")
    table.add_column("Gateway")
    table.add_column("DNS")
    table.add_column("Edit", justify="center")

    for name, iface in interfaces.items():
        status = "[green]Up[/green]" if iface.is_up else "[red]Down[/red]"
        table.add_row(
            name,
            status,
            iface.mode.value,
            iface.address or "-",
            (iface.subnet or "-") if iface.is_up else "-",
            (iface.gateway or "-") if iface.is_up else "-",
            (", ".join(iface.dns) or "-") if iface.is_up else "-",
            "[green]yes[/green]" if policy.is_editable(name) else "[dim]locked[/dim]",
        )

    return table


def show_config(settings: Settings) -> None:
    """Display current configuration and available profiles."""
    console = Console()

    console.print("[bold cyan]Configuration Sources[/bold cyan]")
    if settings.config_sources:
        for source in settings.config_sources:
            console.print(f"  [green][OK][/green] {source}")
    else:
        console.print("  [dim]No config files found (using built-in defaults)[/dim]")

    console.print()

    console.print("[bold cyan]Config Search Paths[/bold cyan]")
    for path in get_config_paths():
        exists = "[green][OK][/green]" if path.exists() else "[dim]--[/dim]"
        console.print(f"  {exists} {path}")

    console.print()

    console.print("[bold cyan]Current Settings[/bold cyan]")
    settings_table = Table(box=box.SIMPLE)
    settings_table.add_column("Setting", style="cyan")
    settings_table.add_column("Value", style="white")

    settings_table.add_row("api_url", settings.api_url)
    settings_table.add_row("backend", settings.backend)
    settings_table.add_row("poll_interval", f"{settings.poll_interval:g}")
    settings_table.add_row("timeout", f"{settings.timeout:g}")
    settings_table.add_row("dry_run", str(settings.dry_run))
    settings_table.add_row("reserved_patterns", ", ".join(settings.reserved_patterns))

    if settings.default_profile:
        settings_table.add_row("default_profile", settings.default_profile)

    console.print(settings_table)

    if settings.profiles:
        console.print()
        list_profiles(settings)


def list_profiles(settings: Settings) -> None:
    """List available profiles."""
    console = Console()

    if not settings.profiles:
        console.print("[yellow]No profiles configured.[/yellow]")
        console.print("Run [cyan]hostnet --init-config[/cyan] to create a config file.")
        return

    console.print("[bold cyan]Available Profiles[/bold cyan]\n")

    for name, profile in settings.profiles.items():
        default = " [yellow](default)[/yellow]" if name == settings.default_profile else ""
        console.print(f"[bold]{name}[/bold]{default}")
        console.print(f"  API: {profile.api_url} ({profile.backend})")
        if profile.description:
            console.print(f"  [dim]{profile.description}[/dim]")
        console.print()


def watch(sync: StateSynchronizer, console: Console) -> int:
    """Refresh the interface table until interrupted"""
    with sync, Live(console=console, auto_refresh=False) as live:
        while True:
            live.update(build_interface_table(sync.interfaces, sync.policy), refresh=True)
            time.sleep(sync.poll_interval)


def edit_interface(
    sync: StateSynchronizer,
    name: InterfaceName,
    changes: dict[str, str],
    console: Console,
    confirm: bool = True
) -> int:
    """
    Run one edit session from the command line.

    Returns:
        Exit code: 0 applied, 1 apply failed, 2 rejected or invalid
    """
    logger = logging.getLogger(__name__)

    if not sync.refresh():
        console.print("[red][FAIL] Could not read interface state[/red]")
        return 1

    if sync.select(name) is None:
        return 2

    pending = sync.edit(**changes)
    failure = sync.validator.check(pending)
    if failure is not None:
        console.print(f"[red][FAIL][/red] {failure}")
        sync.cancel()
        return 2

    request = normalize(pending)
    preview = Table(title=f"Update {name}", box=box.SIMPLE, show_header=False)
    preview.add_column("Field", style="cyan")
    preview.add_column("Value")
    for key, value in request.to_payload().items():
        preview.add_row(key, "-" if value is None else str(value))
    console.print(preview)

    if confirm and not isinstance(sync.applier, DryRunApplier):
        if not Confirm.ask("Apply this configuration?", default=False, console=console):
            logger.info("Update cancelled by user")
            sync.cancel()
            return 0

    if sync.submit():
        return 0

    if sync.state is SessionState.EDITING:
        sync.cancel()
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    console = Console()
    argv = sys.argv[1:] if argv is None else argv

    # Preliminary parse for --profile so defaults come from the profile
    profile_arg = None
    if "--profile" in argv:
        idx = argv.index("--profile")
        if idx + 1 < len(argv):
            profile_arg = argv[idx + 1]

    settings = load_settings(profile=profile_arg)

    parser = create_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    if args.init_config:
        config_path = init_config()
        if config_path:
            console.print(f"[green][OK][/green] Config file created: {config_path}")
        else:
            console.print("[yellow]Config file already exists.[/yellow]")
            console.print("Use --show-config to view current settings.")
        return 0

    if args.show_config:
        show_config(settings)
        return 0

    if args.list_profiles:
        list_profiles(settings)
        return 0

    if args.profile and args.profile not in settings.profiles:
        console.print(f"[yellow]Warning: Profile '{args.profile}' not found[/yellow]")
        console.print("Available profiles:", ", ".join(settings.list_profiles()) or "(none)")

    settings.api_url = args.api_url
    settings.backend = args.backend
    settings.poll_interval = args.poll_interval
    settings.dry_run = args.dry_run

    source = applier = None
    try:
        source = BackendFactory.create_source(settings)
        applier = BackendFactory.create_applier(settings)
        sync = StateSynchronizer(
            source,
            applier,
            policy=EditabilityPolicy(settings.reserved_patterns),
            notifier=ConsoleNotifier(console),
            poll_interval=settings.poll_interval,
        )

        if args.edit:
            changes = {
                field: getattr(args, field)
                for field in EDIT_FIELDS
                if getattr(args, field) is not None
            }
            return edit_interface(sync, args.edit, changes, console, confirm=not args.yes)

        if args.watch:
            return watch(sync, console)

        if not sync.refresh():
            console.print("[red][FAIL] Could not read interface state[/red]")
            return 1
        console.print(build_interface_table(sync.interfaces, sync.policy))
        return 0

    except (ValueError, re.error) as e:
        logger.error(f"[FAIL] Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("\n[!] Cancelled by user")
        return 130
    finally:
        for backend in (source, applier):
            if backend is not None:
                backend.close()


if __name__ == "__main__":
    sys.exit(main())
