"""CLI entry point for cors-forward-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from ui.console_log import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import shutdown_log_executor, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    plain = False
    show_headers = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        elif arg == "--headers":
            plain = True
            show_headers = True
        else:
            console.print(f"[red][ERROR][/red] Unknown option: {arg}")
            _print_help()
            sys.exit(2)

    if not config.relay.route_prefix.startswith("/"):
        console.print("[red][ERROR][/red] relay.route_prefix must start with '/'")
        console.print(f"[dim]Edit {CONFIG_FILE}[/dim]")
        sys.exit(1)

    import uvicorn

    if plain:
        dashboard = None
        app = create_app(config, ConsoleLogger(console, show_headers=show_headers))
    else:
        dashboard = Dashboard(config)
        app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if plain and config.proxy.debug else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        shutdown_log_executor()
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]CORS Forward Proxy[/bold cyan]

Relays /proxy/<target URL> to the target and adds permissive CORS headers.

[bold]Usage:[/bold]
    cors-forward-proxy              Start with live dashboard
    cors-forward-proxy --plain      Start with one log line per relay phase
    cors-forward-proxy --headers    Like --plain, also print forwarded headers (redacted)
    cors-forward-proxy --config     Show config location
    cors-forward-proxy --help       Show this help

[bold]Targets:[/bold]
    Percent-encode the target once, e.g.
    /proxy/https%3A%2F%2Fhttpbin.org%2Fget
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
