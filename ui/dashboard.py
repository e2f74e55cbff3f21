"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import truncate, write_cli_log

console = Console()


class RelayInfo:
    """Info about a single relayed request."""

    def __init__(self, method: str, target: str, status: int, size: int, elapsed: float):
        self.method = method
        self.target = truncate(target, 80)
        self.status = status
        self.size = size
        self.elapsed = elapsed
        self.timestamp = datetime.now()


class Dashboard:
    """Real-time dashboard showing recent relays and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._relays: list[RelayInfo] = []
        self._max_relays = 10
        self._counts = {"relayed": 0, "preflight": 0, "rejected": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def target_resolved(self, method: str, raw: str, target: str) -> None:
        pass

    def request_issued(self, method: str, target: str, headers: list[tuple[str, str]]) -> None:
        pass

    def response_relayed(
        self,
        method: str,
        target: str,
        status: int,
        size: int,
        *,
        elapsed: float = 0.0,
    ) -> None:
        """Record a relayed response (or answered preflight)."""
        with self._lock:
            key = "preflight" if method == "OPTIONS" else "relayed"
            self._counts[key] += 1
            self._relays.insert(0, RelayInfo(method, target, status, size, elapsed))
            self._relays = self._relays[: self._max_relays]
            self._refresh()

    def relay_failed(self, method: str, target: str, status: int, message: str) -> None:
        """Record a rejected or failed relay."""
        with self._lock:
            self._counts["rejected" if status == 400 else "failed"] += 1
            self._relays.insert(0, RelayInfo(method, target, status, 0, 0.0))
            self._relays = self._relays[: self._max_relays]
            self._errors.insert(0, f"{status} {method}: {truncate(message, 60)}")
            self._errors = self._errors[:3]
            self._refresh()
        write_cli_log("ERROR", message[:200], method=method, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_relays_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("CORS Forward Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Relayed: {self._counts['relayed']}", style="green")
        stats.append("  |  ")
        stats.append(f"Preflight: {self._counts['preflight']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._counts['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Failed: {self._counts['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_relays_panel(self) -> Panel:
        """Build the recent relays panel."""
        if self._relays:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("Target", ratio=3)
            table.add_column("Size", justify="right", width=10)
            table.add_column("ms", justify="right", width=7)

            for info in self._relays:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    Text(str(info.status), style=_status_style(info.status)),
                    escape(info.target) or "[dim]—[/dim]",
                    str(info.size),
                    f"{info.elapsed * 1000:.0f}",
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[green]Recent relays[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            prefix = self.config.relay.route_prefix.rstrip("/")
            content = Text(
                f"Request http://{self.config.proxy.host}:{self.config.proxy.port}"
                f"{prefix}/<encoded target URL>",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _status_style(status: int) -> str:
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    return "green"
