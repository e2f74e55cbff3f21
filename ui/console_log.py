"""Plain console logger, one line per relay phase."""

from rich.console import Console
from rich.markup import escape

from ui.log_utils import redact_headers, write_cli_log


class ConsoleLogger:
    """Print relay phases to the terminal instead of a live dashboard."""

    def __init__(self, console: Console | None = None, show_headers: bool = False):
        self._console = console or Console()
        self._show_headers = show_headers

    def target_resolved(self, method: str, raw: str, target: str) -> None:
        self._console.print(f"[dim]→ raw segment:[/dim] {escape(raw)}", highlight=False)
        self._console.print(f"[dim]→ decoded URL:[/dim] {escape(target)}", highlight=False)

    def request_issued(self, method: str, target: str, headers: list[tuple[str, str]]) -> None:
        self._console.print(f"[cyan]{method}[/cyan] {escape(target)}", highlight=False)
        if self._show_headers:
            for key, value in redact_headers(headers):
                self._console.print(f"    [dim]{key}: {escape(value)}[/dim]", highlight=False)

    def response_relayed(
        self,
        method: str,
        target: str,
        status: int,
        size: int,
        *,
        elapsed: float = 0.0,
    ) -> None:
        self._console.print(
            f"[green]{status}[/green] {method} {escape(target)} ({size} bytes, {elapsed * 1000:.0f} ms)",
            highlight=False,
        )

    def relay_failed(self, method: str, target: str, status: int, message: str) -> None:
        self._console.print(f"[red]{status}[/red] {method} {escape(target)}: {escape(message)}", highlight=False)
        write_cli_log("ERROR", message[:200], method=method, status=status)
