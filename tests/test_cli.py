import pytest
import uvicorn

import cli
from core.config import Config
from ui.console_log import ConsoleLogger
from ui.dashboard import Dashboard


class FakeServer:
    def __init__(self, config):
        self.config = config

    def run(self):
        pass


@pytest.fixture
def run_cli(monkeypatch):
    """Run cli.main with the given argv and return the observer handed to create_app."""
    observers = []

    def fake_create_app(config, observer):
        observers.append(observer)
        return object()

    monkeypatch.setattr(cli, "load_config", Config)
    monkeypatch.setattr(cli, "create_app", fake_create_app)
    monkeypatch.setattr(cli, "write_cli_log", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "shutdown_log_executor", lambda: None)
    monkeypatch.setattr(uvicorn, "Config", lambda app, **kwargs: kwargs)
    monkeypatch.setattr(uvicorn, "Server", FakeServer)
    monkeypatch.setattr(Dashboard, "start", lambda self: self)

    def _run(*args):
        monkeypatch.setattr(cli.sys, "argv", ["cors-forward-proxy", *args])
        cli.main()
        return observers[-1]

    return _run


def test_default_uses_dashboard(run_cli):
    assert isinstance(run_cli(), Dashboard)


def test_plain_hides_headers(run_cli):
    observer = run_cli("--plain")

    assert isinstance(observer, ConsoleLogger)
    assert observer._show_headers is False


def test_headers_flag_enables_header_lines(run_cli):
    observer = run_cli("--headers")

    assert isinstance(observer, ConsoleLogger)
    assert observer._show_headers is True


def test_unknown_option_exits(run_cli):
    with pytest.raises(SystemExit) as exc_info:
        run_cli("--bogus")

    assert exc_info.value.code == 2
