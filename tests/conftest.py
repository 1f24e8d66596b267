"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from spicectl.adapters.mock import MockRunner
from spicectl.core.models.config import HostApp, ToolConfig
from spicectl.core.persistence.ledger import OperationLedger
from spicectl.core.services.lifecycle import LifecycleService


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway HOME so ``~`` paths never touch the real one."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("SPICECTL_CONFIG", raising=False)
    return home_dir


@pytest.fixture
def host_app(home: Path) -> Path:
    """An installed host application bundle."""
    app = home / "Applications" / "Spotify.app"
    app.mkdir(parents=True)
    return app


@pytest.fixture
def config(home: Path) -> ToolConfig:
    return ToolConfig(
        host=HostApp(name="Spotify", install_paths=["~/Applications/Spotify.app"]),
        state_dir=str(home / "state"),
        settle_delay=0.0,
    )


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def service(config: ToolConfig, mock_runner: MockRunner, sleeps: list[float]) -> LifecycleService:
    return LifecycleService(config, mock_runner, sleep=sleeps.append)


@pytest.fixture
def ledger(home: Path) -> OperationLedger:
    return OperationLedger(state_dir=home / "state")
