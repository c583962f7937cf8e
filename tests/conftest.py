import pytest
from typer.testing import CliRunner
from pathlib import Path

from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.cli.display import ConsoleDisplay
from annihilator.infrastructure.config.settings import set_config_for_testing, clear_test_config
from annihilator.main import reset_dependencies

class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now

@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "object-cache"

@pytest.fixture
def store(cache_dir: Path, clock: FakeClock) -> FileCacheStore:
    """A file cache rooted in a temporary directory, driven by the fake clock."""
    return FileCacheStore(cache_dir, clock=clock)

@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    return tmp_path / "content"

@pytest.fixture(autouse=True)
def isolated_config(content_dir: Path):
    """Points every configured path at the test's temporary directory."""
    set_config_for_testing({
        'ANNIHILATOR_CONTENT_DIR': str(content_dir),
        'ANNIHILATOR_CACHE_DIR': str(content_dir / "object-cache"),
        'ANNIHILATOR_FILE_PREFIX': "wp_cache_",
        'ANNIHILATOR_TENANT_ID': "",
    })
    reset_dependencies()
    yield
    reset_dependencies()
    clear_test_config()

@pytest.fixture
def mock_console_display(mocker):
    """ Mocks the ConsoleDisplay to capture notices easily.
        Patches the ConsoleDisplay where main.py instantiates it.
    """
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('annihilator.main.ConsoleDisplay', return_value=mock)
    return mock
