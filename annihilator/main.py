"""Main entry point for the annihilator application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines the cache administration commands, and delegates execution to the CommandHandler.
"""

import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from annihilator.core.command_handler import CommandHandler
from annihilator.core.lifecycle import bootstrap_host

# --- Infrastructure Layer ---
# Config
from annihilator.infrastructure.config.settings import load_configuration, get_config, get_dropin_path
# UI
from annihilator.infrastructure.cli.display import ConsoleDisplay
# Cache
from annihilator.infrastructure.cache.factory import get_default_store, reset_default_store
# Host
from annihilator.infrastructure.host.dropper import Dropper
# Monitoring
from annihilator.infrastructure.monitoring.logger_setup import setup_logging, level_from_name

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies(log_level: Optional[str] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First
    load_configuration()
    level = level_from_name(log_level or get_config('logging.level'))
    setup_logging(
        log_level=level,
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )
    logger.debug("Configuration and logging initialized.")

    # 2. Instantiate Infrastructure Adapters
    dependencies['ui'] = ConsoleDisplay()
    dependencies['dropper'] = Dropper(get_dropin_path())
    try:
        dependencies['store'] = get_default_store()
    except OSError as e:
        logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
        dependencies['ui'].display_error(f"Cannot use the cache directory: {e}")
        raise typer.Exit(code=1)

    # 3. Host state comes from the drop-in
    dependencies['host'] = bootstrap_host(dependencies['dropper'], dependencies['store'])

    # 4. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        store=dependencies['store'],
        host=dependencies['host'],
        dropper=dependencies['dropper'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies

_dependencies: Optional[Dict[str, Any]] = None

def get_handler() -> CommandHandler:
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies()
    return _dependencies['command_handler']

def reset_dependencies() -> None:
    """Drops the wired-up dependencies so the next command starts fresh."""
    global _dependencies
    _dependencies = None
    reset_default_store()

# --- Typer App Definition ---
app = typer.Typer(
    name="annihilator",
    help="File-based object cache for testing: enable, disable, flush and inspect it.",
    add_completion=False,
)

def _exit_with(success: bool) -> None:
    if not success:
        raise typer.Exit(code=1)

# --- CLI Commands ---

@app.command()
def enable():
    """Install the drop-in and make the file cache active."""
    _exit_with(get_handler().handle_enable())

@app.command()
def disable():
    """Deactivate the file cache and remove the drop-in."""
    _exit_with(get_handler().handle_disable())

@app.command()
def flush():
    """Delete every cached entry."""
    _exit_with(get_handler().handle_flush())

@app.command(name="flush-group")
def flush_group_command(
    group: Annotated[str, typer.Argument(help="Name of the cache group to clear.")]
):
    """Delete the cached entries of one group."""
    _exit_with(get_handler().handle_flush_group(group))

@app.command()
def status():
    """Show whether the file cache is active and what it holds."""
    get_handler().handle_status()

@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", "-l", help="Logging level (debug, info, warning, error).")
    ] = None,
):
    """Manage the file-based object cache."""
    global _dependencies
    if log_level and _dependencies is None:
        _dependencies = create_dependencies(log_level=log_level)

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
