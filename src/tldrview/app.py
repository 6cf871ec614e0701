"""Typer application and CLI entry point for tldrview.

The ``tldr`` command is a single Typer command whose flags select the
operation, in this order when several are combined:

1. ``--clear-cache``
2. ``--update`` / ``--update-from``
3. ``--config-path`` / ``--seed-config``
4. ``--list``
5. rendering, by name (``tldr tar``) or by file (``tldr -f page.md``)

Cache and config locations are resolved once here and passed into each
component's constructor; nothing below this module reads the environment
for paths.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`tldrview.config`: Path and config file resolution.
    :mod:`tldrview.output`: Output streams initialised in :func:`tldr_command`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import typer

from tldrview import __version__
from tldrview.exit_codes import EXIT_GENERIC_FAILURE

if TYPE_CHECKING:
    from tldrview.cache import CacheStore
    from tldrview.models import Config, Page


app = typer.Typer(
    name="tldr",
    help="Show simplified, community-maintained help pages for console commands.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

PAGES_REPOSITORY = "https://github.com/tldr-pages/tldr"


class ColorMode(str, Enum):
    """Values accepted by ``--color``."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tldrview {__version__}")
        raise typer.Exit()


@app.command()
def tldr_command(
    command: Optional[list[str]] = typer.Argument(
        None, help="The command to show (e.g. `tar` or `git checkout`)."
    ),
    render: Optional[Path] = typer.Option(
        None, "--render", "-f", help="Render a page file from disk instead of the cache."
    ),
    update: bool = typer.Option(
        False, "--update", "-u", help="Update the local page cache."
    ),
    update_from: Optional[str] = typer.Option(
        None,
        "--update-from",
        metavar="PATH_OR_URL",
        help="Update the cache from a local .tar.gz file or an http(s) URL.",
    ),
    clear_cache: bool = typer.Option(
        False, "--clear-cache", "-c", help="Delete the local page cache."
    ),
    list_pages: bool = typer.Option(
        False, "--list", "-l", help="List all pages for the current platform."
    ),
    platform: Optional[str] = typer.Option(
        None, "--platform", "-p", help="Platform to prefer (linux, osx, windows, ...)."
    ),
    raw: bool = typer.Option(
        False, "--raw", "-r", help="Print the page source without rendering it."
    ),
    compact: bool = typer.Option(
        False, "--compact", help="Omit blank lines between page sections."
    ),
    color: ColorMode = typer.Option(
        ColorMode.AUTO, "--color", help="When to colour the rendered page."
    ),
    config_path: bool = typer.Option(
        False, "--config-path", help="Show the config file path."
    ),
    seed: bool = typer.Option(
        False, "--seed-config", help="Write a default config file to the config path."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress informational messages."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Show the tldr page for COMMAND, or manage the page cache.

    Initialises the global :class:`~tldrview.output.OutputManager` from
    CLI flags, then runs each requested operation in turn. Any
    :class:`~tldrview.exceptions.TldrError` is printed to stderr and turned
    into the matching exit code.

    Example::

        tldr --update
        tldr tar
        tldr -f ./my-page.md --color always
    """
    from tldrview.exceptions import TldrError
    from tldrview.output import OutputManager, error, set_output

    set_output(OutputManager(no_color=color == ColorMode.NEVER, quiet=quiet, verbose=verbose))

    try:
        _run(
            name=" ".join(command) if command else None,
            render=render,
            update=update,
            update_from=update_from,
            clear_cache=clear_cache,
            list_pages=list_pages,
            platform=platform,
            raw=raw,
            compact=compact,
            color=color,
            config_path=config_path,
            seed=seed,
        )
    except TldrError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _run(
    *,
    name: Optional[str],
    render: Optional[Path],
    update: bool,
    update_from: Optional[str],
    clear_cache: bool,
    list_pages: bool,
    platform: Optional[str],
    raw: bool,
    compact: bool,
    color: ColorMode,
    config_path: bool,
    seed: bool,
) -> None:
    """Dispatch the operations selected on the command line."""
    from tldrview.cache import CacheStore, current_platform, read_page_file
    from tldrview.config import get_cache_dir, get_config_path, load_config, seed_config
    from tldrview.exceptions import InvalidUsageError
    from tldrview.models import Config
    from tldrview.output import debug, info, print_data, success

    if update and update_from:
        raise InvalidUsageError("Use either --update or --update-from, not both.")
    if name and render:
        raise InvalidUsageError("Give either a command name or --render FILE, not both.")

    store = CacheStore(get_cache_dir())
    debug(f"Cache directory: {store.root}")
    did_something = False

    if clear_cache:
        if store.clear():
            success(f"Successfully cleared cache at `{store.root}`.")
        else:
            info(f"Cache at `{store.root}` already empty.")
        did_something = True

    # A broken config file must not block --config-path or --seed-config.
    config = load_config() if (update or name or render) else Config()

    if update or update_from:
        _update_cache(store, update_from or config.updates.archive_url)
        did_something = True

    if config_path:
        print_data(f"Config path is: {get_config_path()}\n")
        did_something = True

    if seed:
        path = seed_config()
        success(f"Successfully created seed config file here: {path}")
        did_something = True

    resolved_platform = platform or current_platform()

    if list_pages:
        print_data("".join(f"{page}\n" for page in store.list_pages(resolved_platform)))
        did_something = True

    if render is not None:
        _show_page(read_page_file(render), config, raw=raw, compact=compact, color=color)
        return

    if name:
        _render_from_cache(store, name, resolved_platform, config, raw=raw, compact=compact, color=color)
        return

    if not did_something:
        raise InvalidUsageError(
            "No command given. Run `tldr COMMAND`, or see `tldr --help`."
        )


def _update_cache(store: CacheStore, source: str) -> None:
    """Run a cache update, prefixing any failure with ``Could not update cache``."""
    from tldrview.cache import ArchiveFetcher, CacheUpdater, networking_enabled
    from tldrview.exceptions import TldrError
    from tldrview.output import success

    updater = CacheUpdater(store, ArchiveFetcher(networking=networking_enabled()))
    try:
        updater.update(source)
    except TldrError as exc:
        raise type(exc)(f"Could not update cache: {exc}", exit_code=exc.exit_code) from exc
    success("Successfully updated cache.")


def _render_from_cache(
    store: CacheStore,
    name: str,
    platform: str,
    config: Config,
    *,
    raw: bool,
    compact: bool,
    color: ColorMode,
) -> None:
    """Look a page up in the cache and render it, warning if the cache is stale."""
    from tldrview.cache import MAX_CACHE_AGE, should_auto_update
    from tldrview.exceptions import PageNotFoundError
    from tldrview.output import suggest, warning

    if should_auto_update(store, config.updates):
        _update_cache(store, config.updates.archive_url)

    if store.is_stale():
        warning(
            f"Cache wasn't updated for more than {MAX_CACHE_AGE.days} days.\n"
            "You should probably run `tldr --update` soon."
        )

    try:
        page = store.lookup(name, platform)
    except PageNotFoundError:
        suggest(
            "Try updating with `tldr --update`, or submit a pull request to: "
            f"{PAGES_REPOSITORY}"
        )
        raise

    _show_page(page, config, raw=raw, compact=compact, color=color)


def _show_page(page: Page, config: Config, *, raw: bool, compact: bool, color: ColorMode) -> None:
    """Parse and render *page* with *config*, honouring CLI display overrides."""
    from tldrview.output import debug, print_data, should_use_color
    from tldrview.pages import Renderer, parse_page

    display = config.display
    overrides = {key: True for key, flag in (("raw", raw), ("compact", compact)) if flag}
    if overrides:
        display = display.model_copy(update=overrides)

    debug(f"Rendering {page.path}")
    renderer = Renderer(config.style, display, color=should_use_color(color.value))
    if display.raw:
        print_data(renderer.render_raw(page.text))
    else:
        print_data(renderer.render(parse_page(page.text)))


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from tldrview.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tldr`` console script.

    Unhandled :class:`~tldrview.exceptions.TldrError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from tldrview.exceptions import TldrError
        from tldrview.output import error

        if isinstance(exc, TldrError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
