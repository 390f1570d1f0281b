"""`cap-sync-version` command.

Reads the version from package.json (or `--set-version`), hands it to the
sync pipeline and renders the per-file report. Exit codes:
0 everything in sync, 1 at least one file or platform failed, 2 the version
or the manifest could not be read.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from cap_sync_version import __version__
from cap_sync_version.adapters.package_manifest import read_package_version
from cap_sync_version.cli.ui_components import build_progress_hooks, build_results_table, print_header
from cap_sync_version.core.config import AppSettings
from cap_sync_version.core.errors import InvalidVersionError, PackageManifestError
from cap_sync_version.core.services.sync_pipeline import SyncOptions, sync

EPILOG = (
    "Syncs the npm package version to the capacitor android and ios projects. "
    "Default behaviour: syncs to android and ios when neither --android nor --ios is given."
)

app = typer.Typer(add_completion=False, help="Sync the package version into native Android/iOS projects.")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(*, verbose: bool = False, debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False, markup=False)],
        force=True,
    )


def split_plist_option(values: list[str] | None) -> list[str]:
    """Flatten repeated and comma-separated `--plist` values, trimming each entry."""

    out: list[str] = []
    for value in values or []:
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return out


def _version_callback(value: bool) -> None:
    if value:
        _console.print(__version__)
        raise typer.Exit()


@app.command(epilog=EPILOG)
def main(
    android: bool = typer.Option(
        False,
        "-a",
        "--android",
        help="Sync package version to android. It will not update iOS, unless --ios is specified.",
    ),
    android_allow_prerelease: bool = typer.Option(
        False,
        "-p",
        "--android-allow-prerelease",
        help="Deprecated and ignored: prerelease tags produced unreliable version codes.",
    ),
    ios: bool = typer.Option(
        False,
        "-i",
        "--ios",
        help="Sync package version to ios. It will not update Android, unless --android is specified.",
    ),
    plist: list[str] | None = typer.Option(
        None,
        "--plist",
        help="Additional plists to modify (ios only). Repeat or pass a comma-separated list.",
    ),
    set_version: str | None = typer.Option(
        None,
        "--set-version",
        help="Version to sync instead of the one in package.json.",
    ),
    project_root: Path | None = typer.Option(
        None,
        "--project-root",
        help="Project directory (defaults to CAP_SYNC_VERSION_PROJECT_ROOT or the current directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log every file written."),
    debug: bool = typer.Option(False, "--debug", help="Log every file read and matched field."),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the cap-sync-version version and exit.",
    ),
) -> None:
    """Sync the package.json version into the capacitor android and ios projects."""

    configure_logging(verbose=verbose, debug=debug)
    logger = logging.getLogger("cap_sync_version")

    if android_allow_prerelease:
        logger.warning(
            "--android-allow-prerelease is ignored: version codes are derived from major.minor.patch only"
        )

    if not android and not ios:
        android = ios = True

    settings = AppSettings()
    if project_root is not None:
        settings = settings.model_copy(update={"project_root": project_root})

    if set_version is not None:
        package_version = set_version
    else:
        try:
            package_version = read_package_version(settings.resolve(settings.package_json_path))
        except PackageManifestError as exc:
            _err_console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=2)

    print_header(_console, version=package_version, android=android, ios=ios)

    extra_plists = split_plist_option(plist) if ios else []
    if extra_plists:
        logger.info("Additional plists: %s", ", ".join(extra_plists))

    try:
        report = sync(
            package_version,
            SyncOptions(android=android, ios=ios, extra_plists=extra_plists),
            settings=settings,
            hooks=build_progress_hooks(_console, root=settings.project_root),
        )
    except InvalidVersionError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=2)

    _console.print(build_results_table(report, root=settings.project_root))

    if not report.ok:
        raise typer.Exit(code=1)
    if not report.changed:
        _console.print("[dim]Everything already in sync.[/dim]")


def run() -> None:
    app()
