#!/usr/bin/env python3
"""Drive the car records client from a terminal.

Every run starts the app the same way the browser client does: the stored
token (if any) is verified first and the matching page is shown. The chosen
command is then dispatched as a user action.

Credential sourcing for ``login``:
- --username / --password
- CARAPP_USERNAME / CARAPP_PASSWORD

Examples::

    car_console.py login
    car_console.py cars
    car_console.py add "Model 3" --connector nacs --connector ccs1 \\
        --charge-limit 90 --battery 75 --ac 11 --dc 250
    car_console.py logout
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycarapp import CarApp, CarAppConfig, CarAppError  # noqa: E402
from pycarapp.render import CarsTableView, DashboardView, HeaderView  # noqa: E402
from pycarapp.state.pages import FormName, Page  # noqa: E402

_DEFAULT_STORAGE = Path.home() / ".pycarapp" / "storage.json"


class ConsoleRenderer:
    """Prints whatever the view layer asks a user interface to show."""

    def __init__(self, *, verbose: bool = False) -> None:
        self._verbose = verbose
        self._page: Page | None = None
        self._dashboard: DashboardView | None = None
        self._table: CarsTableView | None = None

    def show_page(self, page: Page, header: HeaderView) -> None:
        self._page = page
        who = f"  [{header.username}]" if header.visible else ""
        print(f"== {page.value}{who}")

    def render_cars(self, dashboard: DashboardView, table: CarsTableView) -> None:
        self._dashboard = dashboard
        self._table = table

    def set_loading(self, loading: bool) -> None:
        if self._verbose:
            print("  ..." if loading else "  done")

    def show_error(self, message: str | None) -> None:
        if message:
            print(f"!! {message}", file=sys.stderr)

    def reset_form(self, form: FormName) -> None:
        if self._verbose:
            print(f"  ({form.value} cleared)")

    def print_current(self) -> None:
        """Print the car views for the page last shown."""
        if self._page is Page.DASHBOARD and self._dashboard is not None:
            if self._dashboard.empty_message:
                print(f"  {self._dashboard.empty_message}")
            for name in self._dashboard.car_names:
                print(f"  - {name}")
        elif self._page is Page.CARS and self._table is not None:
            if self._table.show_empty:
                print("  (no cars)")
            for row in self._table.rows:
                print(
                    f"  {row.name:<24} {row.connectors:<20} "
                    f"limit={row.battery_charge_limit}% battery={row.battery_size}kWh "
                    f"ac={row.max_kw_ac}kW dc={row.max_kw_dc}kW"
                )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Terminal client for the car records service.")
    parser.add_argument("--base-url", help="Service base URL (default: CARAPP_BASE_URL or localhost)")
    parser.add_argument(
        "--storage",
        help=f"Token storage file (default: CARAPP_TOKEN_STORAGE_PATH or {_DEFAULT_STORAGE})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    login = sub.add_parser("login", help="Log in and store the token")
    login.add_argument("--username")
    login.add_argument("--password")

    sub.add_parser("status", help="Show the page the stored session lands on")
    sub.add_parser("dashboard", help="Show the dashboard preview")
    sub.add_parser("cars", help="List all cars")
    sub.add_parser("logout", help="Forget the stored token")

    add = sub.add_parser("add", help="Add a car")
    add.add_argument("name")
    add.add_argument("--connector", action="append", default=[], help="Connector type (repeatable)")
    add.add_argument("--charge-limit", help="Battery charge limit in percent (1-100)")
    add.add_argument("--battery", help="Battery size in kWh")
    add.add_argument("--ac", help="Max AC charging power in kW")
    add.add_argument("--dc", help="Max DC charging power in kW")
    return parser


def _config_from_args(args: argparse.Namespace) -> CarAppConfig:
    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.storage:
        overrides["token_storage_path"] = args.storage
    elif not os.environ.get("CARAPP_TOKEN_STORAGE_PATH"):
        overrides["token_storage_path"] = str(_DEFAULT_STORAGE)
    return CarAppConfig.from_env(**overrides)


async def run(args: argparse.Namespace) -> int:
    renderer = ConsoleRenderer(verbose=args.verbose)
    async with CarApp(_config_from_args(args), renderer=renderer) as app:
        await app.start()
        command = args.command or "status"

        if command == "login":
            username = args.username or os.environ.get("CARAPP_USERNAME", "")
            password = args.password or os.environ.get("CARAPP_PASSWORD", "")
            if not await app.dispatch("submit-login", form={"username": username, "password": password}):
                return 1
        elif command == "logout":
            await app.dispatch("logout")
        elif command in ("dashboard", "cars"):
            if app.view.current_page is Page.LOGIN:
                print("Not logged in; run 'login' first.", file=sys.stderr)
                return 1
            await app.dispatch("nav", page=command)
        elif command == "add":
            if app.view.current_page is Page.LOGIN:
                print("Not logged in; run 'login' first.", file=sys.stderr)
                return 1
            await app.dispatch("nav", page="add-car")
            form = {
                "name": args.name,
                "connector_types": args.connector,
                "battery_charge_limit": args.charge_limit,
                "battery_size": args.battery,
                "max_kw_ac": args.ac,
                "max_kw_dc": args.dc,
            }
            if not await app.dispatch("submit-add-car", form=form):
                return 1

        await app.view.wait_for_refreshes()
        renderer.print_current()
    return 0


def main() -> None:
    args = _build_parser().parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        code = asyncio.run(run(args))
    except CarAppError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        code = 2
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
