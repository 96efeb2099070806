"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import typer

app = typer.Typer(
    name="hmum",
    help="Helm Update Manager - Keep helmsman chart pins and values files up to date.",
    no_args_is_help=True,
)


def _register_commands() -> None:
    from helm_update_manager.cli.commands.check_cmd import app as check_app
    from helm_update_manager.cli.commands.update_cmd import app as update_app

    app.add_typer(check_app, name="check", help="Show available chart updates")
    app.add_typer(update_app, name="update", help="Update chart pins and merge values files")


_register_commands()


def main() -> None:
    app()
