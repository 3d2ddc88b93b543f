"""Subcommand modules for dbref.

Provides register_commands() which uses deferred imports to keep
``dbref --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``store`` group and the standalone commands on the root group."""
    from dbref.commands.init_cmd import init_cmd
    from dbref.commands.resolve import inline, resolve
    from dbref.commands.store import store

    cli.add_command(store)
    cli.add_command(init_cmd)
    cli.add_command(resolve)
    cli.add_command(inline)
