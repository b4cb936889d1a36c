#!/usr/bin/env python3
"""
Main CLI entry point using Typer.
"""

import sys
from pathlib import Path
from typing import List, Optional

import typer

from targetd_provisioner.cli.commands import iscsi, nfs

app = typer.Typer(
    name="targetd-provisioner",
    help="Provision iSCSI and NFS volumes on targetd",
    add_completion=False,
)

# Add command groups
app.add_typer(iscsi.app, name="iscsi", help="iSCSI volume commands")
app.add_typer(nfs.app, name="nfs", help="NFS volume commands")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Optional[List[Path]] = typer.Option(
        None, "--config-file", help="Configuration file (may be repeated)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    obj = ctx.ensure_object(dict)
    obj["config_files"] = [str(path) for path in config_file] if config_file else None
    obj["debug"] = debug


def main() -> int:
    """Main entry point."""
    try:
        app()
        return 0
    except KeyboardInterrupt:
        typer.echo("\nOperation cancelled by user", err=True)
        return 130
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
