"""
Volume commands, registered once per backend.
"""

from pathlib import Path
from typing import List, Optional

import typer

from targetd_provisioner.cli.lib.runtime import (
    build_provisioner,
    parse_params,
    read_record,
    write_record,
)
from targetd_provisioner.provisioner.models import AccessMode, ProvisionRequest


def register(app: typer.Typer, backend: str) -> None:
    """Add provision and delete commands for ``backend`` to ``app``."""

    @app.command()
    def provision(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Volume name"),
        size: int = typer.Option(0, "--size", help="Size in bytes"),
        access_mode: Optional[List[str]] = typer.Option(
            None, "--access-mode", "-m", help="Access mode (ReadWriteOnce, ReadOnlyMany, ReadWriteMany)"
        ),
        param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Backend parameter as key=value"),
        output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the volume record to this file"),
    ):
        """
        Provision a volume.

        Creates the volume and its exports on targetd and prints the volume
        record needed to delete it later.
        """
        try:
            request = ProvisionRequest(
                name=name,
                size=size,
                access_modes=[AccessMode(mode) for mode in access_mode or []],
                parameters=parse_params(param),
            )
            provisioner = build_provisioner(ctx, backend)

            typer.echo(f"Provisioning {backend} volume: {name}", err=True)
            record = provisioner.provision(request)
            write_record(record, output)
            typer.echo(f"Volume {name} provisioned successfully", err=True)

        except Exception as e:
            typer.echo(f"Error provisioning volume: {e}", err=True)
            raise typer.Exit(1)

    @app.command()
    def delete(
        ctx: typer.Context,
        record_file: Path = typer.Argument(..., help="Volume record written by provision"),
    ):
        """
        Delete a volume.

        Removes the exports and the volume described by a saved volume record.
        """
        try:
            record = read_record(record_file)
            provisioner = build_provisioner(ctx, backend)

            typer.echo(f"Deleting {backend} volume: {record.name}")
            provisioner.delete(record)
            typer.echo(f"Volume {record.name} deleted successfully")

        except Exception as e:
            typer.echo(f"Error deleting volume: {e}", err=True)
            raise typer.Exit(1)
