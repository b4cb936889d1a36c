"""
NFS backend commands.
"""

import typer

from targetd_provisioner.cli.commands import volume
from targetd_provisioner.cli.lib.runtime import build_client, load_conf
from targetd_provisioner.provisioner.models import FSVolume, NFSExport

app = typer.Typer(help="NFS volume commands")

volume.register(app, "nfs")


@app.command()
def exports(ctx: typer.Context):
    """
    List NFS exports.
    """
    try:
        client = build_client(load_conf(ctx))
        items = [NFSExport.model_validate(item) for item in client.nfs_export_list()]

        if not items:
            typer.echo("No exports found")
            return

        for export in items:
            typer.echo(f"{export.host}  {export.path}  {','.join(export.options)}")

    except Exception as e:
        typer.echo(f"Error listing exports: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def volumes(ctx: typer.Context):
    """
    List filesystem volumes.
    """
    try:
        client = build_client(load_conf(ctx))
        items = [FSVolume.model_validate(item) for item in client.fs_list()]

        if not items:
            typer.echo("No volumes found")
            return

        for fs in items:
            typer.echo(f"{fs.pool}/{fs.name}  {fs.uuid}  {fs.full_path}")

    except Exception as e:
        typer.echo(f"Error listing volumes: {e}", err=True)
        raise typer.Exit(1)
