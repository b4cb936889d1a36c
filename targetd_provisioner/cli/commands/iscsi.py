"""
iSCSI backend commands.
"""

import typer

from targetd_provisioner.cli.commands import volume
from targetd_provisioner.cli.lib.runtime import build_client, load_conf
from targetd_provisioner.provisioner.models import Export

app = typer.Typer(help="iSCSI volume commands")

volume.register(app, "iscsi")


@app.command()
def exports(ctx: typer.Context):
    """
    List iSCSI exports.

    Shows every export known to targetd, including the LUN in use.
    """
    try:
        client = build_client(load_conf(ctx))
        items = [Export.model_validate(item) for item in client.export_list()]

        if not items:
            typer.echo("No exports found")
            return

        for export in sorted(items, key=lambda e: (e.lun, e.initiator_wwn)):
            typer.echo(f"{export.lun:>3}  {export.pool}/{export.vol_name}  {export.initiator_wwn}")

    except Exception as e:
        typer.echo(f"Error listing exports: {e}", err=True)
        raise typer.Exit(1)
