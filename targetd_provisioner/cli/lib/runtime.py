"""
Helpers shared by the CLI commands: configuration, client and provisioner setup.
"""

from pathlib import Path
from typing import Dict, List, Optional

import typer
from oslo_log import log as logging

from targetd_provisioner import configuration
from targetd_provisioner.provisioner import Provisioner, get_provisioner
from targetd_provisioner.provisioner.models import VolumeRecord
from targetd_provisioner.targetd.client import TargetdClient


def load_conf(ctx: typer.Context):
    """Load configuration once per invocation and set up logging."""
    obj = ctx.ensure_object(dict)
    if "conf" not in obj:
        conf = configuration.load_config(config_files=obj.get("config_files"))
        if obj.get("debug"):
            conf.set_override("debug", True)
        logging.setup(conf, configuration.PROJECT)
        obj["conf"] = conf
    return obj["conf"]


def build_client(conf) -> TargetdClient:
    targetd_conf = conf.targetd
    return TargetdClient(
        url=configuration.get_targetd_url(targetd_conf),
        username=targetd_conf.username,
        password=targetd_conf.password,
        timeout=targetd_conf.timeout,
        verify_ssl=targetd_conf.verify_ssl,
    )


def build_provisioner(ctx: typer.Context, backend: str) -> Provisioner:
    """Build the provisioner for ``backend``, logging under its configured name."""
    conf = load_conf(ctx)
    name = getattr(conf.targetd, f"{backend}_provisioner_name", backend)
    log = logging.getLogger(f"targetd_provisioner.{name}")
    log.debug("Using %s provisioner %s", backend, name)
    return get_provisioner(backend, build_client(conf), conf.targetd, log=log)


def parse_params(params: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse ``key=value`` parameters.

    Raises:
        ValueError: If a parameter has no ``=`` or an empty key
    """
    parsed: Dict[str, str] = {}
    for item in params or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid parameter '{item}': expected key=value")
        parsed[key.strip()] = value
    return parsed


def read_record(path: Path) -> VolumeRecord:
    return VolumeRecord.model_validate_json(path.read_text(encoding="utf-8"))


def write_record(record: VolumeRecord, path: Optional[Path]) -> None:
    data = record.model_dump_json(indent=2)
    if path is None:
        typer.echo(data)
    else:
        path.write_text(data + "\n", encoding="utf-8")
