"""Configuration options for the targetd provisioner."""

from typing import List, Optional

from oslo_config import cfg
from oslo_log import log as logging

# Configuration group name
CONF_GROUP = "targetd"

PROJECT = "targetd-provisioner"

DEFAULT_CHAP_CREDENTIAL_FILE = (
    "/var/run/secrets/iscsi-provisioner/session-chap-credential.properties"
)


def _get_targetd_opts():
    """Get targetd provisioner configuration options.

    Returns:
        List of oslo_config options
    """
    return [
        # Endpoint Configuration
        cfg.StrOpt(
            "scheme",
            default="http",
            choices=["http", "https"],
            help="Scheme of the targetd connection",
        ),
        cfg.StrOpt(
            "address",
            default="localhost",
            help="IP or DNS name of the targetd server",
        ),
        cfg.PortOpt(
            "port",
            default=18700,
            help="Port on which targetd is listening",
        ),
        cfg.StrOpt(
            "path",
            default="/targetrpc",
            help="HTTP path of the targetd JSON-RPC endpoint",
        ),
        cfg.StrOpt(
            "username",
            default="admin",
            help="Username for the targetd connection",
        ),
        cfg.StrOpt(
            "password",
            default="",
            secret=True,
            help="Password for the targetd connection",
        ),
        cfg.FloatOpt(
            "timeout",
            default=30.0,
            min=1.0,
            max=600.0,
            help="Transport timeout in seconds for each targetd call",
        ),
        cfg.BoolOpt(
            "verify_ssl",
            default=True,
            help="Verify SSL certificates when scheme is https",
        ),
        # Provisioning Defaults
        cfg.StrOpt(
            "default_fs",
            default="xfs",
            help="Filesystem to use for iSCSI volumes when fsType is not specified",
        ),
        cfg.StrOpt(
            "default_volume_group",
            default="vg-targetd",
            help="Pool used when the volumeGroup parameter is not specified",
        ),
        cfg.StrOpt(
            "session_chap_credential_file_path",
            default=DEFAULT_CHAP_CREDENTIAL_FILE,
            help="Path of the credential file for session CHAP authentication",
        ),
        cfg.StrOpt(
            "iscsi_provisioner_name",
            default="iscsi-targetd",
            help=(
                "Name of the iSCSI provisioner, used as its logger name and to "
                "name the CHAP secret referenced by provisioned volumes."
            ),
        ),
        cfg.StrOpt(
            "nfs_provisioner_name",
            default="nfs-targetd",
            help="Name of the NFS provisioner. Also used as its logger name.",
        ),
        # Failure Policy
        cfg.BoolOpt(
            "nfs_strict_mode",
            default=False,
            help=(
                "When True, a failed NFS export creation aborts provisioning "
                "and a failed filesystem removal is reported by delete. When "
                "False, both are only logged."
            ),
        ),
    ]


def register_opts(conf, group=None):
    """Register targetd configuration options.

    Args:
        conf: oslo_config.cfg.ConfigOpts instance
        group: Configuration group name (default: CONF_GROUP)
    """
    if group is None:
        group = CONF_GROUP
    conf.register_opts(_get_targetd_opts(), group=group)


def list_opts():
    """Return a list of targetd options for oslo-config-generator.

    Returns:
        List of (group_name, options) tuples
    """
    return [
        (CONF_GROUP, _get_targetd_opts()),
    ]


def get_targetd_opts():
    """Get targetd configuration options (public API)."""
    return _get_targetd_opts()


def load_config(
    argv: Optional[List[str]] = None,
    config_files: Optional[List[str]] = None,
) -> cfg.ConfigOpts:
    """Build a ConfigOpts with targetd and logging options registered.

    Args:
        argv: Command line arguments for oslo.config (default: none)
        config_files: Explicit config files; searched in the default
            locations for the project when omitted

    Returns:
        Parsed oslo_config.cfg.ConfigOpts instance
    """
    conf = cfg.ConfigOpts()
    register_opts(conf)
    logging.register_options(conf)

    default_files = config_files
    if default_files is None:
        default_files = cfg.find_config_files(project=PROJECT)

    conf(
        args=argv or [],
        project=PROJECT,
        default_config_files=default_files,
    )
    return conf


def get_targetd_url(targetd_conf) -> str:
    """Build the targetd endpoint URL from the [targetd] group.

    Credentials are not embedded; they are passed to the client separately.
    """
    path = targetd_conf.path or "/"
    if not path.startswith("/"):
        path = "/" + path
    return f"{targetd_conf.scheme}://{targetd_conf.address}:{targetd_conf.port}{path}"
