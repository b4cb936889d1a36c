"""Provisioners for targetd.

This package provides one provisioner per targetd backend:
- IscsiProvisioner: block volumes exported over iSCSI
- NfsProvisioner: filesystem volumes exported over NFS
"""

from typing import Dict, Type

from .base import Provisioner
from .iscsi import IscsiProvisioner
from .nfs import NfsProvisioner

BACKENDS: Dict[str, Type[Provisioner]] = {
    "iscsi": IscsiProvisioner,
    "nfs": NfsProvisioner,
}


def get_provisioner(backend: str, client, configuration, log=None) -> Provisioner:
    """Build the provisioner for ``backend``.

    Raises:
        ValueError: Unknown backend name
    """
    try:
        provisioner_class = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Invalid backend: {backend}. Must be one of: {', '.join(sorted(BACKENDS))}"
        )
    return provisioner_class(client, configuration, log=log)


__all__ = ["Provisioner", "IscsiProvisioner", "NfsProvisioner", "BACKENDS", "get_provisioner"]
