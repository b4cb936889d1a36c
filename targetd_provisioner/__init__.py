"""
targetd provisioner - iSCSI and NFS volume provisioning on top of targetd.

This package provides the provisioners that create and remove targetd volumes
and exports, the targetd JSON-RPC client they use, and a CLI to drive them.
"""

__version__ = "0.1.0"
__all__ = ["cli", "provisioner", "targetd"]
