"""
Pydantic models for provisioning requests, volume records and targetd listings.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AccessMode(str, Enum):
    """Volume access modes."""

    READ_WRITE_ONCE = "ReadWriteOnce"
    READ_ONLY_MANY = "ReadOnlyMany"
    READ_WRITE_MANY = "ReadWriteMany"


# Annotation keys written at provision time and read back by delete.
ANNOTATION_VOLUME_NAME = "volume_name"
ANNOTATION_POOL = "pool"
ANNOTATION_INITIATORS = "initiators"
ANNOTATION_UUID = "uuid"
ANNOTATION_HOSTS = "hosts"


class ProvisionRequest(BaseModel):
    """Request to provision one volume."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Volume name, unique across the cluster", min_length=1)
    size: int = Field(0, description="Requested size in bytes", ge=0)
    access_modes: List[AccessMode] = Field(default_factory=list)
    parameters: Dict[str, str] = Field(default_factory=dict, description="Backend parameters")
    reclaim_policy: str = Field("Delete", description="Reclaim policy copied to the record")
    volume_mode: Optional[str] = Field(None, description="Volume mode copied to the record")

    def param(self, key: str, default: str = "") -> str:
        """Return a parameter value, or ``default`` when absent."""
        return self.parameters.get(key, default)


class SecretReference(BaseModel):
    """Reference to the secret holding CHAP credentials."""

    name: str
    namespace: Optional[str] = None


class ISCSIVolumeSource(BaseModel):
    """Location of an iSCSI volume."""

    target_portal: str = ""
    portals: List[str] = Field(default_factory=list)
    iqn: str = ""
    iscsi_interface: str = ""
    lun: int = Field(..., ge=0, lt=255)
    read_only: bool = False
    fs_type: str = ""
    discovery_chap_auth: bool = False
    session_chap_auth: bool = False
    secret_ref: Optional[SecretReference] = None


class NFSVolumeSource(BaseModel):
    """Location of an NFS volume."""

    server: str = ""
    path: str
    read_only: bool = False


class VolumeRecord(BaseModel):
    """Provisioned volume as returned to, and later handed back by, the caller.

    The annotations are the only state kept between provision and delete.
    """

    name: str
    capacity: int = 0
    access_modes: List[AccessMode] = Field(default_factory=list)
    reclaim_policy: str = "Delete"
    volume_mode: Optional[str] = None
    annotations: Dict[str, str] = Field(default_factory=dict)
    iscsi: Optional[ISCSIVolumeSource] = None
    nfs: Optional[NFSVolumeSource] = None

    @model_validator(mode="after")
    def check_single_source(self) -> "VolumeRecord":
        if (self.iscsi is None) == (self.nfs is None):
            raise ValueError("exactly one of iscsi or nfs must be set")
        return self


# targetd listings


class Export(BaseModel):
    """One iSCSI export as returned by export_list."""

    model_config = ConfigDict(extra="ignore")

    initiator_wwn: str = ""
    lun: int
    vol_name: str = ""
    vol_size: int = 0
    vol_uuid: str = ""
    pool: str = ""


class NFSExport(BaseModel):
    """One NFS export as returned by nfs_export_list."""

    model_config = ConfigDict(extra="ignore")

    host: str
    path: str
    options: List[str] = Field(default_factory=list)


class FSVolume(BaseModel):
    """One filesystem volume as returned by fs_list."""

    model_config = ConfigDict(extra="ignore")

    name: str
    uuid: str
    total_space: int = 0
    free_space: int = 0
    pool: str = ""
    full_path: str = ""
