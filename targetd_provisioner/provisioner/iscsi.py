"""iSCSI provisioner backed by targetd block volumes.

Provisioning is a strict sequence of targetd calls: export_list, vol_create,
then export_create (and initiator_set_auth for session CHAP) per initiator.
The first failure is raised as is. Nothing created before the failing step is
rolled back; the caller is expected to retry the whole operation.
"""

from typing import Optional

from pydantic import ValidationError

from targetd_provisioner.provisioner import lun as lun_allocator
from targetd_provisioner.provisioner.base import Provisioner, parse_bool, split_list
from targetd_provisioner.provisioner.chap import ChapSessionCredentials, load_chap_credentials
from targetd_provisioner.provisioner.models import (
    ANNOTATION_INITIATORS,
    ANNOTATION_POOL,
    ANNOTATION_VOLUME_NAME,
    AccessMode,
    Export,
    ISCSIVolumeSource,
    ProvisionRequest,
    SecretReference,
    VolumeRecord,
)
from targetd_provisioner.targetd.exceptions import TargetdTransportError

DEFAULT_FS = "xfs"


class IscsiProvisioner(Provisioner):
    """Provision iSCSI volumes on targetd."""

    access_modes = [
        AccessMode.READ_WRITE_ONCE,
        AccessMode.READ_ONLY_MANY,
    ]

    def supports_block(self) -> bool:
        return True

    def provision(self, request: ProvisionRequest) -> VolumeRecord:
        self.validate_access_modes(request.access_modes)
        self.log.debug("New provision request received for volume %s", request.name)

        pool = self.get_volume_group(request)
        try:
            lun = self._create_volume(request, pool)
        except Exception as e:
            self.log.warning("Failed to create volume %s: %s", request.name, e)
            raise
        self.log.debug("Volume %s created with lun %d", request.name, lun)

        annotations = {
            ANNOTATION_VOLUME_NAME: request.name,
            ANNOTATION_POOL: pool,
            ANNOTATION_INITIATORS: request.param("initiators"),
        }

        return VolumeRecord(
            name=request.name,
            capacity=request.size,
            access_modes=list(request.access_modes),
            reclaim_policy=request.reclaim_policy,
            volume_mode=request.volume_mode,
            annotations=annotations,
            iscsi=self._build_source(request, lun),
        )

    def delete(self, record: VolumeRecord) -> None:
        vol = record.annotations.get(ANNOTATION_VOLUME_NAME, "")
        pool = record.annotations.get(ANNOTATION_POOL, "")
        self.log.debug("Volume deletion request received for %s (vol: %s, pool: %s)", record.name, vol, pool)

        for initiator in split_list(record.annotations.get(ANNOTATION_INITIATORS, "")):
            self.log.debug("Removing iscsi export of %s for initiator %s", vol, initiator)
            try:
                self.client.export_destroy(pool, vol, initiator)
            except Exception as e:
                self.log.warning("Failed to destroy iscsi export of %s for initiator %s: %s", vol, initiator, e)
                raise
            self.log.debug("iscsi export of %s for initiator %s removed", vol, initiator)

        self.log.debug("Removing logical volume %s from pool %s", vol, pool)
        try:
            self.client.vol_destroy(pool, vol)
        except Exception as e:
            self.log.warning("Failed to remove logical volume %s: %s", vol, e)
            raise
        self.log.debug("Volume deletion request for %s completed", record.name)

    def _create_volume(self, request: ProvisionRequest, pool: str) -> int:
        """Run the create sequence and return the allocated LUN."""
        vol = request.name
        initiators = split_list(request.param("initiators"))
        session_chap = parse_bool(request.param("chapAuthSession"))

        credentials: Optional[ChapSessionCredentials] = None
        if session_chap:
            credentials = load_chap_credentials(self.configuration.session_chap_credential_file_path)

        self.log.debug("Calling export_list")
        try:
            exports = [Export.model_validate(item) for item in self.client.export_list()]
        except ValidationError as e:
            raise TargetdTransportError(f"export_list returned an invalid export: {e}")
        lun = lun_allocator.first_available_lun(exports, log=self.log)

        self.log.debug("Creating volume %s (size: %d, pool: %s)", vol, request.size, pool)
        self.client.vol_create(pool, vol, request.size)

        for initiator in initiators:
            self.log.debug("Exporting volume %s to initiator %s at lun %d", vol, initiator, lun)
            self.client.export_create(pool, vol, initiator, lun)

            if credentials is not None:
                self.log.debug(
                    "Setting up chap session auth for initiator %s (in_user: %s, out_user: %s)",
                    initiator,
                    credentials.in_user,
                    credentials.out_user,
                )
                self.client.initiator_set_auth(
                    initiator,
                    credentials.in_user,
                    credentials.in_password,
                    credentials.out_user,
                    credentials.out_password,
                )
        return lun

    def _build_source(self, request: ProvisionRequest, lun: int) -> ISCSIVolumeSource:
        discovery_chap = parse_bool(request.param("chapAuthDiscovery"))
        session_chap = parse_bool(request.param("chapAuthSession"))

        secret_ref = None
        if discovery_chap or session_chap:
            secret_ref = SecretReference(name=f"{self.configuration.iscsi_provisioner_name}-chap-secret")

        return ISCSIVolumeSource(
            target_portal=request.param("targetPortal"),
            portals=split_list(request.param("portals")),
            iqn=request.param("iqn"),
            iscsi_interface=request.param("iscsiInterface"),
            lun=lun,
            read_only=parse_bool(request.param("readonly")),
            fs_type=request.param("fsType") or getattr(self.configuration, "default_fs", None) or DEFAULT_FS,
            discovery_chap_auth=discovery_chap,
            session_chap_auth=session_chap,
            secret_ref=secret_ref,
        )
