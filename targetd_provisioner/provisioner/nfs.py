"""NFS provisioner backed by targetd filesystem volumes."""

from typing import List, Tuple

from pydantic import ValidationError

from targetd_provisioner.provisioner.base import Provisioner, parse_bool, split_list
from targetd_provisioner.provisioner.models import (
    ANNOTATION_HOSTS,
    ANNOTATION_UUID,
    AccessMode,
    FSVolume,
    NFSVolumeSource,
    ProvisionRequest,
    VolumeRecord,
)
from targetd_provisioner.targetd import errors as targetd_errors
from targetd_provisioner.targetd.exceptions import TargetdTransportError, VolumeNotFoundError


class NfsProvisioner(Provisioner):
    """Provision NFS volumes on targetd.

    Unlike the iSCSI backend, failures are handled leniently: an export that
    cannot be created for one host is logged and skipped, exports that are
    already gone are ignored on delete, and a failed filesystem removal is
    only logged. Setting ``nfs_strict_mode`` turns the export creation and
    filesystem removal failures into errors.
    """

    access_modes = [
        AccessMode.READ_WRITE_MANY,
        AccessMode.READ_ONLY_MANY,
        AccessMode.READ_WRITE_ONCE,
    ]

    def supports_block(self) -> bool:
        return False

    @property
    def strict(self) -> bool:
        return getattr(self.configuration, "nfs_strict_mode", False) is True

    def provision(self, request: ProvisionRequest) -> VolumeRecord:
        self.validate_access_modes(request.access_modes)
        self.log.debug("New provision request received for volume %s", request.name)

        try:
            path, uuid = self._create_volume(request)
        except Exception as e:
            self.log.warning("Failed to create volume %s: %s", request.name, e)
            raise
        self.log.debug("Volume %s created at %s", request.name, path)

        annotations = {
            ANNOTATION_UUID: uuid,
            ANNOTATION_HOSTS: request.param("hosts"),
        }

        return VolumeRecord(
            name=request.name,
            capacity=request.size,
            access_modes=list(request.access_modes),
            reclaim_policy=request.reclaim_policy,
            volume_mode=request.volume_mode,
            annotations=annotations,
            nfs=NFSVolumeSource(
                server=request.param("host"),
                path=path,
                read_only=parse_bool(request.param("readonly")),
            ),
        )

    def delete(self, record: VolumeRecord) -> None:
        uuid = record.annotations.get(ANNOTATION_UUID, "")
        path = record.nfs.path if record.nfs is not None else ""
        self.log.debug("Volume deletion request received for %s (uuid: %s)", record.name, uuid)

        for host in split_list(record.annotations.get(ANNOTATION_HOSTS, "")):
            self.log.debug("Removing nfs export %s for host %s", path, host)
            try:
                self.client.nfs_export_remove(host, path)
            except Exception as e:
                if not targetd_errors.is_absent(e, targetd_errors.NFS_EXPORT_ABSENT_CODES):
                    self.log.warning("Failed to destroy nfs export %s for host %s: %s", path, host, e)
                    raise
                self.log.warning("nfs export %s for host %s was already removed", path, host)
                continue
            self.log.debug("nfs export %s for host %s removed", path, host)

        self.log.debug("Removing filesystem volume %s", uuid)
        try:
            self.client.fs_destroy(uuid)
        except Exception as e:
            if targetd_errors.is_absent(e, targetd_errors.FS_VOLUME_ABSENT_CODES):
                self.log.debug("Filesystem volume %s was already removed", uuid)
            else:
                self.log.warning("Failed to destroy filesystem volume %s: %s", uuid, e)
                if self.strict:
                    raise
        self.log.debug("Volume deletion request for %s completed", record.name)

    def _create_volume(self, request: ProvisionRequest) -> Tuple[str, str]:
        """Create the filesystem and its exports; return (full path, uuid)."""
        vol = request.name
        pool = self.get_volume_group(request)
        hosts = split_list(request.param("hosts"))
        options = self._get_nfs_options(request)

        self.log.debug("Creating volume %s in pool %s", vol, pool)
        self.client.fs_create(pool, vol, 0)

        path, uuid = self._find_volume(vol, pool)
        self.log.debug("Created volume %s in pool %s (full path: %s)", vol, pool, path)

        for host in hosts:
            self.log.debug("Exporting volume %s to host %s", vol, host)
            try:
                self.client.nfs_export_add(host, path, options)
            except Exception as e:
                self.log.warning("Failed to create nfs export of %s for host %s: %s", vol, host, e)
                if self.strict:
                    raise
        return path, uuid

    def _find_volume(self, name: str, pool: str) -> Tuple[str, str]:
        """Look up a filesystem by pool and name, since fs_create returns nothing."""
        try:
            volumes = [FSVolume.model_validate(item) for item in self.client.fs_list()]
        except ValidationError as e:
            raise TargetdTransportError(f"fs_list returned an invalid volume: {e}")
        for volume in volumes:
            if volume.pool == pool and volume.name == name:
                return volume.full_path, volume.uuid
        raise VolumeNotFoundError(f"failed to find the created volume {name} in pool {pool}")

    @staticmethod
    def _get_nfs_options(request: ProvisionRequest) -> List[str]:
        return split_list(request.param("options"))
