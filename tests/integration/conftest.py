"""Fixtures for integration tests: an in-memory targetd."""

import uuid
from typing import Any, Callable, Dict, List, Optional

import pytest

from targetd_provisioner.targetd.errors import ErrorCode
from targetd_provisioner.targetd.exceptions import TargetdRemoteError


class FakeTargetd:
    """In-memory stand-in for targetd with the same methods as TargetdClient.

    ``fail`` registers a hook that can raise before a method runs, to inject
    failures at a given step.
    """

    def __init__(self):
        self.volumes: Dict[tuple, int] = {}
        self.exports: List[Dict[str, Any]] = []
        self.auth: Dict[str, tuple] = {}
        self.filesystems: Dict[str, Dict[str, Any]] = {}
        self.nfs_exports: List[Dict[str, Any]] = []
        self.calls: List[tuple] = []
        self._hooks: Dict[str, Callable[..., None]] = {}

    def fail(self, method: str, hook: Optional[Callable[..., None]]):
        if hook is None:
            self._hooks.pop(method, None)
        else:
            self._hooks[method] = hook

    def _record(self, method: str, *args):
        self.calls.append((method,) + args)
        hook = self._hooks.get(method)
        if hook is not None:
            hook(*args)

    # Block

    def vol_create(self, pool, name, size):
        self._record("vol_create", pool, name, size)
        if (pool, name) in self.volumes:
            raise TargetdRemoteError(ErrorCode.NAME_CONFLICT, "Volume with that name exists")
        self.volumes[(pool, name)] = size

    def vol_destroy(self, pool, name):
        self._record("vol_destroy", pool, name)
        if (pool, name) not in self.volumes:
            raise TargetdRemoteError(ErrorCode.NOT_FOUND_VOLUME, f"Volume {name} not found")
        if any(e["pool"] == pool and e["vol_name"] == name for e in self.exports):
            raise TargetdRemoteError(ErrorCode.VOLUME_MASKED, f"Volume {name} is exported")
        del self.volumes[(pool, name)]

    def export_create(self, pool, vol, initiator_wwn, lun):
        self._record("export_create", pool, vol, initiator_wwn, lun)
        if (pool, vol) not in self.volumes:
            raise TargetdRemoteError(ErrorCode.NOT_FOUND_VOLUME, f"Volume {vol} not found")
        self.exports.append(
            {
                "initiator_wwn": initiator_wwn,
                "lun": lun,
                "vol_name": vol,
                "vol_size": self.volumes[(pool, vol)],
                "vol_uuid": f"{pool}-{vol}",
                "pool": pool,
            }
        )

    def export_destroy(self, pool, vol, initiator_wwn):
        self._record("export_destroy", pool, vol, initiator_wwn)
        for export in self.exports:
            if export["pool"] == pool and export["vol_name"] == vol and export["initiator_wwn"] == initiator_wwn:
                self.exports.remove(export)
                return
        raise TargetdRemoteError(ErrorCode.NOT_FOUND_VOLUME_EXPORT, "Volume export not found")

    def export_list(self):
        self._record("export_list")
        return [dict(export) for export in self.exports]

    def initiator_set_auth(self, initiator_wwn, in_user, in_pass, out_user, out_pass):
        self._record("initiator_set_auth", initiator_wwn, in_user, in_pass, out_user, out_pass)
        self.auth[initiator_wwn] = (in_user, in_pass, out_user, out_pass)

    # Filesystem

    def fs_create(self, pool_name, name, size_bytes=0):
        self._record("fs_create", pool_name, name, size_bytes)
        if any(fs["pool"] == pool_name and fs["name"] == name for fs in self.filesystems.values()):
            raise TargetdRemoteError(ErrorCode.EXISTS_FS_NAME, "Filesystem with that name exists")
        fs_uuid = uuid.uuid4().hex
        self.filesystems[fs_uuid] = {
            "name": name,
            "uuid": fs_uuid,
            "total_space": 0,
            "free_space": 0,
            "pool": pool_name,
            "full_path": f"/{pool_name}/{name}",
        }

    def fs_destroy(self, uuid):
        self._record("fs_destroy", uuid)
        if uuid not in self.filesystems:
            raise TargetdRemoteError(ErrorCode.NOT_FOUND_FS, "Filesystem not found")
        del self.filesystems[uuid]

    def fs_list(self):
        self._record("fs_list")
        return [dict(fs) for fs in self.filesystems.values()]

    def nfs_export_add(self, host, path, options):
        self._record("nfs_export_add", host, path, options)
        self.nfs_exports.append({"host": host, "path": path, "options": list(options)})

    def nfs_export_remove(self, host, path):
        self._record("nfs_export_remove", host, path)
        for export in self.nfs_exports:
            if export["host"] == host and export["path"] == path:
                self.nfs_exports.remove(export)
                return
        raise TargetdRemoteError(ErrorCode.NOT_FOUND_NFS_EXPORT, "NFS export not found")

    def nfs_export_list(self):
        self._record("nfs_export_list")
        return [dict(export) for export in self.nfs_exports]


@pytest.fixture
def fake_targetd():
    return FakeTargetd()
