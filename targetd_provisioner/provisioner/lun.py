"""LUN allocation for iSCSI exports."""

from typing import Any, Iterable, List, Mapping, Union

from oslo_log import log as logging

from targetd_provisioner.provisioner.models import Export
from targetd_provisioner.targetd.exceptions import LunExhaustedError

LOG = logging.getLogger(__name__)

MAX_LUNS = 255


def _lun_of(export: Union[Export, Mapping[str, Any]]) -> int:
    if isinstance(export, Export):
        return export.lun
    return int(export["lun"])


def used_luns(exports: Iterable[Union[Export, Mapping[str, Any]]]) -> List[int]:
    """Return the sorted, de-duplicated LUNs in use.

    A volume exported to several initiators shows up once per initiator with
    the same LUN; those entries occupy a single slot.
    """
    return sorted({_lun_of(export) for export in exports})


def first_available_lun(exports: Iterable[Union[Export, Mapping[str, Any]]], log=None) -> int:
    """Return the lowest LUN not used by any export.

    LUNs are shared by every volume on the target, so ``exports`` must be the
    complete export_list fetched right before the allocation.

    Raises:
        LunExhaustedError: All 255 LUNs are in use
    """
    log = log or LOG
    luns = used_luns(exports)
    log.debug("Used LUNs: %s", luns)

    if len(luns) >= MAX_LUNS:
        raise LunExhaustedError(f"{MAX_LUNS} luns allocated no more luns available")

    for index, lun in enumerate(luns):
        if index < lun:
            return index
    return len(luns)
