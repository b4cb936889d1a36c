"""Base class for targetd provisioners."""

from abc import ABC, abstractmethod
from typing import Iterable, List

from oslo_log import log as logging

from targetd_provisioner.provisioner.models import AccessMode, ProvisionRequest, VolumeRecord
from targetd_provisioner.targetd.client import TargetdClient
from targetd_provisioner.targetd.exceptions import AccessModeError

LOG = logging.getLogger(__name__)

DEFAULT_VOLUME_GROUP = "vg-targetd"

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}


def parse_bool(value: str) -> bool:
    """Parse a boolean parameter; only the exact true spellings count, anything else is False."""
    return value in _TRUE_VALUES


def split_list(value: str) -> List[str]:
    """Split a comma separated parameter, dropping empty entries."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Provisioner(ABC):
    """Abstract base class for targetd provisioners.

    A provisioner creates a volume and its exports on targetd, and removes
    them again given the record it returned. It keeps no state between calls
    besides the client, configuration and logger it was built with.
    """

    #: Access modes the backend can serve.
    access_modes: List[AccessMode] = []

    def __init__(self, client: TargetdClient, configuration, log=None):
        """Initialize provisioner.

        Args:
            client: targetd client
            configuration: Object exposing the [targetd] options as attributes
            log: Logger; defaults to the module logger
        """
        self.client = client
        self.configuration = configuration
        self.log = log or LOG

    def get_access_modes(self) -> List[AccessMode]:
        return list(self.access_modes)

    def validate_access_modes(self, requested: Iterable[AccessMode]) -> None:
        """Raise AccessModeError unless every requested mode is supported."""
        requested = list(requested)
        supported = self.get_access_modes()
        if any(mode not in supported for mode in requested):
            raise AccessModeError(requested, supported)

    def get_volume_group(self, request: ProvisionRequest) -> str:
        pool = request.param("volumeGroup")
        if pool:
            return pool
        return getattr(self.configuration, "default_volume_group", None) or DEFAULT_VOLUME_GROUP

    @abstractmethod
    def provision(self, request: ProvisionRequest) -> VolumeRecord:
        """Create the volume and its exports.

        Raises:
            AccessModeError: Unsupported access modes (no remote call made)
            TargetdProvisionerException: Any other failure
        """
        pass

    @abstractmethod
    def delete(self, record: VolumeRecord) -> None:
        """Remove the exports and volume described by ``record``."""
        pass

    @abstractmethod
    def supports_block(self) -> bool:
        pass
