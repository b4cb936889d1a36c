"""Custom exceptions for the targetd provisioner."""

import json
from typing import Any, Dict, List, Optional


class TargetdProvisionerException(Exception):
    """Base exception for targetd provisioner errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class AccessModeError(TargetdProvisionerException):
    """Requested access modes are not supported by the backend."""

    def __init__(self, requested: List[Any], supported: List[Any]):
        self.requested = list(requested)
        self.supported = list(supported)
        super().__init__(
            "invalid AccessModes %s: only AccessModes %s are supported"
            % (_mode_names(self.requested), _mode_names(self.supported))
        )


class TargetdTransportError(TargetdProvisionerException):
    """The remote call could not be completed or its reply was not understood."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TargetdConnectionError(TargetdTransportError):
    """Failed to connect to targetd."""

    pass


class TargetdTimeout(TargetdTransportError):
    """targetd did not answer within the transport timeout."""

    pass


class TargetdRemoteError(TargetdProvisionerException):
    """targetd answered with a JSON-RPC error object.

    The string form is the JSON encoding of ``{"code": ..., "message": ...}``
    so callers that only hold the text can still recover the code.
    """

    def __init__(self, code: int, message: str):
        self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}

    def __str__(self) -> str:
        return json.dumps(self.to_dict())


class LunExhaustedError(TargetdProvisionerException):
    """No free LUN slot is left on the target."""

    pass


class VolumeNotFoundError(TargetdProvisionerException):
    """A filesystem volume that was just created is missing from fs_list."""

    pass


class ChapCredentialsError(TargetdProvisionerException):
    """CHAP session credential file is unreadable or incomplete."""

    pass


def _mode_names(modes: List[Any]) -> List[str]:
    return [getattr(mode, "value", mode) for mode in modes]
