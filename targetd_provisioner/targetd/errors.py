"""targetd error codes and classification of failed calls.

targetd reports failures as JSON-RPC error objects whose ``code`` is one of a
fixed set of negative integers. Some codes are shared between the block and
filesystem APIs, others only make sense for one of them.
"""

import enum
import json
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .exceptions import TargetdRemoteError


class ErrorCode(enum.IntEnum):
    """Error codes returned by targetd."""

    # Common
    INVALID = -1
    NAME_CONFLICT = -50
    NO_SUPPORT = -153
    UNEXPECTED_EXIT_CODE = -303
    INVALID_ARGUMENT = -32602

    # Block
    EXISTS_INITIATOR = -52
    NOT_FOUND_VOLUME = -103
    NOT_FOUND_VOLUME_GROUP = -152
    NOT_FOUND_ACCESS_GROUP = -200
    VOLUME_MASKED = -303
    NO_FREE_HOST_LUN_ID = -1000

    # Filesystem / NFS
    EXISTS_CLONE_NAME = -51
    EXISTS_FS_NAME = -53
    NOT_FOUND_FS = -104
    INVALID_POOL = -110
    NOT_FOUND_SS = -112
    NOT_FOUND_VOLUME_EXPORT = -151
    NOT_FOUND_NFS_EXPORT = -400
    NFS_NO_SUPPORT = -401


# Codes meaning the thing being removed is already gone.
NFS_EXPORT_ABSENT_CODES = (ErrorCode.NOT_FOUND_NFS_EXPORT,)
FS_VOLUME_ABSENT_CODES = (ErrorCode.NOT_FOUND_VOLUME, ErrorCode.NOT_FOUND_FS)


@dataclass(frozen=True)
class RemoteError:
    """Decoded ``{code, message}`` payload of a targetd failure."""

    code: int
    message: str


def parse_remote_error(error: Union[BaseException, str, None]) -> Optional[RemoteError]:
    """Decode a failure into a RemoteError.

    A TargetdRemoteError already carries the payload. Anything else has its
    text parsed as JSON; if that does not yield an object with an integer
    ``code`` the error is opaque and None is returned.
    """
    if error is None:
        return None
    if isinstance(error, TargetdRemoteError):
        return RemoteError(code=error.code, message=error.message)

    text = error if isinstance(error, str) else str(error)
    try:
        payload = json.loads(text)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None

    code = payload.get("code")
    if isinstance(code, bool) or not isinstance(code, int):
        return None
    message = payload.get("message", "")
    return RemoteError(code=code, message=str(message))


def is_absent(error: Union[BaseException, str, None], codes: Iterable[int]) -> bool:
    """Return True if ``error`` is a remote error whose code is in ``codes``.

    Opaque errors are never treated as absence.
    """
    remote = parse_remote_error(error)
    if remote is None:
        return False
    return remote.code in {int(code) for code in codes}
