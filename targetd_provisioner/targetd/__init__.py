"""targetd JSON-RPC client, error codes and exceptions."""

from .client import TargetdClient
from .errors import ErrorCode, RemoteError, is_absent, parse_remote_error

__all__ = ["TargetdClient", "ErrorCode", "RemoteError", "is_absent", "parse_remote_error"]
