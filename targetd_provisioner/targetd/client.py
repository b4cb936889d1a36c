"""JSON-RPC client for targetd."""

import itertools
from typing import Any, Dict, List, Optional

import requests
from oslo_log import log as logging

from .exceptions import (
    TargetdConnectionError,
    TargetdRemoteError,
    TargetdTimeout,
    TargetdTransportError,
)

LOG = logging.getLogger(__name__)

_request_ids = itertools.count(1)


class TargetdClient:
    """JSON-RPC 2.0 client for the targetd storage daemon.

    Every call opens its own HTTP session against a single fixed endpoint and
    closes it before returning, so an instance can be shared freely between
    threads. Remote failures are raised as TargetdRemoteError without any
    interpretation of the error code.
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30,
        verify_ssl: bool = True,
    ):
        """Initialize targetd client.

        Args:
            url: targetd RPC endpoint (e.g., http://192.168.10.5:18700/targetrpc)
            username: HTTP basic auth user
            password: HTTP basic auth password
            timeout: Transport timeout in seconds for every call
            verify_ssl: Whether to verify SSL certificates
        """
        self.url = url
        self.username = username
        self.password = password
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    @property
    def auth(self):
        if self.username is None:
            return None
        return (self.username, self.password or "")

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Issue one JSON-RPC call and return its result.

        Args:
            method: targetd method name (e.g., vol_create)
            params: Named parameters, or None for methods without arguments

        Returns:
            The decoded ``result`` member of the reply

        Raises:
            TargetdConnectionError: Connection failed
            TargetdTimeout: No reply within the timeout
            TargetdTransportError: Reply was not a JSON-RPC response
            TargetdRemoteError: targetd returned an error object
        """
        body: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": method,
        }
        if params is not None:
            body["params"] = params

        LOG.debug("Calling targetd method %s", method)
        try:
            with requests.Session() as session:
                response = session.post(
                    self.url,
                    json=body,
                    auth=self.auth,
                    timeout=self.timeout,
                    verify=self.verify_ssl,
                )
        except requests.exceptions.Timeout as e:
            raise TargetdTimeout(f"targetd call {method} timed out after {self.timeout}s: {e}")
        except requests.exceptions.ConnectionError as e:
            raise TargetdConnectionError(f"Failed to connect to targetd: {e}")
        except requests.exceptions.RequestException as e:
            raise TargetdTransportError(f"targetd call {method} failed: {e}")

        try:
            reply = response.json()
        except ValueError:
            reply = None

        if isinstance(reply, dict) and isinstance(reply.get("error"), dict):
            error = reply["error"]
            raise TargetdRemoteError(
                code=error.get("code", 0),
                message=error.get("message", ""),
            )

        if response.status_code >= 400:
            raise TargetdTransportError(
                f"targetd call {method} failed with HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        if not isinstance(reply, dict) or "result" not in reply:
            raise TargetdTransportError(
                f"targetd call {method} returned an invalid reply: {response.text}",
                status_code=response.status_code,
            )

        return reply.get("result")

    # Block operations

    def vol_create(self, pool: str, name: str, size: int) -> None:
        self.call("vol_create", {"pool": pool, "name": name, "size": size})

    def vol_destroy(self, pool: str, name: str) -> None:
        self.call("vol_destroy", {"pool": pool, "name": name})

    def export_create(self, pool: str, vol: str, initiator_wwn: str, lun: int) -> None:
        self.call(
            "export_create",
            {"pool": pool, "vol": vol, "initiator_wwn": initiator_wwn, "lun": lun},
        )

    def export_destroy(self, pool: str, vol: str, initiator_wwn: str) -> None:
        self.call("export_destroy", {"pool": pool, "vol": vol, "initiator_wwn": initiator_wwn})

    def export_list(self) -> List[Dict[str, Any]]:
        """List every iSCSI export known to targetd, across all volumes."""
        return self.call("export_list") or []

    def initiator_set_auth(
        self,
        initiator_wwn: str,
        in_user: str,
        in_pass: str,
        out_user: str,
        out_pass: str,
    ) -> None:
        self.call(
            "initiator_set_auth",
            {
                "initiator_wwn": initiator_wwn,
                "in_user": in_user,
                "in_pass": in_pass,
                "out_user": out_user,
                "out_pass": out_pass,
            },
        )

    # Filesystem operations

    def fs_create(self, pool_name: str, name: str, size_bytes: int = 0) -> None:
        self.call("fs_create", {"pool_name": pool_name, "name": name, "size_bytes": size_bytes})

    def fs_destroy(self, uuid: str) -> None:
        self.call("fs_destroy", {"uuid": uuid})

    def fs_list(self) -> List[Dict[str, Any]]:
        return self.call("fs_list") or []

    def nfs_export_add(self, host: str, path: str, options: List[str]) -> None:
        self.call("nfs_export_add", {"host": host, "path": path, "options": options})

    def nfs_export_remove(self, host: str, path: str) -> None:
        self.call("nfs_export_remove", {"host": host, "path": path})

    def nfs_export_list(self) -> List[Dict[str, Any]]:
        return self.call("nfs_export_list") or []
