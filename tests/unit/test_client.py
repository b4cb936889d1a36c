"""Unit tests for the targetd JSON-RPC client."""

import json
import unittest
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from targetd_provisioner.targetd import client as targetd_client
from targetd_provisioner.targetd import exceptions as targetd_exceptions


def _response(status_code=200, body=None, text=None):
    response = Mock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    response.text = text if text is not None else json.dumps(body)
    return response


class TestTargetdClient(unittest.TestCase):
    """Test TargetdClient class."""

    def setUp(self):
        """Set up test fixtures."""
        self.url = "http://192.168.10.5:18700/targetrpc"

    def _client(self, **kwargs):
        return targetd_client.TargetdClient(
            url=self.url, username="admin", password="secret", timeout=5, **kwargs
        )

    def _mock_session(self, mock_requests, *responses):
        # Preserve real exceptions
        mock_requests.exceptions = requests.exceptions

        session = MagicMock()
        session.__enter__.return_value = session
        session.post.side_effect = list(responses)
        mock_requests.Session.return_value = session
        return session

    @patch("targetd_provisioner.targetd.client.requests")
    def test_call_success(self, mock_requests):
        """Test successful call returns the result member."""
        session = self._mock_session(
            mock_requests, _response(body={"jsonrpc": "2.0", "id": 1, "result": [{"lun": 0}]})
        )

        result = self._client().call("export_list")

        assert result == [{"lun": 0}]
        args, kwargs = session.post.call_args
        assert args == (self.url,)
        assert kwargs["json"]["jsonrpc"] == "2.0"
        assert kwargs["json"]["method"] == "export_list"
        assert "params" not in kwargs["json"]
        assert kwargs["auth"] == ("admin", "secret")
        assert kwargs["timeout"] == 5
        assert kwargs["verify"] is True

    @patch("targetd_provisioner.targetd.client.requests")
    def test_call_sends_params(self, mock_requests):
        """Test parameters are sent by name."""
        session = self._mock_session(mock_requests, _response(body={"id": 1, "result": None}))

        self._client().vol_create("vg-targetd", "pvc-1", 1024)

        body = session.post.call_args[1]["json"]
        assert body["method"] == "vol_create"
        assert body["params"] == {"pool": "vg-targetd", "name": "pvc-1", "size": 1024}

    @patch("targetd_provisioner.targetd.client.requests")
    def test_session_per_call(self, mock_requests):
        """Test every call opens and closes its own session."""
        session = self._mock_session(
            mock_requests,
            _response(body={"id": 1, "result": None}),
            _response(body={"id": 2, "result": None}),
        )

        client = self._client()
        client.vol_destroy("vg-targetd", "pvc-1")
        client.export_destroy("vg-targetd", "pvc-1", "iqn.a")

        assert mock_requests.Session.call_count == 2
        assert session.__exit__.call_count == 2

    @patch("targetd_provisioner.targetd.client.requests")
    def test_remote_error(self, mock_requests):
        """Test JSON-RPC error objects become TargetdRemoteError."""
        self._mock_session(
            mock_requests,
            _response(body={"id": 1, "error": {"code": -400, "message": "NFS export not found"}}),
        )

        with pytest.raises(targetd_exceptions.TargetdRemoteError) as exc_info:
            self._client().nfs_export_remove("10.0.0.1", "/vg-targetd/pvc-1")

        assert exc_info.value.code == -400
        assert exc_info.value.message == "NFS export not found"
        assert json.loads(str(exc_info.value)) == {"code": -400, "message": "NFS export not found"}

    @patch("targetd_provisioner.targetd.client.requests")
    def test_remote_error_with_http_error_status(self, mock_requests):
        """Test an error object wins over the HTTP status."""
        self._mock_session(
            mock_requests,
            _response(status_code=500, body={"id": 1, "error": {"code": -103, "message": "Volume not found"}}),
        )

        with pytest.raises(targetd_exceptions.TargetdRemoteError) as exc_info:
            self._client().vol_destroy("vg-targetd", "missing")

        assert exc_info.value.code == -103

    @patch("targetd_provisioner.targetd.client.requests")
    def test_http_error_without_rpc_error(self, mock_requests):
        """Test HTTP errors without an error object are transport errors."""
        self._mock_session(
            mock_requests, _response(status_code=401, body=ValueError("no json"), text="Unauthorized")
        )

        with pytest.raises(targetd_exceptions.TargetdTransportError) as exc_info:
            self._client().fs_list()

        assert exc_info.value.status_code == 401
        assert "Unauthorized" in str(exc_info.value)

    @patch("targetd_provisioner.targetd.client.requests")
    def test_invalid_reply(self, mock_requests):
        """Test a 200 reply that is not JSON-RPC is a transport error."""
        self._mock_session(mock_requests, _response(body=ValueError("no json"), text="<html>"))

        with pytest.raises(targetd_exceptions.TargetdTransportError):
            self._client().fs_list()

    @patch("targetd_provisioner.targetd.client.requests")
    def test_timeout(self, mock_requests):
        """Test transport timeout."""
        session = self._mock_session(mock_requests)
        session.post.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(targetd_exceptions.TargetdTimeout):
            self._client().export_list()

    @patch("targetd_provisioner.targetd.client.requests")
    def test_connection_error(self, mock_requests):
        """Test connection failures are transport errors."""
        session = self._mock_session(mock_requests)
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(targetd_exceptions.TargetdConnectionError) as exc_info:
            self._client().export_list()

        assert isinstance(exc_info.value, targetd_exceptions.TargetdTransportError)

    @patch("targetd_provisioner.targetd.client.requests")
    def test_list_methods_default_to_empty(self, mock_requests):
        """Test list calls return [] for a null result."""
        self._mock_session(
            mock_requests,
            _response(body={"id": 1, "result": None}),
            _response(body={"id": 2, "result": None}),
            _response(body={"id": 3, "result": None}),
        )

        client = self._client()
        assert client.export_list() == []
        assert client.fs_list() == []
        assert client.nfs_export_list() == []

    @patch("targetd_provisioner.targetd.client.requests")
    def test_typed_helpers_parameters(self, mock_requests):
        """Test parameter names of the typed helpers."""
        session = self._mock_session(
            mock_requests, *[_response(body={"id": i, "result": None}) for i in range(5)]
        )

        client = self._client()
        client.export_create("vg-targetd", "pvc-1", "iqn.a", 3)
        client.initiator_set_auth("iqn.a", "iu", "ip", "ou", "op")
        client.fs_create("vg-targetd", "pvc-2")
        client.fs_destroy("uuid-1")
        client.nfs_export_add("10.0.0.1", "/vg-targetd/pvc-2", ["rw", "no_root_squash"])

        bodies = [c[1]["json"] for c in session.post.call_args_list]
        assert bodies[0]["params"] == {"pool": "vg-targetd", "vol": "pvc-1", "initiator_wwn": "iqn.a", "lun": 3}
        assert bodies[1]["params"] == {
            "initiator_wwn": "iqn.a",
            "in_user": "iu",
            "in_pass": "ip",
            "out_user": "ou",
            "out_pass": "op",
        }
        assert bodies[2]["params"] == {"pool_name": "vg-targetd", "name": "pvc-2", "size_bytes": 0}
        assert bodies[3]["params"] == {"uuid": "uuid-1"}
        assert bodies[4]["params"] == {
            "host": "10.0.0.1",
            "path": "/vg-targetd/pvc-2",
            "options": ["rw", "no_root_squash"],
        }

    def test_auth_without_username(self):
        """Test no credentials are sent without a username."""
        client = targetd_client.TargetdClient(url=self.url)
        assert client.auth is None
