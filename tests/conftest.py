"""
Pytest configuration and fixtures.
"""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from targetd_provisioner.targetd.client import TargetdClient


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")
    config.addinivalue_line("markers", "integration: tests spanning several components")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def mock_configuration(temp_dir):
    """Create a mock oslo.config-like [targetd] group for the provisioners."""
    config = Mock()

    config.scheme = "http"
    config.address = "192.168.10.5"
    config.port = 18700
    config.path = "/targetrpc"
    config.username = "admin"
    config.password = "secret"
    config.timeout = 30.0
    config.verify_ssl = False

    config.default_fs = "xfs"
    config.default_volume_group = "vg-targetd"
    config.session_chap_credential_file_path = str(temp_dir / "session-chap-credential.properties")
    config.iscsi_provisioner_name = "iscsi-targetd"
    config.nfs_provisioner_name = "nfs-targetd"
    config.nfs_strict_mode = False

    return config


@pytest.fixture
def mock_targetd_client():
    """Create a mock targetd client; ``method_calls`` records call order."""
    client = Mock(spec=TargetdClient)
    client.export_list.return_value = []
    client.fs_list.return_value = []
    client.nfs_export_list.return_value = []
    return client


@pytest.fixture
def chap_credential_file(mock_configuration):
    """Write a complete session CHAP credential file at the configured path."""
    path = Path(mock_configuration.session_chap_credential_file_path)
    path.write_text(
        "\n".join(
            [
                "# session chap credentials",
                "node.session.auth.username=inuser",
                "node.session.auth.password=inpass",
                "node.session.auth.username_in=outuser",
                "node.session.auth.password_in=outpass",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return path
