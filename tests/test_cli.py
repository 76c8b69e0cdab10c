#!/usr/bin/env python3
"""Tests for the clustervip CLI."""

from unittest.mock import patch

import pytest
import yaml

from clustervip.cli import main
from clustervip.errors import StoreError
from clustervip.models import OpenStackCluster
from clustervip.service import NetworkingService


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("clustervip.cli.parsers.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def patched_service(fake_store):
    """Route every CLI command to the in-memory store."""
    with patch("clustervip.cli.utils.create_service") as mock_create:
        mock_create.side_effect = lambda settings: NetworkingService(
            fake_store,
            network_prefix=settings.network_prefix,
            strict_port_lookup=settings.strict_port_lookup,
        )
        yield mock_create


class TestReconcileCommand:
    def test_writes_status_back(self, cluster_file, fake_store, patched_service):
        main(["reconcile", str(cluster_file)])

        data = yaml.safe_load(cluster_file.read_text())
        assert data["status"]["network"]["unmanaged_port"] == {
            "name": "openstack-cluster-demo", "id": "P1", "ip": "203.0.113.10",
        }
        assert fake_store.count("create_port") == 1

    def test_strict_flag(self, cluster_file, patched_service):
        main(["reconcile", "--strict", str(cluster_file)])

        settings = patched_service.call_args.args[0]
        assert settings.strict_port_lookup is True

    def test_skip_leaves_file_untouched(self, cluster_file, demo_cluster_data, fake_store, patched_service):
        demo_cluster_data["spec"]["external_network_id"] = ""
        cluster_file.write_text(yaml.safe_dump(demo_cluster_data))
        before = cluster_file.read_text()

        main(["reconcile", str(cluster_file)])

        assert cluster_file.read_text() == before
        assert fake_store.calls == []

    def test_failure_exits_and_keeps_file(self, cluster_file, fake_store, patched_service, capsys):
        fake_store.fail_on["update_floating_ip"] = StoreError("port not ready", 409)
        before = cluster_file.read_text()

        with pytest.raises(SystemExit) as exc_info:
            main(["reconcile", str(cluster_file)])

        assert exc_info.value.code == 1
        assert cluster_file.read_text() == before
        assert "error associating floating IP" in capsys.readouterr().out

    def test_cloud_config_option(self, cluster_file, tmp_path, patched_service):
        cloud = tmp_path / "cloud.yaml"
        cloud.write_text(yaml.safe_dump({"network_prefix": "capo"}))

        main(["--cloud-config", str(cloud), "reconcile", str(cluster_file)])

        port = OpenStackCluster.load(cluster_file).unmanaged_port
        assert port.name == "capo-cluster-demo"


class TestDeleteCommand:
    def test_deletes_and_clears_status(self, cluster_file, fake_store, patched_service):
        main(["reconcile", str(cluster_file)])

        main(["delete", str(cluster_file)])

        assert OpenStackCluster.load(cluster_file).unmanaged_port is None
        assert fake_store.ports == []

    def test_nothing_recorded(self, cluster_file, patched_service, capsys):
        main(["rm", str(cluster_file)])

        patched_service.assert_not_called()
        assert "No VIP port recorded" in capsys.readouterr().out


class TestShowCommand:
    def test_show_not_provisioned(self, cluster_file, capsys):
        main(["show", str(cluster_file)])

        out = capsys.readouterr().out
        assert "sub-1" in out
        assert "not provisioned" in out

    def test_show_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["show", str(tmp_path / "absent.yaml")])
        assert exc_info.value.code == 1


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert "clustervip" in capsys.readouterr().out


def test_logging_options(cluster_file, no_logging_setup):
    main(["--log-level", "debug", "--json-logs", "show", str(cluster_file)])
    no_logging_setup.assert_called_once_with(level="DEBUG", json_output=True)
