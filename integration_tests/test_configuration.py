"""Integration tests for config version and VCL methods against a live
Fastly service.

These tests require the following environment variables:

``FASTLY_TEST_SERVICE_ID``
    ID of a Fastly service with at least one active config version.

``FASTLY_API_KEY``
    A Fastly API key with write access to that service.

The tests will be skipped if they are not available.

Note that these tests deactivate and re-activate the active version, and
create cloned versions and a test VCL file in the service.
"""

import os

import pytest

from fastlyapi import FastlyClient, NameConflictError

SERVICE_ID = os.getenv("FASTLY_TEST_SERVICE_ID")
API_KEY = os.getenv("FASTLY_API_KEY")

pytestmark = pytest.mark.skipif(
    SERVICE_ID is None or API_KEY is None,
    reason="Set FASTLY_TEST_SERVICE_ID and FASTLY_API_KEY",
)


@pytest.fixture(scope="module")
def fastly():
    with FastlyClient(API_KEY) as client:
        yield client


@pytest.fixture(scope="module")
def active_version(fastly):
    version = fastly.get_active_config_version(SERVICE_ID)
    if version is None:
        pytest.fail("The test service needs an active config version.")
    return version["number"]


@pytest.fixture(scope="module")
def vcl_version(fastly):
    """An editable clone of the active version."""
    return fastly.clone_config_version(SERVICE_ID)["number"]


def test_get_config_versions(fastly):
    versions = fastly.get_config_versions(SERVICE_ID)
    assert isinstance(versions, list)
    for version in versions:
        assert version["service_id"] == SERVICE_ID


def test_get_config_version(fastly, active_version):
    version = fastly.get_config_version(SERVICE_ID, active_version)
    assert version["service_id"] == SERVICE_ID
    assert version["number"] == active_version


def test_get_active_config_version(fastly):
    version = fastly.get_active_config_version(SERVICE_ID)
    assert version["service_id"] == SERVICE_ID
    assert version["active"] is True


def test_deactivate_and_activate(fastly, active_version):
    version = fastly.deactivate_config_version(SERVICE_ID, active_version)
    assert version["number"] == active_version
    assert version["active"] is False

    version = fastly.activate_config_version(SERVICE_ID, active_version)
    assert version["number"] == active_version
    assert version["active"] is True


def test_clone_validate_lock(fastly):
    cloned = fastly.clone_config_version(SERVICE_ID)
    assert cloned["service_id"] == SERVICE_ID

    result = fastly.validate_config_version(SERVICE_ID, cloned["number"])
    assert result["status"] == "ok"
    assert not result["errors"]

    locked = fastly.lock_config_version(SERVICE_ID, cloned["number"])
    assert locked["number"] == cloned["number"]
    assert locked["locked"] is True


def test_create_config_version(fastly):
    version = fastly.create_config_version(SERVICE_ID)
    assert version["service_id"] == SERVICE_ID


def test_vcl_lifecycle(fastly, vcl_version):
    name = f"test-boilerplate-vcl-{vcl_version}"

    boilerplate = fastly.get_boilerplate_vcl(SERVICE_ID, vcl_version)
    assert isinstance(boilerplate, str)

    vcl = fastly.upload_new_vcl(SERVICE_ID, vcl_version, name, boilerplate)
    assert vcl["name"] == name
    assert vcl["version"] == vcl_version
    assert vcl["service_id"] == SERVICE_ID

    with pytest.raises(NameConflictError):
        fastly.upload_new_vcl(SERVICE_ID, vcl_version, name, boilerplate)

    content = boilerplate + "\n# This is a comment added to update the VCL."
    vcl = fastly.update_vcl(
        SERVICE_ID, vcl_version, name, content, set_main=True
    )
    assert vcl["name"] == name
    assert "# This is a comment added to update the VCL." in vcl["content"]
    assert vcl["main"] is True

    vcls = fastly.get_all_vcl(SERVICE_ID, vcl_version)
    assert isinstance(vcls, list)
    last = fastly.get_vcl(SERVICE_ID, vcl_version, vcls[-1]["name"])
    assert last["name"] == vcls[-1]["name"]
    assert last["version"] == vcl_version

    main = fastly.get_main_vcl(SERVICE_ID, vcl_version)
    assert main["main"] is True
    result = fastly.set_main_vcl(SERVICE_ID, main["name"], vcl_version)
    assert result["main"] is True

    result = fastly.delete_vcl(SERVICE_ID, name, vcl_version)
    assert result["status"] == "ok"
