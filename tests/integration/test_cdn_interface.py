"""End-to-end tests of the CDN management interface against a fake service."""

import pytest

from cloud_files import CdnInterface, NotFound
from cloud_files.models import CdnContainerInfo, CdnContainerSummary

pytestmark = pytest.mark.integration


def test_uses_cdn_management_endpoint(fake_service, cdn):
    cdn.list_containers()
    request = fake_service.service_requests()[0]
    assert request.url.host == "cdn.example.com"


def test_share_container_returns_uri(fake_service, cdn):
    uri = cdn.share_container("photos", ttl=3600, cdn_enabled=True)

    assert uri == "http://c0000001.cdn.example.com"
    request = fake_service.service_requests("PUT")[0]
    assert request.headers["x-ttl"] == "3600"
    assert request.headers["x-cdn-enabled"] == "true"
    assert "x-log-retention" not in request.headers


def test_describe_container(fake_service, cdn):
    cdn.share_container("photos", ttl=86400, log_retention=True)

    info = cdn.describe_container("photos")

    assert isinstance(info, CdnContainerInfo)
    assert info.ttl == 86400
    assert info.cdn_enabled is True
    assert info.log_retention is True
    assert info.cdn_uri == "http://c0000001.cdn.example.com"
    assert info.useragent_acl == ""


def test_update_container(fake_service, cdn):
    cdn.share_container("photos")

    uri = cdn.update_container("photos", cdn_enabled=False, log_retention=False)

    assert uri == "http://c0000001.cdn.example.com"
    request = fake_service.service_requests("POST")[0]
    assert request.headers["x-cdn-enabled"] == "false"
    assert request.headers["x-log-retention"] == "false"
    assert cdn.describe_container("photos").cdn_enabled is False


def test_update_unknown_container(cdn):
    with pytest.raises(NotFound):
        cdn.update_container("never-shared", ttl=60)


def test_describe_unknown_container(cdn):
    with pytest.raises(NotFound):
        cdn.describe_container("never-shared")


def test_list_containers(fake_service, cdn):
    cdn.share_container("b")
    cdn.share_container("a")
    cdn.update_container("b", cdn_enabled=False)

    everything = cdn.list_containers()
    enabled = cdn.list_containers(enabled_only=True)

    assert [c.name for c in everything] == ["a", "b"]
    assert all(isinstance(c, CdnContainerSummary) for c in everything)
    assert everything[1].cdn_enabled is False
    assert [c.name for c in enabled] == ["a"]
    assert fake_service.service_requests("GET")[-1].url.params["enabled_only"] == "true"


def test_incrementally_list_containers(fake_service, cdn):
    for name in ("a", "b", "c"):
        cdn.share_container(name)
    pages = []

    cdn.incrementally_list_containers(lambda page: pages.append(page) or True, limit=2)

    assert [[c.name for c in p] for p in pages] == [["a", "b"], ["c"]]


def test_iter_container_pages(fake_service, cdn):
    for name in ("a", "b"):
        cdn.share_container(name)
    pages = list(cdn.iter_container_pages(limit=1))
    assert [p[0].name for p in pages] == ["a", "b"]


def test_interfaces_log_in_independently(fake_service, cdn):
    from cloud_files import CloudFilesInterface

    with CloudFilesInterface(transport=fake_service.transport) as storage:
        storage.create_container("photos")
    cdn.share_container("photos")
    assert fake_service.logins == 2


def test_share_and_update_discard_status_pages(cdn):
    assert cdn.share_container("photos", ttl=3600) == "http://c0000001.cdn.example.com"
    assert b"<h1>Created</h1>" in cdn.last_response.content

    assert cdn.update_container("photos", ttl=60) == "http://c0000001.cdn.example.com"
    assert b"<h1>Accepted</h1>" in cdn.last_response.content


def test_non_positive_limit_is_rejected(fake_service, cdn):
    with pytest.raises(ValueError):
        cdn.incrementally_list_containers(lambda page: True, limit=0)
    assert fake_service.service_requests() == []
