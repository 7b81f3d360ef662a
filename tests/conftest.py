import json
import sys
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import unquote

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

AUTH_URL = "https://auth.example.com/v1.0"
STORAGE_URL = "https://storage.example.com/v1/MossoCloudFS_acct"
CDN_URL = "https://cdn.example.com/v1/MossoCloudFS_acct"
USERNAME = "test-user"
API_KEY = "test-api-key"
STATUS_DETAILS = {
    201: "",
    202: "The request is accepted for processing.",
    404: "The resource could not be found.",
    409: "There was a conflict when trying to complete your request.",
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line("markers", "auth: mark test as testing authentication")


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set the environment the Settings class reads during tests."""
    monkeypatch.setenv("CLOUD_FILES_USERNAME", USERNAME)
    monkeypatch.setenv("CLOUD_FILES_API_KEY", API_KEY)
    monkeypatch.setenv("CLOUD_FILES_AUTH_URL", AUTH_URL)
    monkeypatch.setenv("CLOUD_FILES_AUTH_METHOD", "legacy")
    monkeypatch.setenv("CLOUD_FILES_LOG_LEVEL", "INFO")
    monkeypatch.delenv("CLOUD_FILES_DEFAULT_PAGE_SIZE", raising=False)
    yield


class FakeCloudFiles:
    """In-memory Cloud Files + CDN service served through httpx.MockTransport.

    Every request is recorded in ``requests``. ``expire_token()`` makes the
    current token stale so the next service call answers 401.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.containers: Dict[str, Dict[str, dict]] = {}
        self.cdn: Dict[str, dict] = {}
        self.logins = 0
        self.valid_token: Optional[str] = None

    # -- helpers -------------------------------------------------------

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def expire_token(self) -> None:
        self.valid_token = "expired-for-good"

    def service_requests(self, method: Optional[str] = None) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.url.host != "auth.example.com" and (method is None or r.method == method)
        ]

    def add_object(self, container: str, name: str, data: bytes = b"x", **meta) -> None:
        self.containers.setdefault(container, {})[name] = {
            "data": data,
            "content_type": "text/plain",
            "meta": {k.lower(): v for k, v in meta.items()},
            "last_modified": "2009-11-10T08:43:01.209444",
        }

    # -- dispatch ------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.startswith(AUTH_URL):
            return self._auth(request)

        if request.headers.get("x-auth-token") != self.valid_token:
            return httpx.Response(401, text="Unauthorized")

        if url.startswith(STORAGE_URL):
            base = httpx.URL(STORAGE_URL).path
            parts = self._parts(request, base)
            return self._storage(request, parts)
        if url.startswith(CDN_URL):
            base = httpx.URL(CDN_URL).path
            parts = self._parts(request, base)
            return self._cdn(request, parts)
        return httpx.Response(404)

    @staticmethod
    def _parts(request: httpx.Request, base: str) -> List[str]:
        raw = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
        rest = raw[len(base):].lstrip("/")
        if not rest:
            return []
        container, _, obj = rest.partition("/")
        return [unquote(container), unquote(obj)] if obj else [unquote(container)]

    def _auth(self, request: httpx.Request) -> httpx.Response:
        if (
            request.headers.get("x-auth-user") != USERNAME
            or request.headers.get("x-auth-key") != API_KEY
        ):
            return httpx.Response(401, text="Bad username or password")
        self.logins += 1
        self.valid_token = f"token-{self.logins}"
        return httpx.Response(
            204,
            headers={
                "X-Auth-Token": self.valid_token,
                "X-Storage-Url": STORAGE_URL,
                "X-CDN-Management-Url": CDN_URL,
                "X-Server-Management-Url": "https://servers.example.com/v1.0/acct",
            },
        )

    @staticmethod
    def _listing(request: httpx.Request, entries: List[dict]) -> httpx.Response:
        params = request.url.params
        entries = sorted(entries, key=lambda e: e["name"])
        marker = params.get("marker")
        if marker:
            entries = [e for e in entries if e["name"] > marker]
        prefix = params.get("prefix")
        if prefix:
            entries = [e for e in entries if e["name"].startswith(prefix)]
        path = params.get("path")
        if path is not None:
            head = path.rstrip("/") + "/" if path else ""
            entries = [
                e
                for e in entries
                if e["name"].startswith(head) and "/" not in e["name"][len(head):]
            ]
        if params.get("enabled_only") == "true":
            entries = [e for e in entries if e.get("cdn_enabled") is True]
        entries = entries[: int(params.get("limit", 10000))]
        if not entries:
            return httpx.Response(204)
        return httpx.Response(
            200,
            content=json.dumps(entries).encode(),
            headers={"Content-Type": "application/json; charset=utf-8"},
        )

    def _storage(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        method = request.method
        if not parts:
            if method == "HEAD":
                total = sum(
                    len(o["data"]) for c in self.containers.values() for o in c.values()
                )
                return httpx.Response(
                    204,
                    headers={
                        "X-Account-Container-Count": str(len(self.containers)),
                        "X-Account-Bytes-Used": str(total),
                    },
                )
            if method == "GET":
                entries = [
                    {
                        "name": name,
                        "count": len(objs),
                        "bytes": sum(len(o["data"]) for o in objs.values()),
                    }
                    for name, objs in self.containers.items()
                ]
                return self._listing(request, entries)
            return httpx.Response(405)

        container = parts[0]
        if len(parts) == 1:
            if method == "PUT":
                created = container not in self.containers
                self.containers.setdefault(container, {})
                return self._status_page(201 if created else 202)
            if container not in self.containers:
                return self._status_page(404)
            objs = self.containers[container]
            if method == "HEAD":
                return httpx.Response(
                    204,
                    headers={
                        "X-Container-Object-Count": str(len(objs)),
                        "X-Container-Bytes-Used": str(
                            sum(len(o["data"]) for o in objs.values())
                        ),
                    },
                )
            if method == "DELETE":
                if objs:
                    return self._status_page(409)
                del self.containers[container]
                return httpx.Response(204)
            if method == "GET":
                entries = [
                    {
                        "name": name,
                        "bytes": len(o["data"]),
                        "content_type": o["content_type"],
                        "hash": "d41d8cd98f00b204e9800998ecf8427e",
                        "last_modified": o["last_modified"],
                    }
                    for name, o in objs.items()
                ]
                return self._listing(request, entries)
            return httpx.Response(405)

        name = parts[1]
        if container not in self.containers:
            return self._status_page(404)
        objs = self.containers[container]
        if method == "PUT":
            objs[name] = {
                "data": request.content,
                "content_type": request.headers.get("content-type", ""),
                "meta": self._meta_from(request),
                "last_modified": "2009-11-10T13:25:04.841459",
            }
            return self._status_page(201, headers={"ETag": "etag"})
        if name not in objs:
            return self._status_page(404)
        obj = objs[name]
        meta_headers = {f"X-Object-Meta-{k}": v for k, v in obj["meta"].items()}
        if method == "HEAD":
            return httpx.Response(204, headers=meta_headers)
        if method == "POST":
            obj["meta"] = self._meta_from(request)
            return self._status_page(202)
        if method == "GET":
            return httpx.Response(
                200,
                content=obj["data"],
                headers={"Content-Type": obj["content_type"], **meta_headers},
            )
        if method == "DELETE":
            del objs[name]
            return httpx.Response(204)
        return httpx.Response(405)

    @staticmethod
    def _status_page(status: int, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """Answer with an HTML status page, the way Swift does for writes and errors."""
        reason = httpx.codes.get_reason_phrase(status)
        body = f"<html><h1>{reason}</h1><p>{STATUS_DETAILS.get(status, '')}</p></html>"
        return httpx.Response(
            status,
            text=body,
            headers={**(headers or {}), "Content-Type": "text/html; charset=UTF-8"},
        )

    @staticmethod
    def _meta_from(request: httpx.Request) -> Dict[str, str]:
        prefix = "x-object-meta-"
        return {
            k[len(prefix):]: v
            for k, v in request.headers.items()
            if k.lower().startswith(prefix)
        }

    def _cdn(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        method = request.method
        if not parts:
            if method == "GET":
                entries = [{"name": name, **attrs} for name, attrs in self.cdn.items()]
                return self._listing(request, entries)
            return httpx.Response(405)

        container = parts[0]
        if method in ("PUT", "POST"):
            if method == "POST" and container not in self.cdn:
                return self._status_page(404)
            attrs = self.cdn.setdefault(
                container,
                {
                    "ttl": 259200,
                    "cdn_enabled": True,
                    "log_retention": False,
                    "cdn_uri": f"http://c{len(self.cdn) + 1:07d}.cdn.example.com",
                    "referrer_acl": "",
                    "useragent_acl": "",
                },
            )
            if "x-ttl" in request.headers:
                attrs["ttl"] = int(request.headers["x-ttl"])
            if "x-cdn-enabled" in request.headers:
                attrs["cdn_enabled"] = request.headers["x-cdn-enabled"] == "true"
            if "x-log-retention" in request.headers:
                attrs["log_retention"] = request.headers["x-log-retention"] == "true"
            return self._status_page(
                201 if method == "PUT" else 202, headers={"X-CDN-URI": attrs["cdn_uri"]}
            )
        if container not in self.cdn:
            return self._status_page(404)
        attrs = self.cdn[container]
        if method == "HEAD":
            return httpx.Response(
                204,
                headers={
                    "X-CDN-Enabled": str(attrs["cdn_enabled"]),
                    "X-CDN-URI": attrs["cdn_uri"],
                    "X-TTL": str(attrs["ttl"]),
                    "X-Log-Retention": str(attrs["log_retention"]),
                    "X-User-Agent-ACL": attrs["useragent_acl"],
                    "X-Referrer-ACL": attrs["referrer_acl"],
                },
            )
        return httpx.Response(405)


@pytest.fixture
def fake_service():
    return FakeCloudFiles()


@pytest.fixture
def storage(fake_service):
    from cloud_files import CloudFilesInterface

    with CloudFilesInterface(transport=fake_service.transport) as iface:
        yield iface


@pytest.fixture
def cdn(fake_service):
    from cloud_files import CdnInterface

    with CdnInterface(transport=fake_service.transport) as iface:
        yield iface
