import requests

from api.services import provisioning
from api.services.provisioning import ResourceSpec, ensure


class FakeResponse:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


SPECS = [
    ResourceSpec("a.se1", 10, "https://mirror.test/a.se1"),
    ResourceSpec("b.se1", 20, "https://mirror.test/b.se1"),
]


def _ok_session():
    return FakeSession({
        "https://mirror.test/a.se1": FakeResponse(b"A" * 10),
        "https://mirror.test/b.se1": FakeResponse(b"B" * 25),
    })


def test_fetches_missing_files_and_creates_dir(tmp_path):
    target = tmp_path / "ephe" / "nested"
    session = _ok_session()
    report = ensure(SPECS, target, session=session, timeout=5)
    assert target.is_dir()
    assert sorted(report.fetched) == ["a.se1", "b.se1"]
    assert report.ok
    assert (target / "b.se1").read_bytes() == b"B" * 25
    assert all(c["timeout"] == 5 for c in session.calls)
    assert all("User-Agent" in c["headers"] for c in session.calls)


def test_second_run_is_idempotent_and_offline(tmp_path):
    ensure(SPECS, tmp_path, session=_ok_session())
    before = {p.name: p.read_bytes() for p in tmp_path.iterdir()}

    session = _ok_session()
    report = ensure(SPECS, tmp_path, session=session)

    assert session.calls == []
    assert sorted(report.present) == ["a.se1", "b.se1"]
    assert {p.name: p.read_bytes() for p in tmp_path.iterdir()} == before


def test_undersized_file_is_refetched(tmp_path):
    (tmp_path / "a.se1").write_bytes(b"<html>404</html>"[:5])
    (tmp_path / "b.se1").write_bytes(b"x" * 20)
    session = _ok_session()

    report = ensure(SPECS, tmp_path, session=session)

    assert [c["url"] for c in session.calls] == ["https://mirror.test/a.se1"]
    assert report.fetched == ["a.se1"]
    assert (tmp_path / "a.se1").read_bytes() == b"A" * 10


def test_failure_is_isolated_per_file(tmp_path):
    session = FakeSession({
        "https://mirror.test/a.se1": requests.ConnectionError("boom"),
        "https://mirror.test/b.se1": FakeResponse(b"B" * 20),
    })
    report = ensure(SPECS, tmp_path, session=session)

    assert report.fetched == ["b.se1"]
    assert [w.file_name for w in report.warnings] == ["a.se1"]
    assert "ConnectionError" in report.warnings[0].reason
    assert not (tmp_path / "a.se1").exists()


def test_http_error_and_short_payload_become_warnings(tmp_path):
    session = FakeSession({
        "https://mirror.test/a.se1": FakeResponse(b"", status=503),
        "https://mirror.test/b.se1": FakeResponse(b"tiny"),
    })
    report = ensure(SPECS, tmp_path, session=session)

    assert report.fetched == []
    assert sorted(w.file_name for w in report.warnings) == ["a.se1", "b.se1"]
    assert not (tmp_path / "b.se1").exists()


def test_download_disabled_only_reports(tmp_path):
    session = _ok_session()
    report = ensure(SPECS, tmp_path, session=session, download=False)
    assert session.calls == []
    assert len(report.warnings) == 2


def test_module_level_requests_used_without_session(tmp_path, monkeypatch):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append(url)
        return FakeResponse(b"Z" * 30)

    monkeypatch.setattr(provisioning.requests, "get", fake_get)
    report = ensure(SPECS, tmp_path)
    assert sorted(calls) == ["https://mirror.test/a.se1", "https://mirror.test/b.se1"]
    assert report.ok


def test_ephemeris_specs_follow_base_url(monkeypatch):
    monkeypatch.setenv("EPHEMERIS_BASE_URL", "https://cdn.test/ephe")
    specs = provisioning.ephemeris_specs()
    assert [s.file_name for s in specs] == ["seas_18.se1", "semo_18.se1", "sepl_18.se1"]
    assert specs[0].url == "https://cdn.test/ephe/seas_18.se1"
    assert all(s.min_bytes > 0 for s in specs)


def test_fetch_timeout_env(monkeypatch):
    monkeypatch.setenv("EPHEMERIS_FETCH_TIMEOUT", "7.5")
    assert provisioning.fetch_timeout() == 7.5
    monkeypatch.setenv("EPHEMERIS_FETCH_TIMEOUT", "soon")
    assert provisioning.fetch_timeout() == provisioning.DEFAULT_TIMEOUT


def test_unexpected_session_error_stays_with_its_file(tmp_path):
    session = FakeSession({
        "https://mirror.test/a.se1": KeyError("adapter table"),
        "https://mirror.test/b.se1": FakeResponse(b"B" * 20),
    })
    report = ensure(SPECS, tmp_path, session=session)

    assert report.fetched == ["b.se1"]
    assert [w.file_name for w in report.warnings] == ["a.se1"]
    assert report.warnings[0].reason.startswith("KeyError")
    assert (tmp_path / "b.se1").read_bytes() == b"B" * 20
