import io
import json

import pytest
import requests

from rpcgen.utils import (
    DescriptorLoaderError,
    load_descriptor,
    load_descriptor_from_stream,
    load_descriptor_from_url,
)


class FakeResponse:
    def __init__(self, payload=None, status=200, content_type="application/json"):
        self._payload = payload
        self.status_code = status
        self.headers = {"content-type": content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


def test_load_from_file(descriptor_path, greeter_descriptor):
    source, data = load_descriptor(file_path=descriptor_path)
    assert source == str(descriptor_path)
    assert data == greeter_descriptor


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_descriptor(file_path=tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{")
    with pytest.raises(DescriptorLoaderError, match="Invalid JSON"):
        load_descriptor(file_path=path)


def test_requires_exactly_one_source(descriptor_path):
    with pytest.raises(DescriptorLoaderError):
        load_descriptor()
    with pytest.raises(DescriptorLoaderError):
        load_descriptor(file_path=descriptor_path, url="http://example.com/a.json")


def test_load_from_stream():
    source, data = load_descriptor_from_stream(io.StringIO(json.dumps({"services": []})))
    assert source == "<stdin>"
    assert data == {"services": []}


class TestUrl:
    def test_success(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse({"package": "pkg"})

        monkeypatch.setattr(requests, "get", fake_get)
        source, data = load_descriptor(url="https://example.com/svc.json", timeout=5)
        assert source == "https://example.com/svc.json"
        assert data == {"package": "pkg"}
        assert calls == [("https://example.com/svc.json", 5)]

    def test_invalid_url(self):
        with pytest.raises(DescriptorLoaderError, match="Invalid URL"):
            load_descriptor_from_url("not-a-url")

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(status=404))
        with pytest.raises(DescriptorLoaderError, match="HTTP error 404"):
            load_descriptor_from_url("https://example.com/svc.json")

    def test_timeout(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(requests, "get", fake_get)
        with pytest.raises(DescriptorLoaderError, match="timeout"):
            load_descriptor_from_url("https://example.com/svc.json")

    def test_invalid_json_body(self, monkeypatch):
        monkeypatch.setattr(
            requests, "get", lambda url, timeout: FakeResponse(content_type="text/html")
        )
        with pytest.raises(DescriptorLoaderError, match="Invalid JSON response"):
            load_descriptor_from_url("https://example.com/svc")
