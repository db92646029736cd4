import json

import pytest
import requests

from lcmgen import utils
from lcmgen.codegen.core.schema import ModelError, TypeName
from lcmgen.utils import (
    SchemaLoaderError,
    load_document_from_file,
    load_document_from_url,
    load_schema,
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, content_type="application/json"):
        self.payload = payload
        self.status_code = status_code
        self.headers = {"content-type": content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload


@pytest.fixture
def document_file(tmp_path, reading_document):
    path = tmp_path / "sensors.json"
    path.write_text(json.dumps(reading_document), encoding="utf-8")
    return path


def test_load_document_from_file(document_file, reading_document):
    source, data = load_document_from_file(document_file)
    assert source == str(document_file)
    assert data == reading_document


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document_from_file(tmp_path / "nope.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SchemaLoaderError, match="Invalid JSON"):
        load_document_from_file(path)


def test_load_document_from_url(monkeypatch, reading_document):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(reading_document)

    monkeypatch.setattr(utils.requests, "get", fake_get)

    url = "https://example.com/types/sensors.json"
    assert load_document_from_url(url, timeout=5) == (url, reading_document)
    assert calls == [(url, 5)]


def test_invalid_url():
    with pytest.raises(SchemaLoaderError, match="Invalid URL"):
        load_document_from_url("not-a-url")


def test_http_error(monkeypatch):
    monkeypatch.setattr(
        utils.requests, "get", lambda url, timeout: FakeResponse(status_code=404)
    )
    with pytest.raises(SchemaLoaderError, match="HTTP error 404"):
        load_document_from_url("https://example.com/missing.json")


def test_timeout(monkeypatch):
    def fake_get(url, timeout):
        raise requests.exceptions.Timeout("slow")

    monkeypatch.setattr(utils.requests, "get", fake_get)
    with pytest.raises(SchemaLoaderError, match="timeout"):
        load_document_from_url("https://example.com/types.json")


def test_non_json_response(monkeypatch):
    monkeypatch.setattr(
        utils.requests,
        "get",
        lambda url, timeout: FakeResponse(content_type="text/html"),
    )
    with pytest.raises(SchemaLoaderError, match="Invalid JSON response"):
        load_document_from_url("https://example.com/page")


class TestLoadSchema:
    def test_merges_files_and_urls(self, monkeypatch, document_file, robot_document):
        monkeypatch.setattr(
            utils.requests, "get", lambda url, timeout: FakeResponse(robot_document)
        )

        schema = load_schema([document_file], ["https://example.com/robot.json"])

        assert len(schema) == 3
        assert TypeName("robot.sensors", "reading_t") in schema
        assert TypeName("robot", "pose_t") in schema

    def test_requires_a_document(self):
        with pytest.raises(SchemaLoaderError, match="No schema documents"):
            load_schema()

    def test_duplicate_structs_across_documents(self, tmp_path, document_file):
        copy = tmp_path / "copy.json"
        copy.write_text(document_file.read_text(encoding="utf-8"), encoding="utf-8")

        with pytest.raises(ModelError, match="Duplicate struct"):
            load_schema([document_file, copy])
