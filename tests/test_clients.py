"""Tests for the classifier and duplicate-check HTTP clients."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from app.models import ClassificationVerdict
from app.services import (
    ClassifierClient,
    DuplicateCheckClient,
    ServiceError,
    UnsupportedFileTypeError,
)
from app.services.duplicate_checker import file_extension


class RecordingHandler:
    """MockTransport handler returning a canned response."""

    def __init__(self, status_code: int = 200, payload=None, *, raw: bytes | None = None) -> None:
        self.status_code = status_code
        self.payload = payload
        self.raw = raw
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.payload)


def classifier_with(handler) -> ClassifierClient:
    return ClassifierClient("http://classifier", transport=httpx.MockTransport(handler))


def checker_with(handler) -> DuplicateCheckClient:
    return DuplicateCheckClient("http://dedupe", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_classify_confirms_exact_label(jpeg_bytes: bytes) -> None:
    handler = RecordingHandler(payload={"result": "kolam"})
    client = classifier_with(handler)

    verdict = await client.classify(io.BytesIO(jpeg_bytes))

    assert verdict is ClassificationVerdict.CONFIRMED
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url == "http://classifier/classify"
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b'name="image"; filename="image.jpg"' in request.content
    assert jpeg_bytes in request.content
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("label", ["Kolam", "kolam ", "KOLAM", "pond", ""])
async def test_classify_rejects_anything_but_exact_label(label: str, jpeg_bytes: bytes) -> None:
    client = classifier_with(RecordingHandler(payload={"result": label}))
    assert await client.classify(jpeg_bytes) is ClassificationVerdict.REJECTED
    await client.close()


@pytest.mark.asyncio
async def test_classify_missing_result_is_rejection(jpeg_bytes: bytes) -> None:
    client = classifier_with(RecordingHandler(payload={}))
    assert await client.classify(jpeg_bytes) is ClassificationVerdict.REJECTED
    await client.close()


@pytest.mark.asyncio
async def test_classify_null_result_is_rejection(jpeg_bytes: bytes) -> None:
    client = classifier_with(RecordingHandler(payload={"result": None}))
    assert await client.classify(jpeg_bytes) is ClassificationVerdict.REJECTED
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [201, 400, 500, 503])
async def test_classify_non_200_is_error(status_code: int, jpeg_bytes: bytes) -> None:
    client = classifier_with(RecordingHandler(status_code, payload={"result": "kolam"}))

    with pytest.raises(ServiceError) as exc_info:
        await client.classify(jpeg_bytes)

    assert exc_info.value.status_code == status_code
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        RecordingHandler(raw=b"<html>oops</html>"),
        RecordingHandler(payload={"result": 1}),
        RecordingHandler(payload=["kolam"]),
    ],
)
async def test_classify_decode_failures_are_errors(handler, jpeg_bytes: bytes) -> None:
    client = classifier_with(handler)
    with pytest.raises(ServiceError):
        await client.classify(jpeg_bytes)
    await client.close()


@pytest.mark.asyncio
async def test_classify_transport_failure_is_error(jpeg_bytes: bytes) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = classifier_with(refuse)
    with pytest.raises(ServiceError):
        await client.classify(jpeg_bytes)
    await client.close()


@pytest.mark.asyncio
async def test_classify_timeout_is_error(jpeg_bytes: bytes) -> None:
    def stall(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = classifier_with(stall)
    with pytest.raises(ServiceError):
        await client.classify(jpeg_bytes)
    await client.close()


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("photo.jpg", ".jpg"),
        ("archive.tar.png", ".png"),
        (".jpg", ".jpg"),
        ("photo", ""),
        ("dir.v1/photo", ""),
        ("uploads/photo.JPG", ".JPG"),
    ],
)
def test_file_extension(filename: str, expected: str) -> None:
    assert file_extension(filename) == expected


@pytest.mark.asyncio
async def test_check_duplicate_sends_metadata_in_order(jpeg_bytes: bytes) -> None:
    handler = RecordingHandler(payload={"duplicate": False, "message": "ok"})
    client = checker_with(handler)

    verdict = await client.check_duplicate(
        io.BytesIO(jpeg_bytes),
        nama_petani="Siti",
        alamat="Jl. Kenanga 7",
        kota="Klaten",
        filename="photo.jpg",
    )

    assert verdict.duplicate is False
    assert verdict.message == "ok"
    request = handler.requests[0]
    assert request.url == "http://dedupe/check"
    body = request.content
    assert b'name="image"; filename=".jpg"' in body
    assert jpeg_bytes in body
    positions = [body.index(f'name="{name}"'.encode()) for name in ("nama_petani", "alamat", "kota")]
    assert positions == sorted(positions)
    for value in (b"Siti", b"Jl. Kenanga 7", b"Klaten"):
        assert value in body
    await client.close()


@pytest.mark.asyncio
async def test_check_duplicate_returns_verdict_verbatim(png_bytes: bytes) -> None:
    client = checker_with(RecordingHandler(payload={"duplicate": True, "message": "seen before"}))

    verdict = await client.check_duplicate(
        png_bytes, nama_petani="", alamat="", kota="", filename="photo.png"
    )

    assert verdict.duplicate is True
    assert verdict.message == "seen before"
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("filename", ["photo.gif", "photo.jpeg", "photo.JPG", "photo", ""])
async def test_unsupported_extension_rejected_before_network(filename: str, jpeg_bytes: bytes) -> None:
    handler = RecordingHandler(payload={"duplicate": False, "message": "ok"})
    client = checker_with(handler)

    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        await client.check_duplicate(
            jpeg_bytes, nama_petani="a", alamat="b", kota="c", filename=filename
        )

    assert str(exc_info.value) == "unsupported file type"
    assert handler.requests == []
    await client.close()


@pytest.mark.asyncio
async def test_check_duplicate_non_200_is_error(jpeg_bytes: bytes) -> None:
    client = checker_with(RecordingHandler(404, payload={"detail": "not found"}))

    with pytest.raises(ServiceError) as exc_info:
        await client.check_duplicate(
            jpeg_bytes, nama_petani="a", alamat="b", kota="c", filename="photo.jpg"
        )

    assert exc_info.value.status_code == 404
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        json.dumps({"duplicate": "yes", "message": "ok"}).encode(),
        json.dumps({"duplicate": False, "message": 3}).encode(),
    ],
)
async def test_check_duplicate_decode_failures_are_errors(raw: bytes, jpeg_bytes: bytes) -> None:
    client = checker_with(RecordingHandler(raw=raw))
    with pytest.raises(ServiceError):
        await client.check_duplicate(
            jpeg_bytes, nama_petani="a", alamat="b", kota="c", filename="photo.jpg"
        )
    await client.close()


@pytest.mark.asyncio
async def test_check_duplicate_null_fields_take_zero_values(jpeg_bytes: bytes) -> None:
    client = checker_with(RecordingHandler(payload={"duplicate": None, "message": None}))

    verdict = await client.check_duplicate(
        jpeg_bytes, nama_petani="a", alamat="b", kota="c", filename="photo.jpg"
    )

    assert verdict.duplicate is False
    assert verdict.message == ""
    await client.close()
