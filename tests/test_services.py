"""Tests for batch uploader services."""
import json

import httpx
import pytest

from batch_uploader.config import UploadConfig
from batch_uploader.errors import TransportError, ValidationError
from batch_uploader.models import FileDescriptor
from batch_uploader.orchestrator.file_collector import FileCollector
from batch_uploader.protocols import IUploader, IValidator
from batch_uploader.services import (
    ForbiddenTypeValidator,
    HTTPUploader,
    MimeAllowListValidator,
    MockUploader,
)

MB = 1024 * 1024
ENDPOINT = "http://uploads.test/upload"


class TestForbiddenTypeValidator:
    def test_implements_protocol(self):
        assert isinstance(ForbiddenTypeValidator(), IValidator)

    def test_accepts_regular_file(self):
        ForbiddenTypeValidator().validate(FileDescriptor("a.pdf", MB, "application/pdf"))

    @pytest.mark.parametrize("mime", ["text/html", "TEXT/HTML", "application/x-sh", "application/x-msdownload"])
    def test_forbidden_type(self, mime):
        with pytest.raises(ValidationError) as excinfo:
            ForbiddenTypeValidator().validate(FileDescriptor("x", 1, mime))
        assert excinfo.value.field == "type"
        assert excinfo.value.message == "Forbidden file type detected."

    def test_size_limit(self):
        with pytest.raises(ValidationError) as excinfo:
            ForbiddenTypeValidator(max_file_size=10 * MB).validate(
                FileDescriptor("big.pdf", 10 * MB + 1, "application/pdf")
            )
        assert excinfo.value.field == "size"
        assert excinfo.value.message == "File size must be less than 10 MB. (Max 10 MB)"

    def test_exact_limit_allowed(self):
        ForbiddenTypeValidator(max_file_size=10 * MB).validate(
            FileDescriptor("edge.pdf", 10 * MB, "application/pdf")
        )

    def test_size_checked_before_type(self):
        with pytest.raises(ValidationError) as excinfo:
            ForbiddenTypeValidator(max_file_size=1).validate(FileDescriptor("p.html", 5, "text/html"))
        assert excinfo.value.field == "size"

    @pytest.mark.parametrize("file, field", [
        (FileDescriptor("", 1, "text/plain"), "name"),
        (FileDescriptor("a", -1, "text/plain"), "size"),
        (FileDescriptor("a", 1, ""), "type"),
    ])
    def test_malformed_descriptor(self, file, field):
        with pytest.raises(ValidationError) as excinfo:
            ForbiddenTypeValidator().validate(file)
        assert excinfo.value.field == field

    def test_custom_forbidden_list(self):
        validator = ForbiddenTypeValidator(forbidden_types=["image/png"])
        validator.validate(FileDescriptor("page.html", 1, "text/html"))
        with pytest.raises(ValidationError):
            validator.validate(FileDescriptor("pic.png", 1, "image/png"))


class TestMimeAllowListValidator:
    def test_allowed(self):
        MimeAllowListValidator().validate(FileDescriptor("a.csv", 1, "text/csv"))

    def test_disallowed(self):
        with pytest.raises(ValidationError) as excinfo:
            MimeAllowListValidator().validate(FileDescriptor("clip.mp4", 1, "video/mp4"))
        assert excinfo.value.field == "type"
        assert "clip.mp4" in excinfo.value.message
        assert "video/mp4" in excinfo.value.message


class TestMockUploader:
    def test_implements_protocol(self):
        assert isinstance(MockUploader(), IUploader)

    @pytest.mark.asyncio
    async def test_records_group(self):
        uploader = MockUploader(delay=0)
        group = (FileDescriptor("my file.pdf", 1, "application/pdf"),)

        receipt = await uploader.send(group)

        assert uploader.sent == [group]
        assert receipt.message == "Stored 1 files"
        assert receipt.objects[0].endswith("-my_file.pdf")

    @pytest.mark.asyncio
    async def test_configured_failure(self):
        uploader = MockUploader(delay=0, fail_files={"bad.pdf": "simulated outage"})
        with pytest.raises(TransportError, match="simulated outage"):
            await uploader.send((FileDescriptor("bad.pdf", 1, "application/pdf"),))
        assert uploader.sent == []


@pytest.fixture
def local_group(tmp_path):
    a = tmp_path / "a.pdf"
    a.write_bytes(b"%PDF-1.4 first")
    b = tmp_path / "b.csv"
    b.write_text("x,y\n1,2\n")
    return (
        FileDescriptor("a.pdf", a.stat().st_size, "application/pdf", path=a),
        FileDescriptor("b.csv", b.stat().st_size, "text/csv", path=b),
    )


def make_uploader(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPUploader(UploadConfig(endpoint_url=ENDPOINT), client=client), client


class TestHTTPUploader:
    @pytest.mark.asyncio
    async def test_posts_multipart_group(self, local_group):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json={"message": "2 files stored", "files": ["1-a.pdf", "2-b.csv"]})

        uploader, client = make_uploader(handler)
        async with uploader:
            receipt = await uploader.send(local_group)
        await client.aclose()

        assert seen["method"] == "POST"
        assert seen["url"] == ENDPOINT
        assert seen["content_type"].startswith("multipart/form-data")
        assert seen["body"].count(b'name="files"') == 2
        assert b'filename="a.pdf"' in seen["body"]
        assert b"%PDF-1.4 first" in seen["body"]
        assert receipt.message == "2 files stored"
        assert receipt.objects == ("1-a.pdf", "2-b.csv")

    @pytest.mark.asyncio
    async def test_error_status_prefers_body(self, local_group):
        uploader, client = make_uploader(lambda request: httpx.Response(413, text="Payload too large for bucket"))
        async with uploader:
            with pytest.raises(TransportError) as excinfo:
                await uploader.send(local_group)
        await client.aclose()

        assert excinfo.value.code == 413
        assert excinfo.value.reason == "API failed with status 413: Payload too large for bucket"

    @pytest.mark.asyncio
    async def test_error_status_without_body(self, local_group):
        uploader, client = make_uploader(lambda request: httpx.Response(500))
        async with uploader:
            with pytest.raises(TransportError) as excinfo:
                await uploader.send(local_group)
        await client.aclose()

        assert excinfo.value.reason == "API failed with status 500: Internal Server Error"

    @pytest.mark.asyncio
    async def test_transport_failure(self, local_group):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        uploader, client = make_uploader(handler)
        async with uploader:
            with pytest.raises(TransportError, match="connection refused"):
                await uploader.send(local_group)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_json(self, local_group):
        uploader, client = make_uploader(lambda request: httpx.Response(200, text="not json"))
        async with uploader:
            with pytest.raises(TransportError, match="Invalid JSON"):
                await uploader.send(local_group)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_response_without_message(self, local_group):
        uploader, client = make_uploader(lambda request: httpx.Response(200, content=json.dumps({}).encode()))
        async with uploader:
            receipt = await uploader.send(local_group)
        await client.aclose()
        assert receipt.message is None

    @pytest.mark.asyncio
    async def test_file_without_path(self):
        uploader, client = make_uploader(lambda request: httpx.Response(200, json={}))
        async with uploader:
            with pytest.raises(TransportError, match="No local data"):
                await uploader.send((FileDescriptor("ghost.pdf", 1, "application/pdf"),))
        await client.aclose()

    @pytest.mark.asyncio
    async def test_not_initialized(self, local_group):
        uploader = HTTPUploader(UploadConfig(endpoint_url=ENDPOINT))
        with pytest.raises(RuntimeError, match="not initialized"):
            await uploader.send(local_group)

    @pytest.mark.asyncio
    async def test_owns_client_when_none_given(self):
        uploader = HTTPUploader(UploadConfig(endpoint_url=ENDPOINT))
        async with uploader:
            assert uploader._client is not None
        assert uploader._client is None


class TestFileCollector:
    def test_collect_files(self, tmp_path):
        (tmp_path / "report.pdf").write_bytes(b"pdf")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "data.csv").write_text("a,b")
        (tmp_path / "blob").write_bytes(b"\x00\x01")

        files = FileCollector.collect_files([tmp_path])

        by_name = {file.name: file for file in files}
        assert set(by_name) == {"report.pdf", "data.csv", "blob"}
        assert by_name["report.pdf"].mime_type == "application/pdf"
        assert by_name["report.pdf"].size == 3
        assert by_name["blob"].mime_type == "application/octet-stream"
        assert by_name["data.csv"].path == tmp_path / "sub" / "data.csv"

    def test_single_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert [f.name for f in FileCollector.collect_files([path])] == ["notes.txt"]

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileCollector.collect_files([tmp_path / "nope"])
