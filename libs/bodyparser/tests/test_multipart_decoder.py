"""
Unit tests – multipart/form-data decoder.

Coverage:
  - Fields and files split into separate maps, repeated names promoted
  - File metadata: sanitized name, original name, size, declared / mime type
  - Structural limits: field count, name / value / filename length
  - Byte limits: per-file ceiling, stream budget
  - Malformed bodies, missing boundary, parts without a name
  - Denylisted field names
"""

import pytest

from bodyparser.decoders.multipart import (
    MAX_FIELDS,
    MAX_FILENAME_LENGTH,
    MAX_NAME_LENGTH,
    MAX_VALUE_LENGTH,
    FileField,
    MultipartDecoder,
    sanitize_filename,
)
from bodyparser.errors import DecodeFailure
from bodyparser.options import MultipartOptions
from helpers import BOUNDARY, build_request, multipart_body

MULTIPART = f"multipart/form-data; boundary={BOUNDARY}"


async def run(parts, content_length=True, **options):
    request, _ = build_request(
        body=multipart_body(parts),
        content_type=MULTIPART,
        content_length=content_length,
    )
    return await MultipartDecoder(MultipartOptions(**options)).run(request)


# ═══════════════════════════════════════════════════════════════════════
#  Filename sanitization
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "name, expected",
    [
        ("report.pdf", "report.pdf"),
        ("../../etc/passwd", "etcpasswd"),
        ("..\\..\\windows\\system32", "windowssystem32"),
        (".hidden", "hidden"),
        ("a\x00b.txt", "ab.txt"),
        ("...", "upload"),
        ("", "upload"),
    ],
)
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


# ═══════════════════════════════════════════════════════════════════════
#  Fields and files
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_fields_only():
    result = await run([{"name": "title", "value": "Hello"}, {"name": "lang", "value": "fr"}])
    assert result.body == {"title": "Hello", "lang": "fr"}
    assert result.files == {}
    assert result.raw is None


@pytest.mark.asyncio
async def test_field_and_file():
    result = await run(
        [
            {"name": "title", "value": "Avatar"},
            {"name": "avatar", "filename": "me.png", "type": "image/png", "value": "PNGDATA"},
        ]
    )
    assert result.body == {"title": "Avatar"}
    upload = result.files["avatar"]
    assert isinstance(upload, FileField)
    assert upload.filename == "me.png"
    assert upload.original_name == "me.png"
    assert upload.size == 7
    assert upload.data == b"PNGDATA"
    assert upload.declared_type == "image/png"
    assert upload.mime_type == "image/png"


@pytest.mark.asyncio
async def test_file_without_type_defaults_to_text_plain():
    result = await run([{"name": "doc", "filename": "notes", "value": "abc"}])
    assert result.files["doc"].declared_type == "text/plain"
    assert result.files["doc"].mime_type == "text/plain"


@pytest.mark.asyncio
async def test_default_file_type_option():
    result = await run(
        [{"name": "doc", "filename": "blob", "value": "abc"}],
        default_file_type="application/octet-stream",
    )
    assert result.files["doc"].declared_type == "application/octet-stream"


@pytest.mark.asyncio
async def test_mime_type_drops_parameters():
    result = await run(
        [{"name": "doc", "filename": "a.txt", "type": "text/plain; charset=utf-8", "value": "abc"}]
    )
    assert result.files["doc"].declared_type == "text/plain; charset=utf-8"
    assert result.files["doc"].mime_type == "text/plain"


@pytest.mark.asyncio
async def test_traversal_filename_sanitized():
    result = await run([{"name": "f", "filename": "../../etc/passwd", "value": "root"}])
    assert result.files["f"].filename == "etcpasswd"
    assert result.files["f"].original_name == "../../etc/passwd"


@pytest.mark.asyncio
async def test_repeated_names_promote_to_list():
    result = await run(
        [
            {"name": "tag", "value": "a"},
            {"name": "tag", "value": "b"},
            {"name": "docs", "filename": "1.txt", "value": "one"},
            {"name": "docs", "filename": "2.txt", "value": "two"},
        ]
    )
    assert result.body == {"tag": ["a", "b"]}
    assert [f.filename for f in result.files["docs"]] == ["1.txt", "2.txt"]


@pytest.mark.asyncio
async def test_file_data_not_in_repr():
    result = await run([{"name": "f", "filename": "s.txt", "value": "secret-content"}])
    assert "secret-content" not in repr(result.files["f"])


@pytest.mark.asyncio
async def test_chunked_transfer():
    result = await run([{"name": "a", "value": "1"}], content_length=False)
    assert result.body == {"a": "1"}


@pytest.mark.asyncio
async def test_denied_names_skipped():
    result = await run(
        [
            {"name": "__proto__", "value": "x"},
            {"name": "constructor", "filename": "c.txt", "value": "y"},
            {"name": "ok", "value": "1"},
        ]
    )
    assert result.body == {"ok": "1"}
    assert result.files == {}


# ═══════════════════════════════════════════════════════════════════════
#  Structural limits
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_max_fields_accepted():
    parts = [{"name": f"f{i}", "value": "v"} for i in range(MAX_FIELDS)]
    result = await run(parts)
    assert len(result.body) == MAX_FIELDS


@pytest.mark.asyncio
async def test_too_many_fields():
    parts = [{"name": f"f{i}", "value": "v"} for i in range(MAX_FIELDS + 1)]
    result = await run(parts)
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 400
    assert result.detail == "Too many form fields"


@pytest.mark.asyncio
async def test_field_name_too_long():
    result = await run([{"name": "n" * (MAX_NAME_LENGTH + 1), "value": "v"}])
    assert isinstance(result, DecodeFailure)
    assert result.detail == "Field name too long"


@pytest.mark.asyncio
async def test_field_value_too_long():
    result = await run([{"name": "big", "value": "v" * (MAX_VALUE_LENGTH + 1)}])
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 400
    assert result.detail == "Field value too long"


@pytest.mark.asyncio
async def test_filename_too_long():
    result = await run([{"name": "f", "filename": "a" * (MAX_FILENAME_LENGTH + 1), "value": "x"}])
    assert isinstance(result, DecodeFailure)
    assert result.detail == "Filename too long"


# ═══════════════════════════════════════════════════════════════════════
#  Byte limits
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_file_too_large():
    result = await run(
        [{"name": "f", "filename": "big.bin", "value": "x" * 11}],
        content_length=False,
        file_limit="10b",
    )
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 413
    assert result.detail == "File too large"


@pytest.mark.asyncio
async def test_file_at_limit_accepted():
    result = await run([{"name": "f", "filename": "ok.bin", "value": "x" * 10}], file_limit=10)
    assert result.files["f"].size == 10


@pytest.mark.asyncio
async def test_body_over_limit():
    result = await run(
        [{"name": "f", "filename": "big.bin", "value": "x" * 500}],
        content_length=False,
        limit="200b",
    )
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 413


def test_file_limit_defaults_to_limit():
    decoder = MultipartDecoder(MultipartOptions(limit="1kb"))
    assert decoder.file_limit == 1024


# ═══════════════════════════════════════════════════════════════════════
#  Malformed input
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_boundary():
    request, _ = build_request(body="irrelevant", content_type="multipart/form-data")
    result = await MultipartDecoder().run(request)
    assert isinstance(result, DecodeFailure)
    assert result.detail == "Missing multipart boundary"


@pytest.mark.asyncio
async def test_part_without_name():
    body = f'--{BOUNDARY}\r\nContent-Disposition: form-data\r\n\r\nvalue\r\n--{BOUNDARY}--'
    request, _ = build_request(body=body, content_type=MULTIPART)
    result = await MultipartDecoder().run(request)
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 400


@pytest.mark.asyncio
async def test_garbage_body():
    request, _ = build_request(body="this is not multipart at all", content_type=MULTIPART)
    result = await MultipartDecoder().run(request)
    assert isinstance(result, DecodeFailure)
    assert result.status_code == 400
    assert result.kind == "invalid_syntax"
