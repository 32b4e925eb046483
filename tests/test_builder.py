import pytest

from mimeforge import BuilderConsumed, MultipartBuilder, MultipartPayload, Part
from mimeforge.datastructures import Header


def test_add_methods_are_chainable():
    builder = MultipartBuilder()

    result = (
        builder.add_text("title", "hello")
        .add_bytes("file", "a.txt", "text/plain", b"data")
        .add_json("meta", {"name": "X"})
        .add_part("raw", "application/octet-stream", None, b"\x00")
    )

    assert result is builder
    assert len(builder) == 4


def test_parts_keep_insertion_order_across_kinds():
    builder = (
        MultipartBuilder()
        .add_json("first", [1, 2])
        .add_text("second", "two")
        .add_bytes("third", "3.bin", "application/octet-stream", b"3")
        .add_text("fourth", "four")
    )

    assert [part.name for part in builder.parts] == ["first", "second", "third", "fourth"]


def test_add_text_part():
    builder = MultipartBuilder().add_text("field", "héllo")

    assert builder.parts == (Part("field", "text/plain", None, "héllo".encode()),)


def test_add_text_keeps_lone_surrogates():
    builder = MultipartBuilder().add_text("field", "a\ud800b")

    assert builder.parts[0].content == b"a\xed\xa0\x80b"


def test_add_bytes_part():
    builder = MultipartBuilder().add_bytes("upload", "report.pdf", "application/pdf", b"%PDF")

    part = builder.parts[0]

    assert part.name == "upload"
    assert part.filename == "report.pdf"
    assert part.content_type == "application/pdf"
    assert part.content == b"%PDF"
    assert part.is_file is True


def test_add_part_without_filename_is_not_a_file():
    builder = MultipartBuilder().add_part("raw", "application/xml", None, b"<a/>")

    assert builder.parts[0].is_file is False
    assert builder.parts[0].size == 4


def test_buffers_are_copied():
    buffer = bytearray(b"abc")
    builder = MultipartBuilder().add_bytes("file", "f.bin", "application/octet-stream", buffer)

    buffer[0:1] = b"z"

    assert builder.parts[0].content == b"abc"
    assert isinstance(builder.parts[0].content, bytes)


def test_memoryview_content_is_accepted():
    builder = MultipartBuilder().add_part(
        "view", "application/octet-stream", None, memoryview(b"bytes")
    )

    assert builder.parts[0].content == b"bytes"


def test_duplicate_names_are_preserved():
    builder = MultipartBuilder().add_text("tag", "a").add_text("tag", "b")

    assert [part.content for part in builder.parts] == [b"a", b"b"]


def test_parts_is_a_snapshot():
    builder = MultipartBuilder().add_text("a", "1")
    snapshot = builder.parts

    builder.add_text("b", "2")

    assert len(snapshot) == 1
    assert len(builder.parts) == 2


def test_explicit_boundary_is_used_verbatim():
    builder = MultipartBuilder(boundary="B1")

    assert builder.boundary == "B1"
    assert repr(builder) == "MultipartBuilder(boundary='B1', parts=0)"


def test_build_returns_header_and_body():
    payload = MultipartBuilder(boundary="B1").build()

    assert isinstance(payload, MultipartPayload)
    assert payload.header == Header("Content-Type", "multipart/form-data; boundary=B1")
    assert payload.content_type == "multipart/form-data; boundary=B1"
    assert payload.boundary == "B1"
    assert payload.headers == {"Content-Type": "multipart/form-data; boundary=B1"}
    assert payload.size == len(payload.body)


def test_build_result_unpacks_as_pair():
    (name, value), body = MultipartBuilder(boundary="B1").build()

    assert name == "Content-Type"
    assert value == "multipart/form-data; boundary=B1"
    assert body == b"--B1--\r\n"


def test_build_consumes_the_builder():
    builder = MultipartBuilder().add_text("a", "1")
    builder.build()

    assert builder.consumed is True

    with pytest.raises(BuilderConsumed):
        builder.build()

    with pytest.raises(BuilderConsumed):
        builder.add_text("b", "2")

    with pytest.raises(BuilderConsumed):
        builder.add_bytes("c", "c.txt", "text/plain", b"3")

    with pytest.raises(BuilderConsumed):
        builder.add_json("d", {})

    with pytest.raises(BuilderConsumed):
        builder.add_part("e", "text/plain", None, b"")


def test_no_validation_of_caller_values():
    payload = MultipartBuilder(boundary="B1").add_part("", "not a mime type", "", b"").build()

    assert b'name=""; filename=""' in payload.body
    assert b"Content-Type: not a mime type\r\n" in payload.body


class TestFromForm:
    def test_data_then_files(self):
        builder = MultipartBuilder.from_form(
            data={"field1": "value1", "field2": "value2"},
            files={"upload": b"file content"},
        )

        assert [(part.name, part.filename) for part in builder.parts] == [
            ("field1", None),
            ("field2", None),
            ("upload", "upload"),
        ]
        assert builder.parts[2].content_type == "application/octet-stream"

    def test_file_tuples(self):
        builder = MultipartBuilder.from_form(
            files={
                "doc": ("report.pdf", b"PDF content", "application/pdf"),
                "bin": ("file.bin", b"binary", None),
                "pair": ("pair.txt", b"pair"),
            },
        )

        doc, binary, pair = builder.parts

        assert (doc.filename, doc.content_type, doc.content) == (
            "report.pdf",
            "application/pdf",
            b"PDF content",
        )
        assert binary.content_type == "application/octet-stream"
        assert pair.filename == "pair.txt"
        assert pair.content_type == "application/octet-stream"

    def test_empty(self):
        builder = MultipartBuilder.from_form(boundary="B1")

        assert len(builder) == 0
        assert builder.build().body == b"--B1--\r\n"
