import io
import zipfile

from xlsxsheet.zipio import ZipReader, ZipWriter


def test_round_trip_in_memory():
    buffer = io.BytesIO()
    with ZipWriter(buffer) as writer:
        writer.add_file("xl/workbook.xml", b"<workbook/>")
        writer.add_file("[Content_Types].xml", b"<Types/>")
    buffer.seek(0)
    with ZipReader(buffer) as reader:
        assert reader.exists()
        assert reader.file_paths() == ["xl/workbook.xml", "[Content_Types].xml"]
        assert reader.file_data("xl/workbook.xml") == b"<workbook/>"


def test_round_trip_on_disk(tmp_path):
    path = tmp_path / "book.xlsx"
    writer = ZipWriter(path)
    writer.add_file("a.txt", io.BytesIO(b"from a file object"))
    writer.close()
    reader = ZipReader(path)
    assert reader.file_data("a.txt") == b"from a file object"
    reader.close()


def test_missing_archive(tmp_path):
    reader = ZipReader(tmp_path / "absent.xlsx")
    assert not reader.exists()
    assert reader.file_paths() == []
    assert reader.file_data("anything") == b""


def test_not_a_zip(tmp_path):
    path = tmp_path / "plain.txt"
    path.write_bytes(b"not an archive")
    assert not ZipReader(path).exists()


def test_missing_member_gives_empty_bytes():
    buffer = io.BytesIO()
    with ZipWriter(buffer) as writer:
        writer.add_file("present.xml", b"<x/>")
    buffer.seek(0)
    reader = ZipReader(buffer)
    assert reader.file_data("absent.xml") == b""


def test_directories_are_not_listed():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("xl/", b"")
        archive.writestr("xl/styles.xml", b"<styleSheet/>")
    buffer.seek(0)
    assert ZipReader(buffer).file_paths() == ["xl/styles.xml"]


def test_written_entries_are_compressed():
    buffer = io.BytesIO()
    with ZipWriter(buffer) as writer:
        writer.add_file("big.xml", b"<row/>" * 1000)
    buffer.seek(0)
    with zipfile.ZipFile(buffer) as archive:
        info = archive.getinfo("big.xml")
        assert info.compress_type == zipfile.ZIP_DEFLATED
        assert info.compress_size < info.file_size