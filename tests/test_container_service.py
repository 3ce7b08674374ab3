"""Чтение и запись контейнера."""

import logging

import pytest

from pelx.config import CodecConfig
from pelx.errors import FormatError, PelxIOError, ResultCode
from pelx.models.container_model import PelxContainer
from pelx.models.header_model import HEADER_SIZE, PelxHeader
from pelx.services.container_service import ContainerService
from pelx.services.pixel_service import new_container


class TestHeaderLayout:
    def test_pack_is_26_bytes_big_endian(self):
        header = PelxHeader(
            header_size=26,
            palette_offset=0x01020304,
            width=0x0102,
            height=0x0304,
            palette_channel_count=3,
            true_channel_count=4,
            palette_count=0x0506,
            reserved=b"abcde",
        )
        raw = header.pack()
        assert len(raw) == HEADER_SIZE
        assert raw[0:5] == b"PELX\x00"
        assert raw[5:9] == b"\x00\x00\x00\x1a"
        assert raw[9:13] == b"\x01\x02\x03\x04"
        assert raw[13:15] == b"\x01\x02"
        assert raw[15:17] == b"\x03\x04"
        assert raw[17] == 3
        assert raw[18] == 4
        assert raw[19:21] == b"\x05\x06"
        assert raw[21:26] == b"abcde"
        assert PelxHeader.unpack(raw) == header


class TestDecodeEncode:
    def test_round_trip(self, tmp_path, sample_container):
        service = ContainerService()
        first = tmp_path / "a.pelx"
        second = tmp_path / "b.pelx"
        service.encode(first, sample_container)

        decoded = service.decode(first)
        assert decoded.header == sample_container.header
        assert decoded.body == sample_container.body
        assert decoded.path == first

        service.encode(second, decoded)
        assert second.read_bytes() == first.read_bytes()

    def test_file_layout(self, tmp_path, sample_container):
        path = tmp_path / "a.pelx"
        ContainerService().encode(path, sample_container)
        data = path.read_bytes()
        assert data[:HEADER_SIZE] == sample_container.header.pack()
        assert data[HEADER_SIZE:] == bytes([0x02, 0x00, 0x01, 0x11, 0x22, 0x33, 0x44])

    def test_body_starts_at_header_size(self, write_file, make_header):
        header = make_header(header_size=30)
        path = write_file("gap.pelx", header.pack() + b"GAP!" + b"\x00\x00")
        container = ContainerService().decode(path)
        assert container.body == b"\x00\x00"

    def test_missing_file_is_io_error(self, tmp_path):
        with pytest.raises(PelxIOError) as info:
            ContainerService().decode(tmp_path / "missing.pelx")
        assert info.value.code == ResultCode.IO_ERROR

    def test_short_header_is_format_error(self, write_file):
        path = write_file("short.pelx", b"PELX\x00\x00\x00")
        with pytest.raises(FormatError):
            ContainerService().decode(path)

    def test_header_size_past_end_is_format_error(self, write_file, make_header):
        path = write_file("far.pelx", make_header(header_size=1000).pack())
        with pytest.raises(FormatError) as info:
            ContainerService().decode(path)
        assert info.value.code == ResultCode.INVALID_DATA_FORMAT

    def test_decode_does_not_validate(self, write_file, make_header):
        path = write_file("zero.pelx", make_header(width=0, magic=b"XXXXX").pack())
        container = ContainerService().decode(path)
        assert container.header.width == 0
        assert container.body == b""

    def test_encode_does_not_validate(self, tmp_path, make_header):
        container = PelxContainer(header=make_header(palette_count=0, width=0), body=b"\x07")
        path = tmp_path / "raw.pelx"
        ContainerService().encode(path, container)
        assert path.read_bytes()[-1:] == b"\x07"

    def test_encode_unpackable_field_is_format_error(self, tmp_path, make_header):
        container = PelxContainer(header=make_header(width=70000))
        with pytest.raises(FormatError):
            ContainerService().encode(tmp_path / "big.pelx", container)

    @pytest.mark.parametrize("field,value", [("magic", b"PELX"), ("magic", b"PELX\x00\x00"), ("reserved", b"\x00")])
    def test_encode_rejects_wrong_fixed_field_length(self, tmp_path, make_header, field, value):
        container = PelxContainer(header=make_header(**{field: value}))
        path = tmp_path / "short.pelx"
        with pytest.raises(FormatError, match=field):
            ContainerService().encode(path, container)
        assert not path.exists()

    def test_encode_to_missing_directory_is_io_error(self, tmp_path, sample_container):
        with pytest.raises(PelxIOError):
            ContainerService().encode(tmp_path / "nope" / "a.pelx", sample_container)


class TestBodySize:
    def _large(self, tmp_path):
        container = new_container(300, 300, b"\x00" * 70000)
        path = tmp_path / "large.pelx"
        ContainerService().encode(path, container)
        return path

    def test_body_longer_than_16_bits_is_kept(self, tmp_path):
        container = ContainerService().decode(self._large(tmp_path))
        assert container.body_size == 70000

    def test_legacy_body_size_truncates(self, tmp_path, caplog):
        service = ContainerService(CodecConfig(legacy_body_size=True))
        with caplog.at_level(logging.WARNING, logger="pelx.services.container_service"):
            container = service.decode(self._large(tmp_path))
        assert container.body_size == 70000 & 0xFFFF
        assert "16" in caplog.text


class TestRelease:
    def test_release_is_idempotent(self, sample_container):
        sample_container.release()
        sample_container.release()
        assert sample_container.released
        assert sample_container.body == b""

    def test_context_manager_releases(self, tmp_path, sample_container):
        path = tmp_path / "a.pelx"
        ContainerService().encode(path, sample_container)
        with ContainerService().decode(path) as container:
            assert container.body_size == 7
        assert container.released


class TestConfig:
    def test_from_mapping(self):
        config = CodecConfig.from_mapping({"legacy_body_size": True})
        assert config.legacy_body_size
        assert not config.strict_palette_count

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="colour"):
            CodecConfig.from_mapping({"colour": 1})
