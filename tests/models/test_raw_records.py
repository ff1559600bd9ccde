"""Tests for raw catalog record parsing"""
import pytest

from storefront.models.raw_records import (
    AccessoryRecord,
    GarmentRecord,
    RecordKind,
    parse_addon_record,
    parse_price,
    parse_raw_record,
    parse_sizes,
)


class TestParsePrice:

    @pytest.mark.parametrize("raw,expected", [
        ("35.4", 35.4),
        (" 12 ", 12.0),
        ("7.5abc", 7.5),
        (".5", 0.5),
        ("-3", 0.0),
        ("-5", 0.0),
        (-2.5, 0.0),
        ("+4", 4.0),
        ("1e2", 100.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("inf"), 0.0),
        ({"value": 3}, 0.0),
    ])
    def test_parse_price(self, raw, expected):
        assert parse_price(raw) == expected


class TestParseSizes:

    def test_comma_separated(self):
        assert parse_sizes("S, M ,,L,") == ["S", "M", "L"]

    def test_list_input(self):
        assert parse_sizes(["S", " M", None, ""]) == ["S", "M"]

    def test_missing(self):
        assert parse_sizes(None) == []
        assert parse_sizes("") == []


class TestParseRawRecord:

    def test_garment_record(self):
        record = parse_raw_record(RecordKind.GARMENT, {
            "Id": 7,
            "edicion": " shemah ",
            "modelo": "modelo_1",
            "color": "",
            "genero": " FEMENINO ",
            "precio": "20",
            "tallas": "S",
            "imagen": [{"path": "download/a.jpg", "mimetype": "image/jpeg"}],
            "unexpected": "ignored",
        })
        assert isinstance(record, GarmentRecord)
        assert record.record_id == "7"
        assert record.grouping_key == "shemah"
        assert record.color is None
        assert record.gender == "femenino"
        assert record.price == 20.0
        assert record.attachments[0].path == "download/a.jpg"
        assert record.attachments[0].position == 0
        assert not record.attachments[0].is_video

    def test_accessory_record_from_string_kind(self):
        record = parse_raw_record("accessory", {"nombre_articulo": "talith"})
        assert isinstance(record, AccessoryRecord)
        assert record.grouping_key == "talith"
        assert record.gender == "hombre"
        assert record.sizes == []

    @pytest.mark.parametrize("data", [
        {"modelo": "m"},
        {"edicion": ""},
        {"edicion": "   "},
        {"edicion": None},
        {"edicion": ["a"]},
    ])
    def test_garment_without_edition_is_skipped(self, data):
        assert parse_raw_record(RecordKind.GARMENT, data) is None

    def test_accessory_without_name_is_skipped(self):
        assert parse_raw_record(RecordKind.ACCESSORY, {"precio": "3"}) is None

    @pytest.mark.parametrize("data", [None, "row", 42, ["edicion", "x"]])
    def test_non_mapping_is_skipped(self, data):
        assert parse_raw_record(RecordKind.GARMENT, data) is None

    def test_unknown_kind_is_skipped(self):
        assert parse_raw_record("poster", {"edicion": "x"}) is None

    def test_kind_in_row_does_not_override(self):
        record = parse_raw_record(RecordKind.GARMENT, {"edicion": "x", "kind": "accessory"})
        assert record.kind == RecordKind.GARMENT

    def test_attachments_not_a_list(self):
        record = parse_raw_record(RecordKind.GARMENT, {"edicion": "x", "imagen": "download/a.jpg"})
        assert record.attachments == []

    def test_video_attachment(self):
        record = parse_raw_record(RecordKind.GARMENT, {
            "edicion": "x",
            "imagen": [{"path": "v", "mimetype": "Video/MP4"}],
        })
        assert record.attachments[0].is_video


class TestParseAddonRecord:

    def test_addon_record(self):
        record = parse_addon_record({"nombre": "tzitzits_add", "imagen": [{"path": "download/tz.jpg"}]})
        assert record.name == "tzitzits_add"
        assert record.attachments[0].path == "download/tz.jpg"

    def test_addon_non_mapping(self):
        assert parse_addon_record("nope") is None
