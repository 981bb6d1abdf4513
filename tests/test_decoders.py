"""Tests for DTC and measurement decoding."""

import pytest

from wbh_diag.decoders.dtc import DTCDecoder
from wbh_diag.decoders.formulas import FORMULA_COUNT, FORMULAS, apply_formula
from wbh_diag.decoders.measurement import MeasurementDecoder
from wbh_diag.exceptions import UnsupportedFormatError
from wbh_diag.models.measurement import MeasurementUnit


class TestDTCDecoder:
    def test_decodes_records(self):
        records = DTCDecoder.decode("1234 00\n5678 02\n")
        assert [(r.error_code, r.status_code) for r in records] == [(0x1234, 0x00), (0x5678, 0x02)]
        assert str(records[1]) == "5678/02"

    def test_stops_at_garbage(self):
        records = DTCDecoder.decode("1234 00\nNO DTC\n5678 02\n")
        assert len(records) == 1

    def test_empty_response(self):
        assert DTCDecoder.decode("") == []
        assert DTCDecoder.decode("\n") == []

    def test_lowercase_hex(self):
        assert DTCDecoder.decode("abcd ef\n")[0].error_code == 0xABCD

    def test_incomplete_record_ignored(self):
        assert DTCDecoder.decode("1234 0") == []


U = MeasurementUnit

FORMULA_CASES = [
    (1, 10, 20, 40.0, U.RPM),
    (2, 100, 50, 10.0, U.PERCENT),
    (3, 100, 50, 10.0, U.DEGREES),
    (4, 10, 200, 7.3, U.ATDC),
    (4, 10, 100, 2.7, U.BTDC),
    (5, 10, 190, 90.0, U.CELSIUS),
    (6, 100, 120, 12.0, U.VOLT),
    (7, 100, 50, 50.0, U.KMH),
    (8, 2, 5, 1.0, U.NONE),
    (9, 10, 177, 10.0, U.DEGREES),
    (10, 0, 1, 1.0, U.WARM),
    (10, 0, 0, 0.0, U.COLD),
    (11, 100, 228, 2.0, U.NONE),
    (12, 100, 50, 5.0, U.OHM),
    (13, 100, 177, 5.0, U.MM),
    (14, 100, 50, 25.0, U.BAR),
    (15, 10, 50, 5.0, U.MS),
    (16, 1, 2, 258.0, U.BITS),
    (17, 0x41, 0x42, 16706.0, U.TEXT),
    (18, 10, 50, 20.0, U.MBAR),
    (19, 10, 50, 5.0, U.LITER),
    (20, 64, 192, 32.0, U.PERCENT),
    (21, 100, 120, 12.0, U.VOLT),
    (22, 100, 50, 5.0, U.MS),
    (23, 100, 128, 50.0, U.PERCENT),
    (24, 100, 50, 5.0, U.AMPERE),
    (25, 182, 10, 15.21, U.GRAMS_PER_SECOND),
    (26, 10, 100, 90.0, U.CELSIUS),
    (27, 10, 228, 10.0, U.ATDC),
    (27, 10, 28, 10.0, U.BTDC),
    (28, 10, 100, 90.0, U.NONE),
    (29, 10, 5, 1.0, U.MAP),
    (29, 5, 10, 2.0, U.MAP),
    (30, 2, 60, 10.0, U.DEG_KW),
    (31, 255, 0, 0.0, U.CELSIUS),
    (31, 128, 200, 10.0, U.CELSIUS),
    (32, 0, 200, -56.0, U.NONE),
    (32, 0, 100, 100.0, U.NONE),
    (33, 2, 5, 250.0, U.PERCENT),
    (33, 0, 5, 500.0, U.PERCENT),
    (34, 100, 138, 10.0, U.KW),
    (35, 10, 50, 5.0, U.LITER_PER_HOUR),
    (36, 1, 2, 2580.0, U.KM),
    (38, 100, 228, 10.0, U.DEG_KW),
    (39, 100, 128, 50.0, U.MG_PER_HOUR),
    (40, 20, 50, 115.0, U.AMPERE),
    (41, 1, 5, 260.0, U.AMPERE_HOUR),
    (42, 20, 50, 115.0, U.KW),
    (43, 1, 45, 30.0, U.VOLT),
    (44, 2, 30, 150.0, U.MINUTES),
    (45, 10, 100, 1.0, U.NONE),
    (46, 100, 42, 2.7, U.DEG_KW),
    (47, 2, 138, 20.0, U.MS),
    (48, 1, 5, 260.0, U.NONE),
    (49, 10, 40, 10.0, U.MG_PER_HOUR),
    (50, 50, 138, 20.0, U.MBAR),
    (50, 0, 138, 10.0, U.MBAR),
    (51, 255, 138, 10.0, U.MG_PER_HOUR),
    (52, 10, 100, 10.0, U.NM),
    (53, 0, 138, 14.222, U.GRAMS_PER_SECOND),
    (54, 1, 2, 258.0, U.COUNT),
    (55, 10, 40, 2.0, U.SECONDS),
    (56, 1, 2, 258.0, U.WSC),
    (57, 1, 2, 65794.0, U.WSC),
    (58, 0, 200, 57.26, U.PER_SECOND),
    (58, 0, 100, 102.25, U.PER_SECOND),
    (59, 128, 0, 1.0, U.PERCENT),
    (60, 1, 0, 2.56, U.SECONDS),
    (61, 2, 138, 5.0, U.NONE),
    (61, 0, 138, 10.0, U.NONE),
    (62, 10, 10, 25.6, U.SECONDS),
    (63, 0x41, 0x42, 16706.0, U.TEXT),
    (64, 10, 20, 30.0, U.OHM),
    (65, 10, 177, 5.0, U.MM),
    (66, 100, 51, 5100 / 511.12, U.VOLT),
    (67, 1, 4, 650.0, U.DEGREES),
    (68, 28, 197, 1000.0, U.DEG_PER_S),
    (69, 0, 100, 32.54, U.BAR),
    (70, 0, 100, 19.2, U.M_PER_S2),
]


@pytest.mark.parametrize("formula_id, a, b, value, unit", FORMULA_CASES)
def test_formula_values(formula_id, a, b, value, unit):
    m = apply_formula(formula_id, a, b)
    assert m.value == pytest.approx(value)
    assert m.unit == unit


def test_formula_cases_cover_table():
    assert {case[0] for case in FORMULA_CASES} == set(FORMULAS)


class TestFormulas:
    def test_table_covers_every_used_id(self):
        assert set(FORMULAS) == set(range(FORMULA_COUNT)) - {0, 37}

    def test_ratio(self):
        m = apply_formula(33, 0x50, 0x28)
        assert m.value == pytest.approx(50.0)
        assert m.unit == MeasurementUnit.PERCENT

    @pytest.mark.parametrize("formula_id", [0, 37, 71, 99, 0xFF])
    def test_unknown_ids(self, formula_id):
        m = apply_formula(formula_id, 0x12, 0x34)
        assert m.value == 0
        assert m.unit == MeasurementUnit.UNKNOWN
        assert not m.is_known
        assert m.raw == (formula_id, 0x12, 0x34)

    def test_warm_cold(self):
        assert apply_formula(10, 0, 1).formatted_value == "warm"
        assert apply_formula(10, 0, 0).formatted_value == "cold"

    def test_every_formula_runs_on_edge_bytes(self):
        for formula_id in FORMULAS:
            for a, b in ((0, 0), (0xFF, 0xFF), (0, 0xFF), (0xFF, 0)):
                assert apply_formula(formula_id, a, b).is_known


class TestMeasurementDecoder:
    def test_decodes_group(self):
        values = MeasurementDecoder.decode("01 0A 14\n21 50 28\n")
        assert len(values) == 2
        assert values[0].value == pytest.approx(40.0)
        assert values[1].value == pytest.approx(50.0)

    def test_keeps_unknown_formulas(self):
        values = MeasurementDecoder.decode("25 01 02\n")
        assert values[0].unit == MeasurementUnit.UNKNOWN
        assert values[0].raw == (0x25, 1, 2)

    def test_stops_at_garbage(self):
        assert len(MeasurementDecoder.decode("01 0A 14\nxx\n01 0A 14\n")) == 1

    @pytest.mark.parametrize("text", ["5", "A1 02 03\n", "NO DATA\n"])
    def test_unsupported_format(self, text):
        with pytest.raises(UnsupportedFormatError):
            MeasurementDecoder.decode(text)

    def test_empty_response(self):
        assert MeasurementDecoder.decode("") == []
