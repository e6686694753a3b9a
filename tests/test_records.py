"""
Tests for record construction and de-duplication.
"""
from local_stats.pipeline.records import dedupe_records, has_data, new_record, record_key


def _record(year, prefecture, area=None, source="a.xlsx", **values):
    record = {"fiscal_year": year, "prefecture": prefecture, "area": area, "source": source}
    record.update(values)
    return record


class TestNewRecord:

    def test_fields_initialized_to_none(self):
        record = new_record(2022, "x.xlsx", ["births", "deaths"], prefecture="北海道", area="北海道")
        assert record == {
            "fiscal_year": 2022,
            "prefecture": "北海道",
            "area": "北海道",
            "source": "x.xlsx",
            "births": None,
            "deaths": None,
        }
        assert not has_data(record, ["births", "deaths"])

    def test_without_area_key(self):
        record = new_record(2022, "x.xlsx", [], prefecture="東京都", include_area=False)
        assert "area" not in record


class TestDedupe:

    def test_first_record_wins(self):
        first = _record(2022, "東京都", source="first.xlsx", population=1)
        second = _record(2022, "東京都", source="second.xlsx", population=2)

        result = dedupe_records([first, second])

        assert result == [first]
        assert result[0] is first

    def test_no_field_merge(self):
        first = _record(2022, "東京都", births=None)
        second = _record(2022, "東京都", births=10)
        assert dedupe_records([first, second])[0]["births"] is None

    def test_different_years_are_kept(self):
        records = [_record(2021, "東京都"), _record(2022, "東京都")]
        assert len(dedupe_records(records)) == 2

    def test_area_takes_precedence_over_prefecture(self):
        records = [
            _record(2022, "北海道", area="北海道札幌市"),
            _record(2022, "北海道", area="北海道函館市"),
            _record(2022, "北海道", area="北海道"),
        ]
        assert len(dedupe_records(records)) == 3

    def test_order_preserved(self):
        records = [
            _record(2022, "青森県"),
            _record(2022, "北海道"),
            _record(2022, "青森県", source="dup.xlsx"),
            _record(2022, "岩手県"),
        ]
        assert [r["prefecture"] for r in dedupe_records(records)] == ["青森県", "北海道", "岩手県"]

    def test_record_key(self):
        assert record_key(_record(2022, "北海道")) == (2022, "北海道")
        assert record_key(_record(2022, "北海道", area="北海道札幌市")) == (2022, "北海道札幌市")

    def test_empty(self):
        assert dedupe_records([]) == []
