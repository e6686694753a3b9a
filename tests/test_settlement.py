"""
Tests for settlement card (single-entity) extraction.
"""
import json

from local_stats.pipeline.settings import ExtractionSettings
from local_stats.pipeline.settlement import (
    SETTLEMENT_FIELDS,
    claim_label,
    extract_settlement_sheet,
    find_label_cells,
)
from local_stats.pipeline.workbook import Sheet

FIELD_NAMES = [f.name for f in SETTLEMENT_FIELDS]


def _extract(grid, sheet_name="東京都", settings=None):
    kwargs = {"settings": settings} if settings else {}
    return extract_settlement_sheet(sheet_name, Sheet(grid), 2022, "card_FY2022.xlsx", **kwargs)


class TestSettlementScenario:

    def test_tokyo_card(self, tokyo_settlement_grid):
        record = _extract(tokyo_settlement_grid)

        expected = {"fiscal_year": 2022, "prefecture": "東京都", "source": "card_FY2022.xlsx"}
        expected.update({name: None for name in FIELD_NAMES})
        expected["total_revenue"] = 1234567
        expected["population"] = 13900000
        assert record == expected

    def test_idempotent(self, tokyo_settlement_grid):
        first = _extract(tokyo_settlement_grid)
        second = _extract(tokyo_settlement_grid)
        assert json.dumps(first, ensure_ascii=False) == json.dumps(second, ensure_ascii=False)

    def test_no_match_returns_none(self, make_grid):
        grid = make_grid(6, 6, {(0, 0): "表題のみ", (1, 1): 123})
        assert _extract(grid) is None

    def test_sheet_name_with_code(self, tokyo_settlement_grid):
        record = _extract(tokyo_settlement_grid, sheet_name="13 東京都")
        assert record["prefecture"] == "東京都"
        assert "area" not in record

    def test_sheet_name_without_prefecture(self, tokyo_settlement_grid):
        record = _extract(tokyo_settlement_grid, sheet_name=" 札幌市 ")
        assert record["prefecture"] is None
        assert record["area"] == "札幌市"


class TestSettlementGuards:

    def test_population_skips_code_value(self, make_grid):
        grid = make_grid(6, 8, {
            (1, 0): "住民基本台帳人口",
            (1, 1): 47,
            (1, 3): "5,123,456",
        })
        assert _extract(grid)["population"] == 5123456

    def test_population_left_null_when_nothing_qualifies(self, make_grid):
        grid = make_grid(6, 8, {
            (1, 0): "住民基本台帳人口",
            (1, 1): 47,
            (3, 0): "歳入総額",
            (3, 2): 100,
        })
        record = _extract(grid)
        assert record["population"] is None
        assert record["total_revenue"] == 100

    def test_population_falls_through_to_next_label(self, make_grid):
        grid = make_grid(6, 8, {
            (1, 0): "住民基本台帳人口",
            (1, 1): 47,
            (4, 0): "住基人口",
            (4, 2): 2000000,
        })
        assert _extract(grid)["population"] == 2000000

    def test_ratio_and_amount_do_not_mix(self, make_grid):
        grid = make_grid(8, 8, {
            (1, 0): "実質公債費比率",
            (1, 2): "12.3",
            (4, 0): "公債費",
            (4, 2): "456,789",
        })
        record = _extract(grid)
        assert record["real_debt_service_ratio"] == 12.3
        assert record["public_debt_expenses"] == 456789

    def test_amount_ignores_ratio_labelled_cell(self, make_grid):
        grid = make_grid(8, 8, {
            (1, 0): "人件費 構成比率",
            (1, 2): "30.5",
            (3, 0): "人件費",
            (3, 2): "100,000",
        })
        assert _extract(grid)["personnel_expenses"] == 100000

    def test_column_bound_skips_right_block(self, make_grid):
        grid = make_grid(8, 40, {
            (2, 30): "地方税",
            (2, 31): 999,
            (5, 1): "地方税",
            (5, 3): 1000,
        })
        assert _extract(grid)["local_tax"] == 1000

    def test_lookahead_window(self, make_grid):
        grid = make_grid(6, 70, {
            (1, 0): "歳出総額",
            (1, 60): 5000,
        })
        assert _extract(grid) is None
        wide = ExtractionSettings(lookahead=65)
        assert _extract(grid, settings=wide)["total_expenditure"] == 5000

    def test_negative_marker_value(self, make_grid):
        grid = make_grid(6, 6, {(1, 0): "単年度収支", (1, 2): "▲1,500"})
        assert _extract(grid)["single_year_balance"] == -1500

    def test_ragged_rows(self):
        grid = [["歳入総額"], [], ["歳出総額", "", 300], None, ["x"], ["y"]]
        record = _extract(grid)
        assert record["total_revenue"] is None
        assert record["total_expenditure"] == 300


class TestLabelClaims:

    def test_cell_claimed_by_most_specific_field(self):
        claimed = claim_label("実質公債費比率", SETTLEMENT_FIELDS)
        assert [f.name for f in claimed] == ["real_debt_service_ratio"]

    def test_unmatched_cell(self):
        assert claim_label("備考", SETTLEMENT_FIELDS) == []

    def test_label_positions_in_row_major_order(self, make_grid):
        grid = make_grid(6, 6, {(3, 1): "歳入合計", (1, 4): "歳入総額"})
        positions = find_label_cells(Sheet(grid), SETTLEMENT_FIELDS)
        assert positions["total_revenue"] == [(1, 4), (3, 1)]
