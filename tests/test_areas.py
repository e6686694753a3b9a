"""
Unit tests for the area resolver (local_stats.utils.areas).
"""
import pytest

from config import PREFECTURES
from local_stats.utils.areas import (
    MUNICIPALITY,
    NONE,
    PREFECTURE,
    compose_area,
    normalize_prefecture,
    resolve_area,
)


def test_prefecture_master_has_47_entries():
    assert len(PREFECTURES) == 47
    assert len(set(PREFECTURES)) == 47


class TestResolveArea:
    """Tests for resolve_area."""

    def test_prefecture_with_code_column(self):
        match = resolve_area(["01", "北海道", "", ""])
        assert match.kind == PREFECTURE
        assert match.name == "北海道"

    def test_prefecture_with_inner_whitespace(self):
        match = resolve_area(["", "東 京 都"])
        assert match.kind == PREFECTURE
        assert match.name == "東京都"

    def test_prefecture_with_code_prefix_in_same_cell(self):
        match = resolve_area(["01 北海道", "", ""])
        assert match.kind == PREFECTURE
        assert match.name == "北海道"

    def test_prefecture_wins_over_municipality(self):
        match = resolve_area(["札幌市", "北海道"], allow_municipality=True)
        assert match.kind == PREFECTURE
        assert match.name == "北海道"

    def test_municipality_when_allowed(self):
        match = resolve_area(["", "", "札幌市", ""], allow_municipality=True)
        assert match.kind == MUNICIPALITY
        assert match.name == "札幌市"

    def test_municipality_not_allowed(self):
        match = resolve_area(["", "", "札幌市", ""])
        assert match.kind == NONE
        assert not match

    @pytest.mark.parametrize("suffix_name", ["青森市", "森町", "大潟村", "千代田区"])
    def test_municipality_suffixes(self, suffix_name):
        match = resolve_area([suffix_name], allow_municipality=True)
        assert match.is_municipality
        assert match.name == suffix_name

    def test_municipality_code_prefix_removed(self):
        match = resolve_area(["13101千代田区"], allow_municipality=True)
        assert match.name == "千代田区"

    @pytest.mark.parametrize("label", ["合計", "再掲", "全国", "県計", "総数", "市計", "町村計"])
    def test_aggregate_labels_never_resolve(self, label):
        assert resolve_area([label], allow_municipality=True).kind == NONE
        assert resolve_area([label]).kind == NONE

    def test_bare_suffix_is_not_a_municipality(self):
        assert not resolve_area(["市"], allow_municipality=True)

    def test_empty_and_non_string_candidates(self):
        assert not resolve_area(["", None, 123, float("nan")], allow_municipality=True)

    def test_containment_is_not_enough_for_rows(self):
        # "北海道計" は集計行であり都道府県行ではない
        assert not resolve_area(["北海道計"])


class TestNormalizePrefecture:
    """Tests for normalize_prefecture."""

    def test_exact(self):
        assert normalize_prefecture("大阪府") == "大阪府"

    def test_leading_code(self):
        assert normalize_prefecture("13東京都") == "東京都"

    def test_trailing_text(self):
        assert normalize_prefecture("北海道(令和4年度)") == "北海道"

    def test_kyoto_is_not_tokyo(self):
        assert normalize_prefecture("26京都府") == "京都府"

    def test_no_prefecture(self):
        assert normalize_prefecture("Sheet1") is None
        assert normalize_prefecture("") is None


class TestComposeArea:
    """Tests for compose_area."""

    def test_concatenation(self):
        assert compose_area("北海道", "札幌市") == "北海道札幌市"

    def test_unknown_prefecture(self):
        assert compose_area(None, "札幌市") == "札幌市"

    def test_already_prefixed(self):
        assert compose_area("北海道", "北海道札幌市") == "北海道札幌市"
