"""
一覧シート（1行＝1地域）の抽出

1. 見出し解析: 先頭行から項目ごとの列番号を確定する（ColumnMap）
2. データ抽出: 見出しより下の行を地域名で判定し、確定した列から値を読む
"""
import logging
from dataclasses import dataclass, field as dataclass_field
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from local_stats.pipeline.fields import FieldSpec, KeywordSpec
from local_stats.pipeline.records import Record, has_data, new_record
from local_stats.pipeline.settings import DEFAULT_SETTINGS, ExtractionSettings
from local_stats.pipeline.workbook import Sheet
from local_stats.utils.areas import AreaMatch, compose_area, normalize_prefecture, resolve_area
from local_stats.utils.normalization import compact_text, parse_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderCandidate:
    """見出しセルと項目の一致候補"""
    field: FieldSpec
    keyword: KeywordSpec
    row: int
    column: int
    field_order: int
    position: int = 0

    def sort_key(self) -> Tuple:
        exact, guarded, length = self.field.specificity(self.keyword)
        # 複合見出しのセルは先頭に現れる語の項目に割り当てる
        return (-exact, -guarded, self.position, -length, self.row, self.column, self.field_order)


@dataclass(frozen=True)
class ColumnMap:
    """見出し解析の結果（項目名→列番号）"""
    columns: Mapping[str, int] = dataclass_field(default_factory=dict)
    header_row: int = -1

    def __post_init__(self):
        object.__setattr__(self, 'columns', MappingProxyType(dict(self.columns)))

    def __bool__(self) -> bool:
        return bool(self.columns)

    def column(self, field_name: str) -> Optional[int]:
        return self.columns.get(field_name)


def find_header_candidates(
    sheet: Sheet,
    fields: Sequence[FieldSpec],
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> List[HeaderCandidate]:
    """
    先頭 settings.header_scan_rows 行から見出し候補を収集

    左端の settings.data_column_offset 列はコード・名称列のため対象外

    Args:
        sheet: シート
        fields: 抽出項目
        settings: 抽出パラメータ

    Returns:
        見出し候補のリスト（走査順）
    """
    candidates = []
    scan_rows = min(settings.header_scan_rows, sheet.n_rows)

    for row_idx in range(scan_rows):
        row = sheet.row(row_idx)
        for col_idx in range(settings.data_column_offset, len(row)):
            cell = row[col_idx]
            if isinstance(cell, (int, float)):
                continue
            cell_text = compact_text(cell)
            if not cell_text:
                continue

            for order, field in enumerate(fields):
                if not field.within_bound(col_idx):
                    continue
                keyword = field.match_label(cell_text)
                if keyword is not None:
                    position = max(cell_text.find(keyword.text), 0)
                    candidates.append(HeaderCandidate(field, keyword, row_idx, col_idx, order, position))

    return candidates


def resolve_columns(candidates: Sequence[HeaderCandidate]) -> ColumnMap:
    """
    見出し候補から項目ごとの列を確定

    具体的な一致（完全一致 > 文脈チェックあり > セル内で前にある語 > 長いキーワード）から順に割り当て、
    同点の場合は上の行・左の列を優先する。1つの列は1項目にしか割り当てない。
    割り当て済みの列しか候補がない項目は次の候補の列を使う

    Args:
        candidates: 見出し候補

    Returns:
        ColumnMap
    """
    columns = {}
    claimed = set()

    for candidate in sorted(candidates, key=HeaderCandidate.sort_key):
        name = candidate.field.name
        if name in columns or candidate.column in claimed:
            continue
        columns[name] = candidate.column
        claimed.add(candidate.column)

    # 採用された列の見出しセルのうち最も下の行を見出し行とする
    header_row = max(
        (c.row for c in candidates if columns.get(c.field.name) == c.column),
        default=-1,
    )
    return ColumnMap(columns, header_row)


def discover_columns(
    sheet: Sheet,
    fields: Sequence[FieldSpec],
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> ColumnMap:
    """見出し解析（find_header_candidates + resolve_columns）"""
    return resolve_columns(find_header_candidates(sheet, fields, settings))


def extract_list_sheet(
    sheet_name: str,
    sheet: Sheet,
    fields: Sequence[FieldSpec],
    fiscal_year: int,
    source: str,
    allow_municipality: bool = False,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
    column_map: Optional[ColumnMap] = None,
) -> List[Record]:
    """
    一覧シートから地域ごとのレコードを抽出

    Args:
        sheet_name: シート名
        sheet: シート
        fields: 抽出項目
        fiscal_year: 年度
        source: 出典
        allow_municipality: 市区町村行も抽出するか
        settings: 抽出パラメータ
        column_map: 見出し解析済みの場合はその結果

    Returns:
        レコードのリスト
    """
    if column_map is None:
        column_map = discover_columns(sheet, fields, settings)

    if not column_map:
        logger.debug(f"  {sheet_name}: no header columns found")
        return []

    logger.debug(
        f"  {sheet_name}: header row {column_map.header_row}, "
        f"columns {dict(column_map.columns)}"
    )

    field_names = [f.name for f in fields]
    records = []
    current_prefecture = normalize_prefecture(sheet_name)

    for row_idx in range(column_map.header_row + 1, sheet.n_rows):
        candidates = [sheet.cell(row_idx, c) for c in range(settings.area_name_columns)]
        match = resolve_area(candidates, allow_municipality=allow_municipality)
        if not match:
            continue

        record = _new_area_record(match, current_prefecture, fiscal_year, source, field_names)
        if match.is_prefecture:
            current_prefecture = match.name

        for field in fields:
            col_idx = column_map.column(field.name)
            if col_idx is None:
                continue
            value = parse_number(sheet.cell(row_idx, col_idx))
            if field.accepts_value(value, settings):
                record[field.name] = value

        if has_data(record, field_names):
            records.append(record)

    logger.info(f"  {sheet_name}: {len(records)} rows")
    return records


def _new_area_record(
    match: AreaMatch,
    current_prefecture: Optional[str],
    fiscal_year: int,
    source: str,
    field_names: Sequence[str],
) -> Record:
    if match.is_prefecture:
        return new_record(fiscal_year, source, field_names, prefecture=match.name, area=match.name)

    # 行ラベル自体に都道府県名が含まれる場合はそれを優先する（"北海道札幌市"）
    prefecture = normalize_prefecture(match.name) or current_prefecture
    return new_record(
        fiscal_year,
        source,
        field_names,
        prefecture=prefecture,
        area=compose_area(prefecture, match.name),
    )
