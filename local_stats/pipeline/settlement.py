"""
決算カード（1シート＝1団体）の抽出

シート全体からキーワードを含むセルを探し、その右側の最初の数値を
項目の値とする
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from local_stats.pipeline.fields import FieldSpec, build_field_specs
from local_stats.pipeline.records import Record, new_record
from local_stats.pipeline.settings import DEFAULT_SETTINGS, ExtractionSettings
from local_stats.pipeline.workbook import Sheet
from local_stats.utils.areas import normalize_prefecture
from local_stats.utils.normalization import compact_text, parse_number

logger = logging.getLogger(__name__)

# 決算カードの見出しは文中に現れるため全キーワードを部分一致で扱う
SETTLEMENT_FIELDS = build_field_specs('settlement', exact_max_length=0)

Position = Tuple[int, int]


def claim_label(cell_text: str, fields: Sequence[FieldSpec]) -> List[FieldSpec]:
    """
    見出しセルを使える項目を返す

    複数の項目のキーワードに一致する場合は、最も具体的な一致
    （FieldSpec.specificity）の項目だけがセルを使える
    例: 「実質公債費比率」は公債費ではなく実質公債費比率の見出し

    Args:
        cell_text: compact_text済みのセル文字列
        fields: 抽出項目

    Returns:
        セルを使える項目（一致なしの場合は空）
    """
    matches = []
    for field in fields:
        keyword = field.match_label(cell_text)
        if keyword is not None:
            matches.append((field.specificity(keyword), field))

    if not matches:
        return []

    best = max(score for score, _ in matches)
    return [field for score, field in matches if score == best]


def find_label_cells(sheet: Sheet, fields: Sequence[FieldSpec]) -> Dict[str, List[Position]]:
    """
    項目ごとの見出しセル位置を行優先順で収集

    Args:
        sheet: シート
        fields: 抽出項目

    Returns:
        項目名 → [(行, 列), ...]
    """
    positions: Dict[str, List[Position]] = {field.name: [] for field in fields}

    for row_idx, row in sheet.iter_rows():
        for col_idx, cell in enumerate(row):
            if isinstance(cell, (int, float)):
                continue
            cell_text = compact_text(cell)
            if not cell_text:
                continue

            for field in claim_label(cell_text, fields):
                if field.within_bound(col_idx):
                    positions[field.name].append((row_idx, col_idx))

    return positions


def scan_right(
    sheet: Sheet,
    position: Position,
    field: FieldSpec,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
):
    """
    見出しセルの右側から項目の値を探す

    探索範囲は settings.lookahead 列まで（列上限のある項目はその手前まで）。
    人口項目の下限未満の数値は読み飛ばして右へ探索を続ける

    Returns:
        値（見つからない場合はNone）
    """
    row_idx, col_idx = position
    row = sheet.row(row_idx)

    end = min(col_idx + 1 + settings.lookahead, len(row))
    if field.column_bound is not None:
        end = min(end, field.column_bound)

    for next_col in range(col_idx + 1, end):
        value = parse_number(row[next_col])
        if value is None:
            continue
        if not field.accepts_value(value, settings):
            logger.debug(
                f"    Rejected {field.name}={value} at ({row_idx}, {next_col})"
            )
            continue
        return value

    return None


def extract_settlement_sheet(
    sheet_name: str,
    sheet: Sheet,
    fiscal_year: int,
    source: str,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
    fields: Optional[Sequence[FieldSpec]] = None,
) -> Optional[Record]:
    """
    決算カード1シートから1団体分のレコードを抽出

    団体はシート名から判定する（都道府県名を含まない場合はシート名を地域キーとする）

    Args:
        sheet_name: シート名
        sheet: シート
        fiscal_year: 年度
        source: 出典
        settings: 抽出パラメータ
        fields: 抽出項目（指定しない場合は決算カードの既定項目）

    Returns:
        レコード（どの項目も見つからない場合はNone）
    """
    fields = SETTLEMENT_FIELDS if fields is None else fields

    prefecture = normalize_prefecture(sheet_name)
    area = None if prefecture else sheet_name.strip()

    record = new_record(
        fiscal_year,
        source,
        [field.name for field in fields],
        prefecture=prefecture,
        area=area,
        include_area=prefecture is None,
    )

    label_cells = find_label_cells(sheet, fields)
    found = 0

    for field in fields:
        for position in label_cells[field.name]:
            value = scan_right(sheet, position, field, settings)
            if value is not None:
                record[field.name] = value
                found += 1
                break

    if not found:
        return None

    logger.info(f"  {sheet_name}: {found}/{len(fields)} fields")
    return record
