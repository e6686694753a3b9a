"""
抽出レコードの作成と重複除外
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Record = Dict[str, object]


def new_record(
    fiscal_year: int,
    source: str,
    field_names: Sequence[str],
    prefecture: Optional[str] = None,
    area: Optional[str] = None,
    include_area: bool = True,
) -> Record:
    """
    全項目をNoneで初期化したレコードを作成

    Args:
        fiscal_year: 年度
        source: 出典（ファイル名など）
        field_names: 抽出項目名
        prefecture: 都道府県名
        area: 地域キー（都道府県名 or 都道府県名＋市区町村名）
        include_area: areaキーを出力するか

    Returns:
        レコード
    """
    record: Record = {
        'fiscal_year': fiscal_year,
        'prefecture': prefecture,
    }
    if include_area:
        record['area'] = area
    record['source'] = source
    for name in field_names:
        record[name] = None
    return record


def has_data(record: Record, field_names: Iterable[str]) -> bool:
    return any(record.get(name) is not None for name in field_names)


def record_key(record: Record) -> Tuple[object, object]:
    """重複判定キー: (年度, 地域 or 都道府県)"""
    return record.get('fiscal_year'), record.get('area') or record.get('prefecture')


def dedupe_records(records: Iterable[Record]) -> List[Record]:
    """
    同一キーのレコードを除外（先に見つかったものを残す）

    後から見つかったレコードは補助シート等からの再抽出とみなし、
    項目のマージは行わない

    Args:
        records: レコード列

    Returns:
        重複除外後のレコードリスト（元の順序を維持）
    """
    unique: Dict[Tuple[object, object], Record] = {}
    dropped = 0

    for record in records:
        key = record_key(record)
        if key in unique:
            dropped += 1
            continue
        unique[key] = record

    if dropped:
        logger.debug(f"Dropped {dropped} duplicate records")

    return list(unique.values())
