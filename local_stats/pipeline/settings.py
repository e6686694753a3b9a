"""
抽出処理の調整パラメータ

しきい値は経験的に調整する値のため、呼び出し側から上書きできるようにする
"""
from dataclasses import dataclass, replace

from config import (
    AREA_NAME_COLUMNS,
    DATA_COLUMN_OFFSET,
    HEADER_SCAN_ROWS,
    MIN_SHEET_ROWS,
    POPULATION_FLOOR,
    RIGHTWARD_LOOKAHEAD,
)


@dataclass(frozen=True)
class ExtractionSettings:
    """抽出パラメータ"""
    lookahead: int = RIGHTWARD_LOOKAHEAD
    population_floor: float = POPULATION_FLOOR
    header_scan_rows: int = HEADER_SCAN_ROWS
    data_column_offset: int = DATA_COLUMN_OFFSET
    area_name_columns: int = AREA_NAME_COLUMNS
    min_sheet_rows: int = MIN_SHEET_ROWS

    def with_overrides(self, **overrides) -> 'ExtractionSettings':
        """Noneでない値だけを上書きした設定を返す"""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


DEFAULT_SETTINGS = ExtractionSettings()
