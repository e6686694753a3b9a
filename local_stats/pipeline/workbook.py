"""
ワークブックの読み込みとシートの取り扱い

抽出処理はExcelファイルではなく、シート名→セル行列のメモリ上の
ワークブックを対象とする
"""
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from config import EXCLUDED_SHEET_PATTERN
from local_stats.pipeline.settings import DEFAULT_SETTINGS, ExtractionSettings

logger = logging.getLogger(__name__)

RE_EXCLUDED_SHEET = re.compile(EXCLUDED_SHEET_PATTERN, re.IGNORECASE)


class Sheet:
    """
    セル行列（行ごとに列数が異なってもよい）

    範囲外のセルは空文字列として扱う
    """

    def __init__(self, rows: Sequence[Sequence[Any]]):
        self._rows: List[List[Any]] = [list(row) if row is not None else [] for row in rows]

    @property
    def n_rows(self) -> int:
        return len(self._rows)

    def row(self, row_idx: int) -> List[Any]:
        if 0 <= row_idx < len(self._rows):
            return self._rows[row_idx]
        return []

    def cell(self, row_idx: int, col_idx: int) -> Any:
        row = self.row(row_idx)
        if 0 <= col_idx < len(row):
            value = row[col_idx]
            return '' if value is None else value
        return ''

    def iter_rows(self) -> Iterator[Tuple[int, List[Any]]]:
        return enumerate(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> 'Sheet':
        """header=Noneで読み込んだDataFrameから作成（NaNは空文字列）"""
        df = df.astype(object).where(df.notna(), '')
        return cls(df.values.tolist())


class Workbook:
    """シート名（順序付き）→Sheet"""

    def __init__(self, sheets: Mapping[str, Union[Sheet, Sequence[Sequence[Any]]]]):
        self._sheets: Dict[str, Sheet] = {}
        for name, sheet in sheets.items():
            self._sheets[str(name)] = sheet if isinstance(sheet, Sheet) else Sheet(sheet)

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets.keys())

    def __getitem__(self, name: str) -> Sheet:
        return self._sheets[name]

    def __len__(self) -> int:
        return len(self._sheets)

    def items(self):
        return self._sheets.items()


def is_excluded_sheet_name(sheet_name: str) -> bool:
    """目次・表紙・注意書きなど、地域データを含まないシート名か"""
    return RE_EXCLUDED_SHEET.search(sheet_name) is not None


def is_admitted_sheet(
    sheet_name: str, sheet: Sheet, settings: ExtractionSettings = DEFAULT_SETTINGS
) -> bool:
    """
    抽出対象のシートか判定

    Args:
        sheet_name: シート名
        sheet: シート
        settings: 抽出パラメータ（最小行数）

    Returns:
        対象の場合True
    """
    if is_excluded_sheet_name(sheet_name):
        logger.debug(f"  Skipped sheet (excluded name): {sheet_name}")
        return False

    if sheet.n_rows < settings.min_sheet_rows:
        logger.debug(f"  Skipped sheet (only {sheet.n_rows} rows): {sheet_name}")
        return False

    return True


def read_workbook(path: Union[str, Path], sheet_names: Optional[List[str]] = None) -> Workbook:
    """
    Excelファイルの全シートを読み込み

    Args:
        path: .xlsxファイルのパス
        sheet_names: 読み込むシート名（指定しない場合は全シート）

    Returns:
        Workbook
    """
    path = Path(path)
    frames = pd.read_excel(
        path,
        sheet_name=sheet_names,
        header=None,
        dtype=object,
        engine='openpyxl',
    )
    logger.info(f"Loaded {path.name}: {len(frames)} sheets")

    return Workbook({name: Sheet.from_dataframe(df) for name, df in frames.items()})
