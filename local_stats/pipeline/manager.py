"""
一括抽出の管理モジュール

ファイルを1件ずつ読み込んで抽出し、ファイルごとの結果と件数を記録する
"""
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from tqdm import tqdm

from local_stats.pipeline.modes import get_mode
from local_stats.pipeline.records import Record
from local_stats.pipeline.settings import ExtractionSettings
from local_stats.pipeline.workbook import Workbook, read_workbook

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    """ファイルの処理ステータス"""
    PENDING = "pending"
    EXTRACTED = "extracted"
    EMPTY = "empty"
    FAILED = "failed"


class UnknownModeError(ValueError):
    """存在しない抽出モードが指定された時の例外"""
    pass


class FileResult:
    """1ファイルの抽出結果"""

    def __init__(self, path: Path, mode: str, fiscal_year: int):
        self.path = path
        self.mode = mode
        self.fiscal_year = fiscal_year
        self.status = FileStatus.PENDING
        self.records: List[Record] = []
        self.error_message: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None

    @property
    def source(self) -> str:
        return self.path.name

    @property
    def record_count(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict:
        """結果を辞書形式で返す（レコード本体は含まない）"""
        return {
            "source": self.source,
            "mode": self.mode,
            "fiscal_year": self.fiscal_year,
            "status": self.status.value,
            "record_count": self.record_count,
            "error_message": self.error_message,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


class BatchRunner:
    """一括抽出クラス"""

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        loader: Callable[[Path], Workbook] = read_workbook,
    ):
        self.settings = settings
        self.loader = loader
        self.results: List[FileResult] = []

    def run_file(self, path: Union[str, Path], mode_name: str, fiscal_year: int) -> FileResult:
        """
        1ファイルを抽出

        読み込み・抽出のエラーはログに記録し、FAILEDの結果として返す

        Args:
            path: ワークブックのパス
            mode_name: 抽出モード名
            fiscal_year: 年度

        Returns:
            FileResult
        """
        mode = get_mode(mode_name)
        if mode is None:
            raise UnknownModeError(f"Unknown mode: {mode_name}")

        result = FileResult(Path(path), mode_name, fiscal_year)
        result.started_at = datetime.now()

        logger.info(f"Processing: {result.source} ({mode_name}, FY{fiscal_year})")

        try:
            workbook = self.loader(result.path)
            result.records = mode.extract(workbook, fiscal_year, result.source, self.settings)
            result.status = FileStatus.EXTRACTED if result.records else FileStatus.EMPTY

        except Exception as e:
            logger.error(f"Error processing {result.source}: {e}", exc_info=True)
            result.status = FileStatus.FAILED
            result.error_message = str(e)

        result.completed_at = datetime.now()

        if result.status == FileStatus.EXTRACTED:
            logger.info(f"  Extracted {result.record_count} records from {result.source}")
        elif result.status == FileStatus.EMPTY:
            logger.warning(
                f"  No data extracted from {result.source} "
                f"(check the lexicon or guards for this layout)"
            )

        self.results.append(result)

        return result

    def run(
        self,
        paths: Iterable[Union[str, Path]],
        mode_name: str,
        fiscal_year: int,
        show_progress: bool = True,
    ) -> List[FileResult]:
        """
        複数ファイルを順に抽出

        Args:
            paths: ワークブックのパス
            mode_name: 抽出モード名
            fiscal_year: 年度
            show_progress: 進捗バーを表示するか

        Returns:
            FileResultのリスト（入力順）
        """
        if get_mode(mode_name) is None:
            raise UnknownModeError(f"Unknown mode: {mode_name}")

        paths = [Path(p) for p in paths]
        results = [
            self.run_file(path, mode_name, fiscal_year)
            for path in tqdm(paths, desc=f"Extracting ({mode_name})", disable=not show_progress)
        ]

        self.log_summary(results)
        return results

    @staticmethod
    def log_summary(results: List[FileResult]) -> None:
        """ファイル数・レコード数の集計をログ出力"""
        extracted = sum(1 for r in results if r.status == FileStatus.EXTRACTED)
        empty = [r.source for r in results if r.status == FileStatus.EMPTY]
        failed = [r.source for r in results if r.status == FileStatus.FAILED]
        total_records = sum(r.record_count for r in results)

        logger.info(
            f"Completed: {len(results)} files, {extracted} extracted, "
            f"{len(empty)} empty, {len(failed)} failed, {total_records} records"
        )
        if empty:
            logger.warning(f"Files with no records: {', '.join(empty)}")
        if failed:
            logger.error(f"Failed files: {', '.join(failed)}")

    def get_results(self) -> List[FileResult]:
        """これまでの全結果を取得"""
        return list(self.results)
