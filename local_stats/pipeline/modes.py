"""
抽出モード定義

決算カード・人口移動・人口動態の各モードで、ワークブック全体から
レコードを抽出する
"""
import logging
from typing import Dict, List, Optional

from local_stats.pipeline.fields import FieldSpec, build_field_specs
from local_stats.pipeline.list_sheet import extract_list_sheet
from local_stats.pipeline.records import Record, dedupe_records
from local_stats.pipeline.settings import DEFAULT_SETTINGS, ExtractionSettings
from local_stats.pipeline.settlement import SETTLEMENT_FIELDS, extract_settlement_sheet
from local_stats.pipeline.workbook import Sheet, Workbook, is_admitted_sheet

logger = logging.getLogger(__name__)


class ExtractionMode:
    """抽出モードの基底クラス"""

    def __init__(self, name: str, description: str, fields: List[FieldSpec]):
        self.name = name
        self.description = description
        self.fields = fields

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    def extract_sheet(
        self,
        sheet_name: str,
        sheet: Sheet,
        fiscal_year: int,
        source: str,
        settings: ExtractionSettings,
    ) -> List[Record]:
        """
        1シートからレコードを抽出

        Args:
            sheet_name: シート名
            sheet: シート
            fiscal_year: 年度
            source: 出典
            settings: 抽出パラメータ

        Returns:
            レコードのリスト
        """
        raise NotImplementedError

    def extract(
        self,
        workbook: Workbook,
        fiscal_year: int,
        source: str,
        settings: Optional[ExtractionSettings] = None,
    ) -> List[Record]:
        """
        ワークブックの全シートから抽出し、重複を除外

        1シートの処理でエラーが発生しても残りのシートの処理は続ける

        Args:
            workbook: ワークブック
            fiscal_year: 年度
            source: 出典（ファイル名など）
            settings: 抽出パラメータ（指定しない場合は既定値）

        Returns:
            重複除外済みのレコードリスト
        """
        settings = settings or DEFAULT_SETTINGS
        results: List[Record] = []

        for sheet_name, sheet in workbook.items():
            if not is_admitted_sheet(sheet_name, sheet, settings):
                continue

            try:
                results.extend(
                    self.extract_sheet(sheet_name, sheet, fiscal_year, source, settings)
                )
            except Exception as e:
                logger.error(f"Error extracting sheet {sheet_name} of {source}: {e}", exc_info=True)

        return dedupe_records(results)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "fields": self.field_names,
        }


class SettlementMode(ExtractionMode):
    """決算カード: 1シート＝1団体"""

    def __init__(self):
        super().__init__(
            name="settlement",
            description="決算カード（1シート1団体）から財政指標を抽出",
            fields=SETTLEMENT_FIELDS,
        )

    def extract_sheet(self, sheet_name, sheet, fiscal_year, source, settings):
        record = extract_settlement_sheet(
            sheet_name, sheet, fiscal_year, source, settings, self.fields
        )
        return [record] if record else []


class ListMode(ExtractionMode):
    """一覧シート: 1行＝1地域"""

    def __init__(self, name: str, description: str, allow_municipality: bool):
        super().__init__(name=name, description=description, fields=build_field_specs(name))
        self.allow_municipality = allow_municipality

    def extract_sheet(self, sheet_name, sheet, fiscal_year, source, settings):
        return extract_list_sheet(
            sheet_name,
            sheet,
            self.fields,
            fiscal_year,
            source,
            allow_municipality=self.allow_municipality,
            settings=settings,
        )

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data["allow_municipality"] = self.allow_municipality
        return data


# 利用可能なモードのリスト
AVAILABLE_MODES = [
    SettlementMode(),
    ListMode(
        name="migration",
        description="住民基本台帳人口移動報告（都道府県別）から転入・転出者数を抽出",
        allow_municipality=False,
    ),
    ListMode(
        name="population",
        description="人口動態（都道府県・市区町村別）から人口・出生・死亡を抽出",
        allow_municipality=True,
    ),
]


def get_mode(name: str) -> Optional[ExtractionMode]:
    """
    モード名からモードを取得

    Args:
        name: モード名（settlement / migration / population）

    Returns:
        ExtractionModeオブジェクト（存在しない場合はNone）
    """
    for mode in AVAILABLE_MODES:
        if mode.name == name:
            return mode
    return None


def extract_settlement(
    workbook: Workbook, fiscal_year: int, source: str, settings: Optional[ExtractionSettings] = None
) -> List[Record]:
    """決算カードモードで抽出"""
    return get_mode("settlement").extract(workbook, fiscal_year, source, settings)


def extract_migration(
    workbook: Workbook, fiscal_year: int, source: str, settings: Optional[ExtractionSettings] = None
) -> List[Record]:
    """人口移動モードで抽出"""
    return get_mode("migration").extract(workbook, fiscal_year, source, settings)


def extract_population(
    workbook: Workbook, fiscal_year: int, source: str, settings: Optional[ExtractionSettings] = None
) -> List[Record]:
    """人口動態モードで抽出"""
    return get_mode("population").extract(workbook, fiscal_year, source, settings)
