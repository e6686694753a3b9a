"""
抽出項目の定義

キーワード辞書から項目ごとの照合ルール（完全一致／部分一致、値の種類、
列の上限）を組み立てる。決算カード・一覧シートの両方の抽出で共通に使う
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from config import EXACT_MATCH_MAX_LENGTH, RATIO_MARKERS, SETTLEMENT_COLUMN_BOUNDS
from local_stats.pipeline.lexicon import LEXICON
from local_stats.pipeline.settings import DEFAULT_SETTINGS, ExtractionSettings
from local_stats.utils.normalization import compact_text

# キーワードの照合方法
EXACT = 'exact'
SUBSTRING = 'substring'

# 値の種類
AMOUNT = 'amount'
RATIO = 'ratio'
POPULATION = 'population'
COUNT = 'count'
MEASURE = 'measure'

FIELD_KINDS = {
    'settlement': {
        'population': POPULATION,
        'land_area': MEASURE,
        'financial_capability_index': RATIO,
        'real_debt_service_ratio': RATIO,
        'future_burden_ratio': RATIO,
        'current_account_ratio': RATIO,
    },
    'migration': {},
    'population': {
        'total_population': POPULATION,
    },
}

# 種類の指定がない項目の既定値
DEFAULT_KINDS = {
    'settlement': AMOUNT,
    'migration': COUNT,
    'population': COUNT,
}

COLUMN_BOUNDS = {
    'settlement': SETTLEMENT_COLUMN_BOUNDS,
}


def has_ratio_marker(cell_text: str) -> bool:
    return any(marker in cell_text for marker in RATIO_MARKERS)


@dataclass(frozen=True)
class KeywordSpec:
    """見出しキーワード（記号は完全一致、語句は部分一致）"""
    text: str
    match: str = SUBSTRING

    @classmethod
    def from_text(cls, keyword: str, exact_max_length: int = EXACT_MATCH_MAX_LENGTH) -> 'KeywordSpec':
        text = compact_text(keyword)
        match = EXACT if len(text) <= exact_max_length else SUBSTRING
        return cls(text, match)

    @property
    def is_exact(self) -> bool:
        return self.match == EXACT

    def matches(self, cell_text: str) -> bool:
        """compact_text済みのセル文字列と照合"""
        if not cell_text:
            return False
        if self.is_exact:
            return cell_text == self.text
        return self.text in cell_text


@dataclass(frozen=True)
class FieldSpec:
    """抽出項目"""
    name: str
    keywords: Tuple[KeywordSpec, ...]
    kind: str = AMOUNT
    column_bound: Optional[int] = None

    @property
    def is_guarded(self) -> bool:
        """見出しに比率の目印が必須の項目か"""
        return self.kind == RATIO

    def accepts_label(self, cell_text: str) -> bool:
        """
        見出しセルの文脈チェック

        比率・指数の項目は見出しに「率」「指数」「%」を含むセルのみ、
        金額の項目はそれらを含まないセルのみを受け付ける
        （「公債費」と「実質公債費比率」の取り違え防止）
        """
        if self.kind == RATIO:
            return has_ratio_marker(cell_text)
        if self.kind == AMOUNT:
            return not has_ratio_marker(cell_text)
        return True

    def match_label(self, cell_text: str) -> Optional[KeywordSpec]:
        """
        見出しセルに一致する最も具体的なキーワードを返す

        Args:
            cell_text: compact_text済みのセル文字列

        Returns:
            一致したキーワード（一致しない場合はNone）
        """
        if not cell_text or not self.accepts_label(cell_text):
            return None

        matched = [kw for kw in self.keywords if kw.matches(cell_text)]
        if not matched:
            return None
        return max(matched, key=self.specificity)

    def specificity(self, keyword: KeywordSpec) -> Tuple[int, int, int]:
        """完全一致 > 文脈チェックあり > キーワード長 の順で比較する値"""
        return (int(keyword.is_exact), int(self.is_guarded), len(keyword.text))

    def within_bound(self, column: int) -> bool:
        return self.column_bound is None or column < self.column_bound

    def accepts_value(self, value, settings: ExtractionSettings = DEFAULT_SETTINGS) -> bool:
        """人口項目は下限未満の値（団体コード等）を受け付けない"""
        if value is None:
            return False
        if self.kind == POPULATION:
            return value >= settings.population_floor
        return True


def build_field_specs(domain: str, exact_max_length: int = EXACT_MATCH_MAX_LENGTH) -> List[FieldSpec]:
    """
    ドメインの抽出項目一覧を作成

    Args:
        domain: 'settlement' / 'migration' / 'population'
        exact_max_length: この文字数以下のキーワードを完全一致とする（0で全て部分一致）

    Returns:
        FieldSpecのリスト（辞書の定義順）
    """
    lexicon: Dict[str, List[str]] = LEXICON[domain]
    kinds = FIELD_KINDS.get(domain, {})
    bounds = COLUMN_BOUNDS.get(domain, {})

    specs = []
    for name, keywords in lexicon.items():
        keyword_specs = []
        for keyword in keywords:
            spec = KeywordSpec.from_text(keyword, exact_max_length)
            # 全角/半角の違いだけの重複は除く
            if spec.text and spec not in keyword_specs:
                keyword_specs.append(spec)

        specs.append(FieldSpec(
            name=name,
            keywords=tuple(keyword_specs),
            kind=kinds.get(name, DEFAULT_KINDS[domain]),
            column_bound=bounds.get(name),
        ))

    return specs
