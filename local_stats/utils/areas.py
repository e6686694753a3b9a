"""
地域名の判定ユーティリティ

行・シート名の文字列を都道府県／市区町村／該当なしに分類する
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from config import AGGREGATE_ROW_LABELS, MUNICIPALITY_SUFFIXES, PREFECTURES
from local_stats.utils.normalization import compact_text

PREFECTURE = 'prefecture'
MUNICIPALITY = 'municipality'
NONE = 'none'

_PREFECTURE_SET = frozenset(PREFECTURES)

# 地域名の前に付く団体コード・番号（例: "01 北海道", "13101千代田区"）
RE_LEADING_CODE = re.compile(r'^[0-9\-_.:()]+')


@dataclass(frozen=True)
class AreaMatch:
    """地域名の判定結果"""
    kind: str
    name: Optional[str] = None

    @property
    def is_prefecture(self) -> bool:
        return self.kind == PREFECTURE

    @property
    def is_municipality(self) -> bool:
        return self.kind == MUNICIPALITY

    def __bool__(self) -> bool:
        return self.kind != NONE


NO_AREA = AreaMatch(NONE)


def strip_leading_code(token: str) -> str:
    """先頭の団体コードを除去"""
    return RE_LEADING_CODE.sub('', token)


def normalize_prefecture(token) -> Optional[str]:
    """
    文字列に含まれる都道府県名を返す

    シート名や行ラベルの前後に付いたコード・記号を吸収する
    例: "13東京都" → "東京都", "北海道(令和4年度)" → "北海道"

    Args:
        token: シート名・セル値

    Returns:
        都道府県名（含まれない場合はNone）
    """
    text = compact_text(token)
    if not text:
        return None

    if text in _PREFECTURE_SET:
        return text

    for prefecture in PREFECTURES:
        if prefecture in text:
            return prefecture

    return None


def _as_municipality(token: str) -> Optional[str]:
    """市区町村名として妥当ならその名称を返す"""
    name = strip_leading_code(token)

    if len(name) <= 1 or not name.endswith(MUNICIPALITY_SUFFIXES):
        return None

    if token in AGGREGATE_ROW_LABELS or name in AGGREGATE_ROW_LABELS:
        return None

    return name


def resolve_area(candidates: Iterable, allow_municipality: bool = False) -> AreaMatch:
    """
    地域名候補のセル群から地域を判定

    判定順:
    1. 都道府県名との完全一致（空白は無視）
    2. 団体コード付きの都道府県名（"01 北海道"）
    3. 市区町村名（allow_municipality=Trueの場合のみ）

    Args:
        candidates: 行の先頭数列などの候補値
        allow_municipality: 市区町村行を認めるか

    Returns:
        AreaMatch
    """
    tokens = [compact_text(c) for c in candidates]
    tokens = [t for t in tokens if t]

    for token in tokens:
        if token in _PREFECTURE_SET:
            return AreaMatch(PREFECTURE, token)

    for token in tokens:
        stripped = strip_leading_code(token)
        if stripped != token and stripped in _PREFECTURE_SET:
            return AreaMatch(PREFECTURE, stripped)

    if allow_municipality:
        for token in tokens:
            name = _as_municipality(token)
            if name:
                return AreaMatch(MUNICIPALITY, name)

    return NO_AREA


def compose_area(prefecture: Optional[str], municipality: str) -> str:
    """
    市区町村の表示・重複判定キーを作成（都道府県名＋市区町村名）

    Args:
        prefecture: 都道府県名（不明ならNone）
        municipality: 市区町村名

    Returns:
        地域キー
    """
    if not prefecture or municipality.startswith(prefecture):
        return municipality
    return f"{prefecture}{municipality}"
