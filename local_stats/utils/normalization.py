"""
テキスト・セル値の正規化ユーティリティ

見出しセルの表記揺れ（全角/半角、空白、括弧）を吸収し、
統計表のセル値を数値に変換する
"""
import math
import re
import unicodedata
from typing import Any, Optional, Union

import neologdn
import pandas as pd

from config import NEGATIVE_MARKERS, PLACEHOLDER_TOKENS

Number = Union[int, float]

RE_WHITESPACE = re.compile(r'\s+')

# 小数点・指数表記を含むか
RE_DECIMAL = re.compile(r'[.eE]')

# 数値の桁区切り
THOUSANDS_SEPARATORS = (',', '，')

# 数学記号のマイナス（U+2212）はNFKCでハイフンにならない
MINUS_SIGN = '\u2212'


def cell_to_str(value: Any) -> str:
    """
    セル値を文字列に変換

    空セル（None, NaN）は空文字列とする

    Args:
        value: セル値

    Returns:
        文字列
    """
    if value is None:
        return ''
    if isinstance(value, float) and math.isnan(value):
        return ''
    if isinstance(value, str):
        return value
    return str(value)


def normalize_text(text: Any) -> str:
    """
    見出し・地域名の正規化処理（メイン関数）

    処理内容:
    1. neologdnによる正規化
    2. Unicode NFKC正規化（全角/半角統一など）
    3. 連続空白を1つに、前後の空白を削除

    Args:
        text: 正規化対象の値（文字列以外はcell_to_strで変換）

    Returns:
        正規化されたテキスト
    """
    text = cell_to_str(text)

    if not text or text.strip() == '':
        return ''

    text = neologdn.normalize(text)
    text = unicodedata.normalize('NFKC', text)
    text = RE_WHITESPACE.sub(' ', text)

    return text.strip()


def compact_text(text: Any) -> str:
    """
    キーワード照合用に正規化し、空白をすべて除去

    「転入者数 （国内）」→「転入者数(国内)」
    """
    return RE_WHITESPACE.sub('', normalize_text(text))


def parse_number(value: Any) -> Optional[Number]:
    """
    セル値を数値に変換

    例:
        "1,234" → 1234
        "▲500" → -500
        "-", "***", "…" → None（該当なし・秘匿）

    数値に変換できない場合は例外を出さずにNoneを返す

    Args:
        value: セル値

    Returns:
        数値（変換できない場合はNone）
    """
    if value is None or isinstance(value, bool):
        return None

    # numpy型をPython標準型に変換
    if hasattr(value, 'item') and not isinstance(value, str):
        try:
            value = value.item()
        except (ValueError, TypeError):
            return None
        if isinstance(value, bool):
            return None

    if isinstance(value, (int, float)):
        if pd.isna(value) or not math.isfinite(value):
            return None
        return value

    if not isinstance(value, str):
        return None

    text = unicodedata.normalize('NFKC', value)
    for separator in THOUSANDS_SEPARATORS:
        text = text.replace(separator, '')
    text = RE_WHITESPACE.sub('', text)

    if not text or text in PLACEHOLDER_TOKENS:
        return None

    text = text.replace(MINUS_SIGN, '-')

    if text.startswith(NEGATIVE_MARKERS):
        number = _parse_float(text[1:])
        return -number if number is not None else None

    return _parse_float(text)


def _parse_float(text: str) -> Optional[Number]:
    """文字列を数値に変換（整数値はintで返す）"""
    if not text:
        return None

    try:
        number = float(text)
    except ValueError:
        return None

    if not math.isfinite(number):
        return None

    if number.is_integer() and RE_DECIMAL.search(text) is None:
        return int(number)
    return number
