from pathlib import Path

# --- Path Definitions ---
# プロジェクトのルートディレクトリを基準とする
PROJECT_ROOT = Path(__file__).parent
LOG_FILE = PROJECT_ROOT / "extraction.log"

# --- Master Data Definitions ---
# 都道府県マスター（全国地方公共団体コード順）
PREFECTURES = [
    '北海道', '青森県', '岩手県', '宮城県', '秋田県', '山形県', '福島県',
    '茨城県', '栃木県', '群馬県', '埼玉県', '千葉県', '東京都', '神奈川県',
    '新潟県', '富山県', '石川県', '福井県', '山梨県', '長野県', '岐阜県',
    '静岡県', '愛知県', '三重県', '滋賀県', '京都府', '大阪府', '兵庫県',
    '奈良県', '和歌山県', '鳥取県', '島根県', '岡山県', '広島県', '山口県',
    '徳島県', '香川県', '愛媛県', '高知県', '福岡県', '佐賀県', '長崎県',
    '熊本県', '大分県', '宮崎県', '鹿児島県', '沖縄県',
]

# 市区町村名の末尾
MUNICIPALITY_SUFFIXES = ('市', '町', '村', '区')

# 集計行のラベル（地域名としては扱わない）
AGGREGATE_ROW_LABELS = {
    '合計', '再掲', '全国', '県計', '総数',
    '都計', '道計', '府計', '市計', '町村計', '区部',
}

# 地域データを含まない管理用シート名
EXCLUDED_SHEET_PATTERN = r'(目次|index|注意|原本|menu|表紙|概況|付表)'

# --- Cell Value Definitions ---
# 「該当なし・秘匿」を表すプレースホルダー（NFKC正規化後の表記）
PLACEHOLDER_TOKENS = {
    '-', '‐', '―', '—', '−',
    '*', '**', '***',
    '…', '...', '・・・',
    'x', 'X',
}

# 負数を表す三角記号（統計表の慣例）
NEGATIVE_MARKERS = ('▲', '△')

# 比率・指数系の見出しに含まれる目印
RATIO_MARKERS = ('率', '指数', '%')

# --- Extraction Defaults ---
# 見出しから右方向に数値を探す最大列数
RIGHTWARD_LOOKAHEAD = 50

# 人口として妥当な最小値（コードや連番の誤検出を防ぐ）
POPULATION_FLOOR = 1000

# 一覧シートの見出しを探す先頭行数
HEADER_SCAN_ROWS = 25

# 一覧シートの左端のコード・名称列（データ列として扱わない）
DATA_COLUMN_OFFSET = 2

# 地域名を探す左端の列数
AREA_NAME_COLUMNS = 4

# この文字数以下のキーワードはセル全体との完全一致のみ
EXACT_MATCH_MAX_LENGTH = 3

# 表として扱う最小行数
MIN_SHEET_ROWS = 5

# 決算カードの左ブロック（歳入）にある項目の列上限
SETTLEMENT_COLUMN_BOUNDS = {
    'local_tax': 24,
    'local_allocation_tax': 24,
    'local_consumption_tax': 24,
}
