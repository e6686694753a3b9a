"""
抽出キーワード辞書

ドメイン → 項目名 → 見出しの表記（同義語・記号）
"""

LEXICON = {
    # ■ 決算カード
    'settlement': {
        # 基本情報
        'population': ['住民基本台帳人口', '住基人口'],
        'land_area': ['面積'],
        # 収支
        'total_revenue': ['歳入総額', '歳入決算総額', '歳入合計'],
        'total_expenditure': ['歳出総額', '歳出決算総額', '歳出合計'],
        'real_balance': ['実質収支', '実質収支額'],
        'single_year_balance': ['単年度収支'],
        # 財政指標
        'financial_capability_index': ['財政力指数'],
        'real_debt_service_ratio': ['実質公債費比率'],
        'future_burden_ratio': ['将来負担比率'],
        'current_account_ratio': ['経常収支比率'],
        # 歳入内訳
        'local_tax': ['地方税', '普通税', '都道府県税'],
        'local_allocation_tax': ['地方交付税'],
        'local_consumption_tax': ['地方消費税'],
        # 歳出内訳（性質別）
        'personnel_expenses': ['人件費'],
        'assistance_expenses': ['扶助費'],
        'public_debt_expenses': ['公債費'],
        'ordinary_construction_expenses': ['普通建設事業費'],
    },

    # ■ 人口移動
    'migration': {
        'domestic_in': ['転入者数(国内)', '転入者数（国内）', '(A)'],
        'domestic_out': ['転出者数(国内)', '転出者数（国内）', '(B)'],
        'international_in': ['国外からの転入者数', '国外転入', '(C)'],
        'international_out': ['国外への転出者数', '国外転出', '(D)'],
        'social_increase': ['社会増加数', '社会増減', '(A)-(B)+(C)-(D)', '(E)'],
    },

    # ■ 人口動態
    'population': {
        'total_population': ['住民基本台帳人口', '人口総数', '総人口', '人口(計)', '人口'],
        'births': ['出生者数', '出生数'],
        'deaths': ['死亡者数', '死亡数'],
    },
}
