"""
Pytest configuration and shared fixtures.
"""
import os
import sys
import pytest

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


def blank_grid(n_rows, n_cols):
    """n_rows x n_cols grid filled with empty strings."""
    return [["" for _ in range(n_cols)] for _ in range(n_rows)]


@pytest.fixture
def make_grid():
    """Factory: build a grid and place values at (row, col) positions."""
    def _make(n_rows, n_cols, cells=None):
        grid = blank_grid(n_rows, n_cols)
        for (row, col), value in (cells or {}).items():
            grid[row][col] = value
        return grid
    return _make


@pytest.fixture
def tokyo_settlement_grid(make_grid):
    """Settlement card for 東京都 with revenue and population labels."""
    return make_grid(12, 10, {
        (0, 0): "令和4年度 都道府県決算状況調",
        (2, 1): "歳入総額",
        (2, 4): "1,234,567",
        (10, 2): "住民基本台帳人口",
        (10, 5): "13900000",
    })


@pytest.fixture
def migration_grid(make_grid):
    """Migration list sheet: (A) at column 4, (B) at column 6."""
    return make_grid(8, 8, {
        (0, 0): "住民基本台帳人口移動報告",
        (2, 4): "(A)",
        (2, 6): "(B)",
        (4, 1): "北海道",
        (4, 4): 50000,
        (4, 6): 40000,
        (5, 1): "青森県",
        (5, 4): "12,345",
        (5, 6): "15,678",
        (7, 1): "合計",
        (7, 4): 62345,
        (7, 6): 55678,
    })
