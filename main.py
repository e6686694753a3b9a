"""
メインエントリーポイント

FastAPI アプリケーション、またはCLIとして実行可能
"""
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import LOG_FILE
from local_stats.pipeline.manager import BatchRunner, FileStatus
from local_stats.pipeline.modes import AVAILABLE_MODES, get_mode
from local_stats.pipeline.settings import DEFAULT_SETTINGS
from local_stats.pipeline.workbook import Workbook

logger = logging.getLogger(__name__)


def _configure_logging(level: int = logging.INFO):
    """ログ設定"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
        ]
    )


# FastAPIアプリ
app = FastAPI(
    title="Local Stats Extraction API",
    description="自治体の財政・人口統計Excelからキーワードで数値レコードを抽出する",
    version="0.1.0",
)


class ExtractionRequest(BaseModel):
    """抽出リクエスト（シート名 → セル行列）"""
    mode: str
    fiscal_year: int
    source: str = "request"
    sheets: Dict[str, List[List[Any]]]
    population_floor: Optional[float] = None


@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {
        "message": "Local Stats Extraction API",
        "version": "0.1.0",
        "endpoints": {
            "modes": "/api/modes",
            "extract": "/api/extract",
        }
    }


@app.get("/api/modes")
async def list_modes():
    """
    利用可能な抽出モードを取得

    Returns:
        モードリスト
    """
    return JSONResponse({
        "modes": [mode.to_dict() for mode in AVAILABLE_MODES],
        "total": len(AVAILABLE_MODES),
    })


@app.post("/api/extract")
def extract(request: ExtractionRequest):
    """
    ワークブックからレコードを抽出

    Args:
        request: 抽出リクエスト

    Returns:
        抽出されたレコード
    """
    mode = get_mode(request.mode)
    if mode is None:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {request.mode}")

    settings = DEFAULT_SETTINGS.with_overrides(population_floor=request.population_floor)
    records = mode.extract(Workbook(request.sheets), request.fiscal_year, request.source, settings)

    if not records:
        logger.warning(f"No data extracted from {request.source}")

    return JSONResponse({
        "mode": mode.name,
        "source": request.source,
        "count": len(records),
        "records": records,
    })


def cli_main():
    """CLI実行"""
    import argparse

    parser = argparse.ArgumentParser(description="Local Stats Extraction CLI")
    parser.add_argument(
        "files",
        nargs="*",
        help="Excel files (.xlsx) to extract",
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=[mode.name for mode in AVAILABLE_MODES],
        help="Extraction mode",
    )
    parser.add_argument(
        "--year",
        type=int,
        help="Fiscal year of the files (e.g., 2022)",
    )
    parser.add_argument(
        "--population-floor",
        type=float,
        default=None,
        help=f"Minimum plausible population value (default: {DEFAULT_SETTINGS.population_floor:g})",
    )
    parser.add_argument(
        "--print-records",
        action="store_true",
        help="Print extracted records to stdout as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--server",
        action="store_true",
        help="Run as API server",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="API server host",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="API server port",
    )

    args = parser.parse_args()
    _configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.server:
        # APIサーバーとして起動
        import uvicorn
        uvicorn.run(app, host=args.host, port=args.port)
        return

    if not args.files or not args.mode or args.year is None:
        parser.error("files, --mode and --year are required unless --server is given")

    settings = DEFAULT_SETTINGS.with_overrides(population_floor=args.population_floor)
    runner = BatchRunner(settings)
    results = runner.run(args.files, args.mode, args.year)

    for result in results:
        print(json.dumps(result.to_dict(), ensure_ascii=False), file=sys.stderr)

    if args.print_records:
        records = [record for result in results for record in result.records]
        print(json.dumps(records, ensure_ascii=False, indent=2))

    if any(result.status == FileStatus.FAILED for result in results):
        logger.error("Extraction finished with failures")
        sys.exit(1)

    logger.info("Extraction completed successfully")
    sys.exit(0)


if __name__ == "__main__":
    cli_main()
