"""
가져오기 / 내보내기 라우트

JSON 가져오기/내보내기, 스냅샷 저장/복원, CSV (계정과목, 분개)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from core.ledger.errors import ImportPayloadError
from core.ledger.facade import Ledger
from web.dependencies import get_ledger
from web.errors import http_error
from web.models.requests import CsvImportRequest
from web.models.responses import JournalResultResponse

router = APIRouter(prefix="/api/data", tags=["Data"])


@router.post("/import")
def import_json(
    payload: dict[str, Any] = Body(..., description="가져오기 페이로드 (camelCase)"),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """JSON 가져오기 (분개별 결과, 페이로드 형식 오류 시 400)"""
    try:
        return ledger.import_json_data(payload)
    except ImportPayloadError as e:
        raise http_error(e) from e


@router.get("/export")
def export_json(ledger: Ledger = Depends(get_ledger)) -> dict:
    """JSON 내보내기"""
    return ledger.export_json()


@router.get("/snapshot")
def get_snapshot(ledger: Ledger = Depends(get_ledger)) -> dict:
    """전체 상태 스냅샷"""
    return ledger.serialize()


@router.post("/restore")
def restore_snapshot(
    snapshot: dict[str, Any] = Body(..., description="스냅샷"),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """스냅샷 복원 (실패 시 기존 상태 유지)"""
    try:
        ledger.restore(snapshot)
    except ImportPayloadError as e:
        raise http_error(e) from e
    return {
        "success": True,
        "accounts": len(ledger.accounts),
        "journals": len(ledger.journals.all_journals()),
    }


@router.post("/snapshot/save")
def save_snapshot(ledger: Ledger = Depends(get_ledger)) -> dict:
    """스냅샷 파일 저장 (data/ledger_snapshot.json)"""
    path = ledger.save_snapshot()
    return {"success": True, "path": str(path)}


@router.get("/accounts.csv", response_class=PlainTextResponse)
def export_accounts_csv(ledger: Ledger = Depends(get_ledger)) -> str:
    """계정과목 CSV"""
    return ledger.export_accounts_csv()


@router.post("/accounts.csv", response_model=list[JournalResultResponse])
def import_accounts_csv(
    request: CsvImportRequest,
    ledger: Ledger = Depends(get_ledger),
) -> list[JournalResultResponse]:
    """계정과목 CSV 가져오기 (행별 결과)"""
    try:
        results = ledger.import_accounts_csv(request.content)
    except ImportPayloadError as e:
        raise http_error(e) from e
    return [JournalResultResponse.from_result(r) for r in results]


@router.get("/journals.csv", response_class=PlainTextResponse)
def export_journals_csv(ledger: Ledger = Depends(get_ledger)) -> str:
    """분개 CSV (라인 단위 행)"""
    return ledger.export_journals_csv()


@router.post("/journals.csv")
def import_journals_csv(
    request: CsvImportRequest,
    ledger: Ledger = Depends(get_ledger),
) -> list[dict]:
    """분개 CSV 가져오기 (분개별 결과)"""
    try:
        return ledger.import_journals_csv(request.content, auto_post=request.auto_post)
    except ImportPayloadError as e:
        raise http_error(e) from e
