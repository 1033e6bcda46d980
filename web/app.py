"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from core.ledger.errors import LedgerError
from core.logging import setup_logging
from web.errors import status_for

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import (
    accounts,
    data,
    health,
    journals,
    reports,
    transactions,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리 (시작 시 Ledger 로드)"""
    from web.dependencies import get_ledger

    ledger = get_ledger()
    logger.info(
        f"Web: Ledger 준비 완료 (계정 {len(ledger.accounts)}건, "
        f"분개 {len(ledger.journals.all_journals())}건)"
    )
    yield


app = FastAPI(
    title="Ledger API",
    description="관리조합 복식부기 장부 API (회계구분별 자금 관리)",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """라우트에서 변환되지 않은 도메인 예외"""
    logger.warning(f"Web: {request.method} {request.url.path} - {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_for(exc.code),
        content={"detail": {"errors": exc.errors, "errorCode": exc.code}},
    )


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(journals.router)
app.include_router(transactions.router)
app.include_router(reports.router)
app.include_router(data.router)


@app.get("/", include_in_schema=False)
async def home(request: Request):
    """홈페이지 (API 문서로 리다이렉트)"""
    return RedirectResponse(url="/docs")
