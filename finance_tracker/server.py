"""FastAPI application exposing owner-scoped expense endpoints."""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from . import __version__, auth, crud, database, dates, entries, models, schemas
from .config import load_settings
from .logging import RequestLogAdapter, configure_logging, request_logger

settings = load_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings)
    database.init_db()
    yield


app = FastAPI(title="Finance Tracker Backend", version=__version__, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
)


def get_request_logger(request: Request) -> RequestLogAdapter:
    return request_logger(__name__, request.method, request.url.path)


def _parse_or_400(raw: Optional[str]) -> date:
    try:
        return dates.parse_date(raw)
    except dates.InvalidDateFormat as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _create(
    expense_in: schemas.ExpenseCreate,
    owner: models.User,
    db: Session,
    log: RequestLogAdapter,
) -> models.Expense:
    log.debug("Creating entry for %s, raw date=%r", owner.username, expense_in.date, extra={"owner_id": owner.id})
    try:
        expense = entries.build_expense(expense_in, owner)
    except dates.InvalidDateFormat as exc:
        log.info("Rejected entry with unparseable date", extra={"owner_id": owner.id})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    saved = crud.save_expense(db, expense)
    log.info(
        "Saved entry id=%s date=%s",
        saved.id,
        saved.date.isoformat(),
        extra={"owner_id": owner.id, "expense_id": saved.id},
    )
    return saved


def _scoped_list(
    db: Session,
    owner: models.User,
    start: date,
    end: date,
) -> List[models.Expense]:
    try:
        return crud.list_expenses_by_owner_and_range(db, owner.id, start, end)
    except crud.InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.post("/api/expenses", response_model=schemas.ExpenseRead)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    owner: models.User = Depends(auth.get_current_user),
    db: Session = Depends(database.get_db),
    log: RequestLogAdapter = Depends(get_request_logger),
) -> schemas.ExpenseRead:
    return _create(expense_in, owner, db, log)


@app.post("/api/expenses/incomes", response_model=schemas.ExpenseRead)
def create_income(
    expense_in: schemas.ExpenseCreate,
    owner: models.User = Depends(auth.get_current_user),
    db: Session = Depends(database.get_db),
    log: RequestLogAdapter = Depends(get_request_logger),
) -> schemas.ExpenseRead:
    forced = expense_in.model_copy(update={"type": entries.INCOME_LABEL})
    return _create(forced, owner, db, log)


@app.post("/api/expenses/spendings", response_model=schemas.ExpenseRead)
def create_spending(
    expense_in: schemas.ExpenseCreate,
    owner: models.User = Depends(auth.get_current_user),
    db: Session = Depends(database.get_db),
    log: RequestLogAdapter = Depends(get_request_logger),
) -> schemas.ExpenseRead:
    forced = expense_in.model_copy(update={"type": entries.EXPENSE_LABEL})
    return _create(forced, owner, db, log)


@app.get("/api/expenses", response_model=List[schemas.ExpenseRead])
def list_mine(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    owner: models.User = Depends(auth.get_current_user),
    db: Session = Depends(database.get_db),
) -> List[schemas.ExpenseRead]:
    if start is None and end is None:
        return crud.list_expenses_by_owner(db, owner.id)
    # A missing bound leaves that side of the range open.
    start_date = _parse_or_400(start) if start is not None else date.min
    end_date = _parse_or_400(end) if end is not None else date.max
    return _scoped_list(db, owner, start_date, end_date)


@app.get("/api/expenses/range", response_model=List[schemas.ExpenseRead])
def list_by_range(
    start: str = Query(...),
    end: str = Query(...),
    owner: models.User = Depends(auth.get_current_user),
    db: Session = Depends(database.get_db),
) -> List[schemas.ExpenseRead]:
    return _scoped_list(db, owner, _parse_or_400(start), _parse_or_400(end))


@app.get("/health", tags=["system"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
