# backend/app/routers/portfolios.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import PortfolioCreate, PortfolioOut, PortfolioUpdate
from ..services import portfolio_service

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


@router.get("", response_model=list[PortfolioOut])
def list_portfolios(db: Session = Depends(get_db), actor=Depends(get_actor)):
    return portfolio_service.list_portfolios(db)


@router.get("/{portfolio_id}", response_model=PortfolioOut)
def get_portfolio(portfolio_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return portfolio_service.get_portfolio(db, portfolio_id)


@router.post("", response_model=PortfolioOut, status_code=201)
def create_portfolio(payload: PortfolioCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return portfolio_service.create_portfolio(db, actor_id=actor.id, payload=payload)


@router.put("/{portfolio_id}", response_model=PortfolioOut)
def update_portfolio(
    portfolio_id: str,
    payload: PortfolioUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return portfolio_service.update_portfolio(db, actor_id=actor.id, portfolio_id=portfolio_id, payload=payload)


@router.delete("/{portfolio_id}", status_code=204, response_class=Response)
def delete_portfolio(portfolio_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    portfolio_service.delete_portfolio(db, actor_id=actor.id, portfolio_id=portfolio_id)
    return Response(status_code=204)
