"""Dependency injection for FastAPI endpoints"""

from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from shortlet_settlement.infrastructure.clients.notifications import NotificationClient
from shortlet_settlement.infrastructure.database.session import get_db
from shortlet_settlement.services.payouts import PayoutProcessor
from shortlet_settlement.services.reporting import ReportingService
from shortlet_settlement.services.settlement import SettlementOrchestrator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_notification_client() -> NotificationClient:
    """Provide email service client instance"""
    return NotificationClient()


def get_settlement_orchestrator(db: Session = Depends(get_db)) -> SettlementOrchestrator:
    return SettlementOrchestrator(db)


def get_payout_processor(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
) -> PayoutProcessor:
    """Payout processor whose notifications run as background tasks after the response"""
    return PayoutProcessor(db, notifier, background_tasks)


def get_reporting_service(
    currency: Optional[str] = Query(None, min_length=3, max_length=3, description="Report currency, defaults to NGN"),
    db: Session = Depends(get_db),
) -> ReportingService:
    return ReportingService(db, currency)


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit on success, roll back on any error and re-raise"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
