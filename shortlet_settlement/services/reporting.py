"""Commission reports over settled payments"""

from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from shortlet_settlement.config import settings
from shortlet_settlement.domain.exceptions import InvalidArgumentError
from shortlet_settlement.domain.models import CommissionReport, PlatformCommissionReport
from shortlet_settlement.domain.reporting import build_platform_report, build_realtor_report
from shortlet_settlement.infrastructure.database.repositories import PaymentRepository
from shortlet_settlement.utils.date_utils import end_of_day, start_of_day

DateBound = Optional[Union[date, datetime]]


class ReportingService:
    """
    Read-only commission reports, recomputed on every call.

    A report covers one currency; settled payments in other currencies are left out.
    """

    def __init__(self, db: Session, currency: Optional[str] = None):
        self.payments = PaymentRepository(db)
        self.currency = (currency or settings.default_currency).upper()

    @staticmethod
    def _bounds(start_date: DateBound, end_date: DateBound):
        start, end = start_of_day(start_date), end_of_day(end_date)
        if start is not None and end is not None and start > end:
            raise InvalidArgumentError("start_date must not be after end_date")
        return start, end

    def realtor_report(
        self,
        realtor_id: str,
        start_date: DateBound = None,
        end_date: DateBound = None,
    ) -> CommissionReport:
        start, end = self._bounds(start_date, end_date)
        payments = self.payments.list_settled_payments(
            realtor_id=realtor_id, start=start, end=end, currency=self.currency
        )
        return build_realtor_report(realtor_id, payments, self.currency)

    def platform_report(self, start_date: DateBound = None, end_date: DateBound = None) -> PlatformCommissionReport:
        start, end = self._bounds(start_date, end_date)
        payments = self.payments.list_settled_payments(start=start, end=end, currency=self.currency)
        return build_platform_report(payments, self.currency)
