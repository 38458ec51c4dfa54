"""Realtor payout processing"""

import logging
from typing import Any, Callable, Optional, Protocol

from sqlalchemy.orm import Session

from shortlet_settlement.domain.exceptions import ConflictError, NotFoundError, PreconditionFailedError
from shortlet_settlement.domain.models import PayoutProcessedDetails, PayoutResult
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.clients.notifications import NotificationClient
from shortlet_settlement.infrastructure.database.repositories import AuditLogRepository, PaymentRepository
from shortlet_settlement.infrastructure.observability.logging import log_payout
from shortlet_settlement.infrastructure.observability.metrics import notification_failure_counter, record_payout
from shortlet_settlement.services.settlement import PAYMENT_ENTITY, SYSTEM_ACTOR
from shortlet_settlement.utils.date_utils import Clock, epoch_millis, utc_now


class TaskRunner(Protocol):
    """Anything that can run a task after the current request (e.g. FastAPI BackgroundTasks)"""

    def add_task(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None: ...


class PayoutProcessor:
    """Marks realtor earnings as paid out and notifies the realtor"""

    def __init__(
        self,
        db: Session,
        notifier: NotificationClient,
        tasks: TaskRunner,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.payments = PaymentRepository(db)
        self.audit = AuditLogRepository(db)
        self.notifier = notifier
        self.tasks = tasks
        self.clock = clock

    def process_payout(self, payment_id: str, payout_reference: Optional[str] = None) -> PayoutResult:
        """
        Pay out a payment's realtor earnings exactly once.

        Flow:
        1. Validate the payment exists, is not paid out and has earnings computed
        2. Flip commission_paid_out with a conditional update (loses cleanly to a concurrent payout)
        3. Append a PAYOUT_PROCESSED audit entry
        4. Schedule the realtor email without waiting for it

        Raises:
            NotFoundError: Payment does not exist
            ConflictError: Payout already processed; treat as done, do not retry
            PreconditionFailedError: Realtor earnings not calculated yet
        """
        payment = self.payments.get_payment_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        if payment.commission_paid_out:
            record_payout(processed=False)
            raise ConflictError("Payout already processed")

        if payment.realtor_earnings is None:
            raise PreconditionFailedError("Realtor earnings not calculated")

        payout_date = self.clock()
        reference = payout_reference or f"PAYOUT_{epoch_millis(payout_date)}"

        if not self.payments.mark_paid_out(payment.id, payout_date, reference):
            record_payout(processed=False)
            raise ConflictError("Payout already processed")

        amount = Money(payment.realtor_earnings, payment.currency)
        self.audit.append_entry(
            PAYMENT_ENTITY,
            payment.id,
            SYSTEM_ACTOR,
            PayoutProcessedDetails(
                realtor_id=payment.realtor_id,
                amount=str(amount.quantize().amount),
                currency=payment.currency,
                payout_reference=reference,
            ),
        )

        record_payout(processed=True, amount=float(amount.amount))
        log_payout(payment.id, payment.realtor_id, str(amount.quantize().amount), payment.currency, reference)

        if payment.realtor_email:
            self.tasks.add_task(
                self.notify_realtor,
                payment.realtor_email,
                payment.realtor_business_name,
                amount,
                payment.booking_id,
            )
        else:
            logging.warning("Realtor has no email on file, payout notification skipped", extra={"payment_id": payment.id})

        return PayoutResult(
            payment_id=payment.id,
            realtor_id=payment.realtor_id,
            amount=amount,
            payout_reference=reference,
            payout_date=payout_date,
        )

    async def notify_realtor(
        self,
        email: str,
        realtor_name: Optional[str],
        amount: Money,
        booking_id: str,
    ) -> None:
        """Best-effort payout email; failures are logged and counted, never raised"""
        try:
            await self.notifier.send_realtor_payout(email, realtor_name, amount, amount.currency, booking_id)
        except Exception as e:
            notification_failure_counter.inc()
            logging.error(
                f"Payout notification failed: {e}",
                extra={"booking_id": booking_id, "step": "payout_notification"},
            )
