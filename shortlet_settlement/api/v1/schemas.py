"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from shortlet_settlement.domain.money import DEFAULT_CURRENCY, Money

CurrencyField = Field(DEFAULT_CURRENCY, min_length=3, max_length=3, description="ISO 4217 currency code")


def money_amount(value: Optional[Money]) -> Optional[Decimal]:
    """Money serialised with two decimal places"""
    return value.quantize().amount if value is not None else None


class QuoteRequest(BaseModel):
    """Request body for POST /v1/quotes"""

    price_per_night: Decimal = Field(..., ge=0, description="Nightly room rate")
    number_of_nights: int = Field(..., ge=1)
    cleaning_fee: Decimal = Field(Decimal("0"), ge=0)
    security_deposit: Decimal = Field(Decimal("0"), ge=0)
    currency: str = CurrencyField


class BreakdownResponse(BaseModel):
    """Full fee breakdown for a booking"""

    currency: str
    room_fee: Decimal
    cleaning_fee: Decimal
    security_deposit: Decimal
    subtotal: Decimal
    service_fee: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    cleaning_fee_to_realtor: Decimal
    service_fee_to_platform: Decimal
    room_fee_in_escrow: Decimal
    deposit_in_escrow: Decimal
    room_fee_split_realtor: Decimal
    room_fee_split_platform: Decimal
    total_realtor_earnings: Decimal


class RefundPreviewRequest(BaseModel):
    """Request body for POST /v1/disputes/refund"""

    tier: str = Field(..., min_length=1, description="TIER_1_SEVERE | TIER_2_PARTIAL | TIER_3_ABUSE")
    room_fee: Decimal = Field(..., ge=0)
    currency: str = CurrencyField


class RefundPreviewResponse(BaseModel):
    tier: str
    refund_amount: Decimal
    currency: str


class DepositDeductionRequest(BaseModel):
    """Request body for POST /v1/disputes/deposit-deduction"""

    damage_amount: Decimal = Field(..., ge=0)
    deposit_amount: Decimal = Field(..., ge=0)
    currency: str = CurrencyField


class DepositDeductionResponse(BaseModel):
    realtor_gets: Decimal
    guest_refund: Decimal
    is_liability_capped: bool
    currency: str


class CommissionRequest(BaseModel):
    """Request body for POST /v1/payments/{payment_id}/commission"""

    custom_rate: Optional[Decimal] = Field(None, gt=0, le=1, description="Overrides the default 7% rate")


class CommissionResponse(BaseModel):
    payment_id: str
    currency: str
    total_amount: Decimal
    platform_commission: Decimal
    payment_processing_fee: Decimal
    realtor_earnings: Decimal
    commission_rate: Decimal


class ReleaseRoomFeeRequest(BaseModel):
    check_in_at: Optional[datetime] = Field(None, description="Refuse release while the guest window is open")


class GuestDisputeRequest(BaseModel):
    tier: str = Field(..., min_length=1)


class ReleaseDepositRequest(BaseModel):
    damage_amount: Optional[Decimal] = Field(None, ge=0, description="Damage awarded to the realtor")
    check_out_at: Optional[datetime] = Field(None, description="Refuse release while the realtor window is open")


class PaymentSettlementResponse(BaseModel):
    """Settlement fields currently stored on a payment"""

    payment_id: str
    booking_id: str
    realtor_id: str
    status: str
    currency: str
    amount: Decimal
    service_fee: Optional[Decimal] = None
    platform_fee: Optional[Decimal] = None
    room_fee_in_escrow: bool
    deposit_in_escrow: bool
    room_fee_split_realtor: Optional[Decimal] = None
    room_fee_split_platform: Optional[Decimal] = None
    room_fee_refunded: Optional[Decimal] = None
    deposit_to_realtor: Optional[Decimal] = None
    deposit_refunded: Optional[Decimal] = None
    platform_commission: Optional[Decimal] = None
    commission_rate: Optional[Decimal] = None
    realtor_earnings: Optional[Decimal] = None
    commission_paid_out: bool
    payout_reference: Optional[str] = None


class PayoutRequest(BaseModel):
    """Request body for POST /v1/payments/{payment_id}/payout"""

    payout_reference: Optional[str] = Field(None, min_length=1, max_length=120)


class PayoutResponse(BaseModel):
    payment_id: str
    realtor_id: str
    amount: Decimal
    currency: str
    payout_reference: str
    payout_date: datetime


class RealtorReportResponse(BaseModel):
    """Response for GET /v1/reports/realtors/{realtor_id}"""

    realtor_id: str
    currency: str
    total_earnings: Decimal
    total_commission_paid: Decimal
    pending_payouts: Decimal
    completed_payouts: Decimal
    payout_count: int
    booking_count: int


class PlatformReportResponse(BaseModel):
    """Response for GET /v1/reports/platform"""

    currency: str
    total_revenue: Decimal
    total_commissions: Decimal
    total_payouts: Decimal
    pending_payouts: Decimal
    total_bookings: int
    active_realtors: int
