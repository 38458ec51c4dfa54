"""GET /v1/reports/* - Commission reports"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shortlet_settlement.api.dependencies import get_reporting_service
from shortlet_settlement.api.v1.schemas import PlatformReportResponse, RealtorReportResponse, money_amount
from shortlet_settlement.services.reporting import ReportingService

router = APIRouter()


@router.get("/reports/realtors/{realtor_id}", response_model=RealtorReportResponse)
def get_realtor_report(
    realtor_id: str,
    start_date: Optional[date] = Query(None, description="Inclusive, by payment creation date"),
    end_date: Optional[date] = Query(None, description="Inclusive, by payment creation date"),
    reporting: ReportingService = Depends(get_reporting_service),
):
    """
    Earnings, commission and payout totals for one realtor's settled bookings.
    """
    report = reporting.realtor_report(realtor_id, start_date, end_date)
    return RealtorReportResponse(
        realtor_id=report.realtor_id,
        currency=report.total_earnings.currency,
        total_earnings=money_amount(report.total_earnings),
        total_commission_paid=money_amount(report.total_commission_paid),
        pending_payouts=money_amount(report.pending_payouts),
        completed_payouts=money_amount(report.completed_payouts),
        payout_count=report.payout_count,
        booking_count=report.booking_count,
    )


@router.get("/reports/platform", response_model=PlatformReportResponse)
def get_platform_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    reporting: ReportingService = Depends(get_reporting_service),
):
    """Platform-wide revenue, commission and payout totals"""
    report = reporting.platform_report(start_date, end_date)
    return PlatformReportResponse(
        currency=report.total_revenue.currency,
        total_revenue=money_amount(report.total_revenue),
        total_commissions=money_amount(report.total_commissions),
        total_payouts=money_amount(report.total_payouts),
        pending_payouts=money_amount(report.pending_payouts),
        total_bookings=report.total_bookings,
        active_realtors=report.active_realtors,
    )
