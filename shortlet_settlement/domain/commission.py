"""Commission calculation for booking payments"""

from decimal import Decimal
from typing import Optional, Union

from shortlet_settlement.domain.exceptions import InvalidArgumentError
from shortlet_settlement.domain.models import CommissionBreakdown, FeeComponents, LegacyBreakdown
from shortlet_settlement.domain.money import DEFAULT_CURRENCY, Money

# Room-fee split model
PLATFORM_FEE_RATE = Decimal("0.10")  # 10% of room fee only
SERVICE_FEE_RATE = Decimal("0.02")  # 2% of room fee + cleaning fee
ROOM_FEE_REALTOR_SHARE = Decimal("0.90")
ROOM_FEE_PLATFORM_SHARE = Decimal("0.10")

# Flat-rate model (deprecated, kept for historical payments)
PLATFORM_COMMISSION_RATE = Decimal("0.07")


def _require_non_negative(**amounts: Money) -> None:
    for name, value in amounts.items():
        if value.is_negative():
            raise InvalidArgumentError(f"{name} must be non-negative, got {value.amount}")


def calculate_fee_components(
    price_per_night: Union[Money, Decimal, int, str],
    number_of_nights: int,
    cleaning_fee: Union[Money, Decimal, int, str] = 0,
    security_deposit: Union[Money, Decimal, int, str] = 0,
    currency: str = DEFAULT_CURRENCY,
) -> FeeComponents:
    """
    Build the fee components a guest is quoted at booking time.

    Room fee = price per night x number of nights. Cleaning fee and security
    deposit are set by the realtor and default to zero.

    Raises:
        InvalidArgumentError: On negative amounts or fewer than one night
    """

    def as_money(value: Union[Money, Decimal, int, str]) -> Money:
        return value if isinstance(value, Money) else Money(value, currency)

    nightly = as_money(price_per_night)
    cleaning = as_money(cleaning_fee)
    deposit = as_money(security_deposit)

    if number_of_nights < 1:
        raise InvalidArgumentError(f"number_of_nights must be at least 1, got {number_of_nights}")
    _require_non_negative(price_per_night=nightly, cleaning_fee=cleaning, security_deposit=deposit)

    return FeeComponents(
        room_fee=nightly * number_of_nights,
        cleaning_fee=cleaning,
        security_deposit=deposit,
    )


def compute_breakdown(room_fee: Money, cleaning_fee: Money, security_deposit: Money) -> CommissionBreakdown:
    """
    Split a booking payment into immediate releases, escrow holdings and the
    post-window realtor/platform split.

    Flow:
    1. Cleaning fee goes to the realtor and service fee to the platform at payment verification
    2. Room fee and security deposit are held in escrow
    3. After the guest dispute window the room fee splits 90/10 realtor/platform

    Example:
        room 100000, cleaning 10000, deposit 20000 (NGN)
        subtotal 110000, service fee 2200, platform fee 10000, total 132200
        realtor earnings 10000 + 90000 = 100000
    """
    _require_non_negative(room_fee=room_fee, cleaning_fee=cleaning_fee, security_deposit=security_deposit)

    subtotal = room_fee + cleaning_fee
    service_fee = subtotal * SERVICE_FEE_RATE
    platform_fee = room_fee * PLATFORM_FEE_RATE
    total_amount = subtotal + service_fee + security_deposit

    room_fee_split_realtor = room_fee * ROOM_FEE_REALTOR_SHARE
    # Computed separately from platform_fee; the two must always agree
    room_fee_split_platform = room_fee * ROOM_FEE_PLATFORM_SHARE

    return CommissionBreakdown(
        room_fee=room_fee,
        cleaning_fee=cleaning_fee,
        security_deposit=security_deposit,
        subtotal=subtotal,
        service_fee=service_fee,
        platform_fee=platform_fee,
        total_amount=total_amount,
        cleaning_fee_to_realtor=cleaning_fee,
        service_fee_to_platform=service_fee,
        room_fee_in_escrow=room_fee,
        deposit_in_escrow=security_deposit,
        room_fee_split_realtor=room_fee_split_realtor,
        room_fee_split_platform=room_fee_split_platform,
        total_realtor_earnings=cleaning_fee + room_fee_split_realtor,
    )


def compute_breakdown_for(components: FeeComponents) -> CommissionBreakdown:
    return compute_breakdown(components.room_fee, components.cleaning_fee, components.security_deposit)


def compute_legacy_breakdown(total_amount: Money, commission_rate: Optional[Decimal] = None) -> LegacyBreakdown:
    """Flat-rate commission on the whole booking total (default 7%)"""
    rate = Decimal(str(commission_rate)) if commission_rate else PLATFORM_COMMISSION_RATE
    if not Decimal("0") < rate <= Decimal("1"):
        raise InvalidArgumentError(f"commission_rate must be between 0 and 1, got {rate}")
    platform_commission = total_amount * rate

    return LegacyBreakdown(
        total_amount=total_amount,
        platform_commission=platform_commission,
        payment_processing_fee=Money.zero(total_amount.currency),
        realtor_earnings=total_amount - platform_commission,
        commission_rate=rate,
    )
