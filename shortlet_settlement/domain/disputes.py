"""Dispute resolution: room-fee refunds by tier and deposit deductions"""

from decimal import Decimal
from typing import Dict, Tuple, Union

from shortlet_settlement.domain.commission import ROOM_FEE_PLATFORM_SHARE, ROOM_FEE_REALTOR_SHARE
from shortlet_settlement.domain.exceptions import InvalidArgumentError
from shortlet_settlement.domain.models import DepositDeductionResult, DisputeTier
from shortlet_settlement.domain.money import Money

REFUND_FRACTIONS: Dict[DisputeTier, Decimal] = {
    DisputeTier.TIER_1_SEVERE: Decimal("1.0"),
    DisputeTier.TIER_2_PARTIAL: Decimal("0.3"),
    DisputeTier.TIER_3_ABUSE: Decimal("0.0"),
}


def parse_tier(tier: Union[DisputeTier, str]) -> DisputeTier:
    try:
        return DisputeTier(tier)
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid dispute tier: {tier}") from e


def refund_for_tier(tier: Union[DisputeTier, str], room_fee: Money) -> Money:
    """
    Room-fee refund owed to the guest for an admin-assigned dispute tier.

    TIER_1_SEVERE -> 100%, TIER_2_PARTIAL -> 30%, TIER_3_ABUSE -> 0%

    Raises:
        InvalidArgumentError: Unknown tier or negative room fee
    """
    resolved = parse_tier(tier)
    if room_fee.is_negative():
        raise InvalidArgumentError(f"room_fee must be non-negative, got {room_fee.amount}")

    if resolved is DisputeTier.TIER_1_SEVERE:
        return room_fee
    if resolved is DisputeTier.TIER_3_ABUSE:
        return Money.zero(room_fee.currency)
    return room_fee * REFUND_FRACTIONS[resolved]


def deduct_from_deposit(damage_amount: Money, deposit_amount: Money) -> DepositDeductionResult:
    """
    Split a security deposit between realtor (damages) and guest (remainder).

    The realtor can never claim more than the deposit: damage above it is
    capped and the guest is not billed for the excess.
    """
    if damage_amount.is_negative() or deposit_amount.is_negative():
        raise InvalidArgumentError("damage_amount and deposit_amount must be non-negative")

    if damage_amount <= deposit_amount:
        return DepositDeductionResult(
            realtor_gets=damage_amount,
            guest_refund=deposit_amount - damage_amount,
            is_liability_capped=False,
        )

    return DepositDeductionResult(
        realtor_gets=deposit_amount,
        guest_refund=Money.zero(deposit_amount.currency),
        is_liability_capped=True,
    )


def split_retained_room_fee(room_fee: Money, refund: Money) -> Tuple[Money, Money]:
    """Split whatever room fee was not refunded 90/10 between realtor and platform"""
    retained = room_fee - refund
    return retained * ROOM_FEE_REALTOR_SHARE, retained * ROOM_FEE_PLATFORM_SHARE
