# installments.py
import calendar
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from formatting import format_price, round_half_up
from pricing_config import PricingConfig

MILESTONE_PLAN = "Milestone-based Payment Plan"
QUARTERS_PER_CONTRACT = 4


@dataclass(frozen=True)
class InstallmentPlan:
    description: str
    advance_amount: int
    remaining_amount: float
    milestones: Optional[List[str]] = None
    # (advance, mid-completion, final); sums to the total
    milestone_amounts: Optional[Tuple[float, float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "description": self.description,
            "amount": self.advance_amount,
            "remaining": self.remaining_amount,
        }
        if self.milestones is not None:
            out["milestones"] = list(self.milestones)
            out["milestoneAmounts"] = list(self.milestone_amounts or ())
        return out


@dataclass(frozen=True)
class ScheduledPayment:
    quarter: int
    amount: float
    due_date: date
    status: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quarter": self.quarter,
            "amount": self.amount,
            "dueDate": self.due_date.isoformat(),
            "status": self.status,
            "description": self.description,
        }


def get_installment_options(total_price: float, config: PricingConfig) -> List[InstallmentPlan]:
    if total_price < config.installment_threshold:
        return []

    fraction = config.advance_payment_fraction
    advance = round_half_up(total_price * fraction)
    remaining = total_price - advance

    options = [
        InstallmentPlan(
            description=f"{round(fraction * 100)}% Advance Payment",
            advance_amount=advance,
            remaining_amount=remaining,
        )
    ]

    if config.milestone_payments and total_price >= config.milestone_threshold:
        mid = round_half_up(remaining * 0.5)
        final = remaining - mid
        options.append(
            InstallmentPlan(
                description=MILESTONE_PLAN,
                advance_amount=advance,
                remaining_amount=remaining,
                milestones=[
                    f"Advance: {format_price(advance, config.currency)}",
                    f"50% completion: {format_price(mid, config.currency)}",
                    f"Project completion: {format_price(final, config.currency)}",
                ],
                milestone_amounts=(advance, mid, final),
            )
        )

    return options


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def amc_payment_schedule(quarterly_amount: float, start_date: date) -> List[ScheduledPayment]:
    """Four quarterly AMC payments; the first is due at contract start."""
    schedule = []
    for i in range(QUARTERS_PER_CONTRACT):
        schedule.append(
            ScheduledPayment(
                quarter=i + 1,
                amount=quarterly_amount,
                due_date=_add_months(start_date, i * 3),
                status="due" if i == 0 else "pending",
                description=f"Q{i + 1} AMC Payment",
            )
        )
    return schedule
