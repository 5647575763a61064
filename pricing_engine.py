# pricing_engine.py
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pricing_config import PricingConfig, get_pricing_config
from rate_table import CONSTRUCTION_CATALOG, PriceUnit, RateEntry, RateTable, get_rate_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuoteContext:
    is_urgent: bool = False
    is_weekend: bool = False
    is_after_hours: bool = False
    has_contract: bool = False
    is_referral: bool = False


@dataclass(frozen=True)
class QuoteRequest:
    selection: str
    area: float = 0
    units: int = 1
    requirements: Mapping[str, bool] = field(default_factory=dict)
    context: QuoteContext = field(default_factory=QuoteContext)
    catalog: str = CONSTRUCTION_CATALOG


@dataclass(frozen=True)
class PriceBreakdownLine:
    item: str
    unit_price: float
    total: float
    quantity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "total": self.total,
        }


@dataclass(frozen=True)
class Discounts:
    bulk_discount: float = 0.0
    contract_discount: float = 0.0
    referral_discount: float = 0.0

    @property
    def total_discount(self) -> float:
        return round(self.bulk_discount + self.contract_discount + self.referral_discount, 2)

    def to_dict(self) -> Dict[str, float]:
        return {
            "bulkDiscount": self.bulk_discount,
            "contractDiscount": self.contract_discount,
            "referralDiscount": self.referral_discount,
            "totalDiscount": self.total_discount,
        }


@dataclass(frozen=True)
class Surcharges:
    urgent_project: float = 0.0
    weekend: float = 0.0
    after_hours: float = 0.0

    @property
    def total_surcharge(self) -> float:
        return round(self.urgent_project + self.weekend + self.after_hours, 2)

    def to_dict(self) -> Dict[str, float]:
        return {
            "urgentProject": self.urgent_project,
            "weekend": self.weekend,
            "afterHours": self.after_hours,
            "totalSurcharge": self.total_surcharge,
        }


@dataclass(frozen=True)
class BasePrice:
    base_price: float
    price_unit: PriceUnit
    breakdown: Tuple[PriceBreakdownLine, ...]


@dataclass(frozen=True)
class Adjustments:
    discounts: Discounts
    surcharges: Surcharges
    total_price: float


@dataclass(frozen=True)
class ProjectQuoteCalculation:
    base_price: float
    total_price: float
    price_unit: PriceUnit
    discounts: Discounts
    surcharges: Surcharges
    breakdown: Tuple[PriceBreakdownLine, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "basePrice": self.base_price,
            "totalPrice": self.total_price,
            "priceUnit": self.price_unit.value,
            "discounts": self.discounts.to_dict(),
            "surcharges": self.surcharges.to_dict(),
            "breakdown": [line.to_dict() for line in self.breakdown],
        }


@dataclass(frozen=True)
class BulkTier:
    min_units: int
    discount: float
    description: str


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ValueError(msg)


def _money(x: float) -> float:
    return round(float(x), 2)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def component_label(key: str) -> str:
    """cabinetInstallation / cabinet_installation -> 'cabinet installation'"""
    words = _CAMEL_BOUNDARY.sub(" ", key).replace("_", " ").replace("-", " ")
    return " ".join(words.split()).lower()


def _bulk_fraction(units: int, tiers) -> float:
    fraction = 0.0
    for min_units, tier_fraction in sorted(tiers):
        if units >= min_units:
            fraction = tier_fraction
        else:
            break
    return fraction


def compute_base_price(request: QuoteRequest, entry: Optional[RateEntry] = None) -> BasePrice:
    if entry is None:
        entry = get_rate_table(request.catalog).lookup(request.selection)

    units = request.units
    area = request.area or 0
    _require(units >= 0, "units must be >= 0")
    _require(area >= 0, "area must be >= 0")
    per_area = entry.price_unit is PriceUnit.PER_SQM and area > 0
    breakdown: List[PriceBreakdownLine] = []

    # ---- Base line ----
    if per_area:
        base_price = entry.base_price * area
        breakdown.append(PriceBreakdownLine(entry.label, entry.base_price, _money(base_price), area))
    else:
        base_price = entry.base_price * max(units, 1)
        breakdown.append(PriceBreakdownLine(entry.label, entry.base_price, _money(base_price), units))

    # ---- Components (unknown keys ignored) ----
    for key, wanted in (request.requirements or {}).items():
        if wanted is not True or key not in entry.components:
            continue
        component_price = entry.components[key]
        quantity = area if per_area else max(units, 1)
        component_total = component_price * quantity
        base_price += component_total
        breakdown.append(
            PriceBreakdownLine(
                component_label(key),
                component_price,
                _money(component_total),
                area if per_area else units,
            )
        )

    return BasePrice(_money(base_price), entry.price_unit, tuple(breakdown))


def apply_adjustments(
    base_price: float,
    context: QuoteContext,
    units: int,
    config: PricingConfig,
    *,
    bulk_eligible: bool = True,
) -> Adjustments:
    # Discounts are all taken off the same base and summed, never compounded
    bulk = base_price * _bulk_fraction(units, config.bulk_tiers) if bulk_eligible else 0.0
    discounts = Discounts(
        bulk_discount=_money(bulk),
        contract_discount=_money(base_price * config.contract_discount) if context.has_contract else 0.0,
        referral_discount=_money(base_price * config.referral_discount) if context.is_referral else 0.0,
    )

    surcharges = Surcharges(
        urgent_project=_money(config.urgent_surcharge) if context.is_urgent else 0.0,
        weekend=_money(config.weekend_surcharge) if context.is_weekend else 0.0,
        after_hours=_money(config.after_hours_surcharge) if context.is_after_hours else 0.0,
    )

    total_price = _money(base_price - discounts.total_discount + surcharges.total_surcharge)
    if config.floor_total_at_zero and total_price < 0:
        logger.warning("total price %.2f clamped to 0 (base %.2f)", total_price, base_price)
        total_price = 0.0

    return Adjustments(discounts, surcharges, total_price)


def calculate_quote(
    request: QuoteRequest,
    config: Optional[PricingConfig] = None,
    table: Optional[RateTable] = None,
) -> ProjectQuoteCalculation:
    if table is None:
        table = get_rate_table(request.catalog)
    entry = table.lookup(request.selection)
    if config is None:
        config = get_pricing_config(table.name)

    base = compute_base_price(request, entry)
    adjusted = apply_adjustments(
        base.base_price,
        request.context,
        request.units,
        config,
        bulk_eligible=entry.bulk_discount_eligible,
    )

    logger.debug(
        "priced %s/%s: base=%.2f total=%.2f",
        request.catalog, request.selection, base.base_price, adjusted.total_price,
    )

    return ProjectQuoteCalculation(
        base_price=base.base_price,
        total_price=adjusted.total_price,
        price_unit=base.price_unit,
        discounts=adjusted.discounts,
        surcharges=adjusted.surcharges,
        breakdown=base.breakdown,
    )


def get_bulk_pricing_tiers(config: PricingConfig) -> List[BulkTier]:
    tiers = sorted(config.bulk_tiers)
    result: List[BulkTier] = []
    for i, (min_units, fraction) in enumerate(tiers):
        pct = f"{round(fraction * 100)}%"
        if i + 1 < len(tiers):
            span = f"{min_units}-{tiers[i + 1][0] - 1} units"
            kind = "bulk discount"
        else:
            span = f"{min_units}+ units"
            kind = "developer discount" if i else "bulk discount"
        result.append(BulkTier(min_units, fraction, f"{span}: {pct} {kind}"))
    return result


if __name__ == "__main__":
    result = calculate_quote(
        QuoteRequest(
            selection="kitchen",
            units=10,
            requirements={"cabinetInstallation": True},
            context=QuoteContext(is_urgent=True),
        )
    )
    print("BASE:", result.base_price)
    print("TOTAL:", result.total_price)
    print("DISCOUNTS:", result.discounts.to_dict())
