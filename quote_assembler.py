# quote_assembler.py
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from formatting import format_price, round_half_up
from pricing_config import PricingConfig, get_pricing_config
from pricing_engine import ProjectQuoteCalculation, QuoteContext, QuoteRequest, calculate_quote
from rate_table import RateTable, get_rate_table

QUOTE_ID_PREFIX = "PROJ"

PHASED_AREA_SQM = 100


@dataclass(frozen=True)
class ProjectAssessment:
    """
    Structured construction assessment as the pricing core sees it.

    `requirements` is keyed by project type ("kitchen", "bathroom", ...); only
    the sub-mapping for `project_type` is priced. Callers holding a free-text
    size fill `area` / `units` via project_size.parse_project_size first.
    """
    project_type: str
    area: float = 0
    units: int = 1
    requirements: Mapping[str, Mapping[str, bool]] = field(default_factory=dict)
    timeline: str = ""
    company: Optional[str] = None
    best_contact_time: Optional[str] = None
    marketing_source: Optional[str] = None
    is_after_hours: bool = False

    @property
    def has_company(self) -> bool:
        return bool((self.company or "").strip())

    def context(self) -> QuoteContext:
        return QuoteContext(
            is_urgent="urgent" in (self.timeline or "").lower(),
            is_weekend=self.best_contact_time == "weekend",
            is_after_hours=self.is_after_hours,
            has_contract=self.has_company,
            is_referral=self.marketing_source == "referral",
        )


@dataclass(frozen=True)
class QuoteRange:
    min: int
    max: int
    currency: str

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "currency": self.currency}


@dataclass(frozen=True)
class Quote:
    id: str
    estimated_range: QuoteRange
    breakdown: ProjectQuoteCalculation
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "estimatedRange": self.estimated_range.to_dict(),
            "breakdown": self.breakdown.to_dict(),
            "recommendations": list(self.recommendations),
        }


def new_quote_id(prefix: str = QUOTE_ID_PREFIX) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def _recommendations(assessment: ProjectAssessment, calculation: ProjectQuoteCalculation) -> List[str]:
    recs: List[str] = []

    if assessment.units >= 5:
        recs.append(
            f"Bulk discount available: Save up to {format_price(calculation.discounts.bulk_discount)} "
            f"on {assessment.units} units"
        )
    if assessment.has_company:
        recs.append("Contract customer discount available for ongoing projects")
    if assessment.area > PHASED_AREA_SQM:
        recs.append("Large area project - consider phased implementation for better scheduling")

    recs.append("Site visit recommended for accurate quote and timeline")
    recs.append("All materials and labor included in quoted price")
    return recs


def generate_quote(
    assessment: ProjectAssessment,
    table: Optional[RateTable] = None,
    config: Optional[PricingConfig] = None,
    *,
    id_prefix: str = QUOTE_ID_PREFIX,
) -> Quote:
    if table is None:
        table = get_rate_table()
    if config is None:
        config = get_pricing_config(table.name)

    request = QuoteRequest(
        selection=assessment.project_type,
        area=assessment.area,
        units=assessment.units,
        requirements=dict(assessment.requirements.get(assessment.project_type) or {}),
        context=assessment.context(),
        catalog=table.name,
    )
    calculation = calculate_quote(request, config, table)

    total = calculation.total_price
    estimated = QuoteRange(
        min=round_half_up(total * (1 - config.range_spread)),
        max=round_half_up(total * (1 + config.range_spread)),
        currency=config.currency,
    )

    return Quote(
        id=new_quote_id(id_prefix),
        estimated_range=estimated,
        breakdown=calculation,
        recommendations=_recommendations(assessment, calculation),
    )
