# form_preview.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from installments import InstallmentPlan, get_installment_options
from notifications import generic_contact_link
from pricing_config import PROJECT_TYPE_FALLBACKS, get_pricing_config
from pricing_engine import ProjectQuoteCalculation, QuoteContext, QuoteRequest, calculate_quote
from project_size import parse_project_size
from rate_table import CONSTRUCTION_CATALOG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preview:
    calculation: Optional[ProjectQuoteCalculation] = None
    installments: Optional[List[InstallmentPlan]] = None
    fallback_link: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.calculation is not None


def request_from_form(form: Mapping[str, Any]) -> QuoteRequest:
    """
    Build a QuoteRequest from partially-filled form values.

    Explicit `area` / `units` win; otherwise the free-text `projectSize` is
    parsed. Project types without a rate entry ("complete") are priced as
    their fallback package, the same as the assessment endpoint.
    """
    size = parse_project_size(form.get("projectSize") or "")
    area = form.get("area")
    units = form.get("units")
    project_type = form.get("projectType") or ""
    reqs = form.get("requirements") or {}

    return QuoteRequest(
        selection=PROJECT_TYPE_FALLBACKS.get(project_type, project_type),
        area=size.area if area in (None, "") else area,
        units=size.units if units in (None, "") else int(units),
        requirements=dict(reqs.get(project_type) or {}),
        context=QuoteContext(
            is_urgent="urgent" in (form.get("timeline") or "").lower(),
            is_weekend=form.get("bestContactTime") == "weekend",
            has_contract=bool((form.get("company") or "").strip()),
            is_referral=form.get("marketingSource") == "referral",
        ),
        catalog=form.get("catalog") or CONSTRUCTION_CATALOG,
    )


def preview_quote(form: Mapping[str, Any]) -> Preview:
    """Live price preview; never raises, falls back to a WhatsApp contact link."""
    try:
        request = request_from_form(form)
        config = get_pricing_config(request.catalog)
        calculation = calculate_quote(request, config)
        options = get_installment_options(calculation.total_price, config)
    except Exception as e:
        logger.info("preview unavailable (%s); offering WhatsApp contact", e)
        return Preview(fallback_link=generic_contact_link())

    return Preview(calculation=calculation, installments=options)


def breakdown_rows(calculation: ProjectQuoteCalculation) -> List[Dict[str, Any]]:
    rows = [
        {
            "Item": line.item,
            "Qty": line.quantity,
            "Unit Price": line.unit_price,
            "Total": line.total,
        }
        for line in calculation.breakdown
    ]
    discounts = calculation.discounts
    for label, amount in (
        ("Bulk discount", discounts.bulk_discount),
        ("Contract discount", discounts.contract_discount),
        ("Referral discount", discounts.referral_discount),
    ):
        if amount:
            rows.append({"Item": label, "Qty": None, "Unit Price": None, "Total": -amount})
    surcharges = calculation.surcharges
    for label, amount in (
        ("Urgent project", surcharges.urgent_project),
        ("Weekend", surcharges.weekend),
        ("After hours", surcharges.after_hours),
    ):
        if amount:
            rows.append({"Item": label, "Qty": None, "Unit Price": None, "Total": amount})
    return rows
