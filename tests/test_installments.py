from datetime import date

from installments import MILESTONE_PLAN, amc_payment_schedule, get_installment_options
from pricing_config import CONSTRUCTION_PRICING, RESIDENT_PRICING


def test_below_threshold_has_no_options():
    assert get_installment_options(3000, CONSTRUCTION_PRICING) == []
    assert get_installment_options(4999.99, CONSTRUCTION_PRICING) == []


def test_threshold_is_inclusive():
    options = get_installment_options(5000, CONSTRUCTION_PRICING)
    assert len(options) == 1
    assert options[0].advance_amount == 2000


def test_advance_payment_option():
    options = get_installment_options(8000, CONSTRUCTION_PRICING)
    assert len(options) == 1
    plan = options[0]
    assert plan.description == "40% Advance Payment"
    assert plan.advance_amount == 3200
    assert plan.remaining_amount == 4800
    assert plan.milestones is None


def test_milestone_plan_above_ten_thousand():
    options = get_installment_options(15000, CONSTRUCTION_PRICING)
    assert len(options) == 2
    plan = options[1]
    assert plan.description == MILESTONE_PLAN
    assert plan.milestones == [
        "Advance: AED 6,000",
        "50% completion: AED 4,500",
        "Project completion: AED 4,500",
    ]
    assert plan.milestone_amounts == (6000, 4500, 4500)
    assert sum(plan.milestone_amounts) == 15000


def test_milestone_amounts_sum_to_total_with_odd_remainder():
    plan = get_installment_options(21250, CONSTRUCTION_PRICING)[1]
    assert sum(plan.milestone_amounts) == 21250


def test_resident_terms():
    options = get_installment_options(1200, RESIDENT_PRICING)
    assert len(options) == 1
    assert options[0].description == "30% Advance Payment"
    assert options[0].advance_amount == 360
    assert options[0].remaining_amount == 840
    assert get_installment_options(999, RESIDENT_PRICING) == []
    assert len(get_installment_options(20000, RESIDENT_PRICING)) == 1


def test_plan_to_dict():
    data = get_installment_options(15000, CONSTRUCTION_PRICING)[1].to_dict()
    assert data["amount"] == 6000
    assert data["remaining"] == 9000
    assert data["milestoneAmounts"] == [6000, 4500, 4500]
    assert "milestones" not in get_installment_options(8000, CONSTRUCTION_PRICING)[0].to_dict()


def test_amc_schedule_is_quarterly():
    schedule = amc_payment_schedule(300, date(2025, 3, 15))
    assert [p.due_date for p in schedule] == [
        date(2025, 3, 15),
        date(2025, 6, 15),
        date(2025, 9, 15),
        date(2025, 12, 15),
    ]
    assert [p.status for p in schedule] == ["due", "pending", "pending", "pending"]
    assert [p.description for p in schedule] == [
        "Q1 AMC Payment", "Q2 AMC Payment", "Q3 AMC Payment", "Q4 AMC Payment",
    ]
    assert sum(p.amount for p in schedule) == 1200


def test_amc_schedule_clamps_month_end_and_rolls_year():
    schedule = amc_payment_schedule(450, date(2025, 11, 30))
    assert [p.due_date for p in schedule] == [
        date(2025, 11, 30),
        date(2026, 2, 28),
        date(2026, 5, 30),
        date(2026, 8, 30),
    ]
    assert schedule[1].to_dict()["dueDate"] == "2026-02-28"


def test_advance_rounds_halves_up():
    # 5001.25 * 0.4 = 2000.5
    plan = get_installment_options(5001.25, CONSTRUCTION_PRICING)[0]
    assert plan.advance_amount == 2001
    assert plan.remaining_amount == 3000.25


def test_mid_milestone_rounds_halves_up():
    # remaining 6009 splits as 3004.5 -> 3005 at completion, 3004 at handover
    plan = get_installment_options(10015, CONSTRUCTION_PRICING)[1]
    assert plan.milestone_amounts == (4006, 3005, 3004)
    assert plan.milestones[1] == "50% completion: AED 3,005"
