from form_preview import breakdown_rows, preview_quote, request_from_form


def test_preview_from_free_text_size():
    preview = preview_quote({"projectType": "kitchen", "projectSize": "10 units"})
    assert preview.ok
    assert preview.calculation.base_price == 25000
    assert preview.calculation.total_price == 21250
    assert len(preview.installments) == 2
    assert preview.fallback_link is None


def test_unpriced_project_falls_back_to_whatsapp():
    preview = preview_quote({"projectType": "roof", "projectSize": "whole building"})
    assert not preview.ok
    assert preview.fallback_link.startswith("https://wa.me/")


def test_empty_form_falls_back():
    assert preview_quote({}).fallback_link


def test_explicit_area_wins_over_free_text():
    request = request_from_form({"projectType": "flooring", "projectSize": "50 sqm", "area": 20})
    assert request.area == 20
    assert request.units == 1


def test_form_flags_and_requirements():
    request = request_from_form(
        {
            "projectType": "bathroom",
            "requirements": {"bathroom": {"waterproofing": True}, "kitchen": {"customStorage": True}},
            "timeline": "Urgent",
            "bestContactTime": "weekend",
            "company": "Nakheel",
            "marketingSource": "referral",
        }
    )
    assert request.requirements == {"waterproofing": True}
    assert request.context.is_urgent
    assert request.context.is_weekend
    assert request.context.has_contract
    assert request.context.is_referral


def test_breakdown_rows_include_adjustments():
    preview = preview_quote({"projectType": "kitchen", "projectSize": "10 units", "timeline": "urgent"})
    rows = breakdown_rows(preview.calculation)
    assert rows[0] == {"Item": "kitchen (per project)", "Qty": 10, "Unit Price": 2500, "Total": 25000}
    assert {"Item": "Bulk discount", "Qty": None, "Unit Price": None, "Total": -3750} in rows
    assert rows[-1]["Item"] == "Urgent project"
    assert rows[-1]["Total"] == 200


def test_complete_project_is_priced_as_broadest_package():
    request = request_from_form({"projectType": "complete", "projectSize": "Whole building, 12 units"})
    assert request.selection == "new-building-package"
    preview = preview_quote({"projectType": "complete", "projectSize": "Whole building, 12 units"})
    assert preview.ok
    # 8000 * 12 less 15% bulk
    assert preview.calculation.total_price == 81600
