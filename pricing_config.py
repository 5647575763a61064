# pricing_config.py
from dataclasses import dataclass
from typing import Tuple

CURRENCY = "AED"

# ============================================================
# 1) CONSTRUCTION FINISHING (B2B projects)
# ============================================================
CONSTRUCTION_PROJECTS = {
    "kitchen": {
        "base_price": 2500,
        "price_range": (2500, 8000),
        "price_unit": "per project",
        "components": {
            "cabinetInstallation": 800,
            "countertopInstallation": 600,
            "applianceConnections": 400,
            "plumbingWork": 500,
            "electricalConnections": 300,
            "customStorage": 400,
        },
    },
    "bathroom": {
        "base_price": 1800,
        "price_range": (1800, 6000),
        "price_unit": "per project",
        "components": {
            "showerBathtubInstallation": 600,
            "toiletSinkInstallation": 400,
            "tileMarbleInstallation": 500,
            "plumbingConnections": 400,
            "mirrorCabinetInstallation": 300,
            "waterproofing": 200,
        },
    },
    "flooring": {
        "base_price": 80,
        "price_range": (80, 200),
        "price_unit": "per sqm",
        "components": {
            "marbleInstallation": 120,
            "graniteInstallation": 100,
            "ceramicTiling": 80,
            "floorPolishing": 30,
            "surfacePreparation": 25,
        },
    },
    "woodwork": {
        "base_price": 1200,
        "price_range": (1200, 5000),
        "price_unit": "per project",
        "components": {
            "builtInWardrobes": 800,
            "customCabinets": 600,
            "doorFinishing": 300,
            "woodenFlooring": 150,
            "customCarpentry": 400,
        },
    },
    "painting": {
        "base_price": 25,
        "price_range": (25, 60),
        "price_unit": "per sqm",
        "components": {
            "interiorPainting": 25,
            "exteriorPainting": 35,
            "primerApplication": 15,
            "decorativeFinishes": 45,
            "touchUpWork": 20,
        },
    },
    "ac": {
        "base_price": 800,
        "price_range": (800, 3000),
        "price_unit": "per unit",
        "components": {
            "splitAcInstallation": 800,
            "centralAcSetup": 1500,
            "ductwork": 200,  # per meter
            "systemCommissioning": 300,
            "thermostatInstallation": 150,
        },
    },
}

# Packages: bulk tiers only apply where bulk_discount is True
CONSTRUCTION_PACKAGES = {
    "new-building-package": {
        "base_price": 8000,
        "price_range": (8000, 15000),
        "bulk_discount": True,
        "description": "Complete apartment finishing (kitchen + bathroom + flooring)",
    },
    "kitchen-bathroom-combo": {
        "base_price": 4500,
        "price_range": (4500, 8000),
        "bulk_discount": False,
        "description": "Complete kitchen and bathroom finishing",
    },
    "flooring-specialist": {
        "base_price": 3000,
        "price_range": (3000, 6000),
        "bulk_discount": True,
        "description": "Complete flooring installation (marble/tile/wood)",
    },
}

# Broadest package, used by callers that fall back for unpriced project types
BROADEST_PACKAGE = "new-building-package"

# Project types with no rate entry of their own; applied by callers, never by lookup
PROJECT_TYPE_FALLBACKS = {"complete": BROADEST_PACKAGE}

# ============================================================
# 2) RESIDENT SERVICES (bookings + AMC)
# ============================================================
RESIDENT_PACKAGES = {
    "move-in-ready": {"price": 800, "description": "Move-in Ready Package"},
    "first-month-free": {"price": 650, "description": "First Month Free Package"},
    "new-building-special": {"price": 750, "description": "New Building Special"},
}

# annual price is the rate; quarterly feeds the AMC payment schedule
AMC_PACKAGES = {
    "amc-basic": {"annual": 1200, "quarterly": 300, "description": "Basic AMC Package"},
    "amc-family": {"annual": 1800, "quarterly": 450, "description": "Family AMC Package"},
    "amc-premium": {"annual": 2500, "quarterly": 625, "description": "Premium AMC Package"},
}

INDIVIDUAL_SERVICES = {
    "plumbing": {"price": 150, "description": "Plumbing Services"},
    "ac": {"price": 200, "description": "AC Service & Maintenance"},
    "painting": {"price": 180, "description": "Painting Services"},
    "electrical": {"price": 120, "description": "Electrical Services"},
    "general": {"price": 100, "description": "General Maintenance"},
}

# ============================================================
# 3) DISCOUNTS / SURCHARGES / PAYMENT TERMS
# ============================================================
# (min_units, fraction of base price); highest qualifying tier wins
BULK_DISCOUNT_TIERS = (
    (5, 0.15),   # bulk projects
    (20, 0.20),  # large developer
)

CONTRACT_DISCOUNT = 0.10
REFERRAL_DISCOUNT = 0.05

# Flat AED fees
URGENT_SURCHARGE = 200
WEEKEND_SURCHARGE = 100
AFTER_HOURS_SURCHARGE = 150

INSTALLMENT_THRESHOLD = 5000
ADVANCE_PAYMENT = 0.40
MILESTONE_THRESHOLD = 10000
MILESTONE_PAYMENTS = True

RESIDENT_EMERGENCY_SURCHARGE = 100
RESIDENT_INSTALLMENT_THRESHOLD = 1000
RESIDENT_ADVANCE_PAYMENT = 0.30

# Advisory band around the point estimate (+/- 20%)
QUOTE_RANGE_SPREAD = 0.20


@dataclass(frozen=True)
class PricingConfig:
    bulk_tiers: Tuple[Tuple[int, float], ...] = BULK_DISCOUNT_TIERS
    contract_discount: float = CONTRACT_DISCOUNT
    referral_discount: float = REFERRAL_DISCOUNT
    urgent_surcharge: float = URGENT_SURCHARGE
    weekend_surcharge: float = WEEKEND_SURCHARGE
    after_hours_surcharge: float = AFTER_HOURS_SURCHARGE
    installment_threshold: float = INSTALLMENT_THRESHOLD
    advance_payment_fraction: float = ADVANCE_PAYMENT
    milestone_threshold: float = MILESTONE_THRESHOLD
    milestone_payments: bool = MILESTONE_PAYMENTS
    floor_total_at_zero: bool = True
    range_spread: float = QUOTE_RANGE_SPREAD
    currency: str = CURRENCY


CONSTRUCTION_PRICING = PricingConfig()

RESIDENT_PRICING = PricingConfig(
    bulk_tiers=(),
    contract_discount=0.0,
    referral_discount=0.0,
    urgent_surcharge=RESIDENT_EMERGENCY_SURCHARGE,
    weekend_surcharge=0,
    after_hours_surcharge=0,
    installment_threshold=RESIDENT_INSTALLMENT_THRESHOLD,
    advance_payment_fraction=RESIDENT_ADVANCE_PAYMENT,
    milestone_payments=False,
)

PRICING_BY_CATALOG = {
    "construction-finishing": CONSTRUCTION_PRICING,
    "resident-services": RESIDENT_PRICING,
}


def get_pricing_config(catalog: str) -> PricingConfig:
    try:
        return PRICING_BY_CATALOG[catalog]
    except KeyError:
        raise ValueError(f"no pricing config for catalog: {catalog}") from None
