import logging
import os
from datetime import date
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import pricing_config as cfg
from installments import amc_payment_schedule, get_installment_options
from notifications import SUPPORT_PHONE, customer_whatsapp_link, notify_assessment
from pricing_engine import QuoteContext, QuoteRequest, calculate_quote, get_bulk_pricing_tiers
from project_size import parse_project_size
from quote_assembler import ProjectAssessment, generate_quote
from rate_table import CONSTRUCTION_CATALOG, RESIDENT_CATALOG, UnknownSelectionError, get_rate_table


# ----------------------------
# App + config
# ----------------------------
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger("api_app")

app = FastAPI(title="ServDubai Quote API", version="1.0.0")

ALLOWED_ORIGINS = [
    o.strip()
    for o in os.environ.get(
        "ALLOWED_ORIGINS", "https://servdubai.netlify.app,https://www.servdubai.ae"
    ).split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Optional API key protection
API_KEY = os.environ.get("API_KEY", "")

RESPONSE_TIMES = {"critical": "30 minutes", "high": "1 hour", "normal": "2 hours"}

# Assessment follow-up: one specialist per project type; "complete" doubles as the default
SPECIALISTS = {
    "kitchen": {
        "name": "Ahmed Al-Mansouri",
        "phone": "+971 55 241 8447",
        "specialization": "Kitchen Installation Specialist",
        "experience": "12+ years in kitchen finishing",
        "expertise": ["Cabinet installation", "Countertop fitting", "Appliance connections", "Custom storage solutions"],
    },
    "bathroom": {
        "name": "Omar Hassan",
        "phone": "+971 55 241 8448",
        "specialization": "Bathroom Finishing Specialist",
        "experience": "10+ years in bathroom construction",
        "expertise": ["Fixture installation", "Tile & marble work", "Plumbing connections", "Waterproofing"],
    },
    "flooring": {
        "name": "Khalid Al-Zahra",
        "phone": "+971 55 241 8449",
        "specialization": "Flooring & Tiling Specialist",
        "experience": "15+ years in marble & tile installation",
        "expertise": ["Marble installation", "Granite fitting", "Ceramic tiling", "Floor polishing"],
    },
    "woodwork": {
        "name": "Saeed Al-Rashid",
        "phone": "+971 55 241 8450",
        "specialization": "Woodwork & Carpentry Specialist",
        "experience": "14+ years in custom carpentry",
        "expertise": ["Built-in wardrobes", "Custom cabinets", "Door finishing", "Wooden flooring"],
    },
    "painting": {
        "name": "Hassan Al-Maktoum",
        "phone": "+971 55 241 8451",
        "specialization": "Painting & Finishing Specialist",
        "experience": "11+ years in building painting",
        "expertise": ["Interior painting", "Exterior painting", "Decorative finishes", "Surface preparation"],
    },
    "ac": {
        "name": "Rashid Al-Nuaimi",
        "phone": "+971 55 241 8452",
        "specialization": "AC Installation Specialist",
        "experience": "13+ years in HVAC systems",
        "expertise": ["Split AC installation", "Central AC setup", "Ductwork", "System commissioning"],
    },
    "complete": {
        "name": "Mohammed Al-Falasi",
        "phone": "+971 55 241 8446",
        "specialization": "Project Manager - Complete Finishing",
        "experience": "18+ years in construction finishing",
        "expertise": ["Project coordination", "Multi-trade management", "Quality control", "Timeline management"],
    },
}

SITE_VISIT_INFO = {
    "included": True,
    "estimatedDuration": "45-60 minutes",
    "whatToExpect": [
        "Detailed project scope assessment",
        "Material and labor cost breakdown",
        "Timeline and milestone planning",
        "Quality standards discussion",
        "Formal written quote within 24 hours",
    ],
}

PROJECT_TYPES = Literal["kitchen", "bathroom", "flooring", "woodwork", "painting", "ac", "complete"]
CONTACT_METHODS = Literal["whatsapp", "phone", "onsite", "email"]
CONTACT_TIMES = Literal["morning", "afternoon", "evening", "weekend"]

UAE_PHONE = r"^(\+971|00971|971)?[0-9]{8,9}$"
EMAIL = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

REQUIREMENT_FIELDS = {
    "kitchen": "kitchen_requirements",
    "bathroom": "bathroom_requirements",
    "flooring": "flooring_requirements",
    "woodwork": "woodwork_requirements",
    "painting": "painting_requirements",
    "ac": "ac_requirements",
}


# ----------------------------
# Helpers
# ----------------------------
def _require_api_key(x_api_key: Optional[str]) -> None:
    if API_KEY:
        if not x_api_key or x_api_key != API_KEY:
            raise HTTPException(status_code=401, detail="Unauthorized")


def _failure_body(what: str) -> Dict[str, str]:
    return {
        "error": "Internal server error",
        "message": f"Failed to process {what}. Please call us directly at {SUPPORT_PHONE}.",
    }


@app.exception_handler(UnknownSelectionError)
async def _unknown_selection(request: Request, exc: UnknownSelectionError):
    logger.error("pricing failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content=_failure_body("your quote request"))


def get_specialist_assignment(project_type: str) -> Dict[str, Any]:
    return SPECIALISTS.get(project_type, SPECIALISTS["complete"])


def next_steps(specialist: Dict[str, Any], response_time: str) -> List[str]:
    return [
        f"{specialist['name']} will call within {response_time}",
        "Free on-site assessment will be scheduled",
        "Detailed written quote provided within 24 hours",
        "Project timeline and milestones discussed",
        "Contract and work commencement planning",
    ]


def determine_priority(project_type: str, timeline: str, company: Optional[str], project_size: str) -> str:
    timeline = (timeline or "").lower()
    size = (project_size or "").lower()
    if "urgent" in timeline or "immediate" in timeline or project_type == "complete":
        return "critical"
    if (company or "").strip() or "building" in size or "multiple" in size:
        return "high"
    return "normal"


# ----------------------------
# Request models
# ----------------------------
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuoteBody(CamelModel):
    selection: str
    catalog: str = CONSTRUCTION_CATALOG
    area: float = Field(default=0, ge=0)
    units: int = Field(default=1, ge=0)
    requirements: Dict[str, bool] = Field(default_factory=dict)
    is_urgent: bool = False
    is_weekend: bool = False
    is_after_hours: bool = False
    has_contract: bool = False
    is_referral: bool = False


class InstallmentBody(CamelModel):
    total_price: float = Field(ge=0)
    catalog: str = CONSTRUCTION_CATALOG


class ProjectLocation(CamelModel):
    building_name: str
    area: str
    unit_number: Optional[str] = None


class ContactInfo(CamelModel):
    name: str = Field(min_length=2)
    phone: str = Field(pattern=UAE_PHONE)
    email: str = Field(pattern=EMAIL)
    company: Optional[str] = None


class AssessmentBody(CamelModel):
    project_type: PROJECT_TYPES
    project_size: str = Field(min_length=1)
    area: Optional[float] = Field(default=None, ge=0)
    units: Optional[int] = Field(default=None, ge=0)
    timeline: str = ""
    current_status: Optional[str] = None
    project_location: Optional[ProjectLocation] = None
    contact_info: ContactInfo
    kitchen_requirements: Optional[Dict[str, bool]] = None
    bathroom_requirements: Optional[Dict[str, bool]] = None
    flooring_requirements: Optional[Dict[str, bool]] = None
    woodwork_requirements: Optional[Dict[str, bool]] = None
    painting_requirements: Optional[Dict[str, bool]] = None
    ac_requirements: Optional[Dict[str, bool]] = None
    additional_details: Optional[str] = Field(default=None, max_length=1000)
    preferred_contact_method: Optional[CONTACT_METHODS] = None
    best_contact_time: Optional[CONTACT_TIMES] = None
    marketing_source: Optional[str] = None

    def requirements(self) -> Dict[str, Dict[str, bool]]:
        out = {}
        for project_type, attr in REQUIREMENT_FIELDS.items():
            value = getattr(self, attr)
            if value:
                out[project_type] = value
        return out


class AmcScheduleBody(CamelModel):
    amc_package: str
    contract_start_date: date


# ----------------------------
# Routes
# ----------------------------
@app.get("/health")
def health():
    return {"ok": True}


@app.post("/quote")
def quote(req: QuoteBody, x_api_key: Optional[str] = Header(default=None)):
    _require_api_key(x_api_key)
    request = QuoteRequest(
        selection=req.selection,
        area=req.area,
        units=req.units,
        requirements=req.requirements,
        context=QuoteContext(
            is_urgent=req.is_urgent,
            is_weekend=req.is_weekend,
            is_after_hours=req.is_after_hours,
            has_contract=req.has_contract,
            is_referral=req.is_referral,
        ),
        catalog=req.catalog,
    )
    return calculate_quote(request).to_dict()


@app.post("/installments")
def installments(req: InstallmentBody, x_api_key: Optional[str] = Header(default=None)):
    _require_api_key(x_api_key)
    try:
        config = cfg.get_pricing_config(req.catalog)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {req.catalog}")
    return {"options": [o.to_dict() for o in get_installment_options(req.total_price, config)]}


@app.get("/bulk-tiers")
def bulk_tiers(catalog: str = CONSTRUCTION_CATALOG):
    try:
        config = cfg.get_pricing_config(catalog)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {catalog}")
    return {
        "tiers": [
            {"minUnits": t.min_units, "discount": t.discount, "description": t.description}
            for t in get_bulk_pricing_tiers(config)
        ]
    }


@app.post("/assessment")
def assessment(req: AssessmentBody, x_api_key: Optional[str] = Header(default=None)):
    """
    Construction project assessment submitted by the multi-step form.
    Prices the project, notifies the team and the customer, and returns the
    quote plus a WhatsApp follow-up link.
    """
    _require_api_key(x_api_key)

    try:
        size = parse_project_size(req.project_size)
        contact = req.contact_info
        project = ProjectAssessment(
            project_type=cfg.PROJECT_TYPE_FALLBACKS.get(req.project_type, req.project_type),
            area=size.area if req.area is None else req.area,
            units=size.units if req.units is None else req.units,
            requirements=req.requirements(),
            timeline=req.timeline,
            company=contact.company,
            best_contact_time=req.best_contact_time,
            marketing_source=req.marketing_source,
        )
        result = generate_quote(project)
        config = cfg.get_pricing_config(CONSTRUCTION_CATALOG)
        options = get_installment_options(result.breakdown.total_price, config)
    except Exception:
        logger.exception("construction project assessment failed (type=%s)", req.project_type)
        return JSONResponse(status_code=500, content=_failure_body("construction project assessment"))

    priority = determine_priority(req.project_type, req.timeline, contact.company, req.project_size)
    specialist = get_specialist_assignment(req.project_type)
    record: Dict[str, Any] = {
        **req.model_dump(by_alias=True),
        "projectId": result.id,
        "estimatedQuote": result.estimated_range.to_dict(),
        "recommendations": result.recommendations,
        "requirements": req.requirements(),
        "priority": priority,
        "assignedSpecialist": specialist,
    }

    notify_assessment(record)

    logger.info(
        "construction project assessment processed: %s type=%s estimate=%s",
        result.id, req.project_type, record["estimatedQuote"],
    )

    response_time = RESPONSE_TIMES[priority]
    return {
        "success": True,
        "projectId": result.id,
        "estimatedQuote": record["estimatedQuote"],
        "breakdown": result.breakdown.to_dict(),
        "recommendations": result.recommendations,
        "installmentOptions": [o.to_dict() for o in options],
        "priority": priority,
        "responseTime": response_time,
        "assignedSpecialist": specialist,
        "message": (
            f"Construction project assessment received! Our {specialist['specialization']} specialist "
            f"will contact you within {response_time} for site visit and assessment."
        ),
        "whatsappLink": customer_whatsapp_link(record),
        "siteVisitInfo": SITE_VISIT_INFO,
        "nextSteps": next_steps(specialist, response_time),
    }


@app.post("/amc-schedule")
def amc_schedule(req: AmcScheduleBody, x_api_key: Optional[str] = Header(default=None)):
    _require_api_key(x_api_key)
    key = req.amc_package if req.amc_package.startswith("amc-") else f"amc-{req.amc_package}"
    entry = get_rate_table(RESIDENT_CATALOG).lookup(key)
    quarterly = cfg.AMC_PACKAGES[key]["quarterly"]
    schedule = amc_payment_schedule(quarterly, req.contract_start_date)
    return {
        "amcPackage": key,
        "annual": entry.base_price,
        "quarterly": quarterly,
        "paymentSchedule": [p.to_dict() for p in schedule],
        "nextPaymentDue": schedule[0].due_date.isoformat(),
    }
