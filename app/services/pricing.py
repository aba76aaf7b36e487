import logging
from dataclasses import dataclass

from app.schemas.quote import QuoteRequest, PriceBreakdown
from app.services.rate_tables import RateTables
from app.core.enums import (
    BackfillOption,
    ContractDuration,
    DispatchPricing,
    DispatchPriority,
    RateFile,
    ServiceLevel,
    VisitType,
)

logger = logging.getLogger(__name__)

ALLOWED_DISTANCE_KM = 50.0
PER_KM_CHARGE = 0.4

BACKFILL_RATE_PREFIX = {
    BackfillOption.WITH: "With Backfill Yearly Rate",
    BackfillOption.WITHOUT: "Without Backfill Yearly Rate",
}

BASE_RATE_FILE = {
    ServiceLevel.L1: RateFile.BASE_L1,
    ServiceLevel.L2: RateFile.BASE_L2,
    ServiceLevel.L3: RateFile.BASE_L3,
    ServiceLevel.L4: RateFile.BASE_L4,
    ServiceLevel.L5: RateFile.BASE_L5,
}

DURATION_RATE_FILE = {
    ContractDuration.SHORT_TERM: RateFile.SHORT_TERM,
    ContractDuration.LONG_TERM: RateFile.LONG_TERM,
}

VISIT_RATE_FILE = {
    VisitType.FULL_DAY: RateFile.FULL_DAY_VISIT,
    VisitType.HALF_DAY: RateFile.HALF_DAY_VISIT,
}


@dataclass(frozen=True)
class RateLookup:
    """Dataset file and column that hold one rate"""
    table: RateFile
    field: str

    def resolve(self, tables: RateTables, country: str) -> float:
        return tables.table(self.table).rate(country, self.field)


def base_rate_lookup(service_level: ServiceLevel, backfill: BackfillOption) -> RateLookup:
    # e.g. "With Backfill Yearly Rate L3" in "extracted_data L3.json"
    field = f"{BACKFILL_RATE_PREFIX[backfill]} {service_level.value}"
    return RateLookup(BASE_RATE_FILE[service_level], field)


def duration_rate_lookup(contract: ContractDuration, service_level: ServiceLevel) -> RateLookup:
    return RateLookup(DURATION_RATE_FILE[contract], service_level.value)


def visit_rate_lookup(visit_type: VisitType, service_level: ServiceLevel) -> RateLookup:
    return RateLookup(VISIT_RATE_FILE[visit_type], service_level.value)


def dispatch_rate_lookup(priority: DispatchPriority) -> RateLookup:
    return RateLookup(RateFile.DISPATCH_TICKET, priority.value)


def dispatch_extra_rate_lookup(pricing: DispatchPricing) -> RateLookup:
    return RateLookup(RateFile.DISPATCH_EXTRA, pricing.value)


def get_base_price(tables: RateTables, req: QuoteRequest) -> float:
    return base_rate_lookup(req.service_level, req.backfill_option).resolve(tables, req.country)


def get_duration_price(tables: RateTables, req: QuoteRequest) -> float:
    per_month = duration_rate_lookup(req.contract_duration, req.service_level).resolve(tables, req.country)
    return per_month * req.project_duration


def get_visit_price(tables: RateTables, req: QuoteRequest) -> float:
    per_visit = visit_rate_lookup(req.visit_type, req.service_level).resolve(tables, req.country)
    return per_visit * req.day_visit_count


def get_dispatch_price(tables: RateTables, req: QuoteRequest) -> float:
    return dispatch_rate_lookup(req.dispatch_priority).resolve(tables, req.country)


def get_dispatch_extra_price(tables: RateTables, req: QuoteRequest) -> float:
    return dispatch_extra_rate_lookup(req.dispatch_pricing).resolve(tables, req.country)


def calculate_extra_distance_charge(distance_km: float) -> float:
    if distance_km <= ALLOWED_DISTANCE_KM:
        return 0.0
    return (distance_km - ALLOWED_DISTANCE_KM) * PER_KM_CHARGE


def calculate_price(req: QuoteRequest, tables: RateTables) -> PriceBreakdown:
    """Price a quote request against the loaded rate tables.

    Any lookup failure propagates before a breakdown exists, so callers
    never see a partial result.
    """
    breakdown = {
        "base_price": get_base_price(tables, req),
        "duration_price": get_duration_price(tables, req),
        "visit_price": get_visit_price(tables, req),
        "dispatch_price": get_dispatch_price(tables, req),
        "dispatch_extra_price": get_dispatch_extra_price(tables, req),
        "distance_charge": calculate_extra_distance_charge(req.distance_from_project_site),
    }
    for component, value in breakdown.items():
        logger.debug(f"{component}: {value}")

    total_price = sum(breakdown.values())
    logger.info(
        f"Quote for {req.company_name} ({req.country}, {req.service_level}): total {total_price}"
    )
    return PriceBreakdown(total_price=total_price, currency=req.payment_method, **breakdown)
