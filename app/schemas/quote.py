from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from app.core.enums import (
    BackfillOption,
    ContractDuration,
    DispatchPricing,
    DispatchPriority,
    ServiceLevel,
    VisitType,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuoteRequest(CamelModel):
    company_name: str = Field(min_length=1)
    region: str = Field(min_length=1)
    country: str = Field(min_length=1)
    service_level: ServiceLevel
    backfill_option: BackfillOption
    contract_duration: ContractDuration
    project_duration: int = Field(ge=1, strict=True)
    visit_type: VisitType
    day_visit_count: int = Field(ge=1, le=365, strict=True)
    dispatch_priority: DispatchPriority
    dispatch_pricing: DispatchPricing
    distance_from_project_site: float = Field(ge=0, le=1000)
    payment_method: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class PriceBreakdown(CamelModel):
    base_price: float
    duration_price: float
    visit_price: float
    dispatch_price: float
    dispatch_extra_price: float
    distance_charge: float
    total_price: float
    currency: Optional[str] = None


class QuoteResponse(BaseModel):
    message: str
    data: PriceBreakdown
