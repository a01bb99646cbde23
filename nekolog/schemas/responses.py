"""Response Schemas: camelCase JSON views of domain records.

Invariants:
    - Field names serialize as camelCase (FastAPI dumps response_model by alias)
    - Models are built from domain dataclasses via from_attributes
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from nekolog.core.domain_types import EventType, Granularity


class ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class CatOut(ResponseModel):
    id: str
    owner_id: str
    name: str
    birth_date: datetime | None
    breed: str | None
    weight: float | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime


class CatEnvelope(ResponseModel):
    cat: CatOut


class CatListEnvelope(ResponseModel):
    cats: list[CatOut]


class EventOut(ResponseModel):
    id: str
    cat_id: str
    type: EventType
    timestamp: datetime
    note: str | None
    created_at: datetime
    updated_at: datetime


class EventEnvelope(ResponseModel):
    log: EventOut


class EventPageOut(ResponseModel):
    logs: list[EventOut]
    total: int
    page: int
    limit: int
    total_pages: int


class CatSummaryOut(ResponseModel):
    cat_id: str
    cat_name: str
    urine_count: int
    feces_count: int
    total_count: int


class DailySummaryOut(ResponseModel):
    date: str
    cats: list[CatSummaryOut]
    total_urine_count: int
    total_feces_count: int
    total_count: int


class ChartPointOut(ResponseModel):
    date: str
    urine_count: int
    feces_count: int
    total_count: int


class ChartDataOut(ResponseModel):
    cat_id: str | None
    cat_name: str | None
    period: Granularity
    data: list[ChartPointOut]


class SuccessOut(ResponseModel):
    success: bool = True
