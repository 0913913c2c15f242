"""Pydantic schemas for ad requests as exchanged with the ads backend."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from dashboard.ads.base import AdStatus
from dashboard.shared.utils.datetime_utils import to_date


def _day(value: Any) -> Any:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if value == "":
        return None
    try:
        return to_date(value)
    except TypeError as e:
        raise ValueError(str(e)) from e


# Calendar day; timestamps from the backend are truncated to their date
Day = Annotated[date | None, BeforeValidator(_day)]


class BaseSchema(BaseModel):
    """Tolerates backend fields this dashboard does not model."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ===========================================
# NESTED RECORDS
# ===========================================


class AdUser(BaseSchema):
    id: str
    email: str
    username: str
    phone_number: str | None = None


class AdAdmin(BaseSchema):
    id: str
    username: str
    email: str


class AdMediaUpload(BaseSchema):
    id: str
    file_url: str
    file_type: str
    original_name: str
    file_size: int = Field(ge=0)


class AdContent(BaseSchema):
    """What is shown on station screens and for how long per rotation."""

    id: str
    content_type: str
    duration_seconds: int = Field(ge=3, le=30)
    display_order: int = Field(ge=0)
    is_active: bool = True
    media_upload: AdMediaUpload | None = None


class AdStation(BaseSchema):
    id: str
    station_name: str
    serial_number: str
    address: str
    status: str

    @property
    def is_online(self) -> bool:
        return self.status.upper() == "ONLINE"


class AdTransaction(BaseSchema):
    id: str
    transaction_id: str
    amount: Decimal
    currency: str
    status: str
    payment_method_type: str
    created_at: datetime


# ===========================================
# AD REQUEST
# ===========================================


class AdRequest(BaseSchema):
    """Full ad request record."""

    id: str
    status: AdStatus
    user: AdUser | None = None
    full_name: str | None = None
    contact_number: str | None = None

    title: str | None = None
    description: str | None = None
    duration_days: int | None = Field(default=None, ge=1, le=365)
    admin_price: Decimal | None = Field(default=None, ge=0)
    admin_notes: str | None = None
    rejection_reason: str | None = None

    start_date: Day = None
    end_date: Day = None

    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    approved_at: datetime | None = None
    paid_at: datetime | None = None
    completed_at: datetime | None = None
    reviewed_by: AdAdmin | None = None
    approved_by: AdAdmin | None = None

    ad_content: AdContent | None = None
    stations: list[AdStation] = Field(default_factory=list)
    transaction: AdTransaction | None = None

    @model_validator(mode="after")
    def check_schedule_order(self) -> AdRequest:
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

    @property
    def station_ids(self) -> list[str]:
        return [station.id for station in self.stations]

    def schedule(self) -> dict[str, date | None]:
        """Stored dates, in the shape the schedule contracts compare against."""
        return {"start_date": self.start_date, "end_date": self.end_date}


class AdRequestListItem(BaseSchema):
    """Row of the ad request list."""

    id: str
    status: AdStatus
    user_id: str | None = None
    user_email: str | None = None
    full_name: str | None = None
    title: str | None = None
    duration_days: int | None = None
    admin_price: Decimal | None = None
    submitted_at: datetime | None = None
    start_date: Day = None
    end_date: Day = None
    station_count: int = 0


class AdRequestFilters(BaseModel):
    """Query filters for listing ad requests."""

    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, le=100)
    search: str | None = None
    status: AdStatus | None = None
    user_id: str | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for name, value in self.model_dump(exclude_none=True).items():
            if value == "":
                continue
            params[name] = value.value if isinstance(value, AdStatus) else str(value)
        return params


class AdPagination(BaseSchema):
    current_page: int
    total_pages: int
    total_count: int
    page_size: int
    has_next: bool
    has_previous: bool


class AdRequestListResponse(BaseSchema):
    success: bool = True
    message: str = ""
    data: list[AdRequestListItem] = Field(default_factory=list)
    pagination: AdPagination | None = None


class AdRequestDetailResponse(BaseSchema):
    success: bool = True
    message: str = ""
    data: AdRequest
