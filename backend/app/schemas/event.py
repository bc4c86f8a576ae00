"""Event schemas for admin mutations."""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventDate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    year: int  # Negative for BC
    month: Optional[int] = Field(None, ge=0, le=11)  # 0 = January
    day: Optional[int] = Field(None, ge=1, le=31)
    display_date: Optional[str] = Field(None, alias="displayDate")


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EventLocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    province: Optional[str] = None
    modern_name: Optional[str] = Field(None, alias="modernName")
    coordinates: Optional[Union[Coordinates, dict, list]] = None


class KeyFigure(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None


class EventFields(BaseModel):
    """Fields shared by create and update; all optional here."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    title_vietnamese: Optional[str] = Field(None, alias="titleVietnamese", max_length=500)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, alias="shortDescription")
    significance: Optional[str] = None
    event_type: Optional[str] = Field(None, alias="type")
    date: Optional[EventDate] = None
    end_date: Optional[EventDate] = Field(None, alias="endDate")
    location: Optional[EventLocation] = None
    period_id: Optional[str] = Field(None, alias="periodId")
    sub_period_id: Optional[str] = Field(None, alias="subPeriodId")
    key_figures: Optional[list[KeyFigure]] = Field(None, alias="keyFigures")
    tags: Optional[list[str]] = None
    featured: Optional[bool] = None


class EventCreate(EventFields):
    """Schema for creating an event. Title, period and date are required."""
    title: str = Field(..., min_length=1, max_length=500)
    period_id: str = Field(..., alias="periodId", min_length=1)
    date: EventDate


class EventUpdate(EventFields):
    """Schema for a partial update, only the fields sent are written."""

    @field_validator("title", "period_id", "date")
    @classmethod
    def not_null(cls, value, info):
        # Omitting a required field is allowed, clearing it is not
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value
