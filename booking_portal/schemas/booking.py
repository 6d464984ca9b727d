from datetime import date, time, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, NaiveDatetime, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # Wire format is camelCase; snake_case names are accepted as well
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True,
                              str_strip_whitespace=True, extra='ignore')


class DirectBookingCreate(CamelModel):
    event_name: str = Field(min_length=3, max_length=200)
    resource_id: int = Field(gt=0)
    start_date_time: NaiveDatetime
    end_date_time: NaiveDatetime
    activity_type: str = Field(default='General', max_length=100)
    participant_count: Optional[int] = Field(default=None, ge=0)
    incharge_name: str = Field(min_length=1, max_length=200)
    incharge_email: EmailStr
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None

    @field_validator('activity_type')
    @classmethod
    def default_activity_type(cls, v):
        return v or 'General'


class BookingRequestCreate(CamelModel):
    """Faculty / coordinator submission. Date and time arrive as separate fields."""
    event_name: str = Field(min_length=3, max_length=200)
    resource_id: int = Field(gt=0)
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    description: Optional[str] = None
    attendee_count: Optional[int] = Field(default=None, ge=0)
    contact_phone: str = Field(min_length=1, max_length=50)

    @property
    def start_date_time(self) -> datetime:
        return datetime.combine(self.start_date, self.start_time)

    @property
    def end_date_time(self) -> datetime:
        return datetime.combine(self.end_date, self.end_time)

    @field_validator('start_time', 'end_time')
    @classmethod
    def reject_aware_times(cls, v):
        if v.tzinfo is not None:
            raise ValueError('Times must not carry a timezone offset')
        return v


class PriorityBookingCreate(BookingRequestCreate):
    pass


class BookingStatusUpdate(CamelModel):
    status: str = Field(min_length=1)
    denial_reason: Optional[str] = Field(default=None, max_length=500)
    rejection_reason: Optional[str] = Field(default=None, max_length=500)

    @property
    def reason(self):
        return self.denial_reason or self.rejection_reason


class BookingUpdate(CamelModel):
    event_name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    resource_id: Optional[int] = Field(default=None, gt=0)
    start_date_time: Optional[NaiveDatetime] = None
    end_date_time: Optional[NaiveDatetime] = None
    activity_type: Optional[str] = Field(default=None, max_length=100)
    participant_count: Optional[int] = Field(default=None, ge=0)
    incharge_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    incharge_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None


class AvailabilityQuery(CamelModel):
    start_date: NaiveDatetime
    end_date: NaiveDatetime


class BookingListQuery(CamelModel):
    status: Optional[str] = None
    resource_id: Optional[int] = Field(default=None, gt=0)
    incharge_email: Optional[str] = None
    start_date: Optional[NaiveDatetime] = None
    end_date: Optional[NaiveDatetime] = None
