from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Users and auth

class UserCreate(CamelModel):
    email: EmailStr
    password: str
    name: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class GoogleLogin(CamelModel):
    credential: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class UserProfile(UserResponse):
    created_at: datetime


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse


class GoogleAuthResponse(CamelModel):
    success: bool
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    user: UserProfile


class MessageResponse(CamelModel):
    message: str


# Contacts

class ContactFields(CamelModel):
    job_title: Optional[str] = None
    firm: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linked_in: Optional[str] = None
    referred_by_id: Optional[int] = None


class ContactCreate(ContactFields):
    full_name: Optional[str] = None
    reached_out: bool = False
    responded: bool = False


class ContactUpdate(ContactFields):
    """Only the keys the client sends are written; read them with exclude_unset."""

    full_name: Optional[str] = None
    reached_out: Optional[bool] = None
    responded: Optional[bool] = None


class ContactRef(CamelModel):
    id: int
    full_name: str


class NoteResponse(CamelModel):
    id: int
    user_id: int
    contact_id: int
    content: str
    created_at: datetime


class ContactResponse(ContactFields):
    id: int
    user_id: int
    full_name: str
    reached_out: bool
    responded: bool
    created_at: datetime
    updated_at: datetime


class ContactDetail(ContactResponse):
    referred_by: Optional[ContactRef] = None
    referred_contacts: List[ContactRef] = []
    notes: List[NoteResponse] = []


class ContactSummary(ContactDetail):
    """List row: carries only the most recent note."""

    @field_validator("notes", mode="before")
    @classmethod
    def latest_note_only(cls, value):
        return list(value or [])[:1]


# Notes

class NoteCreate(CamelModel):
    contact_id: Optional[int] = None
    content: Optional[str] = None


class NoteUpdate(CamelModel):
    content: Optional[str] = None


# Dashboard

class FirmCount(CamelModel):
    name: str
    count: int


class RecentContact(CamelModel):
    id: int
    name: str
    firm: Optional[str] = None
    role: Optional[str] = None
    reached_out: bool
    responded: bool


class DashboardStats(CamelModel):
    total_contacts: int
    reached_out: int
    responded: int
    response_rate: float
    top_firms: List[FirmCount]
    recent_contacts: List[RecentContact]


# Import / export

class ContactRecord(CamelModel):
    """Flat record shape shared by export and import."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    full_name: Optional[str] = None
    job_title: Optional[str] = None
    firm: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linked_in: Optional[str] = None
    reached_out: Union[bool, str, None] = None
    responded: Union[bool, str, None] = None
    referred_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ImportRequest(CamelModel):
    """Records stay raw here; each one is validated on its own during import."""

    contacts: List[Any]


class ImportResults(CamelModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = []


class ImportResponse(CamelModel):
    message: str
    results: ImportResults
