# paintwall/models/clients.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from paintwall.models.enums import ClientStatus, ClientType, PropertyType
from paintwall.models.projects import ProjectOut


class ClientCreate(BaseModel):
    company_id: int
    display_name: str = Field(..., min_length=1)
    client_type: ClientType = ClientType.person
    status: ClientStatus = ClientStatus.active
    primary_email: Optional[EmailStr] = None
    primary_phone: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=1)
    client_type: Optional[ClientType] = None
    status: Optional[ClientStatus] = None
    primary_email: Optional[EmailStr] = None
    primary_phone: Optional[str] = None
    notes: Optional[str] = None


class ClientOut(BaseModel):
    id: int
    company_id: int
    display_name: str
    client_type: ClientType
    status: ClientStatus
    primary_email: Optional[str] = None
    primary_phone: Optional[str] = None
    normalized_email: Optional[str] = None
    normalized_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyCreate(BaseModel):
    client_id: int
    name: str = Field(..., min_length=1)
    property_type: PropertyType = PropertyType.residential
    address_line1: str = Field(..., min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2)
    zip: str = Field(..., min_length=3)
    country: str = "US"


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    property_type: Optional[PropertyType] = None
    address_line1: Optional[str] = Field(default=None, min_length=1)
    address_line2: Optional[str] = None
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = Field(default=None, min_length=2)
    zip: Optional[str] = Field(default=None, min_length=3)
    country: Optional[str] = None


class PropertyOut(BaseModel):
    id: int
    company_id: int
    client_id: int
    name: str
    property_type: PropertyType
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip: str
    country: str
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyWithProjects(PropertyOut):
    projects: List[ProjectOut] = []


class ClientDetail(ClientOut):
    properties: List[PropertyWithProjects] = []


class RoomBase(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    level: Optional[int] = Field(default=None, ge=0)
    sort_order: Optional[int] = None
    room_height_ft: Optional[float] = Field(default=None, ge=0)
    ceiling_height_ft: Optional[float] = Field(default=None, ge=0)
    floor_area_sqft: Optional[float] = Field(default=None, ge=0)
    ceiling_area_sqft: Optional[float] = Field(default=None, ge=0)
    wall_perimeter_ft: Optional[float] = Field(default=None, ge=0)
    wall_area_sqft: Optional[float] = Field(default=None, ge=0)
    openings_area_sqft: Optional[float] = Field(default=None, ge=0)
    paint_walls: Optional[bool] = None
    paint_ceiling: Optional[bool] = None
    paint_trim: Optional[bool] = None
    paint_doors: Optional[bool] = None
    notes_customer: Optional[str] = None
    notes_internal: Optional[str] = None
    # "12 x 14" floor plan; fills floor / ceiling area and perimeter when given
    dimensions: Optional[str] = None


class RoomCreate(RoomBase):
    property_id: int
    project_id: Optional[int] = None
    name: str = Field(..., min_length=1)


class RoomUpdate(RoomBase):
    pass


class RoomOut(BaseModel):
    id: int
    company_id: int
    property_id: int
    project_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    level: int
    sort_order: int
    room_height_ft: Optional[float] = None
    ceiling_height_ft: Optional[float] = None
    floor_area_sqft: Optional[float] = None
    ceiling_area_sqft: Optional[float] = None
    wall_perimeter_ft: Optional[float] = None
    wall_area_sqft: Optional[float] = None
    openings_area_sqft: Optional[float] = None
    paint_walls: bool
    paint_ceiling: bool
    paint_trim: bool
    paint_doors: bool
    notes_customer: Optional[str] = None
    notes_internal: Optional[str] = None

    class Config:
        from_attributes = True


class LeadIn(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    service: Optional[str] = None
    preferred_date: Optional[str] = None
    message: Optional[str] = None


class LeadOut(BaseModel):
    client: ClientOut
    created: bool


class RoomAssignIn(BaseModel):
    project_id: int
