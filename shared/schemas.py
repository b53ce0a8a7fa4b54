"""Pydantic schemas for validated form records and backend responses."""
from typing import Optional, List, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator

from shared.models import Attachment


class FormRecord(BaseModel):
    """An intake form that passed validation.

    Fields are declared in submission order; aliases are the wire names.
    """
    salesman_name: str = Field(..., alias='salesmanName')
    customer_name: str = Field(..., alias='customerName')
    customer_address: str = Field(..., alias='customerAddress')
    customer_home_no: str = Field(..., alias='customerHomeNo')
    village: str = Field(..., alias='village')
    coordinates: str = Field(..., alias='coordinates')
    building_type: str = Field(..., alias='buildingType')
    remarks: str = Field(default='', alias='remarks')
    operators: List[str] = Field(..., min_length=1, alias='operators')
    building_photos: List[Attachment] = Field(default_factory=list, alias='buildingPhotos')

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class SubmissionResponse(BaseModel):
    """Reply of POST /submit-form."""
    success: bool = False
    submission_id: Optional[str] = Field(None, alias='submissionId')
    timestamp: Optional[str] = None
    message: Optional[str] = None

    @field_validator('submission_id', mode='before')
    @classmethod
    def coerce_submission_id(cls, v):
        # Some backends hand out numeric ids
        if v is not None and not isinstance(v, str):
            return str(v)
        return v

    model_config = ConfigDict(populate_by_name=True)


class FormSubmission(BaseModel):
    """A stored submission as listed in the admin area."""
    id: str
    timestamp: str = ''
    salesman_name: str = Field('', alias='salesmanName')
    customer_name: str = Field('', alias='customerName')
    customer_address: str = Field('', alias='customerAddress')
    customer_home_no: Optional[str] = Field(None, alias='customerHomeNo')
    village: str = Field('', alias='village')
    coordinates: str = Field('', alias='coordinates')
    building_type: str = Field('', alias='buildingType')
    operators: List[str] = Field(default_factory=list, alias='operators')
    remarks: Optional[str] = Field(None, alias='remarks')
    building_photos: List[str] = Field(default_factory=list, alias='buildingPhotos')

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator('operators', mode='before')
    @classmethod
    def split_operators(cls, v):
        # Stored as a comma separated string by some backends
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v or []

    @field_validator('building_photos', mode='before')
    @classmethod
    def default_photos(cls, v):
        return v or []

    model_config = ConfigDict(populate_by_name=True)


class ManagedListResponse(BaseModel):
    """Reply of the admin endpoints that append to the salesman/building type lists."""
    success: bool = False
    salesman_data: Optional[List[str]] = Field(None, alias='salesmanData')
    building_types: Optional[List[str]] = Field(None, alias='buildingTypes')
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def items(self) -> Optional[List[str]]:
        """Updated list, whichever one the endpoint returned."""
        if self.salesman_data is not None:
            return self.salesman_data
        return self.building_types


def parse_string_list(data: Any) -> List[str]:
    """Coerce a list endpoint reply into a list of strings.

    The registries reply with a bare JSON array; tolerate null entries and
    non-string scalars.
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Expected a list, got {type(data).__name__}")
    return [str(item) for item in data if item is not None]
