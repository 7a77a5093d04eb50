"""Pydantic schemas for tally REST payloads."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AllocationField, Axis, Category, Channel, Resource

Step = Literal[1, -1]


class PatientEventIn(BaseModel):
    channel: Channel
    delta: Step


class ReclassifyIn(BaseModel):
    category: Category
    direction: Step


class UnknownAdjustIn(BaseModel):
    axis: Axis
    direction: Step


class ResourceAdjustIn(BaseModel):
    counter: Resource
    delta: Step


class AllocationUpdate(BaseModel):
    field: AllocationField
    value: Union[int, str]

    @field_validator("value")
    @classmethod
    def strip_names(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str):
            return value.strip()
        return value


class MetadataUpdate(BaseModel):
    incident: Optional[str] = None
    address: Optional[str] = None
    intervention: Optional[str] = None
    notes: Optional[str] = None


class MethaneUpdate(BaseModel):
    major_incident: Optional[str] = None
    exact_location: Optional[str] = None
    incident_type: Optional[str] = None
    hazards: Optional[str] = None
    access: Optional[str] = None
    casualties: Optional[str] = None
    emergency_services: Optional[str] = None


class FinalFlagIn(BaseModel):
    is_final: bool


class CountsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attended: int = Field(ge=0)
    transported: int = Field(ge=0)
    male: int = Field(ge=0)
    female: int = Field(ge=0)
    sex_unknown: int = Field(ge=0)
    minors: int = Field(ge=0)
    adults: int = Field(ge=0)
    age_unknown: int = Field(ge=0)
    mobile_units: int = Field(ge=0)
    air_units: int = Field(ge=0)
    deceased: int = Field(ge=0)
    evacuated: int = Field(ge=0)
    total_patients: int = Field(ge=0)


class AllocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    count: int = Field(ge=0)
    is_custom: bool


class MetadataRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    incident: str
    address: str
    intervention: str
    notes: str


class MethaneRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    major_incident: str
    exact_location: str
    incident_type: str
    hazards: str
    access: str
    casualties: str
    emergency_services: str


class TallyStateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    counts: CountsRead
    allocations: list[AllocationRead]
    metadata: MetadataRead
    methane: MethaneRead
    is_final: bool


class NoticeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    message: str
    severity: str


class TallyResponse(BaseModel):
    state: TallyStateRead
    notice: Optional[NoticeRead] = None
    highlight_unknown: bool = False


class ReportFieldRead(BaseModel):
    label: str
    value: str


class ReportSectionRead(BaseModel):
    title: str
    columns: int = 1
    fields: list[ReportFieldRead] = Field(default_factory=list)


class ReportDocumentRead(BaseModel):
    title: str
    generated_at: str
    footer: str
    filename: str
    sections: list[ReportSectionRead] = Field(default_factory=list)


class ExportResult(BaseModel):
    file_path: str


class ShareLinks(BaseModel):
    text: str
    whatsapp_url: str


__all__ = [
    "PatientEventIn",
    "ReclassifyIn",
    "UnknownAdjustIn",
    "ResourceAdjustIn",
    "AllocationUpdate",
    "MetadataUpdate",
    "MethaneUpdate",
    "FinalFlagIn",
    "CountsRead",
    "AllocationRead",
    "MetadataRead",
    "MethaneRead",
    "TallyStateRead",
    "NoticeRead",
    "TallyResponse",
    "ReportFieldRead",
    "ReportSectionRead",
    "ReportDocumentRead",
    "ExportResult",
    "ShareLinks",
]
