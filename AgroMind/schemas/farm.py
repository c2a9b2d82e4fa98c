from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from schemas.common import CamelModel
from utils.normalizers import clean_name

DEFAULT_FARM_NAME = "Mi finca"


class FarmCreate(CamelModel):
    name: str | None = Field(None, validate_default=True)
    view: Any | None = None

    @field_validator("name", mode="before")
    @classmethod
    def clean_farm_name(cls, v):
        return clean_name(v, DEFAULT_FARM_NAME)


class FarmUpdate(CamelModel):
    name: str | None = None
    view: Any | None = None
    is_primary: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def clean_farm_name(cls, v):
        """Un nombre vacío no es válido al renombrar"""
        name = clean_name(v, "")
        if not name:
            raise ValueError("name inválido.")
        return name


class FarmOut(CamelModel):
    id: int
    name: str
    view: Any | None = None
    preferred_center: Any | None = None
    is_primary: bool = False
    created_at: datetime
    updated_at: datetime


class FarmEnvelope(BaseModel):
    farm: FarmOut


class FarmUpdateOut(BaseModel):
    ok: bool = True
    farm: FarmOut


class FarmListOut(BaseModel):
    farms: List[FarmOut]
