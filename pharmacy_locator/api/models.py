"""Pydantic request models for the Pharmacy Locator API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ..models import StockStatus


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class PharmacyRegisterRequest(BaseModel):
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Pharmacy name; matched case-insensitively against the registry",
    )
    address: str = Field(
        "",
        max_length=500,
        description="Street address as entered by the owner",
    )
    phone: str = Field(
        "",
        max_length=40,
        description="Contact phone number",
    )
    lat: float = Field(
        ...,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees",
    )
    lon: float = Field(
        ...,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class InventoryItemRequest(BaseModel):
    medicine_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Medicine name; stored case-insensitively",
    )
    price: float = Field(
        ...,
        gt=0,
        description="Price per strip",
    )
    stock: StockStatus | None = Field(
        None,
        description="Available or Unavailable. Defaults to Available.",
    )

    @field_validator("medicine_name")
    @classmethod
    def medicine_name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class InventoryUploadRequest(BaseModel):
    items: list[InventoryItemRequest] = Field(
        ...,
        min_length=1,
        description="Rows typed in by the owner or extracted from a price slip",
    )


class StockStatusRequest(BaseModel):
    stock: StockStatus = Field(
        ...,
        description="New stock status for the medicine",
    )
