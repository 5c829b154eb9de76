from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class CreateVendorRequest(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('name should not be empty')
        return normalized


class CreateBuyerRequest(BaseModel):
    name: str
    company_name: str | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('name should not be empty')
        return normalized

    @field_validator('company_name')
    @classmethod
    def normalize_company_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class VendorResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class BuyerResponse(BaseModel):
    id: int
    name: str
    company_id: int | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
