from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

# Enums
class AssetType(str, Enum):
    multi_family = "Multi Family"
    retail = "Retail"
    self_storage = "Self Storage"
    office = "Office"
    industrial = "Industrial"

class ValuationModel(str, Enum):
    none = ""
    clik_irr = "CLIK IRR"
    crefc = "CREFC"
    self_storage_loan_sizer = "Self Storage template loan sizer"

# Wire (camelCase) field names
REQUIRED_FIELDS = ("name", "address", "city")
IMMUTABLE_FIELDS = ("id", "createdAt")

# Models
class Project(BaseModel):
    """A persisted property/project record. Serialized with camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", use_enum_values=True)

    id: str
    name: str
    address: str
    city: str
    state: str = ""
    zip: str = ""
    asset_type: AssetType = Field(AssetType.multi_family, alias="assetType")
    model: ValuationModel = ValuationModel.none
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")
