from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

PLACEHOLDER_IMAGE = "/placeholder.svg"


def split_image_references(image_url: Optional[str]) -> List[str]:
    """Split the comma-delimited image field into individual references"""
    if not image_url:
        return [PLACEHOLDER_IMAGE]
    images = [part.strip() for part in image_url.split(",") if part.strip()]
    return images or [PLACEHOLDER_IMAGE]


class Property(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    price: int
    location: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    home_type: Optional[str] = None
    construction_status: Optional[str] = None
    ownership_type: Optional[str] = None
    quick_move_in: bool = False
    image_url: Optional[str] = None  # comma-delimited
    floorplan_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def images(self) -> List[str]:
        return split_image_references(self.image_url)

    def to_record(self) -> Dict[str, Any]:
        """Flat field mapping, the shape stored in the property collection"""
        return self.model_dump(mode="json")


class PropertyCreate(BaseModel):
    """A listing submitted by a user"""
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: int = Field(..., gt=0)
    location: str = Field(..., min_length=1)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    home_type: Optional[str] = None
    construction_status: Optional[str] = None
    ownership_type: Optional[str] = None
    quick_move_in: bool = False
    image_url: Optional[str] = None


class PropertyCreatedResponse(BaseModel):
    property: Property
    slug: str


class PropertyDetailsResponse(BaseModel):
    """Everything the listing detail page needs"""
    property: Property
    slug: str
    images: List[str]
    is_favorite: Optional[bool] = None  # None when nobody is signed in
    similar_properties: List[Property] = []
