from typing import Optional
from pydantic import BaseModel, Field


class GeoCoordinate(BaseModel):
    """A location on the Earth's surface"""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude, -90 to 90")
    longitude: float = Field(
        ..., ge=-180, le=180, description="Longitude, -180 to 180"
    )
    altitude: Optional[float] = Field(None, description="Altitude in metres")
