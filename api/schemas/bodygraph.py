from pydantic import BaseModel, Field
from typing import Optional, List


class ChartRequest(BaseModel):
    name: str = ""
    date: str = ""  # YYYY-MM-DD, local
    time: str = ""  # HH:MM[:SS], local
    tz: Optional[str] = "UTC"
    lang: Optional[str] = "en"


class ChartData(BaseModel):
    name: str
    type: str
    authority: str
    profile: str
    definition: str
    definedCenters: str
    strategy: str
    signature: str
    notSelfTheme: str
    chartImageSVG: str
    timestamp: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class ChartResponse(BaseModel):
    success: bool
    data: Optional[ChartData] = None
    message: Optional[str] = None

