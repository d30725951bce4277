from fastapi import APIRouter

from ..schemas import ChartRequest, ChartResponse
from ..services import pipeline

router = APIRouter(tags=["bodygraph"])


@router.post("/api/generate-chart", response_model=ChartResponse)
def generate_chart(req: ChartRequest):
    # failures are part of the envelope, never an HTTP error
    return pipeline.generate_chart(req)
