from .bodygraph import ChartRequest, ChartData, ChartResponse
