from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from datalens.domain.analysis.assembler import AnalysisResult
from datalens.domain.analysis.contract import ChartConfig


class AnalyzeFileResponse(BaseModel):
    """Response body of a successful upload analysis"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    summary: str
    kpis: List[str]
    charts: List[ChartConfig]
    columns: List[str]
    total_rows: int = Field(alias="totalRows")
    raw_data: List[Dict[str, Any]] = Field(alias="rawData")

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalyzeFileResponse":
        return cls(success=True, **result.model_dump())


class ErrorResponse(BaseModel):
    """Body returned for every failed request"""
    error: str
    details: Optional[str] = None
