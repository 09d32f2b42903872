from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from datalens.domain.analysis.contract import AnalysisContract, ChartConfig
from datalens.domain.datasets.models import Dataset


class AnalysisResult(BaseModel):
    """Everything the dashboard needs: the model's analysis plus the full parsed data."""
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    kpis: List[str]
    charts: List[ChartConfig]
    columns: List[str]
    total_rows: int = Field(alias="totalRows")
    raw_data: List[Dict[str, Any]] = Field(alias="rawData")


def assemble_analysis_result(contract: AnalysisContract, dataset: Dataset) -> AnalysisResult:
    """
    Merge the validated model output with the unsampled dataset.

    The model only saw a sample; ``columns``, ``totalRows`` and ``rawData``
    describe the complete upload.
    """
    return AnalysisResult(
        summary=contract.summary,
        kpis=list(contract.kpis),
        charts=[chart.model_copy() for chart in contract.charts],
        columns=list(dataset.columns),
        total_rows=dataset.total_rows,
        raw_data=[dict(row) for row in dataset.rows],
    )
