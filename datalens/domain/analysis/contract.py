"""
The analysis contract: the JSON shape the model must return.

``ANALYSIS_RESPONSE_SCHEMA`` is the single source of truth. The prompt builder
renders it into the instruction text, the Gemini client sends it as the
``responseSchema``, and :class:`AnalysisContract` validates what comes back.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from datalens.core.errors import InvalidContract

logger = logging.getLogger(__name__)


class ChartType(str, Enum):
    """Chart kinds the dashboard knows how to draw"""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"


CHART_TYPES = [chart_type.value for chart_type in ChartType]
CHART_FIELDS = ["type", "x", "y", "title", "insight"]

ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "kpis": {"type": "ARRAY", "items": {"type": "STRING"}},
        "charts": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "type": {"type": "STRING", "enum": CHART_TYPES},
                    "x": {"type": "STRING"},
                    "y": {"type": "STRING"},
                    "title": {"type": "STRING"},
                    "insight": {"type": "STRING"},
                },
                "required": CHART_FIELDS,
            },
        },
    },
    "required": ["summary", "kpis", "charts"],
}


class ChartConfig(BaseModel):
    """
    One recommended visualization.

    Accepted leniently: an unknown ``type`` passes through, missing or null
    fields become "" and the renderer shows an empty chart. Use :func:`validate_chart_columns`
    for the strict check.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    type: str = ""
    x: str = ""
    y: str = ""
    title: str = ""
    insight: str = ""

    @field_validator(*CHART_FIELDS, mode="before")
    @classmethod
    def blank_missing_values(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (bool, int, float)):
            return str(value)
        return value

    @property
    def is_known_type(self) -> bool:
        return self.type in CHART_TYPES


class AnalysisContract(BaseModel):
    """Validated ``{summary, kpis, charts}`` triple returned by the model."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    summary: str = Field(min_length=1)
    kpis: Optional[List[str]] = Field(default_factory=list)
    charts: List[ChartConfig]

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("summary must not be blank")
        return value

    @field_validator("kpis")
    @classmethod
    def kpis_default_empty(cls, value: Optional[List[str]]) -> List[str]:
        return value or []

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisContract":
        """Validate a decoded JSON payload, raising :class:`InvalidContract` on any violation."""
        if not isinstance(payload, dict):
            raise InvalidContract(
                f"Expected a JSON object with summary and charts, got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'response'}: {error['msg']}"
                for error in e.errors()
            )
            logger.warning(f"AI response failed contract validation: {problems}")
            raise InvalidContract(
                f"Missing summary or charts array from AI response ({problems})"
            ) from e


def validate_chart_columns(contract: AnalysisContract, columns: Sequence[str]) -> None:
    """
    Strict chart check: every chart must use a known type and name dataset columns.

    Raises:
        InvalidContract: listing each offending chart
    """
    known = set(columns)
    problems = []
    for index, chart in enumerate(contract.charts):
        if not chart.is_known_type:
            problems.append(f"charts.{index}: unknown chart type '{chart.type}'")
        for axis in ("x", "y"):
            column = getattr(chart, axis)
            if column not in known:
                problems.append(f"charts.{index}.{axis}: column '{column}' not in dataset")

    if problems:
        raise InvalidContract("; ".join(problems))
