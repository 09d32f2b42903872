import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from datalens.domain.analysis.contract import ANALYSIS_RESPONSE_SCHEMA, CHART_TYPES
from datalens.domain.datasets.models import RawRow

DEFAULT_EXCERPT_ROWS = 5
DEFAULT_DOMAIN = "a digital marketing agency"


@dataclass(frozen=True)
class AnalysisPrompt:
    """Instruction text plus the schema the response must follow."""
    text: str
    response_schema: Dict[str, Any] = field(
        default_factory=lambda: copy.deepcopy(ANALYSIS_RESPONSE_SCHEMA)
    )


def build_analysis_prompt(
    sampled_rows: List[RawRow],
    columns: Sequence[str],
    total_rows: int,
    excerpt_rows: int = DEFAULT_EXCERPT_ROWS,
    domain: str = DEFAULT_DOMAIN,
) -> AnalysisPrompt:
    """
    Render the analysis instruction for the model.

    Only the first ``excerpt_rows`` sampled rows are embedded, to bound token
    cost. The schema text is rendered from ``ANALYSIS_RESPONSE_SCHEMA`` so the
    instruction and the machine-enforced schema never drift apart.
    """
    excerpt = sampled_rows[:excerpt_rows]
    chart_types = ", ".join(f"'{chart_type}'" for chart_type in CHART_TYPES)
    source = f" from {domain}" if domain else ""

    text = f"""Analyze the following dataset{source}.
Total Rows: {total_rows}
Columns: {", ".join(columns)}

Provide:
1. A concise summary (around 100-150 words) of the key findings and overall performance.
2. A list of 3-5 key performance indicators (KPIs) as short strings (e.g., "Total Revenue: $X", "Conversion Rate: Z%").
3. Configurations for 3-4 interactive charts that visualize important aspects of the data. For each chart, specify:
   - 'type': one of {chart_types}
   - 'x': The column name for the X-axis (must be one of the columns above).
   - 'y': The column name for the Y-axis (must be one of the columns above).
   - 'title': A descriptive title for the chart.
   - 'insight': A brief (1-2 sentence) insight derived from the chart.

Return a single JSON object matching this schema:
{json.dumps(ANALYSIS_RESPONSE_SCHEMA, indent=2)}

Dataset sample (first {len(excerpt)} rows):
{json.dumps(excerpt, indent=2, ensure_ascii=False, default=str)}
"""
    return AnalysisPrompt(text=text)
