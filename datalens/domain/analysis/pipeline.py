"""
Upload → analysis pipeline.

``run_analysis`` is the single entry point used by the API route and the
console. It is synchronous; callers on an event loop should run it in a
worker thread.
"""
import logging
import os
import time
from dataclasses import dataclass
from typing import Sequence, Tuple

from datalens.core.errors import PayloadTooLarge
from datalens.domain.analysis.assembler import AnalysisResult, assemble_analysis_result
from datalens.domain.analysis.client import GeminiAnalysisClient
from datalens.domain.analysis.contract import validate_chart_columns
from datalens.domain.analysis.prompt import DEFAULT_DOMAIN, DEFAULT_EXCERPT_ROWS, build_analysis_prompt
from datalens.domain.datasets.parser import SUPPORTED_EXTENSIONS, ensure_supported_extension, parse_tabular_file
from datalens.domain.datasets.sampler import DEFAULT_MAX_ROWS, sample_rows
from datalens.domain.uploads.staging import staged_upload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisLimits:
    """Limits and switches for one pipeline run."""
    max_upload_bytes: int = 10 * 1024 * 1024
    max_rows: int = DEFAULT_MAX_ROWS
    excerpt_rows: int = DEFAULT_EXCERPT_ROWS
    supported_extensions: Tuple[str, ...] = SUPPORTED_EXTENSIONS
    domain: str = DEFAULT_DOMAIN
    strict_charts: bool = False

    @classmethod
    def from_settings(cls, settings) -> "AnalysisLimits":
        return cls(
            max_upload_bytes=settings.upload_max_bytes,
            max_rows=settings.analysis_max_rows,
            excerpt_rows=settings.prompt_excerpt_rows,
            supported_extensions=tuple(settings.extension_list),
            domain=settings.analysis_domain,
            strict_charts=settings.strict_chart_validation,
        )


def ensure_within_size_limit(file_size: int, file_name: str, max_bytes: int) -> None:
    """Raise PayloadTooLarge if a file exceeds the configured upload limit."""
    if file_size > max_bytes:
        raise PayloadTooLarge(
            f"{file_name} is {file_size} bytes. "
            f"Maximum allowed upload size is {max_bytes / (1024 * 1024):g}MB."
        )


def validate_upload(
    file_name: str,
    file_size: int,
    limits: AnalysisLimits,
) -> str:
    """Check size then extension; returns the normalized extension."""
    ensure_within_size_limit(file_size, file_name, limits.max_upload_bytes)
    return ensure_supported_extension(os.path.splitext(file_name)[1], limits.supported_extensions)


def run_analysis(
    file_content: bytes,
    file_name: str,
    client: GeminiAnalysisClient,
    limits: AnalysisLimits = AnalysisLimits(),
) -> AnalysisResult:
    """
    Parse an upload, have the model analyze a sample, and assemble the result.

    Raises:
        AnalysisError: any subclass, for the caller to map to a response
    """
    started = time.time()
    extension = validate_upload(file_name, len(file_content), limits)

    with staged_upload(file_content, suffix=extension) as staged_path:
        dataset = parse_tabular_file(
            staged_path,
            extension,
            source_name=file_name,
            supported_extensions=limits.supported_extensions,
        )

    sampled, columns = sample_rows(dataset, limits.max_rows)
    prompt = build_analysis_prompt(
        sampled,
        columns,
        dataset.total_rows,
        excerpt_rows=limits.excerpt_rows,
        domain=limits.domain,
    )
    logger.info(
        f"Requesting analysis of {file_name}: {len(sampled)}/{dataset.total_rows} rows, "
        f"{len(columns)} columns, prompt {len(prompt.text)} chars"
    )

    contract = client.analyze(prompt)
    if limits.strict_charts:
        validate_chart_columns(contract, dataset.columns)

    result = assemble_analysis_result(contract, dataset)
    logger.info(f"Analysis of {file_name} completed in {time.time() - started:.2f}s")
    return result


def describe_limits(limits: AnalysisLimits) -> Sequence[str]:
    """Human-readable limit lines for the console banner."""
    return [
        f"Max upload: {limits.max_upload_bytes / (1024 * 1024):g}MB",
        f"Rows sent for analysis: up to {limits.max_rows}",
        f"Supported types: {', '.join(limits.supported_extensions)}",
    ]
