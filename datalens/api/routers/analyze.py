"""
File analysis endpoint: upload a dataset, get back summary, KPIs and charts.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from datalens.api.dependencies import get_analysis_client, get_analysis_limits
from datalens.api.schemas.analysis import AnalyzeFileResponse, ErrorResponse
from datalens.domain.analysis.client import GeminiAnalysisClient
from datalens.domain.analysis.pipeline import AnalysisLimits, ensure_within_size_limit, run_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeFileResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def analyze_dataset(
    dataset: Optional[UploadFile] = File(None),
    client: GeminiAnalysisClient = Depends(get_analysis_client),
    limits: AnalysisLimits = Depends(get_analysis_limits),
):
    """
    Analyze an uploaded CSV, Excel or text file.

    Parameters:
    - dataset: The file to analyze (.csv, .xlsx, .xls, .txt)

    Returns:
    - summary, kpis and charts from the model, plus columns, totalRows and
      the full parsed rows as rawData
    """
    if dataset is None or not dataset.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    # Reject oversized uploads before buffering the whole body when the size is known
    if dataset.size is not None:
        ensure_within_size_limit(dataset.size, dataset.filename, limits.max_upload_bytes)

    file_content = await dataset.read()
    logger.info(f"Received {dataset.filename} ({len(file_content)} bytes) for analysis")

    result = await run_in_threadpool(
        run_analysis, file_content, dataset.filename, client, limits
    )
    return AnalyzeFileResponse.from_result(result)
