import logging
from typing import List, Tuple

from datalens.core.errors import EmptyDataset
from datalens.domain.datasets.models import Dataset, RawRow

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 1000


def sample_rows(dataset: Dataset, max_rows: int = DEFAULT_MAX_ROWS) -> Tuple[List[RawRow], List[str]]:
    """
    Select the rows handed to the prompt builder.

    Takes a deterministic prefix of ``max_rows`` rows. Columns come from the
    first row of the full dataset, not from the sample, so keys that only
    appear in later rows are not listed.

    Args:
        dataset: Parsed upload
        max_rows: Upper bound on the number of rows returned

    Returns:
        Tuple of (sampled_rows, columns)

    Raises:
        EmptyDataset: the dataset has no rows
    """
    if max_rows < 1:
        raise ValueError(f"max_rows must be positive, got {max_rows}")

    if dataset.is_empty:
        raise EmptyDataset("Parsed file contains no data rows")

    columns = list(dataset.rows[0].keys())

    if dataset.total_rows <= max_rows:
        logger.info(f"Dataset has {dataset.total_rows} rows, using all data")
        return dataset.rows, columns

    logger.info(f"Sampling first {max_rows} of {dataset.total_rows} rows for analysis")
    return dataset.rows[:max_rows], columns
