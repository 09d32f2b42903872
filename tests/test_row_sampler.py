import pytest

from datalens.core.errors import EmptyDataset
from datalens.domain.datasets.models import Dataset, collect_columns
from datalens.domain.datasets.sampler import sample_rows


def _dataset(count: int) -> Dataset:
    rows = [{"day": str(i), "clicks": str(i * 10)} for i in range(count)]
    return Dataset(rows=rows, columns=["day", "clicks"])


def test_sample_returns_small_dataset_unchanged():
    dataset = _dataset(3)

    sampled, columns = sample_rows(dataset, max_rows=1000)

    assert sampled == dataset.rows
    assert columns == ["day", "clicks"]


def test_sample_takes_deterministic_prefix():
    dataset = _dataset(25)

    sampled, _ = sample_rows(dataset, max_rows=10)

    assert sampled == dataset.rows[:10]
    assert [row["day"] for row in sampled] == [str(i) for i in range(10)]


def test_sample_is_repeatable():
    dataset = _dataset(50)

    assert sample_rows(dataset, 7) == sample_rows(dataset, 7)


def test_sample_does_not_mutate_dataset():
    dataset = _dataset(20)

    sample_rows(dataset, 5)

    assert dataset.total_rows == 20


def test_sample_columns_come_from_first_row_of_full_dataset():
    rows = [{"a": "1"}, {"a": "2", "late": "x"}]
    dataset = Dataset(rows=rows, columns=collect_columns(rows))

    _, columns = sample_rows(dataset, max_rows=1)

    assert columns == ["a"]
    assert dataset.columns == ["a", "late"]


def test_sample_empty_dataset_raises():
    with pytest.raises(EmptyDataset):
        sample_rows(Dataset(rows=[], columns=["a"]), max_rows=10)


def test_sample_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        sample_rows(_dataset(3), max_rows=0)
