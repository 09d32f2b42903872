from datalens.domain.analysis.assembler import assemble_analysis_result
from datalens.domain.analysis.contract import AnalysisContract
from datalens.domain.datasets.models import Dataset


def _contract() -> AnalysisContract:
    return AnalysisContract.from_payload(
        {
            "summary": "ok",
            "kpis": ["Rows: 1200"],
            "charts": [{"type": "bar", "x": "day", "y": "clicks", "title": "Clicks", "insight": "-"}],
        }
    )


def test_assemble_uses_full_dataset_not_sample():
    rows = [{"day": str(i), "clicks": str(i)} for i in range(1200)]
    dataset = Dataset(rows=rows, columns=["day", "clicks"])

    result = assemble_analysis_result(_contract(), dataset)

    assert result.total_rows == 1200
    assert len(result.raw_data) == 1200
    assert result.columns == ["day", "clicks"]
    assert result.summary == "ok"
    assert result.charts[0].type == "bar"


def test_assemble_serializes_with_camel_case_keys():
    dataset = Dataset(rows=[{"day": "1", "clicks": "5"}], columns=["day", "clicks"])

    payload = assemble_analysis_result(_contract(), dataset).model_dump(by_alias=True)

    assert set(payload) == {"summary", "kpis", "charts", "columns", "totalRows", "rawData"}
    assert payload["rawData"] == [{"day": "1", "clicks": "5"}]


def test_assembled_results_do_not_share_state():
    dataset = Dataset(rows=[{"day": "1", "clicks": "5"}], columns=["day", "clicks"])
    contract = _contract()

    first = assemble_analysis_result(contract, dataset)
    second = assemble_analysis_result(contract, dataset)
    first.raw_data[0]["day"] = "changed"
    first.kpis.append("extra")

    assert second.raw_data[0]["day"] == "1"
    assert second.kpis == ["Rows: 1200"]
    assert dataset.rows[0]["day"] == "1"
