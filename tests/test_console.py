import json

from rich.console import Console

from datalens import console as console_module
from datalens.console import AnalysisConsole, main
from datalens.domain.analysis.pipeline import AnalysisLimits
from tests.utils.gemini import gemini_body


def _patch_client(monkeypatch, make_client, *outcomes):
    analysis_client, session = make_client(*outcomes)
    monkeypatch.setattr(
        console_module.GeminiAnalysisClient, "from_settings", classmethod(lambda cls, settings: analysis_client)
    )
    return session


def test_console_prints_summary_kpis_and_charts(tmp_path, monkeypatch, make_client, ok_body, revenue_csv):
    path = tmp_path / "revenue.csv"
    path.write_bytes(revenue_csv)
    _patch_client(monkeypatch, make_client, ok_body)
    output = Console(record=True, width=120)

    exit_code = AnalysisConsole(output).run(str(path), AnalysisLimits())

    text = output.export_text()
    assert exit_code == 0
    assert "Summary (3 rows, 2 columns)" in text
    assert "Revenue: $100" in text
    assert "Recommended Charts" in text


def test_console_reports_pipeline_errors(tmp_path, monkeypatch, make_client):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"date,revenue\n")
    _patch_client(monkeypatch, make_client)
    output = Console(record=True, width=120)

    exit_code = AnalysisConsole(output).run(str(path), AnalysisLimits())

    assert exit_code == 1
    assert "Parsed file contains no data." in output.export_text()


def test_console_missing_file(tmp_path):
    output = Console(record=True, width=120)

    assert AnalysisConsole(output).run(str(tmp_path / "nope.csv"), AnalysisLimits()) == 2


def test_console_json_output(tmp_path, monkeypatch, make_client, capsys, revenue_csv):
    path = tmp_path / "revenue.csv"
    path.write_bytes(revenue_csv)
    session = _patch_client(
        monkeypatch, make_client, gemini_body({"summary": "fine", "charts": []})
    )

    exit_code = main([str(path), "--json", "--max-rows", "2"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["success"] is True
    assert payload["totalRows"] == 3
    assert payload["kpis"] == []
    assert len(session.calls) == 1
