"""Tests for the command line entry point."""

import json

import pytest
import structlog

from processor.main import main


@pytest.fixture
def write_series(tmp_path, make_series):
    def _write(prices):
        path = tmp_path / "series.json"
        path.write_text(json.dumps([o.model_dump(mode="json") for o in make_series(prices)]))
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging():
    # The CLI binds structlog to the captured stderr, which is closed after each test
    yield
    structlog.reset_defaults()


class TestCli:
    def test_prints_every_record(self, write_series, capsys):
        path = write_series([100.0] * 7 + [130.0])
        assert main([str(path), "--threshold", "1.5", "--window", "7"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert len(records) == 8
        assert records[7]["anomaly_price"] is True

    def test_anomalies_only(self, write_series, capsys):
        path = write_series([100.0] * 7 + [130.0])
        assert main([str(path), "--anomalies-only"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert [row["date"] for row in report["anomalies"]] == ["2024-01-08"]
        assert report["summary"]["latest_price"] == 130.0

    def test_synthetic_series(self, capsys):
        assert main(["--synthetic", "30", "--seed", "3"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 30

    def test_invalid_threshold_exits_2(self, write_series, capsys):
        path = write_series([1.0, 2.0])
        assert main([str(path), "--threshold", "0"]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "analysis_failed" in captured.err

    def test_unreadable_file_exits_2(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 2
        assert "MarketDataError" in capsys.readouterr().err

    def test_infinite_price_exits_2(self, tmp_path, capsys):
        path = tmp_path / "series.json"
        path.write_text(
            '[{"date": "2024-01-01", "price": 1.0, "market_cap": 1.0, "volume": 1.0},'
            ' {"date": "2024-01-02", "price": Infinity, "market_cap": 1.0, "volume": 1.0}]'
        )
        assert main([str(path)]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "MarketDataError" in captured.err
