import json

from stackboot.services.report import ReportService


class DummyLogger:
    def __init__(self):
        self.warnings = []

    def warning(self, message, *args, **_kwargs):
        self.warnings.append(message % args)


def test_report_tracks_steps_and_final_status(tmp_path):
    report_file = tmp_path / "reports" / "run-report.json"
    service = ReportService(str(report_file), logger=DummyLogger())

    service.start_run("abc123", "production")
    service.step_started("start_stack")
    service.step_finished("start_stack", "success")
    service.step_started("migrate")
    service.step_finished("migrate", "failed", error="Migration failed.")
    service.finalize("aborted", aborted_at="migrate", error="Migration failed.")

    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["run_id"] == "abc123"
    assert report["mode"] == "production"
    assert report["status"] == "aborted"
    assert report["aborted_at"] == "migrate"
    assert [step["status"] for step in report["steps"]] == ["success", "failed"]
    assert report["steps"][1]["error"] == "Migration failed."
    assert report["duration_seconds"] >= 0


def test_report_without_file_writes_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    service = ReportService(None, logger=DummyLogger())

    service.start_run("abc123", "development")
    service.finalize("completed")

    assert list(tmp_path.iterdir()) == []
    assert service.report["status"] == "completed"


def test_report_unwritable_location_only_warns(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    logger = DummyLogger()
    service = ReportService(str(blocker / "report.json"), logger=logger)

    service.start_run("abc123", "development")
    service.step_started("check_env_file")
    service.finalize("completed")

    assert service.report["status"] == "completed"
    assert len(logger.warnings) == 3
    assert "Could not write report file" in logger.warnings[0]
    assert [path.name for path in tmp_path.iterdir()] == ["blocker"]
