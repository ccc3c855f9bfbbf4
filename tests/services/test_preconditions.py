from stackboot.errors import ProcessExecutionFailed
from stackboot.services.command_runner import CommandOutput, IOMode
from stackboot.services.preconditions import PreconditionService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class FakeRunner:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def run(self, cmd, io_mode=IOMode.CAPTURED, cwd=None, timeout=None):
        self.calls.append((cmd, io_mode))
        if self.error:
            raise self.error
        return CommandOutput(returncode=0)


def test_check_file_exists(tmp_path):
    service = PreconditionService(logger=DummyLogger(), command_runner=FakeRunner())
    env_file = tmp_path / ".env.production"

    assert service.check_file_exists(str(env_file)) is False
    env_file.write_text("", encoding="utf-8")
    assert service.check_file_exists(str(env_file)) is True
    assert service.check_file_exists(str(tmp_path)) is False


def test_daemon_reachable_runs_docker_info_captured():
    runner = FakeRunner()
    service = PreconditionService(logger=DummyLogger(), command_runner=runner)

    assert service.check_daemon_reachable() is True
    assert runner.calls == [(["docker", "info"], IOMode.CAPTURED)]


def test_daemon_unreachable_when_docker_info_fails():
    runner = FakeRunner(error=ProcessExecutionFailed("Cannot connect", exit_code=1))
    service = PreconditionService(logger=DummyLogger(), command_runner=runner)

    assert service.check_daemon_reachable() is False


def test_daemon_unreachable_when_docker_missing():
    runner = FakeRunner(error=ProcessExecutionFailed("Required command not found: docker", exit_code=127))
    service = PreconditionService(logger=DummyLogger(), command_runner=runner)

    assert service.check_daemon_reachable() is False
