"""
Tests for the chaoscli error hierarchy.
"""

from chaoscli.errors import (
    ChaosError,
    ConfigurationError,
    ErrorSeverity,
    IOFailure,
    ResourceExhaustionError,
    UnrecoverableError,
    WorkerFailure,
)


class TestChaosError:
    """Tests for the base error."""

    def test_str_includes_code(self):
        error = ChaosError("something broke", code="X_FAILED")
        assert str(error) == "[X_FAILED] something broke"

    def test_exit_code_override(self):
        assert ChaosError("x").exit_code == 1
        assert ChaosError("x", exit_code=7).exit_code == 7

    def test_to_dict(self):
        cause = OSError("denied")
        data = ChaosError("x", cause=cause).to_dict()
        assert data["error_type"] == "ChaosError"
        assert data["cause"] == "denied"
        assert data["severity"] == "medium"
        assert "timestamp" in data["context"]

    def test_repr(self):
        assert "CONFIG_INVALID" in repr(ConfigurationError("bad"))


class TestSubclasses:
    """Each resource failure has its own code and exit code."""

    def test_configuration_error(self):
        error = ConfigurationError("bad", stressor="cpu-burn", parameter="parallelism", value=0)
        assert error.code == "CONFIG_INVALID"
        assert error.exit_code == 2
        assert error.severity == ErrorSeverity.HIGH
        assert error.context.parameter == "parallelism"
        assert error.context.value == 0

    def test_resource_exhaustion(self):
        error = ResourceExhaustionError(1024, 512.0)
        assert error.exit_code == 3
        assert error.context.stressor == "mem-spike"
        assert "512MB of 1024MB" in error.message

    def test_io_failure(self):
        error = IOFailure("/tmp/x.bin", 4, "Permission denied")
        assert error.exit_code == 4
        assert error.iteration == 4
        assert "/tmp/x.bin" in error.message
        assert error.context.parameter == "file_path"

    def test_worker_failure(self):
        error = WorkerFailure(1, 8, "RuntimeError()")
        assert error.exit_code == 5
        assert "1/8" in error.message

    def test_unrecoverable(self):
        error = UnrecoverableError("cannot spawn")
        assert error.exit_code == 99
        assert error.severity == ErrorSeverity.CRITICAL
        assert not error.recoverable

    def test_exit_codes_are_distinct(self):
        codes = [
            cls.exit_code
            for cls in (ConfigurationError, ResourceExhaustionError, IOFailure, WorkerFailure, UnrecoverableError)
        ]
        assert len(set(codes)) == len(codes)
        assert 0 not in codes
