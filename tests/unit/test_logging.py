"""
Unit tests for logging infrastructure.

Tests SproutLogger and the operation decorators.
"""

from pathlib import Path

import pytest
from loguru import logger

from sprout.logging import (
    SproutLogger,
    get_logger_instance,
    get_sprout_logger,
    initialize_logging,
    performance_monitor,
    track_operation,
)


@pytest.fixture
def captured():
    """Collect every log record emitted while the test runs."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


class TestSproutLogger:
    """Tests for SproutLogger class."""

    def test_logger_initialization(self, tmp_path: Path) -> None:
        """Test logger initialization."""
        sprout_logger = SproutLogger(
            log_dir=tmp_path,
            level="INFO",
            enable_file_logging=False,
        )
        assert sprout_logger.log_dir == tmp_path
        assert sprout_logger.level == "INFO"

    def test_file_logging_creates_directory(self, tmp_path: Path) -> None:
        """Test that file logging creates the log directory."""
        log_dir = tmp_path / "logs"
        assert not log_dir.exists()

        SproutLogger(log_dir=log_dir, enable_file_logging=True, enable_console_logging=False)
        get_sprout_logger("merge").info("Merged feature into master")
        logger.complete()

        assert (log_dir / "sprout.log").exists()
        assert "Merged feature" in (log_dir / "merge.log").read_text()
        SproutLogger(enable_file_logging=False, enable_console_logging=False)

    def test_no_directory_without_file_logging(self, tmp_path: Path) -> None:
        """Test that disabling file logging leaves the filesystem alone."""
        log_dir = tmp_path / "logs"
        SproutLogger(log_dir=log_dir, enable_file_logging=False)
        assert not log_dir.exists()

    def test_get_component_logger(self, tmp_path: Path) -> None:
        """Test getting a component-specific logger."""
        sprout_logger = SproutLogger(log_dir=tmp_path, enable_file_logging=False)
        assert sprout_logger.get_logger("checkout") is not None


class TestGetSproutLogger:
    """Tests for get_sprout_logger function."""

    def test_binds_component(self, captured) -> None:
        """Test that records carry the component name."""
        get_sprout_logger("objects").info("Stored blob")

        assert captured[-1]["extra"]["component"] == "objects"

    def test_braces_in_values_are_safe(self, captured) -> None:
        """Test that user text passed as a value is not formatted."""
        get_sprout_logger("graph").info("Committed: {message}", message="fix {x}")

        assert captured[-1]["message"] == "Committed: fix {x}"


class TestInitializeLogging:
    """Tests for initialize_logging function."""

    def test_initialize_logging_returns_instance(self, tmp_path: Path) -> None:
        """Test that initialize_logging returns a SproutLogger instance."""
        logger_instance = initialize_logging(
            log_dir=tmp_path, level="INFO", enable_file_logging=False
        )
        assert isinstance(logger_instance, SproutLogger)
        assert get_logger_instance() is logger_instance


class TestTrackOperation:
    """Tests for track_operation decorator."""

    def test_track_operation_with_return(self, captured) -> None:
        """Test operation tracking with return value."""

        @track_operation("branch")
        def create_branch(name: str) -> str:
            return name.upper()

        assert create_branch("feature") == "FEATURE"

        operations = [r["extra"].get("operation") for r in captured]
        assert "branch" in operations
        assert "branch_complete" in operations

    def test_track_operation_captures_error(self, captured) -> None:
        """Test that decorator records and re-raises errors."""

        @track_operation("merge")
        def failing_merge(branch: str) -> None:
            raise RuntimeError("Merge failed")

        with pytest.raises(RuntimeError, match="Merge failed"):
            failing_merge("feature")

        errors = [r for r in captured if r["extra"].get("operation") == "merge_error"]
        assert errors
        assert errors[0]["extra"]["error_type"] == "RuntimeError"

    def test_arguments_exclude_self(self, captured) -> None:
        """Test that bound methods do not log the instance."""

        class Facade:
            @track_operation("add")
            def add(self, filename: str) -> str:
                return filename

        Facade().add("notes.txt")

        start = next(r for r in captured if r["extra"].get("operation") == "add")
        assert start["extra"]["arguments"] == {"filename": "notes.txt"}


class TestPerformanceMonitor:
    """Tests for performance_monitor decorator."""

    def test_performance_monitor_fast_function(self) -> None:
        """Test monitoring fast function."""

        @performance_monitor(threshold_ms=1000)
        def fast_function() -> int:
            return 42

        assert fast_function() == 42

    def test_performance_monitor_warns_when_slow(self, captured) -> None:
        """Test that exceeding the threshold logs a warning."""

        @performance_monitor(threshold_ms=-1)
        def slow_function() -> int:
            return 1

        slow_function()

        assert any(r["level"].name == "WARNING" for r in captured)

    def test_performance_monitor_propagates_errors(self) -> None:
        """Test that errors pass through the monitor."""

        @performance_monitor()
        def failing_function() -> None:
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            failing_function()
