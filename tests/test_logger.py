"""
Tests for logger functionality.
"""

import pytest
from mentorapp.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["statements_executed"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is serialized into the message, including datetimes."""
        from datetime import datetime

        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Saved skill", id="0123456789", added=datetime(2024, 1, 1))

        log_content = list(tmp_path.glob("*.log"))[0].read_text()
        assert '"id": "0123456789"' in log_content
        assert "2024-01-01" in log_content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_statement("retrieve")
        logger.record_statement("retrieve")
        logger.record_statement("save")
        logger.record_store_failure("save", "OperationalError")
        logger.record_id_generated(collisions=1)

        metrics = logger.get_metrics()

        assert metrics["statements_executed"] == 3
        assert metrics["store_failures"] == 1
        assert metrics["errors_by_type"]["OperationalError"] == 1
        assert metrics["ids_generated"] == 1
        assert metrics["id_collisions"] == 1
        assert metrics["operations"]["retrieve"]["failure_rate"] == 0.0
        assert metrics["operations"]["save"]["failure_rate"] == 1.0

    def test_failure_rate_calculation(self, tmp_path):
        """Failure rate should be calculated correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(3):
            logger.record_statement("delete")
        logger.record_store_failure("delete", "OperationalError")

        rate = logger.get_metrics()["operations"]["delete"]["failure_rate"]
        assert rate == pytest.approx(0.333, rel=0.01)

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )
        logger.record_statement("exists")
        logger.record_store_failure("exists", "OperationalError")

        logger.log_metrics_summary()

        log_content = list(tmp_path.glob("*.log"))[0].read_text()
        assert "Skill Store Metrics" in log_content
        assert "exists: 1/1 failed" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("mentorapp_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path, fresh_global_logger):
        """get_logger should return same instance."""
        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path, fresh_global_logger):
        """reset_logger should create new instance."""
        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_statement("retrieve")

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["statements_executed"] == 0
