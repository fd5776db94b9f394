import json
import logging

import pytest
from pydantic import ValidationError

from rental_registry.core.config import Settings
from rental_registry.core.logging import JsonFormatter, setup_logging
from rental_registry.errors import InvalidPriceError
from rental_registry.registry import Registry


class TestSettings:
    """Tests for Settings."""

    def test_default_values(self, monkeypatch) -> None:
        for name in ("DATABASE_URL", "ADMIN_IDENTITY", "SECONDS_PER_DAY", "LOG_LEVEL", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.database_url == "sqlite://"
        assert config.admin_identity == "admin"
        assert config.seconds_per_day == 86400
        assert config.sql_echo is False
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("ADMIN_IDENTITY", "custodian")
        monkeypatch.setenv("SECONDS_PER_DAY", "3600")

        config = Settings(_env_file=None)

        assert config.admin_identity == "custodian"
        assert config.seconds_per_day == 3600

    def test_non_positive_day_unit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, seconds_per_day=0)

    def test_blank_admin_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, admin_identity="   ")

    def test_unknown_log_format_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_registry_uses_settings(self) -> None:
        """Test admin and day unit come from settings when not given explicitly."""
        config = Settings(_env_file=None, admin_identity="custodian", seconds_per_day=3600)
        registry = Registry(settings=config)
        try:
            assert registry.admin == "custodian"
            assert registry.policy.day_unit == 3600
        finally:
            registry.close()

    def test_registry_rejects_empty_admin(self, settings) -> None:
        with pytest.raises(ValueError):
            Registry(admin="", settings=settings)


class TestLogging:
    """Tests for logging setup."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root_logger = logging.getLogger()
        handlers = root_logger.handlers[:]
        level = root_logger.level
        package_level = logging.getLogger("rental_registry").level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
        logging.getLogger("rental_registry").setLevel(package_level)

    def test_setup_logging_standard(self) -> None:
        setup_logging(level="DEBUG")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert logging.getLogger("rental_registry").level == logging.DEBUG

    def test_setup_logging_json(self) -> None:
        setup_logging(level="WARNING", format_type="json")

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)

    def test_setup_logging_reads_settings(self) -> None:
        """Test level and format default to log_level and log_format from settings."""
        config = Settings(_env_file=None, log_level="DEBUG", log_format="json")

        setup_logging(config=config)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert logging.getLogger("rental_registry").level == logging.DEBUG
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)

    def test_explicit_arguments_override_settings(self) -> None:
        config = Settings(_env_file=None, log_level="DEBUG", log_format="json")

        setup_logging(level="ERROR", format_type="standard", config=config)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.ERROR
        assert not isinstance(root_logger.handlers[0].formatter, JsonFormatter)

    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            name="rental_registry.events",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="%s published",
            args=("PropertyRegistered",),
            exc_info=None,
        )
        record.event = "PropertyRegistered"

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "rental_registry.events"
        assert data["message"] == "PropertyRegistered published"
        assert data["event"] == "PropertyRegistered"
        assert "timestamp" in data

    def test_rejected_operation_logged(self, registry, caplog) -> None:
        """Test a rejected operation is logged at WARNING with its error code."""
        with caplog.at_level(logging.WARNING, logger="rental_registry.registry"):
            with pytest.raises(InvalidPriceError):
                registry.register_property("owner_1", "Loft", "", "", 0, 0)

        assert "register_property rejected [INVALID_PRICE]" in caplog.text
