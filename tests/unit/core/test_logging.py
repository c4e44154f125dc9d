import pytest
import structlog

from warden.core.config import Settings
from warden.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
    rename_message_field,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    clear_context()


def test_new_correlation_id_format():
    cid = new_correlation_id()
    assert cid.startswith("cid_")
    assert len(cid) == len("cid_") + 12
    assert cid != new_correlation_id()


def test_correlation_id_bound_and_cleared():
    bind_correlation_id("cid_test")
    assert structlog.contextvars.get_contextvars()["correlation_id"] == "cid_test"

    clear_context()
    assert "correlation_id" not in structlog.contextvars.get_contextvars()


def test_rename_message_field():
    event = rename_message_field(None, "info", {"event": "hello", "user_id": 1})
    assert event == {"message": "hello", "user_id": 1}


def test_configure_logging_json(capsys):
    configure_logging(Settings(_env_file=None, log_format="json", log_level="INFO"))
    get_logger("warden.test").info("Something happened", user_id=7)

    out = capsys.readouterr().out
    assert '"message": "Something happened"' in out
    assert '"user_id": 7' in out


def test_configure_logging_console_filters_level(capsys):
    configure_logging(Settings(_env_file=None, log_format="console", log_level="WARNING"))
    get_logger("warden.test").info("hidden")
    get_logger("warden.test").warning("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "shown" in out
