import sys

import pytest
from loguru import logger

from secret_santa.core.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_unknown_level_keeps_existing_sinks():
    messages = []
    logger.add(messages.append, format="{message}")

    with pytest.raises(ValueError):
        setup_logging("LOUD", "")

    logger.info("still here")
    assert messages == ["still here\n"]


def test_file_sink_receives_debug(tmp_path):
    log_path = tmp_path / "logs" / "santa.log"
    setup_logging("WARNING", str(log_path))

    logger.debug("draw started")

    assert "draw started" in log_path.read_text(encoding="utf-8")
