"""Shared fixtures for the integration tests."""

import logging
from unittest.mock import Mock

import pytest

from flask_newrelic_cycle.agent import AgentClient


def make_page_class(qualified_name: str) -> type:
    """Build a class whose fully-qualified name is ``qualified_name``."""
    module, _, name = qualified_name.rpartition(".")
    return type(name, (), {"__module__": module, "__qualname__": name})


@pytest.fixture
def agent():
    """Agent client double recording every call."""
    fake = Mock(spec=AgentClient)
    fake.get_browser_timing_header.return_value = ""
    fake.get_browser_timing_footer.return_value = ""
    fake.linking_metadata.return_value = {}
    return fake


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
