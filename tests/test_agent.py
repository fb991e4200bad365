"""Tests for the calls AgentClient makes into newrelic.agent."""

from unittest.mock import Mock

import newrelic.agent
import pytest

from flask_newrelic_cycle import agent as agent_module
from flask_newrelic_cycle.agent import (
    TRANSACTION_NAME_PRIORITY,
    AgentClient,
    default_agent,
    initialize_agent,
)
from flask_newrelic_cycle.config import Settings


def _settings(enabled: bool) -> Settings:
    return Settings(
        nr_enabled=enabled,
        nr_config_file="newrelic.ini",
        nr_register_timeout=5,
        package_prefix="",
        log_level="INFO",
    )


@pytest.fixture
def nr(monkeypatch):
    """Replace the newrelic.agent API functions with mocks."""
    mocks = {}
    for name in (
        "get_browser_timing_header",
        "set_user_id",
        "add_custom_attribute",
        "set_transaction_name",
        "notice_error",
        "ignore_transaction",
        "initialize",
        "register_application",
    ):
        mocks[name] = Mock(name=name)
        monkeypatch.setattr(newrelic.agent, name, mocks[name])
    monkeypatch.setattr(agent_module, "_agent_initialized", False)
    return mocks


def test_header(nr):
    nr["get_browser_timing_header"].return_value = "<script>h</script>"
    assert AgentClient().get_browser_timing_header() == "<script>h</script>"


def test_footer_when_agent_has_one(monkeypatch):
    monkeypatch.setattr(
        newrelic.agent, "get_browser_timing_footer", lambda: "<script>f</script>", raising=False
    )
    assert AgentClient().get_browser_timing_footer() == "<script>f</script>"


def test_footer_when_agent_has_none(monkeypatch):
    monkeypatch.delattr(newrelic.agent, "get_browser_timing_footer", raising=False)
    assert AgentClient().get_browser_timing_footer() == ""


def test_user_and_account(nr):
    client = AgentClient()
    client.set_user_name("alice")
    client.set_account_name("acme")

    nr["set_user_id"].assert_called_once_with("alice")
    assert [c.args for c in nr["add_custom_attribute"].call_args_list] == [
        ("user", "alice"),
        ("account", "acme"),
    ]


def test_transaction_name_without_group(nr):
    AgentClient().set_transaction_name("/Home")
    nr["set_transaction_name"].assert_called_once_with(
        "/Home", group=None, priority=TRANSACTION_NAME_PRIORITY
    )


def test_transaction_name_outranks_flask_hooks():
    # The agent names Flask transactions at priority 1 (error handlers) and 2 (views)
    assert TRANSACTION_NAME_PRIORITY > 2


def test_linking_metadata(nr, monkeypatch):
    metadata = {"entity.name": "shop", "trace.id": "abc"}
    monkeypatch.setattr(newrelic.agent, "get_linking_metadata", Mock(return_value=metadata))
    assert AgentClient().linking_metadata() == metadata


def test_notice_error_passes_exc_info(nr):
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        error = e

    AgentClient().notice_error(error)

    (exc_info,), _ = nr["notice_error"].call_args
    assert exc_info == (RuntimeError, error, error.__traceback__)


def test_ignore_transaction(nr):
    AgentClient().ignore_transaction()
    nr["ignore_transaction"].assert_called_once_with(flag=True)


def test_default_agent_is_shared():
    assert default_agent() is default_agent()


def test_initialize_disabled(nr):
    assert initialize_agent(_settings(False)) is False
    nr["initialize"].assert_not_called()
    nr["register_application"].assert_not_called()


def test_initialize_enabled_runs_once(nr):
    assert initialize_agent(_settings(True)) is True
    assert initialize_agent(_settings(True)) is True

    nr["initialize"].assert_called_once_with("newrelic.ini")
    nr["register_application"].assert_called_once_with(timeout=5)
