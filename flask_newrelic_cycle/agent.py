"""
Thin client over the New Relic Python agent API.

Everything in this package reaches the agent through an AgentClient, so the
module-level ``newrelic.agent`` functions are called in exactly one place.
"""

import logging
from typing import Dict, Optional

import newrelic.agent

from .config import Settings

logger = logging.getLogger("flask_newrelic_cycle.agent")

# The agent renames Flask transactions after the view (priority 2) and error
# handlers (priority 1); names set here must outrank both.
TRANSACTION_NAME_PRIORITY = 9

_default_agent: Optional["AgentClient"] = None
_agent_initialized: bool = False


class AgentClient:
    """
    Calls into the New Relic agent for the current transaction.

    The agent looks the transaction up from the running request itself, so a
    single instance is shared by every request in the process. Calls made
    outside a transaction are ignored by the agent.
    """

    def get_browser_timing_header(self) -> str:
        return newrelic.agent.get_browser_timing_header()

    def get_browser_timing_footer(self) -> str:
        """
        Return the browser timing footer markup.

        Agent releases that fold the whole loader into the header no longer
        ship a footer call; the footer is empty for those.
        """
        footer = getattr(newrelic.agent, "get_browser_timing_footer", None)
        if footer is None:
            return ""
        return footer()

    def set_user_name(self, user_name: str) -> None:
        newrelic.agent.set_user_id(user_name)
        newrelic.agent.add_custom_attribute("user", user_name)

    def set_account_name(self, account_name: str) -> None:
        newrelic.agent.add_custom_attribute("account", account_name)

    def set_transaction_name(self, name: str, group: Optional[str] = None) -> None:
        """
        Name the current transaction.

        Args:
            name: Transaction name, e.g. "/Edit/submitBtn/IFormSubmitListener"
            group: Category to file the name under; None keeps the agent default
        """
        newrelic.agent.set_transaction_name(
            name, group=group, priority=TRANSACTION_NAME_PRIORITY
        )

    def notice_error(self, error: BaseException) -> None:
        newrelic.agent.notice_error((type(error), error, error.__traceback__))

    def ignore_transaction(self) -> None:
        newrelic.agent.ignore_transaction(flag=True)

    def linking_metadata(self) -> Dict[str, str]:
        """Trace, span and entity ids tying a log line to the current transaction."""
        return newrelic.agent.get_linking_metadata()


def default_agent() -> AgentClient:
    """Return the process-wide AgentClient."""
    global _default_agent  # pylint: disable=global-statement

    if _default_agent is None:
        _default_agent = AgentClient()
    return _default_agent


def initialize_agent(settings: Settings) -> bool:
    """
    Initialize and register the New Relic agent once per process.

    Call it as early as possible so the agent instruments everything imported
    afterwards.

    Args:
        settings: Loaded integration settings

    Returns:
        bool: True if the agent is (now) initialized, False when disabled.
    """
    global _agent_initialized  # pylint: disable=global-statement

    if not settings.nr_enabled:
        logger.info(
            "[agent] New Relic disabled, skipping initialization",
            extra={"nr_enabled": settings.nr_enabled},
        )
        return False

    if _agent_initialized:
        logger.debug("[agent] Already initialized, skipping")
        return True

    newrelic.agent.initialize(settings.nr_config_file)
    newrelic.agent.register_application(timeout=settings.nr_register_timeout)
    _agent_initialized = True

    logger.info(
        "[agent] New Relic initialized",
        extra={
            "config_file": settings.nr_config_file,
            "register_timeout": settings.nr_register_timeout,
        },
    )
    return True
