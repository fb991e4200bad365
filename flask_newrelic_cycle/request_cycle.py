"""
Per-request hooks that report to New Relic.

A RequestCycle enhances the default request handling in three ways:

- sets user and account names for New Relic browser traces
- names the transaction after the page, listener or component dispatched to
- sends uncaught exceptions to New Relic

Transaction names are built by TransactionNamer. Targets it does not
recognize (static files, resources) are ignored rather than reported.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .agent import AgentClient, default_agent
from .naming import TransactionNamer
from .targets import RequestTarget

logger = logging.getLogger("flask_newrelic_cycle.request_cycle")


@dataclass(frozen=True)
class SessionIdentity:
    """User and account a session belongs to."""

    user_name: str
    account_name: str


class RequestCycle:
    """
    Lifecycle hooks for a single request.

    Only the first target set during a request names the transaction; later
    ones come from internal redirects and are dropped.

    Args:
        namer: Derives transaction names from targets
        agent: Agent client to report to
    """

    def __init__(self, namer: TransactionNamer, agent: AgentClient):
        self._namer = namer
        self._agent = agent
        self._first_target = True
        self._transaction_name: Optional[str] = None
        self._ignored = False

    @property
    def transaction_name(self) -> Optional[str]:
        return self._transaction_name

    @property
    def ignored(self) -> bool:
        return self._ignored

    def on_begin_request(self, identity: Optional[SessionIdentity]) -> None:
        """
        Start the request and forward the session identity, if any.

        Args:
            identity: User and account of the session; None sends nothing
        """
        self._first_target = True
        if identity is None:
            return

        self._agent.set_user_name(identity.user_name)
        self._agent.set_account_name(identity.account_name)

    def on_request_target_set(self, target: RequestTarget) -> None:
        """
        Name (or ignore) the transaction after the first target of the request.

        Args:
            target: The target the request was dispatched to
        """
        if not self._first_target:
            logger.debug(
                "[request_cycle] Target already set, dropping",
                extra={"target": repr(target)},
            )
            return
        self._first_target = False

        name = self._namer.name_for(target)
        if name is None:
            self._ignored = True
            self._agent.ignore_transaction()
            logger.debug(
                "[request_cycle] Unrecognized target, transaction ignored",
                extra={"target": repr(target)},
            )
            return

        self._transaction_name = name
        self._agent.set_transaction_name(name, group=None)
        logger.debug(
            "[request_cycle] Transaction named: %s",
            name,
            extra={"transaction_name": name},
        )

    def on_runtime_exception(self, error: BaseException, page: Any = None) -> Any:
        """
        Report an uncaught exception.

        Args:
            error: The exception raised while handling the request
            page: The page being handled when it was raised, if known

        Returns:
            None, so the framework falls back to its own error handling
        """
        self._agent.notice_error(error)
        logger.info(
            "[request_cycle] Error reported: %s",
            type(error).__name__,
            extra={
                "error": str(error),
                "error_type": type(error).__name__,
                "transaction_name": self._transaction_name,
            },
        )
        return None


class RequestCycleFactory:
    """
    Creates RequestCycles sharing one package prefix and agent client.

    Args:
        package_prefix: Dotted prefix of the application's page classes
        agent: Agent client; defaults to the process-wide client
    """

    def __init__(self, package_prefix: str, agent: Optional[AgentClient] = None):
        self._namer = TransactionNamer(package_prefix)
        self._agent = agent or default_agent()

    @property
    def package_prefix(self) -> str:
        return self._namer.package_prefix

    def new_request_cycle(self) -> RequestCycle:
        return RequestCycle(self._namer, self._agent)
