"""
Flask extension wiring RequestCycle into the request lifecycle.

    app = Flask(__name__)
    NewRelicRequestCycle(app, package_prefix="myapp.pages.")

Hooks registered on the application:

- ``before_request``, ahead of the app's own hooks: starts a RequestCycle,
  forwards the session identity and sets the target resolved from the
  matched endpoint
- ``got_request_exception``: reports the exception to New Relic; Flask's own
  error response is left as is
- a context processor exposing the browser timing labels to templates
"""

import logging
from typing import Callable, Optional

from flask import (
    Flask,
    current_app,
    g,
    got_request_exception,
    has_request_context,
    request,
    session,
)

from .agent import AgentClient, default_agent
from .config import get_package_prefix
from .labels import (
    BROWSER_TIMING_FOOTER_LABEL_ID,
    BROWSER_TIMING_HEADER_LABEL_ID,
    browser_timing_footer_label,
    browser_timing_header_label,
)
from .request_cycle import RequestCycle, RequestCycleFactory, SessionIdentity
from .targets import RequestTarget, resolve_request_target

logger = logging.getLogger("flask_newrelic_cycle.extension")

EXTENSION_NAME = "newrelic_request_cycle"
PACKAGE_PREFIX_CONFIG_KEY = "NEWRELIC_PACKAGE_PREFIX"
USER_NAME_SESSION_KEY = "newrelic.user_name"
ACCOUNT_NAME_SESSION_KEY = "newrelic.account_name"

_CYCLE_ATTR = "_newrelic_request_cycle"

IdentityLoader = Callable[[object], Optional[SessionIdentity]]


def session_identity(
    flask_session,
    user_key: str = USER_NAME_SESSION_KEY,
    account_key: str = ACCOUNT_NAME_SESSION_KEY,
) -> Optional[SessionIdentity]:
    """
    Read the user and account names stored in a session.

    Returns:
        The identity if the session holds both names, None otherwise
    """
    if flask_session is None:
        return None
    if user_key not in flask_session or account_key not in flask_session:
        return None
    return SessionIdentity(
        user_name=flask_session[user_key],
        account_name=flask_session[account_key],
    )


def current_request_cycle() -> Optional[RequestCycle]:
    """Return the RequestCycle of the current request, if one was started."""
    return g.get(_CYCLE_ATTR)


def set_request_target(target: RequestTarget) -> None:
    """
    Tell the current request's cycle where the request was dispatched to.

    Use this from views dispatching to a component or listener. Only the first
    target of a request names the transaction.

    Raises:
        RuntimeError: If called outside a request, or before the extension
            started a cycle for it
    """
    if not has_request_context():
        raise RuntimeError("set_request_target() called outside of a request context")

    cycle = current_request_cycle()
    if cycle is None:
        raise RuntimeError(
            "No New Relic request cycle for this request; is NewRelicRequestCycle initialized?"
        )
    cycle.on_request_target_set(target)


class NewRelicRequestCycle:
    """
    Flask extension integrating request handling with New Relic.

    Args:
        app: Application to initialize now; use init_app() for factories
        package_prefix: Dotted prefix of page classes. Falls back to the
            NEWRELIC_PACKAGE_PREFIX app config key, then the environment.
        agent: Agent client; defaults to the process-wide client
        identity_loader: Maps the Flask session to a SessionIdentity or None
    """

    def __init__(
        self,
        app: Optional[Flask] = None,
        package_prefix: Optional[str] = None,
        agent: Optional[AgentClient] = None,
        identity_loader: Optional[IdentityLoader] = None,
    ):
        self._package_prefix = package_prefix
        self._agent = agent
        self._identity_loader = identity_loader or session_identity
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        package_prefix = self._package_prefix
        if package_prefix is None:
            package_prefix = app.config.get(PACKAGE_PREFIX_CONFIG_KEY)
        if package_prefix is None:
            package_prefix = get_package_prefix()

        agent = self._agent or default_agent()
        app.extensions[EXTENSION_NAME] = RequestCycleFactory(package_prefix, agent)

        header_label = browser_timing_header_label(agent)
        footer_label = browser_timing_footer_label(agent)

        @app.context_processor
        def browser_timing_labels():
            return {
                BROWSER_TIMING_HEADER_LABEL_ID: header_label,
                BROWSER_TIMING_FOOTER_LABEL_ID: footer_label,
            }

        # First, so earlier hooks that return early or set a target see a cycle
        app.before_request_funcs.setdefault(None, []).insert(0, self._begin_request)
        # Held strongly; the extension object is often not kept by callers
        got_request_exception.connect(self._on_exception, app, weak=False)

        logger.info(
            "[extension] Initialized - will name transactions and report errors",
            extra={"app": app.name, "package_prefix": package_prefix},
        )

    def _factory(self) -> RequestCycleFactory:
        return current_app.extensions[EXTENSION_NAME]

    def _begin_request(self) -> None:
        cycle = self._factory().new_request_cycle()
        setattr(g, _CYCLE_ATTR, cycle)

        cycle.on_begin_request(self._identity_loader(session))

        target = resolve_request_target(current_app, request)
        if target is not None:
            cycle.on_request_target_set(target)

    def _on_exception(self, sender, exception, **extra) -> None:
        cycle = current_request_cycle()
        if cycle is None:
            # Raised before our before_request hook ran
            cycle = self._factory().new_request_cycle()
        cycle.on_runtime_exception(exception)
