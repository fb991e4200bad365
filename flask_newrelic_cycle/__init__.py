"""
New Relic integration for Flask request handling.

This package provides:
- Labels embedding New Relic's browser timing header and footer in pages
- Per-request transaction naming from the dispatched page, listener or component
- Session user/account propagation and uncaught error reporting
"""

from .agent import AgentClient, default_agent, initialize_agent
from .extension import NewRelicRequestCycle, current_request_cycle, session_identity, set_request_target
from .labels import (
    BROWSER_TIMING_FOOTER_LABEL_ID,
    BROWSER_TIMING_HEADER_LABEL_ID,
    Label,
    browser_timing_footer_label,
    browser_timing_header_label,
)
from .naming import TransactionNamer
from .request_cycle import RequestCycle, RequestCycleFactory, SessionIdentity
from .targets import (
    BookmarkablePageTarget,
    ComponentTarget,
    ListenerInterfaceTarget,
    PageTarget,
    UnrecognizedTarget,
)

__version__ = "0.1.0"

__all__ = [
    "AgentClient",
    "BROWSER_TIMING_FOOTER_LABEL_ID",
    "BROWSER_TIMING_HEADER_LABEL_ID",
    "BookmarkablePageTarget",
    "ComponentTarget",
    "Label",
    "ListenerInterfaceTarget",
    "NewRelicRequestCycle",
    "PageTarget",
    "RequestCycle",
    "RequestCycleFactory",
    "SessionIdentity",
    "TransactionNamer",
    "UnrecognizedTarget",
    "browser_timing_footer_label",
    "browser_timing_header_label",
    "current_request_cycle",
    "default_agent",
    "initialize_agent",
    "session_identity",
    "set_request_target",
]
