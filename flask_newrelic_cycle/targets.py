"""Request targets: what a request was dispatched to."""

from dataclasses import dataclass
from typing import Any, Optional, Union

# Flask's endpoint for files under the static folder
STATIC_ENDPOINT = "static"


@dataclass(frozen=True)
class BookmarkablePageTarget:
    """A page reachable by a stable URL, known only by its class."""

    page_class: type


@dataclass(frozen=True)
class PageTarget:
    """A page instance that has already been resolved."""

    page: Any


@dataclass(frozen=True)
class ListenerInterfaceTarget(PageTarget):
    """A listener interface invoked on a component of a resolved page."""

    component_id: str
    listener_interface: str


@dataclass(frozen=True)
class ComponentTarget:
    """A single component on a page."""

    page: Any
    component_id: str


@dataclass(frozen=True)
class UnrecognizedTarget:
    """Anything else, e.g. static files and resources."""

    description: str = ""


RequestTarget = Union[
    BookmarkablePageTarget,
    PageTarget,
    ListenerInterfaceTarget,
    ComponentTarget,
    UnrecognizedTarget,
]


def resolve_request_target(app, request) -> Optional[RequestTarget]:
    """
    Resolve the target of a Flask request from its matched endpoint.

    Class-based views are bookmarkable pages. Static files and requests that
    matched no rule are unrecognized. Plain function views resolve to None so
    the application can set a target itself.

    Args:
        app: The Flask application
        request: The current request

    Returns:
        The resolved target, or None when the endpoint says nothing about it
    """
    endpoint = request.endpoint
    if endpoint is None:
        return UnrecognizedTarget(description=request.path)
    if endpoint == STATIC_ENDPOINT or endpoint.endswith("." + STATIC_ENDPOINT):
        return UnrecognizedTarget(description=endpoint)

    view_func = app.view_functions.get(endpoint)
    view_class = getattr(view_func, "view_class", None)
    if view_class is not None:
        return BookmarkablePageTarget(page_class=view_class)
    return None
