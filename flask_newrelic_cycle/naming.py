"""Transaction names derived from request targets."""

from typing import Optional, Union

from .targets import (
    BookmarkablePageTarget,
    ComponentTarget,
    ListenerInterfaceTarget,
    PageTarget,
    RequestTarget,
)


def class_name(cls: type) -> str:
    """
    Fully-qualified dotted name of a class.

    Classes defined inside a function are named through that function, with
    the ``<locals>`` marker dropped: ``app.views.make.<locals>.Home`` becomes
    ``app.views.make.Home``.
    """
    qualname = cls.__qualname__.replace(".<locals>", "")
    return f"{cls.__module__}.{qualname}"


class TransactionNamer:
    """
    Turns request targets into transaction names.

    The package prefix is removed from page class names and the rest is
    converted to a path, so ``myapp.pages.account.Settings`` with prefix
    ``myapp.pages.`` becomes ``/account/Settings``.

    Args:
        package_prefix: Dotted prefix of the application's page classes
    """

    def __init__(self, package_prefix: str = ""):
        self._package_prefix = package_prefix

    @property
    def package_prefix(self) -> str:
        return self._package_prefix

    def pathize(self, page_class: Union[type, str]) -> str:
        name = page_class if isinstance(page_class, str) else class_name(page_class)
        if name.startswith(self._package_prefix):
            name = name[len(self._package_prefix):]
        return name.replace(".", "/")

    def _page_path(self, page_class: Union[type, str]) -> str:
        # A prefix without its trailing dot leaves a leading separator behind
        return "/" + self.pathize(page_class).lstrip("/")

    def name_for(self, target: RequestTarget) -> Optional[str]:
        """
        Derive the transaction name for a target.

        Checks run in order and the first match wins: bookmarkable page,
        resolved page (refined by a listener interface), component.

        Returns:
            The transaction name, or None if the target is not recognized
        """
        if isinstance(target, BookmarkablePageTarget):
            return self._page_path(target.page_class)

        if isinstance(target, PageTarget):
            name = self._page_path(type(target.page))
            if isinstance(target, ListenerInterfaceTarget):
                name += f"/{target.component_id}/{target.listener_interface}"
            return name

        if isinstance(target, ComponentTarget):
            return f"{self._page_path(type(target.page))}/{target.component_id}"

        return None
