"""
Labels for New Relic's browser timing header and footer.

Each label re-reads its markup from the agent every time it is rendered,
since the agent embeds a per-request token in it. Both labels render
unescaped; the markup comes from the agent, not from users.

Place the header label in ``<head>`` after any ``<meta>`` elements but before
everything else, and the footer label just before ``</body>``::

    <head>
      <meta charset="utf-8">
      {{ newRelicBrowserTimingHeader }}
      ...
    </head>
    <body>
      ...
      {{ newRelicBrowserTimingFooter }}
    </body>
"""

from typing import Callable, Optional

from markupsafe import Markup, escape

from .agent import AgentClient, default_agent

BROWSER_TIMING_HEADER_LABEL_ID = "newRelicBrowserTimingHeader"
BROWSER_TIMING_FOOTER_LABEL_ID = "newRelicBrowserTimingFooter"


class Label:
    """
    A renderable text node backed by a read-only model.

    Args:
        label_id: Identifier the label is exposed under in templates
        model: Zero-argument callable producing the text; called on every render
        escape_model_strings: HTML-escape the text when True
    """

    def __init__(
        self,
        label_id: str,
        model: Callable[[], Optional[str]],
        escape_model_strings: bool = True,
    ):
        self._id = label_id
        self._model = model
        self._escape_model_strings = escape_model_strings

    @property
    def id(self) -> str:
        return self._id

    @property
    def escape_model_strings(self) -> bool:
        return self._escape_model_strings

    def render(self) -> Markup:
        value = self._model()
        if value is None:
            value = ""
        if self._escape_model_strings:
            return escape(value)
        return Markup(value)

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"Label({self._id!r})"


def browser_timing_header_label(agent: Optional[AgentClient] = None) -> Label:
    """
    Build a label for New Relic's browser timing header.

    Args:
        agent: Agent client to read from; defaults to the process-wide client

    Returns:
        Label: Unescaped label with id BROWSER_TIMING_HEADER_LABEL_ID
    """
    agent = agent or default_agent()
    return Label(
        BROWSER_TIMING_HEADER_LABEL_ID,
        agent.get_browser_timing_header,
        escape_model_strings=False,
    )


def browser_timing_footer_label(agent: Optional[AgentClient] = None) -> Label:
    """
    Build a label for New Relic's browser timing footer.

    Args:
        agent: Agent client to read from; defaults to the process-wide client

    Returns:
        Label: Unescaped label with id BROWSER_TIMING_FOOTER_LABEL_ID
    """
    agent = agent or default_agent()
    return Label(
        BROWSER_TIMING_FOOTER_LABEL_ID,
        agent.get_browser_timing_footer,
        escape_model_strings=False,
    )
