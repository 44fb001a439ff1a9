"""HTML displays: one class per page category, sharing HtmlParentDisplay."""

from bgee_web.views.base import HtmlParentDisplay, HtmlResponse, html_entities
from bgee_web.views.factory import HtmlFactory

__all__ = ["HtmlFactory", "HtmlParentDisplay", "HtmlResponse", "html_entities"]
