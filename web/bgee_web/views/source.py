from __future__ import annotations

import logging
from itertools import groupby
from typing import List

from bgee_web.models import Source
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities

logger = logging.getLogger(__name__)


def _release_info(source: Source) -> str:
    """Release line of a source; empty when the source has neither a date nor a version."""
    parts: List[str] = []
    if source.release_version:
        parts.append(f"version {html_entities(source.release_version)}")
    if source.release_date is not None:
        parts.append(f"released {source.release_date.strftime('%Y-%m-%d')}")
    if not parts:
        return ""
    return "<span class='source-release'>" + ", ".join(parts) + "</span>"


class HtmlSourceDisplay(HtmlParentDisplay):
    """Page of category 'source': the data sources used in Bgee."""

    def display_sources(self, sources: List[Source]) -> None:
        displayed = sorted(
            (s for s in sources if s.to_display),
            key=lambda s: (s.display_order, s.name.lower()),
        )
        logger.debug(f"Displaying {len(displayed)} of {len(sources)} sources")

        self.start_display("Bgee data sources")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Bgee data sources</h1>")

        if not displayed:
            self.writeln("<p>No data source to display.</p>")
        else:
            # Categories appear in the order of their first source.
            order = {}
            for source in displayed:
                order.setdefault(source.category, len(order))
            by_category = sorted(displayed, key=lambda s: order[s.category])
            for category, group in groupby(by_category, key=lambda s: s.category):
                self.writeln(f"<h2>{html_entities(category)}</h2>")
                self.writeln("<table class='sources'>")
                self.writeln("<thead><tr><th>Source</th><th>Description</th><th>Release</th></tr></thead>")
                self.writeln("<tbody>")
                for source in group:
                    self.writeln(self._source_row(source))
                self.writeln("</tbody>")
                self.writeln("</table>")

        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def _source_row(self, source: Source) -> str:
        if source.base_url:
            name = (
                f"<a href='{html_entities(source.base_url)}' class='external_link' "
                f"target='_blank' rel='noopener'>{html_entities(source.name)}</a>"
            )
        else:
            name = html_entities(source.name)
        return (
            f"<tr><td>{name}</td>"
            f"<td>{html_entities(source.description)}</td>"
            f"<td>{_release_info(source)}</td></tr>"
        )

    def include_css(self) -> None:
        self.include_css_file("source.css")
        super().include_css()
