from __future__ import annotations

from typing import Any, Dict, Optional

from bgee_web.exceptions import UnsupportedOperationError
from bgee_web.models import TopAnatResults
from bgee_web.request_params import ACTION_DOC_TOP_ANAT, PAGE_DOCUMENTATION
from bgee_web.views.base import HtmlParentDisplay

NOT_AVAILABLE_MESSAGE = "Not available for HTML display"


class HtmlTopAnatDisplay(HtmlParentDisplay):
    """
    Page of category 'top_anat'.

    The HTML view only serves the page hosting the TopAnat application;
    gene validation, job tracking and results are exchanged as JSON by the
    application itself.
    """

    def display_top_anat_home_page(self) -> None:
        url_doc = self.get_new_request_parameters()
        url_doc.set_page(PAGE_DOCUMENTATION)
        url_doc.set_action(ACTION_DOC_TOP_ANAT)

        self.start_display("Bgee TopAnat - Gene Expression Enrichment")
        self.writeln("<div id='top_anat' ng-app='app'>")
        self.writeln("<h1>TopAnat: Expression enrichment analyses</h1>")
        self.writeln(
            "<p class='top-anat-intro'>TopAnat tests which anatomical structures are enriched "
            "in the expression of a list of genes, compared to a background list. "
            f"See the <a href='{url_doc.get_request_url()}'>TopAnat documentation</a>.</p>"
        )
        self.writeln("<div ng-view class='top-anat-app'>")
        self.writeln("<p class='loading'>Loading TopAnat...</p>")
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def send_gene_list_response(self, data: Optional[Dict[str, Any]], msg: str) -> None:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)

    def send_tracking_job_response(self, data: Optional[Dict[str, Any]], msg: str) -> None:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)

    def send_result_response(self, data: Optional[TopAnatResults], msg: str) -> None:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)

    def include_js(self) -> None:
        super().include_js()
        self.include_js_file("lib/angular.min.js")
        self.include_js_file("lib/angular-route.min.js")
        self.include_js_file("topanat/topanat.js")
        self.include_js_file("topanat/controllers/main.js")

    def include_css(self) -> None:
        self.include_css_file("lib/angular-ui-grid.min.css")
        self.include_css_file("topanat.css")
        super().include_css()
