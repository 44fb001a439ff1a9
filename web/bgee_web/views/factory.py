from __future__ import annotations

import logging
from typing import Type, TypeVar

from bgee_web.config import AppConfig
from bgee_web.exceptions import UnsupportedOperationError
from bgee_web.request_params import RequestParameters
from bgee_web.views.base import HtmlParentDisplay, HtmlResponse
from bgee_web.views.collaboration import HtmlCollaborationDisplay
from bgee_web.views.documentation import HtmlDocumentationDisplay
from bgee_web.views.error import HtmlErrorDisplay
from bgee_web.views.gene import HtmlGeneDisplay
from bgee_web.views.general import HtmlGeneralDisplay
from bgee_web.views.job import HtmlJobDisplay
from bgee_web.views.source import HtmlSourceDisplay
from bgee_web.views.sparql import HtmlSparqlDisplay
from bgee_web.views.topanat import NOT_AVAILABLE_MESSAGE, HtmlTopAnatDisplay

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=HtmlParentDisplay)


class HtmlFactory:
    """
    Instantiates the HTML displays for one request.

    All displays built by a factory share its response, request
    parameters and configuration.
    """

    def __init__(
        self,
        response: HtmlResponse,
        request_parameters: RequestParameters,
        config: AppConfig,
    ) -> None:
        self.response = response
        self.request_parameters = request_parameters
        self.config = config

    def _build(self, display_cls: Type[D]) -> D:
        logger.debug(f"Creating display {display_cls.__name__}")
        return display_cls(self.response, self.request_parameters, self.config, self)

    def get_general_display(self) -> HtmlGeneralDisplay:
        return self._build(HtmlGeneralDisplay)

    def get_error_display(self) -> HtmlErrorDisplay:
        return self._build(HtmlErrorDisplay)

    def get_documentation_display(self) -> HtmlDocumentationDisplay:
        return self._build(HtmlDocumentationDisplay)

    def get_collaboration_display(self) -> HtmlCollaborationDisplay:
        return self._build(HtmlCollaborationDisplay)

    def get_top_anat_display(self) -> HtmlTopAnatDisplay:
        return self._build(HtmlTopAnatDisplay)

    def get_gene_display(self) -> HtmlGeneDisplay:
        return self._build(HtmlGeneDisplay)

    def get_source_display(self) -> HtmlSourceDisplay:
        return self._build(HtmlSourceDisplay)

    def get_job_display(self) -> HtmlJobDisplay:
        return self._build(HtmlJobDisplay)

    def get_sparql_display(self) -> HtmlSparqlDisplay:
        return self._build(HtmlSparqlDisplay)

    # Categories only served as data (JSON, TSV) by other front-ends.

    def get_search_display(self) -> HtmlParentDisplay:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)

    def get_dao_display(self) -> HtmlParentDisplay:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)

    def get_r_package_display(self) -> HtmlParentDisplay:
        raise UnsupportedOperationError(NOT_AVAILABLE_MESSAGE)
