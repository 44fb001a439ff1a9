from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence, Type, Union

from bgee_web.commands import (
    CommandAbout,
    CommandCollaboration,
    CommandDocumentation,
    CommandGene,
    CommandHome,
    CommandJob,
    CommandParent,
    CommandSource,
    CommandSparql,
    CommandTopAnat,
    Services,
)
from bgee_web.config import AppConfig, load_config
from bgee_web.exceptions import (
    InvalidFormatError,
    InvalidRequestError,
    MultipleValuesNotAllowedError,
    PageNotFoundError,
    ServiceUnavailableError,
    TooManyJobsError,
    UnsupportedOperationError,
    ValueSizeExceededError,
)
from bgee_web.gene_expression.service import GeneService, get_gene_service
from bgee_web.jobs import JobService
from bgee_web.request_params import (
    DISPLAY_TYPE_HTML,
    PAGE_ABOUT,
    PAGE_COLLABORATIONS,
    PAGE_DOCUMENTATION,
    PAGE_GENE,
    PAGE_JOB,
    PAGE_SOURCE,
    PAGE_SPARQL,
    PAGE_TOP_ANAT,
    RequestParameters,
)
from bgee_web.sources import SourceService
from bgee_web.views.base import HtmlResponse
from bgee_web.views.factory import HtmlFactory

logger = logging.getLogger(__name__)

RawParams = Mapping[str, Union[str, Sequence[str]]]

COMMANDS: Dict[str, Type[CommandParent]] = {
    PAGE_GENE: CommandGene,
    PAGE_JOB: CommandJob,
    PAGE_SOURCE: CommandSource,
    PAGE_SPARQL: CommandSparql,
    PAGE_COLLABORATIONS: CommandCollaboration,
    PAGE_DOCUMENTATION: CommandDocumentation,
    PAGE_TOP_ANAT: CommandTopAnat,
    PAGE_ABOUT: CommandAbout,
}


class FrontController:
    """
    Entry point of every request: validates the parameters, runs the command
    of the requested page and turns any failure into an error page.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        gene_service: Optional[GeneService] = None,
        source_service: Optional[SourceService] = None,
        job_service: Optional[JobService] = None,
    ) -> None:
        self.config = config or load_config()
        source_service = source_service or SourceService(self.config)
        self.services = Services(
            gene_service=gene_service or get_gene_service(self.config),
            source_service=source_service,
            job_service=job_service or JobService(self.config.jobs.max_jobs_per_user),
        )

    def process_request(self, params: Optional[RawParams] = None) -> HtmlResponse:
        response = HtmlResponse()
        request_parameters = RequestParameters(config=self.config)
        try:
            request_parameters = RequestParameters(params, config=self.config)
            logger.debug(f"Processing request {request_parameters!r}")
            if request_parameters.display_type != DISPLAY_TYPE_HTML:
                raise InvalidRequestError(
                    f"Unsupported display type: {request_parameters.display_type}"
                )
            factory = HtmlFactory(response, request_parameters, self.config)
            command = self._get_command(request_parameters, factory)
            command.process_request()
        except Exception as exc:
            # A failing display may have written part of a page: start over.
            response = HtmlResponse()
            self._display_error(exc, HtmlFactory(response, request_parameters, self.config))
        return response

    def _get_command(
        self, request_parameters: RequestParameters, factory: HtmlFactory
    ) -> CommandParent:
        if request_parameters.is_the_home_page():
            command_cls: Type[CommandParent] = CommandHome
        else:
            page = request_parameters.page or ""
            if page not in COMMANDS:
                raise PageNotFoundError(f"Unknown page: {page}")
            command_cls = COMMANDS[page]
        return command_cls(request_parameters, self.config, factory, self.services)

    def _display_error(self, exc: Exception, factory: HtmlFactory) -> None:
        display = factory.get_error_display()
        if isinstance(exc, InvalidFormatError):
            logger.debug(f"Invalid format for parameter {exc.parameter}")
            display.display_invalid_format(exc)
        elif isinstance(exc, MultipleValuesNotAllowedError):
            logger.debug(f"Multiple values for parameter {exc.parameter}")
            display.display_multiple_values_not_allowed(exc)
        elif isinstance(exc, ValueSizeExceededError):
            logger.debug(f"Value too long for parameter {exc.parameter}")
            display.display_value_size_exceeded(exc)
        elif isinstance(exc, InvalidRequestError):
            logger.debug(f"Invalid request: {exc}")
            display.display_invalid_request(exc)
        elif isinstance(exc, PageNotFoundError):
            logger.debug(f"Page not found: {exc}")
            display.display_page_not_found(exc)
        elif isinstance(exc, UnsupportedOperationError):
            logger.debug(f"Unsupported operation: {exc}")
            display.display_unsupported_operation()
        elif isinstance(exc, TooManyJobsError):
            logger.debug(f"Too many jobs: {exc}")
            display.display_too_many_jobs(exc)
        elif isinstance(exc, ServiceUnavailableError):
            logger.warning(f"Service unavailable: {exc}")
            display.display_service_unavailable()
        else:
            logger.error(f"Unexpected error while processing the request: {exc}", exc_info=exc)
            display.display_unexpected_error()


__all__ = ["FrontController", "COMMANDS"]
