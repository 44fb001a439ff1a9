from __future__ import annotations

import logging

from bgee_web.exceptions import (
    InvalidFormatError,
    InvalidRequestError,
    MultipleValuesNotAllowedError,
    PageNotFoundError,
    TooManyJobsError,
    ValueSizeExceededError,
)
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities

logger = logging.getLogger(__name__)


class HtmlErrorDisplay(HtmlParentDisplay):
    """
    Error pages. Each method sends the matching status code before
    writing the page, so they can be called from any error path.
    """

    def _display_error(self, title: str, alert: str, detail: str = "") -> None:
        self.start_display(title)
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln(f"<h1>{html_entities(title)}</h1>")
        self.writeln(f"<p class='alert alert-danger'>{alert}</p>")
        if detail:
            self.writeln(f"<p>{detail}</p>")
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def display_service_unavailable(self) -> None:
        self.send_service_unavailable_headers()
        self._display_error(
            "Service unavailable",
            "Due to technical problems, Bgee is currently unavailable.",
            "We are working to restore Bgee as soon as possible. "
            "We apologize for any inconvenience.",
        )

    def display_unexpected_error(self) -> None:
        self.send_internal_error_headers()
        self._display_error(
            "Error",
            "Woops, something wrong happened.",
            "500 internal server error. An unexpected error occurred while processing "
            "your request. We apologize for any inconvenience.",
        )

    def display_invalid_format(self, error: InvalidFormatError) -> None:
        self.send_bad_request_headers()
        self._display_error(
            "Invalid request",
            "One of the request parameters has an incorrect format.",
            f"Incorrect parameter: {html_entities(error.parameter)}",
        )

    def display_multiple_values_not_allowed(self, error: MultipleValuesNotAllowedError) -> None:
        self.send_bad_request_headers()
        self._display_error(
            "Invalid request",
            "One of the request parameters was incorrectly assigned multiple values.",
            f"Incorrect parameter: {html_entities(error.parameter)}",
        )

    def display_value_size_exceeded(self, error: ValueSizeExceededError) -> None:
        self.send_bad_request_headers()
        self._display_error(
            "Invalid request",
            "One of the request parameters exceeded its maximum allowed length.",
            f"Incorrect parameter: {html_entities(error.parameter)}",
        )

    def display_invalid_request(self, error: InvalidRequestError) -> None:
        self.send_bad_request_headers()
        self._display_error("Invalid request", html_entities(str(error)))

    def display_page_not_found(self, error: PageNotFoundError) -> None:
        self.send_page_not_found_headers()
        self._display_error(
            "Page not found",
            "Something wrong happened!",
            "404 not found. We could not understand your query.",
        )

    def display_unsupported_operation(self) -> None:
        self.send_bad_request_headers()
        self._display_error(
            "Unsupported operation",
            "Something wrong happened!",
            "This operation is not supported for the requested view or the requested parameters.",
        )

    def display_too_many_jobs(self, error: TooManyJobsError) -> None:
        self.send_too_many_requests_headers()
        self._display_error(
            "Too many requests",
            f"Too Many Requests - {html_entities(str(error))}",
            "Please wait for your running jobs to complete before submitting new ones.",
        )
