from __future__ import annotations

import logging
from typing import Optional

from bgee_web.models import Job
from bgee_web.request_params import PAGE_TOP_ANAT
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities

logger = logging.getLogger(__name__)


class HtmlJobDisplay(HtmlParentDisplay):
    """Page of category 'job'."""

    def cancel_job(self, job: Optional[Job]) -> None:
        """
        Confirm the cancellation of `job`. A None job means it was unknown or
        had already been released, e.g. because it completed meanwhile.
        """
        url_top_anat = self.get_new_request_parameters()
        url_top_anat.set_page(PAGE_TOP_ANAT)

        self.start_display("Job cancellation")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Job cancellation</h1>")

        if job is None:
            logger.debug("Cancellation page for a missing job")
            self.writeln(
                "<p class='alert alert-info'>The job does not exist, or it has already "
                "completed and been removed. Nothing to cancel.</p>"
            )
        elif job.terminated:
            self.writeln(
                f"<p class='alert alert-info'>Job #{job.id} "
                f"(<span class='job-name'>{html_entities(job.name)}</span>) "
                "had already finished, nothing was canceled.</p>"
            )
        else:
            self.writeln(
                f"<p class='alert alert-success'>Job #{job.id} "
                f"(<span class='job-name'>{html_entities(job.name)}</span>) "
                "was canceled.</p>"
            )

        self.writeln(
            f"<p>Back to <a href='{url_top_anat.get_request_url()}' title='TopAnat home page'>"
            "TopAnat</a>.</p>"
        )
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()
