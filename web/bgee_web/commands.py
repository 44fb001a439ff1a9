"""
Commands: one per page category, deciding which display method renders the
request once its parameters have been validated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bgee_web.config import AppConfig
from bgee_web.exceptions import GeneNotFoundError, InvalidRequestError, PageNotFoundError
from bgee_web.gene_expression.service import GeneService
from bgee_web.jobs import JobService
from bgee_web.request_params import (
    ACTION_CANCEL_JOB,
    ACTION_DOC_CALL_DOWNLOAD_FILES,
    ACTION_DOC_DATA_SETS,
    ACTION_DOC_TOP_ANAT,
    ACTION_TOP_ANAT_GENE_VALIDATION,
    ACTION_TOP_ANAT_GET_RESULTS,
    ACTION_TOP_ANAT_SUBMIT_JOB,
    ACTION_TOP_ANAT_TRACKING_JOB,
    PARAM_GENE_LIST,
    RequestParameters,
)
from bgee_web.sources import SourceService
from bgee_web.views.factory import HtmlFactory

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Backing services shared by all requests."""

    gene_service: GeneService
    source_service: SourceService
    job_service: JobService


class CommandParent:
    def __init__(
        self,
        request_parameters: RequestParameters,
        config: AppConfig,
        factory: HtmlFactory,
        services: Services,
    ) -> None:
        self.request_parameters = request_parameters
        self.config = config
        self.factory = factory
        self.services = services

    def process_request(self) -> None:
        raise NotImplementedError


class CommandHome(CommandParent):
    def process_request(self) -> None:
        self.factory.get_general_display().display_home_page()


class CommandAbout(CommandParent):
    def process_request(self) -> None:
        self.factory.get_general_display().display_about()


class CommandCollaboration(CommandParent):
    def process_request(self) -> None:
        self.factory.get_collaboration_display().display_collaboration_page()


class CommandSparql(CommandParent):
    def process_request(self) -> None:
        self.factory.get_sparql_display().display_sparql()


class CommandSource(CommandParent):
    def process_request(self) -> None:
        sources = self.services.source_service.load_sources()
        self.factory.get_source_display().display_sources(sources)


class CommandDocumentation(CommandParent):
    def process_request(self) -> None:
        display = self.factory.get_documentation_display()
        action = self.request_parameters.action
        if action is None:
            display.display_documentation_home_page()
        elif action == ACTION_DOC_CALL_DOWNLOAD_FILES:
            display.display_call_download_file_documentation()
        elif action == ACTION_DOC_TOP_ANAT:
            display.display_top_anat_documentation()
        elif action == ACTION_DOC_DATA_SETS:
            display.display_data_sets_documentation()
        else:
            raise PageNotFoundError(f"Unknown documentation page: {action}")


class CommandGene(CommandParent):
    def process_request(self) -> None:
        display = self.factory.get_gene_display()
        gene_id = self.request_parameters.gene_id
        if gene_id is None:
            display.display_gene_home_page()
            return

        species_id = self.request_parameters.species_id
        genes = self.services.gene_service.load_genes_by_ensembl_id(gene_id, species_id)
        if not genes:
            message = f"No gene corresponding to {gene_id}"
            if species_id is not None:
                message += f" for species {species_id}"
            raise GeneNotFoundError(message + ".")

        if len(genes) > 1 and species_id is None:
            logger.debug(f"{len(genes)} genes share the ID {gene_id}")
            display.display_gene_choice(genes)
            return
        display.display_gene(self.services.gene_service.load_gene_response(genes[0]))


class CommandJob(CommandParent):
    def process_request(self) -> None:
        action = self.request_parameters.action
        if action != ACTION_CANCEL_JOB:
            raise PageNotFoundError(f"Unknown job action: {action}")
        job_id = self.request_parameters.job_id
        if job_id is None:
            raise InvalidRequestError("A job ID must be provided to cancel a job.")
        job = self.services.job_service.cancel_job(job_id)
        self.factory.get_job_display().cancel_job(job)


class CommandTopAnat(CommandParent):
    """
    The TopAnat home page is rendered here; the other actions answer the
    TopAnat application, which expects JSON responses.
    """

    def process_request(self) -> None:
        display = self.factory.get_top_anat_display()
        action = self.request_parameters.action
        if action is None:
            display.display_top_anat_home_page()
        elif action == ACTION_TOP_ANAT_GENE_VALIDATION:
            # Duplicated IDs in the foreground list are submitted once.
            fg_list = self.request_parameters.get_values(PARAM_GENE_LIST)
            genes = list(dict.fromkeys(str(g) for g in fg_list))
            display.send_gene_list_response({PARAM_GENE_LIST.name: genes}, "Gene validation")
        elif action in (ACTION_TOP_ANAT_SUBMIT_JOB, ACTION_TOP_ANAT_TRACKING_JOB):
            display.send_tracking_job_response(None, "Job tracking")
        elif action == ACTION_TOP_ANAT_GET_RESULTS:
            display.send_result_response(None, "TopAnat results")
        else:
            raise PageNotFoundError(f"Unknown TopAnat action: {action}")


__all__ = [
    "Services",
    "CommandParent",
    "CommandHome",
    "CommandAbout",
    "CommandCollaboration",
    "CommandSparql",
    "CommandSource",
    "CommandDocumentation",
    "CommandGene",
    "CommandJob",
    "CommandTopAnat",
]
