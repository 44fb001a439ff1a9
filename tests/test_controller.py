import logging
from dataclasses import replace

import pytest

from bgee_web.controller import FrontController
from bgee_web.exceptions import ServiceUnavailableError, TooManyJobsError
from bgee_web.jobs import JobService
from tests.conftest import FakeGeneService


@pytest.fixture
def job_service():
    return JobService(max_jobs_per_user=2)


@pytest.fixture
def controller(config, fake_gene_service, job_service):
    return FrontController(config=config, gene_service=fake_gene_service, job_service=job_service)


@pytest.mark.parametrize(
    "params, expected",
    [
        ({}, "Welcome on Bgee 15.0"),
        ({"page": "about"}, "About Bgee"),
        ({"page": "collaborations"}, "Bgee collaborations"),
        ({"page": "sparql"}, "Bgee SPARQL endpoint"),
        ({"page": "source"}, "Bgee data sources"),
        ({"page": "documentation"}, "Bgee documentation"),
        ({"page": "documentation", "action": "call_files"}, "single_expr_simple"),
        ({"page": "documentation", "action": "top_anat"}, "TopAnat documentation"),
        ({"page": "documentation", "action": "data_sets"}, "GTEx"),
        ({"page": "top_anat"}, "TopAnat: Expression enrichment analyses"),
        ({"page": "gene"}, "Gene search"),
    ],
)
def test_pages(controller, params, expected):
    response = controller.process_request(params)
    assert response.status_code == 200
    assert expected in response.body


def test_gene_page(controller, fake_gene_service):
    response = controller.process_request({"page": "gene", "gene_id": "ENSG00000130208"})
    assert response.status_code == 200
    assert "gene-expression" in response.body
    assert fake_gene_service.requests == [("ENSG00000130208", None)]


def test_gene_choice_when_id_is_shared(config, gene):
    chimp = replace(gene, species=replace(gene.species, id=9598, genus="Pan", species_name="troglodytes"))
    controller = FrontController(config=config, gene_service=FakeGeneService(genes=[gene, chimp]))

    response = controller.process_request({"page": "gene", "gene_id": gene.ensembl_gene_id})
    assert "gene-choice" in response.body

    response = controller.process_request(
        {"page": "gene", "gene_id": gene.ensembl_gene_id, "species_id": "9598"}
    )
    assert "gene-choice" not in response.body
    assert "Pan troglodytes" in response.body


def test_unknown_gene(controller):
    response = controller.process_request({"page": "gene", "gene_id": "ENSG0", "species_id": "10090"})
    assert response.status_code == 400
    assert "No gene corresponding to ENSG0 for species 10090." in response.body


def test_cancel_job(controller, job_service):
    job = job_service.register_job("TopAnat", "u1")
    response = controller.process_request({"page": "job", "action": "cancel", "job_id": str(job.id)})
    assert response.status_code == 200
    assert f"Job #{job.id}" in response.body
    assert job.interrupt_requested


def test_cancel_missing_job(controller):
    response = controller.process_request({"page": "job", "action": "cancel", "job_id": "999"})
    assert response.status_code == 200
    assert "Nothing to cancel" in response.body


def test_cancel_job_requires_id(controller):
    response = controller.process_request({"page": "job", "action": "cancel"})
    assert response.status_code == 400
    assert "A job ID must be provided" in response.body


@pytest.mark.parametrize(
    "params, status, expected",
    [
        ({"page": "nowhere"}, 404, "404 not found"),
        ({"page": "job", "action": "list"}, 404, "404 not found"),
        ({"page": "documentation", "action": "faq"}, 404, "404 not found"),
        ({"page": "top_anat", "action": "export"}, 404, "404 not found"),
        ({"page": "gene", "species_id": "abc"}, 400, "Incorrect parameter: species_id"),
        ({"page": "source\n"}, 400, "Incorrect parameter: page"),
        ({"page": "gene", "gene_id": "ENSG00000130208\n"}, 400, "Incorrect parameter: gene_id"),
        ({"page": ["gene", "source"]}, 400, "incorrectly assigned multiple values"),
        ({"gene_id": "E" * 500}, 400, "exceeded its maximum allowed length"),
        ({"page": "about", "display_type": "json"}, 400, "Unsupported display type: json"),
        ({"page": "top_anat", "action": "gene_validation"}, 400, "This operation is not supported"),
        ({"page": "top_anat", "action": "submit_job"}, 400, "This operation is not supported"),
        ({"page": "top_anat", "action": "tracking_job"}, 400, "This operation is not supported"),
        ({"page": "top_anat", "action": "get_results"}, 400, "This operation is not supported"),
    ],
)
def test_errors(controller, params, status, expected):
    response = controller.process_request(params)
    assert response.status_code == status
    assert expected in response.body
    assert response.body.startswith("<!DOCTYPE html>")


class FailingGeneService(FakeGeneService):
    def __init__(self, error):
        super().__init__()
        self.error = error

    def load_genes_by_ensembl_id(self, ensembl_gene_id, species_id=None):
        raise self.error


@pytest.mark.parametrize(
    "error, status",
    [
        (ServiceUnavailableError("endpoint down"), 503),
        (TooManyJobsError("3 jobs running"), 429),
        (RuntimeError("boom"), 500),
    ],
)
def test_service_errors(config, error, status):
    controller = FrontController(config=config, gene_service=FailingGeneService(error))
    response = controller.process_request({"page": "gene", "gene_id": "ENSG1"})
    assert response.status_code == status


def test_unexpected_error_is_logged(config, caplog):
    controller = FrontController(config=config, gene_service=FailingGeneService(RuntimeError("boom")))
    with caplog.at_level(logging.ERROR, logger="bgee_web.controller"):
        response = controller.process_request({"page": "gene", "gene_id": "ENSG1"})
    assert "Woops, something wrong happened." in response.body
    assert "boom" not in response.body
    assert any(r.exc_info for r in caplog.records)


def test_partial_output_is_discarded(config, monkeypatch):
    from bgee_web.views.sparql import HtmlSparqlDisplay

    def half_page(self):
        self.start_display("Half")
        raise RuntimeError("failed in the middle")

    monkeypatch.setattr(HtmlSparqlDisplay, "display_sparql", half_page)
    controller = FrontController(config=config, gene_service=FakeGeneService())
    response = controller.process_request({"page": "sparql"})
    assert response.status_code == 500
    assert "<title>Half</title>" not in response.body
    assert response.body.count("<!DOCTYPE html>") == 1


def test_gene_validation_receives_foreground_list(controller, monkeypatch):
    from bgee_web.views.topanat import HtmlTopAnatDisplay

    received = []

    def record(self, data, msg):
        received.append(data)

    monkeypatch.setattr(HtmlTopAnatDisplay, "send_gene_list_response", record)
    response = controller.process_request(
        {"page": "top_anat", "action": "gene_validation", "fg_list": ["ENSG2", "ENSG1", "ENSG2"]}
    )
    assert response.status_code == 200
    assert received == [{"fg_list": ["ENSG2", "ENSG1"]}]
