from dataclasses import replace
from datetime import date

import pytest

from bgee_web.exceptions import UnsupportedOperationError
from bgee_web.models import GeneResponse, Job, Source
from bgee_web.sparql.queries import build_anat_entities_for_gene_query
from bgee_web.views.base import html_entities
from bgee_web.views.collaboration import COLLABORATIONS, HtmlCollaborationDisplay
from bgee_web.views.documentation import HtmlDocumentationDisplay
from bgee_web.views.error import HtmlErrorDisplay
from bgee_web.views.factory import HtmlFactory
from bgee_web.views.gene import HtmlGeneDisplay
from bgee_web.views.general import HtmlGeneralDisplay
from bgee_web.views.job import HtmlJobDisplay
from bgee_web.views.source import HtmlSourceDisplay
from bgee_web.views.sparql import HtmlSparqlDisplay
from bgee_web.views.topanat import HtmlTopAnatDisplay


# --------------------------------------------------------------- collaborations


def test_collaboration_page(make_display):
    display, response = make_display(HtmlCollaborationDisplay)
    display.display_collaboration_page()
    body = response.body
    for collab in COLLABORATIONS:
        assert html_entities(collab.name) in body
    assert "src='/img/logo/biosoda_logo.png'" in body
    assert body.index("collaboration.css") < body.index("bgee.css")


# ----------------------------------------------------------------- documentation


def test_documentation_home_links_sub_pages(make_display):
    display, response = make_display(HtmlDocumentationDisplay)
    display.display_documentation_home_page()
    body = response.body
    assert "/bgee/?page=documentation&amp;action=call_files" in body
    assert "/bgee/?page=documentation&amp;action=top_anat" in body
    assert "/bgee/?page=documentation&amp;action=data_sets" in body
    assert "/bgee/?page=sparql" in body


def test_call_file_documentation_toc_matches_sections(make_display):
    display, response = make_display(HtmlDocumentationDisplay)
    display.display_call_download_file_documentation()
    body = response.body
    for anchor in ("single", "single_expr_simple", "single_expr_complete", "multi"):
        assert f"href='#{anchor}'" in body
        assert f"id='{anchor}'" in body
    assert "<td>1</td><td>Gene ID</td>" in body


def test_top_anat_and_data_sets_documentation(make_display):
    display, response = make_display(HtmlDocumentationDisplay)
    display.display_top_anat_documentation()
    assert "TopAnat documentation" in response.body
    assert "href='/bgee/?page=top_anat'" in response.body

    display, response = make_display(HtmlDocumentationDisplay)
    display.display_data_sets_documentation()
    assert "GTEx data into Bgee" in response.body


# -------------------------------------------------------------------------- gene


def test_gene_home_page(make_display):
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene_home_page()
    body = response.body
    assert "<form id='bgee_gene_search_form' action='/bgee/'" in body
    assert "name='gene_id'" in body
    assert "autoCompleteGene.js" in body


def test_gene_page(make_display, gene_response):
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene(gene_response)
    body = response.body
    assert "<title>Gene: APOC1 - ENSG00000130208</title>" in body
    assert "<i>Homo sapiens</i> (human)" in body
    assert "APO-CI, ApoC-I" in body
    assert "protein_coding" in body
    assert "https://www.ensembl.org/Homo_sapiens/Gene/Summary?g=ENSG00000130208" in body
    assert "https://www.uniprot.org/uniprot/P02654" in body
    # Calls are listed by decreasing score.
    assert body.index("liver") < body.index("brain")
    assert "<td class='quality gold'>gold</td>" in body
    assert "98.25" in body
    assert "also used" not in body


def test_gene_page_lists_call_data_types(make_display, gene_response):
    liver_call = replace(
        gene_response.calls[0], data_types=frozenset({"RNA-Seq", "Affymetrix", "<EST>"})
    )
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene(replace(gene_response, calls=[liver_call, gene_response.calls[1]]))
    body = response.body
    assert "<th>Data types</th>" in body
    assert "<td class='data-types'>&lt;EST&gt;, Affymetrix, RNA-Seq</td>" in body
    # A call loaded without data types still fills the column.
    assert "<td class='data-types'>-</td>" in body


def test_gene_page_without_calls(make_display, gene):
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene(GeneResponse(gene=gene))
    assert "No expression data for this gene." in response.body
    assert "gene-expression" not in response.body


def test_gene_page_warns_on_shared_ensembl_id(make_display, gene):
    shared = replace(gene, gene_mapped_to_same_ensembl_gene_id_count=3)
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene(GeneResponse(gene=shared))
    assert "also used for 2 other gene(s)" in response.body
    assert "href='/bgee/?page=gene&amp;gene_id=ENSG00000130208'" in response.body


def test_gene_choice(make_display, gene):
    chimp = replace(
        gene,
        species=replace(gene.species, id=9598, genus="Pan", species_name="troglodytes", name="chimpanzee"),
    )
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene_choice([gene, chimp])
    body = response.body
    assert "/bgee/?page=gene&amp;gene_id=ENSG00000130208&amp;species_id=9598" in body
    assert "/bgee/?page=gene&amp;gene_id=ENSG00000130208&amp;species_id=9606" in body
    assert body.index("species_id=9598") < body.index("species_id=9606")


def test_gene_choice_requires_genes(make_display):
    display, _ = make_display(HtmlGeneDisplay)
    with pytest.raises(ValueError):
        display.display_gene_choice([])


def test_gene_values_are_escaped(make_display, gene):
    display, response = make_display(HtmlGeneDisplay)
    display.display_gene(GeneResponse(gene=replace(gene, description="<script>x</script>")))
    assert "<script>x</script>" not in response.body
    assert "&lt;script&gt;x&lt;/script&gt;" in response.body


# --------------------------------------------------------------------------- job


def test_cancel_job(make_display):
    job = Job(id=42, name="TopAnat <analysis>", user_id="u1")
    display, response = make_display(HtmlJobDisplay)
    display.cancel_job(job)
    body = response.body
    assert "Job #42" in body
    assert "TopAnat &lt;analysis&gt;" in body
    assert "was canceled" in body
    assert "already finished" not in body


def test_cancel_finished_job(make_display):
    job = Job(id=1, name="done", user_id="u1")
    job.complete_with_success()
    display, response = make_display(HtmlJobDisplay)
    display.cancel_job(job)
    body = response.body
    assert "Job #1" in body
    assert "had already finished, nothing was canceled." in body
    assert "alert-success" not in body


def test_cancel_missing_job(make_display):
    display, response = make_display(HtmlJobDisplay)
    display.cancel_job(None)
    body = response.body
    assert "Nothing to cancel" in body
    assert "Job #" not in body
    assert response.status_code == 200


# ------------------------------------------------------------------------ source


def test_sources_page(make_display, config):
    from bgee_web.sources import SourceService

    display, response = make_display(HtmlSourceDisplay)
    display.display_sources(SourceService(config).load_sources())
    body = response.body
    assert body.index("<h2>Genomics database</h2>") < body.index("<h2>Expression data</h2>")
    assert "version 102, released 2021-01-01" in body
    assert "released 2020-06-15" in body
    # Sources not meant to be displayed are skipped.
    assert "OMA" not in body
    assert "Orthology" not in body


def test_source_without_release_info(make_display):
    display, response = make_display(HtmlSourceDisplay)
    display.display_sources(
        [
            Source(id=1, name="NoRelease", category="Misc"),
            Source(id=2, name="Dated", category="Misc", release_date=date(2019, 2, 3)),
        ]
    )
    body = response.body
    assert body.count("source-release") == 1
    assert "released 2019-02-03" in body


def test_no_source(make_display):
    display, response = make_display(HtmlSourceDisplay)
    display.display_sources([Source(id=1, name="Hidden", to_display=False)])
    assert "No data source to display." in response.body


# ------------------------------------------------------------------------ sparql


def test_sparql_page(make_display):
    display, response = make_display(HtmlSparqlDisplay)
    display.display_sparql()
    body = response.body
    assert "https://sparql.example.org/sparql/" in body
    assert "https://sparql.example.org/bgee15/sparql/" in body
    assert html_entities(build_anat_entities_for_gene_query()) in body
    assert "FROM &lt;https://www.bgee.org/bgee_15_0&gt;" in body
    assert "format=application%2Fsparql-results%2Bjson" in body
    assert "format=application%2Fsparql-results%2Bxml" in body
    assert "href='/bgee/?page=collaborations'" in body
    assert "id='sparql_stable'" in body
    assert "archived version" not in body


def test_sparql_page_in_archive(make_display, archive_config):
    display, response = make_display(HtmlSparqlDisplay)
    display.display_sparql()
    assert "href='#sparql_stable'" in response.body


# ----------------------------------------------------------------------- topanat


def test_top_anat_home_page(make_display):
    display, response = make_display(HtmlTopAnatDisplay)
    display.display_top_anat_home_page()
    body = response.body
    assert "ng-app='app'" in body
    assert "topanat/topanat.js" in body
    assert "/bgee/?page=documentation&amp;action=top_anat" in body


@pytest.mark.parametrize(
    "method",
    ["send_gene_list_response", "send_tracking_job_response", "send_result_response"],
)
def test_top_anat_data_responses_not_available(make_display, method):
    display, response = make_display(HtmlTopAnatDisplay)
    with pytest.raises(UnsupportedOperationError, match="Not available for HTML display"):
        getattr(display, method)(None, "msg")
    assert response.body == ""


# ------------------------------------------------------------------ general/error


def test_home_and_about(make_display):
    display, response = make_display(HtmlGeneralDisplay)
    display.display_home_page()
    assert "Welcome on Bgee 15.0" in response.body
    assert "/bgee/?page=top_anat" in response.body

    display, response = make_display(HtmlGeneralDisplay)
    display.display_about()
    assert "About Bgee" in response.body


def test_error_pages_set_status(make_display):
    display, response = make_display(HtmlErrorDisplay)
    display.display_service_unavailable()
    assert response.status_code == 503
    assert "currently unavailable" in response.body

    display, response = make_display(HtmlErrorDisplay)
    display.display_unsupported_operation()
    assert response.status_code == 400


# ----------------------------------------------------------------------- factory


def test_factory(config):
    from bgee_web.request_params import RequestParameters
    from bgee_web.views.base import HtmlResponse

    response = HtmlResponse()
    factory = HtmlFactory(response, RequestParameters(config=config), config)
    gene_display = factory.get_gene_display()
    assert isinstance(gene_display, HtmlGeneDisplay)
    assert gene_display.response is response
    assert gene_display.factory is factory
    for getter in (factory.get_search_display, factory.get_dao_display, factory.get_r_package_display):
        with pytest.raises(UnsupportedOperationError):
            getter()
