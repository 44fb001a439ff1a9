from __future__ import annotations

from bgee_web.request_params import HASH_SPARQL_STABLE, PAGE_COLLABORATIONS
from bgee_web.sparql.endpoints import get_current_endpoint, get_stable_endpoint
from bgee_web.sparql.queries import (
    EXAMPLE_GENE_NAME,
    EXAMPLE_TAXON_NAME,
    RESULT_FORMAT_JSON,
    RESULT_FORMAT_XML,
    build_anat_entities_for_gene_query,
    build_result_url,
)
from bgee_web.views.base import (
    CENTERED_ELEMENT_CLASS,
    EASY_BGEE_NAME,
    MASTER_BGEE_PIPELINE_GITHUB_URL,
    HtmlParentDisplay,
    html_entities,
)


BIO_QUERY_URL = "https://biosoda.expasy.org"
GENEX_URL = "https://biosoda.github.io/genex/"
OBDA_MAPPINGS_URL = "https://github.com/biosoda/bioquery/tree/master/Bgee_OBDA_mappings"
LSCR_URL = "https://github.com/qfo/OrthologyOntology/blob/master/lscr.ttl"


def _external_link(url: str, text: str, title: str) -> str:
    return (
        f"<a href='{html_entities(url)}' title='{html_entities(title)}' class='external_link' "
        f"target='_blank' rel='noopener'>{text}</a>"
    )


def _code_block(query: str) -> str:
    return "<pre><code>" + html_entities(query) + "</code></pre>"


class HtmlSparqlDisplay(HtmlParentDisplay):
    """Page of category 'sparql': how to access the Bgee SPARQL endpoint."""

    def display_sparql(self) -> None:
        current = get_current_endpoint(self.config)
        stable = get_stable_endpoint(self.config)
        current_query = build_anat_entities_for_gene_query()
        stable_query = build_anat_entities_for_gene_query(graph=stable.graph)
        easy_bgee_doc_url = MASTER_BGEE_PIPELINE_GITHUB_URL + "/pipeline/easybgee_creation"

        url_collabs = self.get_new_request_parameters()
        url_collabs.set_page(PAGE_COLLABORATIONS)

        self.start_display("Bgee SPARQL endpoint")

        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Bgee SPARQL endpoint</h1>")
        self.writeln(
            f"<p>Bgee has a SPARQL endpoint based on the {EASY_BGEE_NAME} database ("
            + _external_link(easy_bgee_doc_url, "documentation on the Bgee pipeline GitHub",
                             f"Link to {EASY_BGEE_NAME} documentation")
            + f"). {EASY_BGEE_NAME} is a view of the Bgee database holding its most useful "
            "and explicit information.</p>"
        )

        self.writeln("<h2>Web interface</h2>")
        self.writeln(
            "<p>Bgee SPARQL queries can be run from the "
            + _external_link(BIO_QUERY_URL, "Bio-Query", "Link to Bio-Query")
            + f" interface created for the <a href='{url_collabs.get_request_url()}' "
            "title='Bgee collaborations'>BioSODA project</a>. Bgee queries are listed under "
            "<span class='bioquery-section'>Bgee database queries</span>; Bio-Query also "
            "allows federated queries over the UniProt, OMA and Bgee endpoints.</p>"
        )

        self.writeln("<h2>Programmatic access to the latest version</h2>")
        if self.config.site.archive:
            self.writeln(
                "<div class='alert alert-warning'>This is an archived version of Bgee. To query "
                f"the data of this version, see <a href='#{HASH_SPARQL_STABLE}' "
                "title='Jump to the stable SPARQL endpoint documentation'>stable programmatic "
                "access to this version</a>.</div>"
            )
        self.writeln(
            "<p>The latest version of the Bgee SPARQL endpoint is accessible at:</p>"
            "<p class='endpoint-url'>"
            + _external_link(current.sparql_url, html_entities(current.sparql_url),
                             "Link to Bgee SPARQL endpoint")
            + "</p>"
        )
        self.writeln(
            f"<p>For example, to retrieve all anatomical entities in <i>{EXAMPLE_TAXON_NAME}</i> "
            f"where the {EXAMPLE_GENE_NAME} gene is expressed:</p>"
        )
        self.writeln(_code_block(current_query))
        self.writeln(
            "<p>The results of this query can be downloaded in "
            + _external_link(build_result_url(current.sparql_url, current_query, RESULT_FORMAT_JSON),
                             "JSON format", "SPARQL example query")
            + " or in "
            + _external_link(build_result_url(current.sparql_url, current_query, RESULT_FORMAT_XML),
                             "XML format", "SPARQL example query")
            + ".</p>"
        )
        self.writeln(
            "<p>When querying the latest version, do <strong>not</strong> specify a graph, "
            "otherwise results will be incorrect.</p>"
        )

        self.writeln(f"<h2 id='{HASH_SPARQL_STABLE}'>Stable programmatic access to this version</h2>")
        self.writeln(
            "<p>This version of the Bgee SPARQL endpoint is accessible in a stable manner at:</p>"
            "<p class='endpoint-url'>"
            + _external_link(stable.sparql_url, html_entities(stable.sparql_url),
                             "Link to Bgee SPARQL endpoint")
            + "</p>"
        )
        self.writeln(
            "<p>Queries must name the graph of this version ("
            + html_entities(stable.graph)
            + "), otherwise they will not use the data of this version. The same example becomes:</p>"
        )
        self.writeln(_code_block(stable_query))

        self.writeln("<h2>RDF serialisation and semantic models</h2>")
        self.writeln(
            f"<p>The Bgee RDF data are produced from the {EASY_BGEE_NAME} database with an "
            "Ontology Based Data Access approach (Ontop), following the "
            + _external_link(GENEX_URL, "GenEx semantic model", "Link to GenEx specification")
            + " and these "
            + _external_link(OBDA_MAPPINGS_URL, "OBDA mappings", "Link to OBDA mappings")
            + ". Cross-references to other resources use the "
            + _external_link(LSCR_URL, "life-sciences cross-reference (LSCR) ontology",
                             "Link to LSCR ontology")
            + ".</p>"
        )

        self.writeln("</div>")  # close CENTERED_ELEMENT_CLASS
        self.writeln("</div>")  # close row

        self.end_display()

    def include_css(self) -> None:
        self.include_css_file("sparql.css")
        # Bgee CSS comes last to override external libs.
        super().include_css()
