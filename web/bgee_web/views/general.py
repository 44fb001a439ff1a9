from __future__ import annotations

from bgee_web.request_params import (
    PAGE_COLLABORATIONS,
    PAGE_DOCUMENTATION,
    PAGE_GENE,
    PAGE_SOURCE,
    PAGE_SPARQL,
    PAGE_TOP_ANAT,
)
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, SIB_URL, html_entities

HOME_LINKS = (
    (PAGE_GENE, "Gene search", "Expression of a gene in anatomical entities"),
    (PAGE_TOP_ANAT, "TopAnat", "Enrichment of anatomical terms for a list of genes"),
    (PAGE_SOURCE, "Data sources", "Resources used to build Bgee"),
    (PAGE_SPARQL, "SPARQL endpoint", "Programmatic access to Bgee data"),
    (PAGE_DOCUMENTATION, "Documentation", "Download files and tools documentation"),
    (PAGE_COLLABORATIONS, "Collaborations", "Projects Bgee works with"),
)


class HtmlGeneralDisplay(HtmlParentDisplay):
    """Home page and about page."""

    def display_home_page(self) -> None:
        release = self.config.site.release
        self.start_display(f"Welcome on {release}")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln(f"<h1>Welcome on {html_entities(release)}</h1>")
        self.writeln(
            "<p id='bgee_introduction'>Bgee is a database to retrieve and compare gene "
            "expression patterns in multiple animal species, produced from multiple data "
            "types and curated to include only healthy wild-type expression.</p>"
        )
        self.writeln("<ul class='home-menu'>")
        for page, label, description in HOME_LINKS:
            url = self.get_new_request_parameters()
            url.set_page(page)
            self.writeln(
                f"<li><a href='{url.get_request_url()}'>{label}</a>: {description}</li>"
            )
        self.writeln("</ul>")
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def display_about(self) -> None:
        url_collabs = self.get_new_request_parameters()
        url_collabs.set_page(PAGE_COLLABORATIONS)

        self.start_display("About Bgee")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>About Bgee</h1>")
        self.writeln(
            "<p>Bgee is developed by the Evolutionary Bioinformatics group of the "
            f"<a href='{SIB_URL}' class='external_link' target='_blank' rel='noopener'>"
            "SIB Swiss Institute of Bioinformatics</a> and the University of Lausanne.</p>"
        )
        self.writeln(
            f"<p>This is {html_entities(self.config.site.release)}. "
            f"See also our <a href='{url_collabs.get_request_url()}'>collaborations</a>.</p>"
        )
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()
