from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities


@dataclass(frozen=True)
class Collaboration:
    name: str
    url: str
    description: str
    logo: Optional[str] = None


COLLABORATIONS: List[Collaboration] = [
    Collaboration(
        name="BioSODA",
        url="http://biosoda.expasy.org",
        description=(
            "Semantic federated queries over life-science databases. Bgee data are exposed "
            "through a SPARQL endpoint and can be queried jointly with UniProt and OMA."
        ),
        logo="biosoda_logo.png",
    ),
    Collaboration(
        name="OMA",
        url="https://omabrowser.org",
        description=(
            "The Orthologous MAtrix project. Bgee uses OMA hierarchical orthologous groups "
            "to compare gene expression between species."
        ),
        logo="oma_logo.png",
    ),
    Collaboration(
        name="UniProtKB",
        url="https://www.uniprot.org",
        description="Bgee expression data are integrated in UniProtKB entries.",
        logo="uniprot_logo.png",
    ),
    Collaboration(
        name="Expression Atlas",
        url="https://www.ebi.ac.uk/gxa",
        description="Exchange of curated RNA-Seq annotations with the EBI Expression Atlas.",
    ),
    Collaboration(
        name="Alliance of Genome Resources",
        url="https://www.alliancegenome.org",
        description=(
            "Development of shared standards for the representation of gene expression data, "
            "with expression ribbons built from Bgee calls."
        ),
    ),
]


class HtmlCollaborationDisplay(HtmlParentDisplay):
    """Page of category 'collaborations'."""

    def display_collaboration_page(self) -> None:
        logo_root = self.config.site.logo_images_root_directory
        self.start_display("Bgee collaborations")

        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Bgee collaborations</h1>")
        self.writeln("<p>Bgee is developed in collaboration with the following projects:</p>")

        for collab in COLLABORATIONS:
            self.writeln("<div class='collaboration'>")
            if collab.logo:
                self.writeln(
                    f"<a href='{html_entities(collab.url)}' target='_blank' rel='noopener'>"
                    f"<img class='collaboration-logo' src='{logo_root}{collab.logo}' "
                    f"alt='{html_entities(collab.name)} logo'/></a>"
                )
            self.writeln(
                f"<h2><a href='{html_entities(collab.url)}' class='external_link' "
                f"target='_blank' rel='noopener'>{html_entities(collab.name)}</a></h2>"
            )
            self.writeln(f"<p>{html_entities(collab.description)}</p>")
            self.writeln("</div>")

        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def include_css(self) -> None:
        self.include_css_file("collaboration.css")
        super().include_css()
