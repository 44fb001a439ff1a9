from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from bgee_web.request_params import (
    ACTION_DOC_CALL_DOWNLOAD_FILES,
    ACTION_DOC_DATA_SETS,
    ACTION_DOC_TOP_ANAT,
    PAGE_DOCUMENTATION,
    PAGE_SPARQL,
    PAGE_TOP_ANAT,
)
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocSection:
    """
    One section of a documentation page.

    `paragraphs` are already valid HTML; `columns` lists (name, description)
    pairs rendered as a file-format table.
    """

    anchor: str
    title: str
    paragraphs: Tuple[str, ...] = ()
    columns: Tuple[Tuple[str, str], ...] = ()
    subsections: Tuple["DocSection", ...] = ()


SIMPLE_EXPR_COLUMNS = (
    ("Gene ID", "Unique identifier of the gene from Ensembl."),
    ("Gene name", "Name of the gene defined by Gene ID."),
    ("Anatomical entity ID", "Unique identifier of the anatomical entity, from the Uberon ontology."),
    ("Anatomical entity name", "Name of the anatomical entity defined by Anatomical entity ID."),
    ("Expression", "Call generated from all data types: 'present' or 'absent'."),
    ("Call quality", "Quality of the call: 'gold quality', 'silver quality' or 'bronze quality'."),
    ("Expression rank", "Rank score of the gene in the condition; lower means higher expression."),
)

CALL_FILE_SECTIONS = (
    DocSection(
        anchor="single",
        title="Single-species download files",
        paragraphs=(
            "Bgee provides calls of presence/absence of expression, generated for each species "
            "independently, using all data types integrated in Bgee.",
        ),
        subsections=(
            DocSection(
                anchor="single_expr_simple",
                title="Presence/absence of expression, simple file",
                paragraphs=(
                    "One line per gene and anatomical entity, with the call integrating all "
                    "developmental stages. Columns are:",
                ),
                columns=SIMPLE_EXPR_COLUMNS,
            ),
            DocSection(
                anchor="single_expr_complete",
                title="Presence/absence of expression, complete file",
                paragraphs=(
                    "Same information as the simple file, with one line per gene, anatomical "
                    "entity and developmental stage, and the detail of the contribution of "
                    "each data type (Affymetrix, EST, in situ hybridization, RNA-Seq).",
                ),
            ),
        ),
    ),
    DocSection(
        anchor="multi",
        title="Multi-species download files",
        paragraphs=(
            "Multi-species files compare expression between orthologous genes, in "
            "homologous anatomical entities, for groups of species sharing a common ancestor.",
        ),
    ),
)

TOP_ANAT_SECTIONS = (
    DocSection(
        anchor="top_anat_intro",
        title="Introduction",
        paragraphs=(
            "TopAnat identifies and visualizes enriched anatomical terms, from the expression "
            "patterns of a list of genes.",
            "It shows where genes from a set are preferentially expressed, as compared to a "
            "background, by default all genes with expression data in Bgee for the species. "
            "It is similar to a Gene Ontology enrichment test, except that it analyzes the "
            "anatomical structures where genes are expressed.",
            "<strong>Results can be slow to compute</strong>, from 1 to 30 minutes depending "
            "on the amount of data to process.",
        ),
    ),
    DocSection(
        anchor="top_anat_quick_start",
        title="Quick start",
        paragraphs=(
            "<ul class='help'><li>Enter a list of Ensembl identifiers into the first form field,</li>"
            "<li>optionally enter a list of background genes,</li>"
            "<li>optionally change the parameters of the analysis,</li>"
            "<li>click the 'Submit your job' button.</li></ul>",
        ),
    ),
    DocSection(
        anchor="top_anat_caution",
        title="Note of caution",
        paragraphs=(
            "Enrichment tests are sensitive to the background used: genes absent from the "
            "background are ignored, and a background too different from the foreground "
            "produces spurious results.",
        ),
    ),
)

DATA_SETS_SECTIONS = (
    DocSection(
        anchor="gtex_annotation",
        title="Annotation process",
        paragraphs=(
            "A stringent re-annotation process was applied to the GTEx data to retain only "
            "healthy tissues and non-contaminated samples.",
        ),
    ),
    DocSection(
        anchor="gtex_in_bgee",
        title="GTEx data into Bgee",
        paragraphs=(
            "All corresponding RNA-Seq libraries were reanalyzed in the Bgee pipeline, and "
            "integrated into the presence/absence calls of expression.",
        ),
    ),
)


class HtmlDocumentationDisplay(HtmlParentDisplay):
    """Pages of category 'documentation'."""

    def display_documentation_home_page(self) -> None:
        self.start_display("Bgee documentation")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Bgee documentation</h1>")
        self.writeln("<ul class='documentation-menu'>")
        for action, label in (
            (ACTION_DOC_CALL_DOWNLOAD_FILES, "Download files of gene expression calls"),
            (ACTION_DOC_TOP_ANAT, "TopAnat: expression enrichment analyses"),
            (ACTION_DOC_DATA_SETS, "Data sets integrated in Bgee"),
        ):
            url_doc = self.get_new_request_parameters()
            url_doc.set_page(PAGE_DOCUMENTATION)
            url_doc.set_action(action)
            self.writeln(f"<li><a href='{url_doc.get_request_url()}'>{label}</a></li>")

        url_sparql = self.get_new_request_parameters()
        url_sparql.set_page(PAGE_SPARQL)
        self.writeln(
            f"<li><a href='{url_sparql.get_request_url()}'>SPARQL endpoint</a></li>"
        )
        self.writeln("</ul>")
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def display_call_download_file_documentation(self) -> None:
        self._display_doc_page("Expression call download file documentation", CALL_FILE_SECTIONS)

    def display_top_anat_documentation(self) -> None:
        url_top_anat = self.get_new_request_parameters()
        url_top_anat.set_page(PAGE_TOP_ANAT)
        self._display_doc_page(
            "TopAnat documentation",
            TOP_ANAT_SECTIONS,
            footer=f"<p><a href='{url_top_anat.get_request_url()}'>Go to TopAnat</a></p>",
        )

    def display_data_sets_documentation(self) -> None:
        self._display_doc_page("GTEx data into Bgee", DATA_SETS_SECTIONS)

    def _display_doc_page(
        self, title: str, sections: Tuple[DocSection, ...], footer: str = ""
    ) -> None:
        logger.debug(f"Displaying documentation page {title!r}")
        self.start_display(f"Bgee {title}")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln(f"<h1 id='sectionname'>{html_entities(title)}</h1>")
        self.writeln(self.get_table_of_contents(sections))
        for section in sections:
            self._write_section(section, level=2)
        if footer:
            self.writeln(footer)
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def get_table_of_contents(self, sections: Tuple[DocSection, ...]) -> str:
        """Nested list of links; anchors stay in sync with the section ids."""
        lines: List[str] = ["<ul class='documentation-toc'>"]
        for section in sections:
            lines.append(
                f"<li><a href='#{section.anchor}' title='Quick jump to this section'>"
                f"{html_entities(section.title)}</a>"
            )
            if section.subsections:
                lines.append(self.get_table_of_contents(section.subsections))
            lines.append("</li>")
        lines.append("</ul>")
        return "\n".join(lines)

    def _write_section(self, section: DocSection, level: int) -> None:
        self.writeln(f"<h{level} id='{section.anchor}'>{html_entities(section.title)}</h{level}>")
        self.writeln("<div class='doc_content'>")
        for paragraph in section.paragraphs:
            if paragraph.startswith("<ul"):
                self.writeln(paragraph)
            else:
                self.writeln(f"<p>{paragraph}</p>")
        if section.columns:
            self.writeln("<table class='call_download_file_desc'>")
            self.writeln("<thead><tr><th>Column</th><th>Content</th><th>Description</th></tr></thead>")
            self.writeln("<tbody>")
            for index, (name, description) in enumerate(section.columns, start=1):
                self.writeln(
                    f"<tr><td>{index}</td><td>{html_entities(name)}</td>"
                    f"<td>{html_entities(description)}</td></tr>"
                )
            self.writeln("</tbody>")
            self.writeln("</table>")
        self.writeln("</div>")
        for subsection in section.subsections:
            self._write_section(subsection, level=min(level + 1, 6))

    def include_css(self) -> None:
        self.include_css_file("documentation.css")
        super().include_css()
