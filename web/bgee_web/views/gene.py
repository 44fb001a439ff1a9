from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional

from bgee_web.models import ExpressionCall, Gene, GeneResponse, XRef
from bgee_web.request_params import PAGE_GENE, PARAM_GENE_ID, PARAM_SPECIES_ID
from bgee_web.views.base import CENTERED_ELEMENT_CLASS, HtmlParentDisplay, html_entities

logger = logging.getLogger(__name__)


GENE_SEARCH_FORM_ID = "bgee_gene_search_form"
GENE_SEARCH_INPUT_ID = "bgee_gene_search_completion_box"


def _format_score(score: Optional[float]) -> str:
    if score is None:
        return "NA"
    return f"{score:.2f}"


def _format_data_types(data_types: FrozenSet[str]) -> str:
    if not data_types:
        return "-"
    return ", ".join(html_entities(data_type) for data_type in sorted(data_types))


class HtmlGeneDisplay(HtmlParentDisplay):
    """Pages of category 'gene': search, homonym choice and gene details."""

    def display_gene_home_page(self) -> None:
        self.start_display("Gene information")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln("<h1>Gene search</h1>")
        self.writeln(self.get_gene_search_box())
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def get_gene_search_box(self) -> str:
        return (
            f"<form id='{GENE_SEARCH_FORM_ID}' action='{self.config.site.bgee_root_directory}' "
            "method='get'>"
            f"<input type='hidden' name='page' value='{PAGE_GENE}'/>"
            f"<label for='{GENE_SEARCH_INPUT_ID}'>Search gene</label>"
            f"<input id='{GENE_SEARCH_INPUT_ID}' name='{PARAM_GENE_ID.name}' type='text' "
            "autocomplete='off' placeholder='Ensembl ID, e.g. ENSG00000130203'/>"
            "<input type='submit' value='Search'/>"
            "</form>"
        )

    def display_gene_choice(self, genes: List[Gene]) -> None:
        """Several genes share the requested Ensembl ID: let the user pick the species."""
        if not genes:
            raise ValueError("At least one gene is needed to display a choice.")
        genes = sorted(genes, key=Gene.sort_key)
        gene_id = genes[0].ensembl_gene_id

        self.start_display(f"Gene: {gene_id}")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln(f"<h1>Genes with Ensembl ID {html_entities(gene_id)}</h1>")
        self.writeln(
            "<p>This Ensembl ID is used in several species, because their genomes were "
            "mapped to the genome of a closely related species. Choose a gene:</p>"
        )
        self.writeln("<ul class='gene-choice'>")
        for gene in genes:
            self.writeln(f"<li><a href='{self._gene_url(gene)}'>{self._gene_label(gene)}</a></li>")
        self.writeln("</ul>")
        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    def display_gene(self, gene_response: GeneResponse) -> None:
        gene = gene_response.gene
        title = gene.ensembl_gene_id if not gene.name else f"{gene.name} - {gene.ensembl_gene_id}"

        self.start_display(f"Gene: {title}")
        self.writeln("<div class='row'>")
        self.writeln(f"<div class='{CENTERED_ELEMENT_CLASS}'>")
        self.writeln(self.get_gene_search_box())
        self.writeln(f"<h1 class='gene-title'>Gene: {self._gene_label(gene)}</h1>")

        self.writeln("<h2>General information</h2>")
        self.writeln(self._general_info(gene))

        if gene.gene_mapped_to_same_ensembl_gene_id_count > 1:
            url_choice = self.get_new_request_parameters()
            url_choice.set_page(PAGE_GENE)
            url_choice.set_value(PARAM_GENE_ID, gene.ensembl_gene_id)
            self.writeln(
                "<p class='alert alert-warning'>The Ensembl ID of this gene is also used "
                f"for {gene.gene_mapped_to_same_ensembl_gene_id_count - 1} other gene(s) in "
                f"other species. <a href='{url_choice.get_request_url()}'>See all genes with "
                f"this ID</a>.</p>"
            )

        self.writeln("<h2>Expression</h2>")
        if not gene_response.calls:
            self.writeln("<p class='no-expression'>No expression data for this gene.</p>")
        else:
            self.writeln(self._expression_table(gene_response.calls))

        if gene.xrefs:
            self.writeln("<h2>Cross-references</h2>")
            self.writeln(self._xrefs(gene))

        self.writeln("</div>")
        self.writeln("</div>")
        self.end_display()

    # --------------------------------------------------------------- helpers

    def _gene_url(self, gene: Gene) -> str:
        url_gene = self.get_new_request_parameters()
        url_gene.set_page(PAGE_GENE)
        url_gene.set_value(PARAM_GENE_ID, gene.ensembl_gene_id)
        url_gene.set_value(PARAM_SPECIES_ID, gene.species.id)
        return url_gene.get_request_url()

    def _gene_label(self, gene: Gene) -> str:
        label = html_entities(gene.ensembl_gene_id)
        if gene.name:
            label = f"{html_entities(gene.name)} - {label}"
        species = gene.species.scientific_name
        if species:
            label += f" <span class='species'>(<i>{html_entities(species)}</i>)</span>"
        return label

    def _general_info(self, gene: Gene) -> str:
        rows = [
            ("Ensembl ID", html_entities(gene.ensembl_gene_id)),
            ("Name", html_entities(gene.name)),
            ("Description", html_entities(gene.description)),
            ("Organism", self._organism(gene)),
            ("Biotype", html_entities(gene.gene_bio_type)),
        ]
        if gene.synonyms:
            rows.append(
                ("Synonyms", ", ".join(html_entities(s) for s in sorted(gene.synonyms)))
            )
        lines = ["<table class='info-table gene-info'>"]
        for label, value in rows:
            lines.append(f"<tr><th scope='row'>{label}</th><td>{value}</td></tr>")
        lines.append("</table>")
        return "\n".join(lines)

    def _organism(self, gene: Gene) -> str:
        species = gene.species
        text = f"<i>{html_entities(species.scientific_name)}</i>"
        if species.name:
            text += f" ({html_entities(species.name)})"
        return text

    def _xrefs(self, gene: Gene) -> str:
        by_source = {}
        for xref in gene.xrefs:
            by_source.setdefault(xref.source.name, []).append(xref)
        lines = ["<dl class='xrefs'>"]
        for source_name in sorted(by_source, key=str.lower):
            lines.append(f"<dt>{html_entities(source_name)}</dt>")
            items = sorted(by_source[source_name], key=lambda x: x.xref_id)
            lines.append("<dd>" + ", ".join(self._xref_link(x, gene) for x in items) + "</dd>")
        lines.append("</dl>")
        return "\n".join(lines)

    def _xref_link(self, xref: XRef, gene: Gene) -> str:
        text = html_entities(xref.xref_id)
        if xref.xref_name:
            text += f" ({html_entities(xref.xref_name)})"
        url = xref.get_url(gene)
        if url is None:
            return text
        return (
            f"<a href='{html_entities(url)}' class='external_link' target='_blank' "
            f"rel='noopener'>{text}</a>"
        )

    def _expression_table(self, calls: List[ExpressionCall]) -> str:
        lines = [
            "<table class='expression gene-expression'>",
            "<thead><tr><th>Anatomical entity</th><th>Developmental stage</th>"
            "<th>Expression score</th><th>Call quality</th><th>Data types</th></tr></thead>",
            "<tbody>",
        ]
        for call in calls:
            stage = (
                "-" if call.dev_stage is None
                else f"{html_entities(call.dev_stage.name)} "
                f"<span class='term-id'>{html_entities(call.dev_stage.id)}</span>"
            )
            lines.append(
                "<tr>"
                f"<td>{html_entities(call.anat_entity.name)} "
                f"<span class='term-id'>{html_entities(call.anat_entity.id)}</span></td>"
                f"<td>{stage}</td>"
                f"<td class='score'>{_format_score(call.expression_score)}</td>"
                f"<td class='quality {call.call_quality}'>{call.call_quality}</td>"
                f"<td class='data-types'>{_format_data_types(call.data_types)}</td>"
                "</tr>"
            )
        lines.append("</tbody>")
        lines.append("</table>")
        return "\n".join(lines)

    # --------------------------------------------------------------- CSS/JS

    def include_js(self) -> None:
        super().include_js()
        self.include_js_file("autoCompleteGene.js")
        self.include_js_file("gene.js")

    def include_css(self) -> None:
        self.include_css_file("gene.css")
        super().include_css()
