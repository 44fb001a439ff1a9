from __future__ import annotations

from typing import Dict, Iterable, Optional
from urllib.parse import urlencode

from rdflib import Namespace
from rdflib.namespace import DCTERMS, RDFS, SKOS


# Vocabularies used by the Bgee RDF serialisation (GenEx semantic model).
ORTH = Namespace("http://purl.org/net/orth#")
UP = Namespace("http://purl.uniprot.org/core/")
GENEX = Namespace("http://purl.org/genex#")
OBO = Namespace("http://purl.obolibrary.org/obo/")
LSCR = Namespace("http://purl.org/lscr#")
UNIPROT_TAXONOMY = Namespace("http://purl.uniprot.org/taxonomy/")

PREFIXES: Dict[str, Namespace] = {
    "orth": ORTH,
    "up": UP,
    "genex": GENEX,
    "obo": OBO,
    "rdfs": RDFS,
    "dcterms": DCTERMS,
    "skos": SKOS,
    "lscr": LSCR,
}

# Confidence levels from the Confidence Information Ontology.
CONFIDENCE_TO_QUALITY: Dict[str, str] = {
    str(OBO["CIO_0000029"]): "gold",
    str(OBO["CIO_0000030"]): "silver",
    str(OBO["CIO_0000031"]): "bronze",
}

EXAMPLE_GENE_NAME = "APOC1"
EXAMPLE_TAXON_ID = 10116
EXAMPLE_TAXON_NAME = "Rattus norvegicus"

RESULT_FORMAT_JSON = "application/sparql-results+json"
RESULT_FORMAT_XML = "application/sparql-results+xml"


def prefix_block(names: Iterable[str]) -> str:
    return "\n".join(f"PREFIX {name}: <{PREFIXES[name]}>" for name in names)


def _escape_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


def build_anat_entities_for_gene_query(
    gene_name: str = EXAMPLE_GENE_NAME,
    taxon_id: int = EXAMPLE_TAXON_ID,
    graph: Optional[str] = None,
) -> str:
    """
    Anatomical entities where a gene is expressed in a species.

    With `graph`, the query targets that named graph, as required when
    querying a stable (release-specific) endpoint.
    """

    from_clause = f" FROM <{graph}>" if graph else ""
    return (
        prefix_block(["orth", "up", "genex", "obo", "rdfs"])
        + "\n"
        + f"SELECT DISTINCT ?anatEntity ?anatName{from_clause} {{\n"
        + "    ?seq a orth:Gene .\n"
        + "    ?seq rdfs:label ?geneName .\n"
        + "    ?seq genex:isExpressedIn ?cond .\n"
        + "    ?cond genex:hasAnatomicalEntity ?anatEntity .\n"
        + "    ?anatEntity rdfs:label ?anatName .\n"
        + f"    ?cond obo:RO_0002162 <{UNIPROT_TAXONOMY[str(int(taxon_id))]}> . \n"
        + f"    FILTER (LCASE(?geneName) = LCASE('{_escape_literal(gene_name)}'))\n"
        + "}"
    )


def build_gene_query(ensembl_gene_id: str) -> str:
    """Genes with the given Ensembl ID, one row per synonym/cross-reference combination."""

    return (
        prefix_block(["orth", "up", "genex", "obo", "rdfs", "dcterms", "skos", "lscr"])
        + "\n"
        + "SELECT DISTINCT ?gene ?geneName ?description ?taxon ?sciName ?commonName "
        + "?synonym ?uniprot WHERE {\n"
        + "    ?gene a orth:Gene ;\n"
        + f"          dcterms:identifier \"{_escape_literal(ensembl_gene_id)}\" ;\n"
        + "          orth:organism ?organism .\n"
        + "    ?organism obo:RO_0002162 ?taxon .\n"
        + "    ?taxon up:scientificName ?sciName .\n"
        + "    OPTIONAL { ?taxon up:commonName ?commonName }\n"
        + "    OPTIONAL { ?gene rdfs:label ?geneName }\n"
        + "    OPTIONAL { ?gene dcterms:description ?description }\n"
        + "    OPTIONAL { ?gene skos:altLabel ?synonym }\n"
        + "    OPTIONAL { ?gene lscr:xrefUniprot ?uniprot }\n"
        + "}"
    )


def build_expression_query(ensembl_gene_id: str, taxon_id: int) -> str:
    """Expression calls of a gene in a species, most expressed conditions first."""

    taxon_iri = UNIPROT_TAXONOMY[str(int(taxon_id))]
    return (
        prefix_block(["orth", "genex", "obo", "rdfs", "dcterms"])
        + "\n"
        + "SELECT DISTINCT ?anat ?anatName ?stage ?stageName ?score ?confidence WHERE {\n"
        + "    ?gene a orth:Gene ;\n"
        + f"          dcterms:identifier \"{_escape_literal(ensembl_gene_id)}\" ;\n"
        + "          orth:organism ?organism .\n"
        + f"    ?organism obo:RO_0002162 <{taxon_iri}> .\n"
        + "    ?expr a genex:Expression ;\n"
        + "          genex:hasSequenceUnit ?gene ;\n"
        + "          genex:hasExpressionCondition ?cond ;\n"
        + "          genex:hasExpressionLevel ?score .\n"
        + "    OPTIONAL { ?expr genex:hasConfidenceLevel ?confidence }\n"
        + "    ?cond genex:hasAnatomicalEntity ?anat .\n"
        + "    ?anat rdfs:label ?anatName .\n"
        + "    OPTIONAL {\n"
        + "        ?cond genex:hasDevelopmentalStage ?stage .\n"
        + "        ?stage rdfs:label ?stageName .\n"
        + "    }\n"
        + "}\n"
        + "ORDER BY DESC(?score)"
    )


def build_result_url(endpoint_url: str, query: str, result_format: str) -> str:
    """URL returning the results of `query` in the given format, for download links."""

    params = {
        "default-graph-uri": "",
        "query": query,
        "format": result_format,
        "timeout": "0",
    }
    return f"{endpoint_url}?{urlencode(params)}"


def taxon_id_from_iri(iri: str) -> Optional[int]:
    if not iri.startswith(str(UNIPROT_TAXONOMY)):
        return None
    tail = iri[len(str(UNIPROT_TAXONOMY)):]
    return int(tail) if tail.isdigit() else None


__all__ = [
    "ORTH",
    "UP",
    "GENEX",
    "OBO",
    "LSCR",
    "UNIPROT_TAXONOMY",
    "PREFIXES",
    "CONFIDENCE_TO_QUALITY",
    "EXAMPLE_GENE_NAME",
    "EXAMPLE_TAXON_ID",
    "EXAMPLE_TAXON_NAME",
    "RESULT_FORMAT_JSON",
    "RESULT_FORMAT_XML",
    "prefix_block",
    "build_anat_entities_for_gene_query",
    "build_gene_query",
    "build_expression_query",
    "build_result_url",
    "taxon_id_from_iri",
]
