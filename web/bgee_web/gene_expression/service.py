from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

import requests

from bgee_web.config import AppConfig, load_config
from bgee_web.exceptions import ServiceUnavailableError
from bgee_web.models import (
    AnatEntity,
    DevStage,
    ExpressionCall,
    Gene,
    GeneResponse,
    Source,
    Species,
    XRef,
)
from bgee_web.sources import SourceService
from bgee_web.sparql.client import SourceResult, configure_session, ensure_limit, execute_sparql
from bgee_web.sparql.endpoints import get_current_endpoint
from bgee_web.sparql.queries import (
    CONFIDENCE_TO_QUALITY,
    build_expression_query,
    build_gene_query,
    taxon_id_from_iri,
)

logger = logging.getLogger(__name__)

UNKNOWN_BIO_TYPE = "unknown"
UNIPROT_SOURCE_NAME = "UniProtKB"
ENSEMBL_SOURCE_NAME = "Ensembl"

SparqlExecutor = Callable[[str, str], SourceResult]


@runtime_checkable
class GeneService(Protocol):
    """Minimal interface for retrieving genes and their expression."""

    def load_genes_by_ensembl_id(
        self, ensembl_gene_id: str, species_id: Optional[int] = None
    ) -> List[Gene]:  # pragma: no cover - protocol
        ...

    def load_gene_response(self, gene: Gene) -> GeneResponse:  # pragma: no cover - protocol
        ...


@dataclass
class _GeneRows:
    """Accumulates the rows of one gene; OPTIONAL patterns return one row per combination."""

    taxon_id: int
    sci_name: str
    common_name: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)
    uniprot_ids: List[str] = field(default_factory=list)


def _last_path_segment(iri: str) -> str:
    return iri.rstrip("/").rsplit("/", 1)[-1]


def _species_from(rows: _GeneRows) -> Species:
    parts = rows.sci_name.split(" ", 1)
    genus = parts[0] if parts else None
    species_name = parts[1] if len(parts) > 1 else None
    return Species(id=rows.taxon_id, name=rows.common_name, genus=genus, species_name=species_name)


class SparqlGeneService:
    """SPARQL-based implementation querying the configured Bgee endpoint."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        source_service: Optional[SourceService] = None,
        executor: Optional[SparqlExecutor] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or load_config()
        self.source_service = source_service or SourceService(self.config)
        if executor is None:
            http = session or configure_session()
            timeout_s = self.config.sparql.timeout_s

            def executor(endpoint_url: str, query: str) -> SourceResult:
                return execute_sparql(endpoint_url, query, timeout_s=timeout_s, session=http)

        self._execute = executor

    def _run(self, query: str) -> SourceResult:
        endpoint = get_current_endpoint(self.config)
        result = self._execute(endpoint.sparql_url, query)
        if not result.ok:
            logger.error(f"Query to {endpoint.sparql_url} failed: {result.error}")
            raise ServiceUnavailableError(
                f"The Bgee SPARQL endpoint could not be queried: {result.error}"
            )
        logger.debug(f"{result.row_count} rows from {endpoint.sparql_url} in {result.elapsed_ms:.1f} ms")
        return result

    def _xrefs(self, ensembl_gene_id: str, uniprot_ids: List[str]) -> List[XRef]:
        xrefs: List[XRef] = []
        ensembl: Optional[Source] = self.source_service.get_source_by_name(ENSEMBL_SOURCE_NAME)
        if ensembl is not None:
            xrefs.append(XRef(xref_id=ensembl_gene_id, source=ensembl))
        uniprot = self.source_service.get_source_by_name(UNIPROT_SOURCE_NAME)
        if uniprot is not None:
            xrefs.extend(XRef(xref_id=uid, source=uniprot) for uid in uniprot_ids)
        return xrefs

    def load_genes_by_ensembl_id(
        self, ensembl_gene_id: str, species_id: Optional[int] = None
    ) -> List[Gene]:
        """
        Genes with the given Ensembl ID, sorted by species ID.

        All genes sharing the ID are loaded even when `species_id` is given,
        so that the returned genes know how many genes share their ID.
        """

        result = self._run(build_gene_query(ensembl_gene_id))

        by_gene: Dict[str, _GeneRows] = {}
        for row in result.rows:
            gene_iri = row.get("gene")
            taxon_id = taxon_id_from_iri(str(row.get("taxon") or ""))
            if not gene_iri or taxon_id is None:
                logger.warning(f"Skipping incomplete gene row for {ensembl_gene_id}: {row}")
                continue
            acc = by_gene.setdefault(
                gene_iri, _GeneRows(taxon_id=taxon_id, sci_name=str(row.get("sciName") or ""))
            )
            acc.common_name = acc.common_name or row.get("commonName")
            acc.name = acc.name or row.get("geneName")
            acc.description = acc.description or row.get("description")
            synonym = row.get("synonym")
            if synonym and synonym not in acc.synonyms:
                acc.synonyms.append(synonym)
            uniprot = row.get("uniprot")
            if uniprot:
                uid = _last_path_segment(uniprot)
                if uid not in acc.uniprot_ids:
                    acc.uniprot_ids.append(uid)

        count = len(by_gene)
        genes = [
            Gene(
                ensembl_gene_id=ensembl_gene_id,
                species=_species_from(acc),
                gene_bio_type=UNKNOWN_BIO_TYPE,
                name=acc.name,
                description=acc.description,
                synonyms=acc.synonyms,
                xrefs=self._xrefs(ensembl_gene_id, acc.uniprot_ids),
                gene_mapped_to_same_ensembl_gene_id_count=count,
            )
            for acc in by_gene.values()
        ]
        if species_id is not None:
            genes = [g for g in genes if g.species.id == species_id]
        return sorted(genes, key=Gene.sort_key)

    def load_gene_response(self, gene: Gene) -> GeneResponse:
        query = ensure_limit(
            build_expression_query(gene.ensembl_gene_id, gene.species.id),
            self.config.ui.max_expression_calls,
        )
        result = self._run(query)

        calls: List[ExpressionCall] = []
        for row in result.rows:
            if not row.get("anat"):
                continue
            anat = AnatEntity(id=_last_path_segment(row["anat"]), name=str(row.get("anatName") or ""))
            stage = None
            if row.get("stage"):
                stage = DevStage(id=_last_path_segment(row["stage"]), name=str(row.get("stageName") or ""))
            try:
                score: Optional[float] = float(row["score"]) if row.get("score") is not None else None
            except (TypeError, ValueError):
                logger.warning(f"Invalid expression score {row.get('score')!r} for {gene.ensembl_gene_id}")
                score = None
            quality = CONFIDENCE_TO_QUALITY.get(str(row.get("confidence") or ""), "silver")
            calls.append(
                ExpressionCall(
                    gene=gene,
                    anat_entity=anat,
                    dev_stage=stage,
                    expression_score=score,
                    call_quality=quality,  # type: ignore[arg-type]
                )
            )
        return GeneResponse(gene=gene, calls=calls)


def get_gene_service(config: Optional[AppConfig] = None) -> GeneService:
    """Factory returning the GeneService for the configured deployment."""

    return SparqlGeneService(config=config)


__all__ = [
    "GeneService",
    "SparqlGeneService",
    "SparqlExecutor",
    "get_gene_service",
    "UNKNOWN_BIO_TYPE",
]
