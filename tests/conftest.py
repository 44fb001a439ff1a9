from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type

import pytest

from bgee_web.config import CONFIG_ENV_VAR, AppConfig, load_config
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
from bgee_web.request_params import RequestParameters
from bgee_web.views.base import HtmlParentDisplay, HtmlResponse
from bgee_web.views.factory import HtmlFactory

CONFIG_YAML = """
site:
  bgee_root_directory: "/bgee/"
  images_root_directory: "/img"
  release: "Bgee 15.0"
  archive: false
sparql:
  current_url: "https://sparql.example.org/sparql/"
  stable_url: "https://sparql.example.org/bgee15/sparql/"
  stable_graph: "https://www.bgee.org/bgee_15_0"
  timeout_s: 5
ui:
  max_expression_calls: 20
jobs:
  max_jobs_per_user: 2
sources:
  - id: 1
    name: "Ensembl"
    description: "Genome annotations"
    base_url: "https://www.ensembl.org/"
    xref_url: "https://www.ensembl.org/[species_ensembl_link]/Gene/Summary?g=[gene_id]"
    release_date: 2021-01-01
    release_version: "102"
    category: "Genomics database"
    display_order: 1
  - id: 2
    name: "UniProtKB"
    description: "Protein knowledgebase"
    base_url: "https://www.uniprot.org/"
    xref_url: "https://www.uniprot.org/uniprot/[xref_id]"
    category: "Genomics database"
    display_order: 2
  - id: 4
    name: "MGI"
    description: "Mouse Genome Informatics"
    experiment_url: "http://www.informatics.jax.org/reference/[experiment_id]"
    evidence_url: "http://www.informatics.jax.org/assay/[evidence_id]"
    release_date: "2020-06-15"
    category: "Expression data"
    display_order: 3
  - id: 6
    name: "OMA"
    description: "Hidden orthology source"
    to_display: false
    category: "Orthology"
    display_order: 4
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "bgee.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


@pytest.fixture
def config(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    return load_config(force_reload=True)


@pytest.fixture
def archive_config(config: AppConfig) -> AppConfig:
    config.site.archive = True
    return config


@pytest.fixture
def make_display(config: AppConfig) -> Callable[..., Tuple[HtmlParentDisplay, HtmlResponse]]:
    """Build a display of the given class for a request with `params`."""

    def _make(
        display_cls: Type[HtmlParentDisplay], params: Optional[Dict[str, str]] = None
    ) -> Tuple[HtmlParentDisplay, HtmlResponse]:
        response = HtmlResponse()
        request_parameters = RequestParameters(params, config=config)
        factory = HtmlFactory(response, request_parameters, config)
        return display_cls(response, request_parameters, config, factory), response

    return _make


@pytest.fixture
def ensembl_source() -> Source:
    return Source(
        id=1,
        name="Ensembl",
        xref_url="https://www.ensembl.org/[species_ensembl_link]/Gene/Summary?g=[gene_id]",
    )


@pytest.fixture
def uniprot_source() -> Source:
    return Source(id=2, name="UniProtKB", xref_url="https://www.uniprot.org/uniprot/[xref_id]")


@pytest.fixture
def human() -> Species:
    return Species(id=9606, name="human", genus="Homo", species_name="sapiens")


@pytest.fixture
def gene(human: Species, ensembl_source: Source, uniprot_source: Source) -> Gene:
    return Gene(
        ensembl_gene_id="ENSG00000130208",
        species=human,
        gene_bio_type="protein_coding",
        name="APOC1",
        description="apolipoprotein C1",
        synonyms=["APO-CI", "ApoC-I"],
        xrefs=[
            XRef("ENSG00000130208", ensembl_source),
            XRef("P02654", uniprot_source),
        ],
    )


@pytest.fixture
def gene_response(gene: Gene) -> GeneResponse:
    liver = AnatEntity("UBERON_0002107", "liver")
    brain = AnatEntity("UBERON_0000955", "brain")
    adult = DevStage("UBERON_0000113", "post-juvenile adult stage")
    return GeneResponse(
        gene=gene,
        calls=[
            ExpressionCall(gene, brain, adult, 71.5, "silver"),
            ExpressionCall(gene, liver, adult, 98.25, "gold"),
        ],
    )


class FakeGeneService:
    """In-memory gene service returning predefined genes and responses."""

    def __init__(self, genes: Optional[List[Gene]] = None, calls: Optional[List[ExpressionCall]] = None):
        self.genes = genes or []
        self.calls = calls or []
        self.requests: List[Tuple[str, Optional[int]]] = []

    def load_genes_by_ensembl_id(self, ensembl_gene_id: str, species_id: Optional[int] = None) -> List[Gene]:
        self.requests.append((ensembl_gene_id, species_id))
        genes = [g for g in self.genes if g.ensembl_gene_id == ensembl_gene_id]
        if species_id is not None:
            genes = [g for g in genes if g.species.id == species_id]
        return genes

    def load_gene_response(self, gene: Gene) -> GeneResponse:
        return GeneResponse(gene=gene, calls=[c for c in self.calls if c.gene == gene])


@pytest.fixture
def fake_gene_service(gene_response: GeneResponse) -> FakeGeneService:
    return FakeGeneService(genes=[gene_response.gene], calls=gene_response.calls)
