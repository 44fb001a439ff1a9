from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, List, Literal, Optional, Tuple

logger = logging.getLogger(__name__)


CallQuality = Literal["gold", "silver", "bronze"]


@dataclass(frozen=True)
class Species:
    """A species with data in Bgee, identified by its NCBI taxon ID."""

    id: int
    name: Optional[str] = None
    genus: Optional[str] = None
    species_name: Optional[str] = None
    genome_version: Optional[str] = None

    @property
    def scientific_name(self) -> str:
        return " ".join(p for p in (self.genus, self.species_name) if p)

    @property
    def short_name(self) -> str:
        if not self.genus or not self.species_name:
            return self.scientific_name
        return f"{self.genus[0].upper()}. {self.species_name}"

    @property
    def ensembl_link(self) -> str:
        """Species name as used in Ensembl URLs, e.g. 'Homo_sapiens'."""
        return self.scientific_name.replace(" ", "_")


@dataclass(frozen=True)
class Source:
    """
    A data source used by Bgee (genome database, expression data, ontology...).

    URL templates can contain the tags below; they are replaced when
    building a link for a specific gene, cross-reference or experiment.
    """

    XREF_ID_TAG = "[xref_id]"
    GENE_ID_TAG = "[gene_id]"
    SPECIES_ENSEMBL_LINK_TAG = "[species_ensembl_link]"
    EXPERIMENT_ID_TAG = "[experiment_id]"
    EVIDENCE_ID_TAG = "[evidence_id]"

    id: int
    name: str
    description: str = ""
    base_url: str = ""
    xref_url: str = ""
    experiment_url: str = ""
    evidence_url: str = ""
    release_date: Optional[date] = None
    release_version: Optional[str] = None
    to_display: bool = True
    category: str = "Other"
    display_order: int = 0

    def _strip_source_prefix(self, identifier: str) -> str:
        # MGI and BDGP IDs are stored prefixed in Bgee, not in the source itself.
        lowered = self.name.lower()
        if lowered == "mgi":
            return identifier.replace("MGI_", "", 1)
        if lowered == "bdgp":
            return identifier.replace("BDGP_", "", 1)
        return identifier

    def filter_experiment_id_for_xref(self, experiment_id: str) -> str:
        return self._strip_source_prefix(experiment_id)

    def filter_evidence_id_for_xref(self, evidence_id: str) -> str:
        return self._strip_source_prefix(evidence_id)

    def get_xref_url(
        self,
        xref_id: str,
        gene_id: Optional[str] = None,
        species: Optional[Species] = None,
    ) -> Optional[str]:
        """Return the URL to `xref_id` in this source, or None if the source has no template."""
        if not self.xref_url:
            return None
        url = self.xref_url.replace(self.XREF_ID_TAG, xref_id)
        url = url.replace(self.GENE_ID_TAG, gene_id or xref_id)
        if species is not None:
            url = url.replace(self.SPECIES_ENSEMBL_LINK_TAG, species.ensembl_link)
        return url

    def get_experiment_url(self, experiment_id: str) -> Optional[str]:
        if not self.experiment_url:
            return None
        return self.experiment_url.replace(
            self.EXPERIMENT_ID_TAG, self.filter_experiment_id_for_xref(experiment_id)
        )

    def get_evidence_url(self, evidence_id: str) -> Optional[str]:
        if not self.evidence_url:
            return None
        return self.evidence_url.replace(
            self.EVIDENCE_ID_TAG, self.filter_evidence_id_for_xref(evidence_id)
        )


@dataclass(frozen=True)
class XRef:
    xref_id: str
    source: Source
    xref_name: Optional[str] = None

    def get_url(self, gene: Optional["Gene"] = None) -> Optional[str]:
        if gene is None:
            return self.source.get_xref_url(self.xref_id)
        return self.source.get_xref_url(self.xref_id, gene.ensembl_gene_id, gene.species)


@dataclass(frozen=True)
class Gene:
    """
    A gene, identified by its Ensembl ID and its species.

    Ensembl IDs are not unique in Bgee: genomes of closely-related species
    are sometimes reused, so the same ID can map to several genes.
    """

    ensembl_gene_id: str
    species: Species
    gene_bio_type: str
    name: Optional[str] = None
    description: Optional[str] = None
    synonyms: FrozenSet[str] = frozenset()
    xrefs: Tuple[XRef, ...] = ()
    gene_mapped_to_same_ensembl_gene_id_count: int = 1

    def __post_init__(self) -> None:
        if not self.ensembl_gene_id or not self.ensembl_gene_id.strip():
            raise ValueError("The Ensembl gene ID must be provided.")
        if self.species is None:
            raise ValueError("The Species must be provided.")
        if not self.gene_bio_type:
            raise ValueError("The gene biotype must be provided.")
        if self.gene_mapped_to_same_ensembl_gene_id_count < 1:
            raise ValueError("Each gene has at least one match with same Ensembl ID: itself.")
        # Accept any iterable for the collections while keeping the instance hashable.
        object.__setattr__(self, "synonyms", frozenset(self.synonyms))
        object.__setattr__(self, "xrefs", tuple(self.xrefs))

    def sort_key(self) -> Tuple[int, str]:
        return (self.species.id, self.ensembl_gene_id)


@dataclass(frozen=True)
class AnatEntity:
    id: str
    name: str


@dataclass(frozen=True)
class DevStage:
    id: str
    name: str


@dataclass(frozen=True)
class ExpressionCall:
    """A call of presence of expression of a gene in a condition."""

    gene: Gene
    anat_entity: AnatEntity
    dev_stage: Optional[DevStage]
    expression_score: Optional[float]
    call_quality: CallQuality = "silver"
    data_types: FrozenSet[str] = frozenset()


@dataclass
class GeneResponse:
    """A gene with its expression calls, ordered by decreasing expression score."""

    gene: Gene
    calls: List[ExpressionCall] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.calls = sorted(
            self.calls,
            key=lambda c: c.expression_score if c.expression_score is not None else float("-inf"),
            reverse=True,
        )


@dataclass
class TopAnatResults:
    """Results of one TopAnat analysis, as produced by the analysis backend."""

    analysis_id: str
    result_file_name: str
    rows: List[Dict[str, Any]] = field(default_factory=list)


class Job:
    """
    A long-running task (e.g. a TopAnat analysis) tracked by a JobService.

    Flags are only ever set, never reset, so they can be read from other
    threads without locking.
    """

    def __init__(
        self,
        id: int,
        name: str,
        user_id: str,
        task_count: int = 0,
        release_callback: Optional[Callable[["Job"], None]] = None,
    ) -> None:
        self.id = id
        self.name = name
        self.user_id = user_id
        self.task_count = task_count
        self._release_callback = release_callback

        self.started = False
        self.terminated = False
        self.successful = False
        self.interrupt_requested = False
        self.released = False
        self.current_task_index = -1
        self.current_task_name = ""

    def __repr__(self) -> str:
        return f"Job(id={self.id!r}, name={self.name!r}, user_id={self.user_id!r})"

    def start(self, first_task_name: str = "") -> None:
        self.next_task(first_task_name)
        self.started = True

    def set_current_task_index(self, task_index: int) -> None:
        if task_index < 0 or (self.task_count > 0 and task_index >= self.task_count):
            raise ValueError(
                f"Incorrect value for current_task_index: {task_index}. Should not be "
                f"negative, nor above or equal to task_count ({self.task_count})"
            )
        self.current_task_index = task_index

    def next_task(self, task_name: str = "") -> None:
        logger.debug(f"Job {self.id}: starting sub-task {task_name!r}")
        next_index = self.current_task_index + 1
        # The index only moves within the range of sub-tasks.
        if self.task_count <= 0 or next_index < self.task_count:
            self.set_current_task_index(next_index)
        self.current_task_name = task_name

    def complete(self, success: bool = False) -> None:
        # Only the first termination counts.
        if not self.terminated:
            self.terminated = True
            self.successful = success

    def complete_with_success(self) -> None:
        self.complete(True)

    def interrupt(self) -> None:
        """
        Request the job to stop. The job stays registered so that its status
        can still be checked; the thread running it is responsible for calling
        `complete` once it has effectively stopped.
        """
        self.interrupt_requested = True

    def release(self) -> None:
        self.complete()
        if not self.released:
            if self._release_callback is not None:
                self._release_callback(self)
            self.released = True


__all__ = [
    "CallQuality",
    "Species",
    "Source",
    "XRef",
    "Gene",
    "AnatEntity",
    "DevStage",
    "ExpressionCall",
    "GeneResponse",
    "TopAnatResults",
    "Job",
]
