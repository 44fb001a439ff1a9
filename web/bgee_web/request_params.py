from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from bgee_web.config import AppConfig, load_config
from bgee_web.exceptions import (
    InvalidFormatError,
    MultipleValuesNotAllowedError,
    ValueSizeExceededError,
)


PAGE_GENE = "gene"
PAGE_JOB = "job"
PAGE_SOURCE = "source"
PAGE_SPARQL = "sparql"
PAGE_COLLABORATIONS = "collaborations"
PAGE_DOCUMENTATION = "documentation"
PAGE_TOP_ANAT = "top_anat"
PAGE_ABOUT = "about"

ACTION_CANCEL_JOB = "cancel"
ACTION_DOC_CALL_DOWNLOAD_FILES = "call_files"
ACTION_DOC_TOP_ANAT = "top_anat"
ACTION_DOC_DATA_SETS = "data_sets"
ACTION_TOP_ANAT_GENE_VALIDATION = "gene_validation"
ACTION_TOP_ANAT_SUBMIT_JOB = "submit_job"
ACTION_TOP_ANAT_TRACKING_JOB = "tracking_job"
ACTION_TOP_ANAT_GET_RESULTS = "get_results"

DISPLAY_TYPE_HTML = "html"

HASH_SPARQL_STABLE = "sparql_stable"


@dataclass(frozen=True)
class URLParameter:
    """Definition of a parameter accepted in request URLs."""

    name: str
    allows_multiple_values: bool = False
    max_size: int = 128
    pattern: Optional[str] = r"^[\w\-.]+$"
    is_int: bool = False


PARAM_PAGE = URLParameter("page")
PARAM_ACTION = URLParameter("action")
PARAM_GENE_ID = URLParameter("gene_id")
PARAM_SPECIES_ID = URLParameter("species_id", pattern=r"^\d+$", is_int=True, max_size=10)
PARAM_JOB_ID = URLParameter("job_id", pattern=r"^\d+$", is_int=True, max_size=18)
PARAM_DISPLAY_TYPE = URLParameter("display_type", pattern=r"^[a-z]+$", max_size=10)
PARAM_GENE_LIST = URLParameter(
    "fg_list", allows_multiple_values=True, max_size=100_000, pattern=None
)

URL_PARAMETERS: List[URLParameter] = [
    PARAM_PAGE,
    PARAM_ACTION,
    PARAM_GENE_ID,
    PARAM_SPECIES_ID,
    PARAM_JOB_ID,
    PARAM_DISPLAY_TYPE,
    PARAM_GENE_LIST,
]

_PARAMETERS_BY_NAME: Dict[str, URLParameter] = {p.name: p for p in URL_PARAMETERS}

ParamValue = Union[str, int]


class RequestParameters:
    """
    Typed access to the parameters of the current request, and generation of
    URLs to other pages.

    Only parameters declared in URL_PARAMETERS are kept; unknown parameters
    are ignored. Values are validated when set, so a RequestParameters
    instance always holds well-formed values.
    """

    def __init__(
        self,
        params: Optional[Mapping[str, Union[str, Sequence[str]]]] = None,
        config: Optional[AppConfig] = None,
        url_encode: bool = True,
        separator: str = "&",
    ) -> None:
        self.config = config or load_config()
        self.url_encode = url_encode
        self.separator = separator
        self._values: Dict[str, List[ParamValue]] = {}
        for name, raw in (params or {}).items():
            definition = _PARAMETERS_BY_NAME.get(name)
            if definition is None:
                continue
            values = [raw] if isinstance(raw, str) else list(raw)
            values = [v for v in values if v != ""]
            if not values:
                continue
            if len(values) > 1 and not definition.allows_multiple_values:
                raise MultipleValuesNotAllowedError(definition.name)
            self._values[name] = [_validate(definition, v) for v in values]

    def clone_for_urls(self, separator: str = "&amp;") -> "RequestParameters":
        """A new empty instance sharing this configuration, meant to build links in markup."""
        return RequestParameters(config=self.config, url_encode=True, separator=separator)

    # ------------------------------------------------------------------ values

    def get_first_value(self, parameter: URLParameter) -> Optional[ParamValue]:
        values = self._values.get(parameter.name)
        return values[0] if values else None

    def get_values(self, parameter: URLParameter) -> List[ParamValue]:
        return list(self._values.get(parameter.name, []))

    def set_value(self, parameter: URLParameter, value: Optional[ParamValue]) -> None:
        if value is None or value == "":
            self._values.pop(parameter.name, None)
            return
        self._values[parameter.name] = [_validate(parameter, str(value))]

    def add_value(self, parameter: URLParameter, value: ParamValue) -> None:
        if not parameter.allows_multiple_values and parameter.name in self._values:
            raise MultipleValuesNotAllowedError(parameter.name)
        self._values.setdefault(parameter.name, []).append(_validate(parameter, str(value)))

    @property
    def page(self) -> Optional[str]:
        value = self.get_first_value(PARAM_PAGE)
        return str(value) if value is not None else None

    def set_page(self, page: Optional[str]) -> None:
        self.set_value(PARAM_PAGE, page)

    @property
    def action(self) -> Optional[str]:
        value = self.get_first_value(PARAM_ACTION)
        return str(value) if value is not None else None

    def set_action(self, action: Optional[str]) -> None:
        self.set_value(PARAM_ACTION, action)

    @property
    def gene_id(self) -> Optional[str]:
        value = self.get_first_value(PARAM_GENE_ID)
        return str(value) if value is not None else None

    @property
    def species_id(self) -> Optional[int]:
        value = self.get_first_value(PARAM_SPECIES_ID)
        return int(value) if value is not None else None

    @property
    def job_id(self) -> Optional[int]:
        value = self.get_first_value(PARAM_JOB_ID)
        return int(value) if value is not None else None

    @property
    def display_type(self) -> str:
        value = self.get_first_value(PARAM_DISPLAY_TYPE)
        return str(value) if value is not None else DISPLAY_TYPE_HTML

    # -------------------------------------------------------- page categories

    def is_the_home_page(self) -> bool:
        return self.page is None

    def is_a_gene_page_category(self) -> bool:
        return self.page == PAGE_GENE

    def is_a_job_page_category(self) -> bool:
        return self.page == PAGE_JOB

    def is_a_source_page_category(self) -> bool:
        return self.page == PAGE_SOURCE

    def is_a_sparql_page_category(self) -> bool:
        return self.page == PAGE_SPARQL

    def is_a_collaboration_page_category(self) -> bool:
        return self.page == PAGE_COLLABORATIONS

    def is_a_documentation_page_category(self) -> bool:
        return self.page == PAGE_DOCUMENTATION

    def is_a_top_anat_page_category(self) -> bool:
        return self.page == PAGE_TOP_ANAT

    def is_an_about_page_category(self) -> bool:
        return self.page == PAGE_ABOUT

    # -------------------------------------------------------------------- URLs

    def get_parameters_query(self) -> str:
        pairs: List[str] = []
        # Declaration order keeps generated URLs stable.
        for definition in URL_PARAMETERS:
            for value in self._values.get(definition.name, []):
                text = str(value)
                if self.url_encode:
                    text = quote(text, safe="")
                pairs.append(f"{definition.name}={text}")
        return self.separator.join(pairs)

    def get_request_url(self) -> str:
        root = self.config.site.bgee_root_directory
        query = self.get_parameters_query()
        return f"{root}?{query}" if query else root

    def __repr__(self) -> str:
        return f"RequestParameters({self._values!r})"


def _validate(definition: URLParameter, value: str) -> ParamValue:
    if len(value) > definition.max_size:
        raise ValueSizeExceededError(
            definition.name,
            f"Parameter '{definition.name}' exceeds its maximum length of {definition.max_size}.",
        )
    if definition.pattern is not None and not re.fullmatch(definition.pattern, value):
        raise InvalidFormatError(definition.name)
    if definition.is_int:
        return int(value)
    return value


def from_multi_dict(items: Iterable[tuple]) -> Dict[str, List[str]]:
    """Group (name, value) pairs, as found in query strings, by name."""
    grouped: Dict[str, List[str]] = {}
    for name, value in items:
        grouped.setdefault(str(name), []).append(str(value))
    return grouped


__all__ = [
    "RequestParameters",
    "URLParameter",
    "URL_PARAMETERS",
    "from_multi_dict",
    "PAGE_GENE",
    "PAGE_JOB",
    "PAGE_SOURCE",
    "PAGE_SPARQL",
    "PAGE_COLLABORATIONS",
    "PAGE_DOCUMENTATION",
    "PAGE_TOP_ANAT",
    "PAGE_ABOUT",
    "ACTION_CANCEL_JOB",
    "ACTION_DOC_CALL_DOWNLOAD_FILES",
    "ACTION_DOC_TOP_ANAT",
    "ACTION_DOC_DATA_SETS",
    "ACTION_TOP_ANAT_GENE_VALIDATION",
    "ACTION_TOP_ANAT_SUBMIT_JOB",
    "ACTION_TOP_ANAT_TRACKING_JOB",
    "ACTION_TOP_ANAT_GET_RESULTS",
    "DISPLAY_TYPE_HTML",
    "HASH_SPARQL_STABLE",
]
