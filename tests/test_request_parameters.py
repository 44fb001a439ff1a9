import pytest

from bgee_web.exceptions import (
    InvalidFormatError,
    MultipleValuesNotAllowedError,
    ValueSizeExceededError,
)
from bgee_web.request_params import (
    PARAM_GENE_ID,
    PARAM_GENE_LIST,
    PARAM_SPECIES_ID,
    RequestParameters,
    from_multi_dict,
)


def test_typed_accessors(config):
    params = RequestParameters(
        {"page": "gene", "gene_id": "ENSG00000130208", "species_id": "9606", "job_id": "12"},
        config=config,
    )
    assert params.page == "gene"
    assert params.gene_id == "ENSG00000130208"
    assert params.species_id == 9606
    assert params.job_id == 12
    assert params.display_type == "html"
    assert params.is_a_gene_page_category()
    assert not params.is_the_home_page()


def test_unknown_and_empty_parameters_are_ignored(config):
    params = RequestParameters({"utm_source": "mail", "gene_id": "", "page": ["sparql"]}, config=config)
    assert params.gene_id is None
    assert params.is_a_sparql_page_category()
    assert params.get_parameters_query() == "page=sparql"


def test_home_page_when_no_page(config):
    params = RequestParameters(config=config)
    assert params.is_the_home_page()
    assert params.get_request_url() == "/bgee/"


def test_invalid_format(config):
    with pytest.raises(InvalidFormatError) as exc_info:
        RequestParameters({"species_id": "human"}, config=config)
    assert exc_info.value.parameter == "species_id"


@pytest.mark.parametrize(
    "name, value",
    [
        ("gene_id", "ENSG00000130208\n"),
        ("page", "source\n"),
        ("species_id", "9606\n"),
    ],
)
def test_trailing_newline_is_an_invalid_format(config, name, value):
    with pytest.raises(InvalidFormatError) as exc_info:
        RequestParameters({name: value}, config=config)
    assert exc_info.value.parameter == name


def test_value_size_exceeded(config):
    with pytest.raises(ValueSizeExceededError) as exc_info:
        RequestParameters({"gene_id": "G" * 200}, config=config)
    assert exc_info.value.parameter == "gene_id"


def test_multiple_values_not_allowed(config):
    with pytest.raises(MultipleValuesNotAllowedError) as exc_info:
        RequestParameters({"page": ["gene", "source"]}, config=config)
    assert exc_info.value.parameter == "page"


def test_multiple_values_allowed_for_gene_list(config):
    params = RequestParameters({"fg_list": ["ENSG1", "ENSG2"]}, config=config)
    params.add_value(PARAM_GENE_LIST, "ENSG3 with space")
    assert params.get_values(PARAM_GENE_LIST) == ["ENSG1", "ENSG2", "ENSG3 with space"]
    assert params.get_parameters_query() == "fg_list=ENSG1&fg_list=ENSG2&fg_list=ENSG3%20with%20space"


def test_add_value_to_single_valued_parameter(config):
    params = RequestParameters({"gene_id": "ENSG1"}, config=config)
    with pytest.raises(MultipleValuesNotAllowedError):
        params.add_value(PARAM_GENE_ID, "ENSG2")


def test_urls_for_markup_use_escaped_separator(config):
    params = RequestParameters({"page": "about"}, config=config).clone_for_urls()
    # Cloned parameters start empty.
    assert params.page is None
    params.set_page("gene")
    params.set_value(PARAM_GENE_ID, "ENSG00000130208")
    params.set_value(PARAM_SPECIES_ID, 9606)
    assert params.get_request_url() == "/bgee/?page=gene&amp;gene_id=ENSG00000130208&amp;species_id=9606"


def test_parameters_keep_declaration_order(config):
    params = RequestParameters(config=config)
    params.set_value(PARAM_SPECIES_ID, 10116)
    params.set_action("cancel")
    params.set_page("job")
    assert params.get_parameters_query() == "page=job&action=cancel&species_id=10116"


def test_set_value_none_removes(config):
    params = RequestParameters({"gene_id": "ENSG1"}, config=config)
    params.set_value(PARAM_GENE_ID, None)
    assert params.gene_id is None


def test_from_multi_dict():
    grouped = from_multi_dict([("page", "gene"), ("fg_list", "A"), ("fg_list", "B")])
    assert grouped == {"page": ["gene"], "fg_list": ["A", "B"]}
