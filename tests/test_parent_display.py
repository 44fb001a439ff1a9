import pytest

from bgee_web.views.base import HtmlParentDisplay, HtmlResponse, html_entities


class PageWithAssets(HtmlParentDisplay):
    def include_css(self):
        self.include_css_file("page.css")
        super().include_css()

    def include_js(self):
        super().include_js()
        self.include_js_file("page.js")


def test_html_entities():
    assert html_entities("<b>Tom & Jerry's \"show\"</b>") == (
        "&lt;b&gt;Tom &amp; Jerry&apos;s &quot;show&quot;&lt;/b&gt;"
    )
    assert html_entities(None) == ""


def test_start_and_end_display(make_display):
    display, response = make_display(HtmlParentDisplay)
    display.start_display("A <title>")
    display.end_display()
    body = response.body
    assert body.startswith("<!DOCTYPE html>")
    assert "<title>A &lt;title&gt;</title>" in body
    assert "href='/img/favicon.ico'" in body
    assert "<link rel='stylesheet' type='text/css' href='/css/bgee.css'/>" in body
    assert "src='/js/lib/jquery.min.js'" in body
    # Links in markup are rooted at the configured root, with escaped separators.
    assert "href='/bgee/?page=documentation'" in body
    assert "archive-banner" not in body
    assert body.count("<div id='sib_body'>") == 1
    assert body.rstrip().endswith("</html>")
    assert response.status_code == 200


def test_archive_banner(make_display, archive_config):
    display, response = make_display(HtmlParentDisplay)
    display.start_display("Archive")
    assert "archived version of Bgee (Bgee 15.0)" in response.body


def test_page_specific_assets_order(make_display):
    display, response = make_display(PageWithAssets)
    display.start_display("Assets")
    body = response.body
    # Page CSS comes before the common Bgee CSS, page JS after the common JS.
    assert body.index("page.css") < body.index("bgee.css")
    assert body.index("urlparameters.js") < body.index("page.js")


def test_ajax_headers(make_display):
    display, response = make_display(HtmlParentDisplay)
    display.empty_display()
    assert response.headers["Cache-Control"].startswith("no-store")
    assert response.headers["Pragma"] == "No-cache"


@pytest.mark.parametrize(
    "method, status",
    [
        ("send_bad_request_headers", 400),
        ("send_page_not_found_headers", 404),
        ("send_too_many_requests_headers", 429),
        ("send_internal_error_headers", 500),
        ("send_service_unavailable_headers", 503),
    ],
)
def test_status_headers(make_display, method, status):
    display, response = make_display(HtmlParentDisplay)
    getattr(display, method)()
    assert response.status_code == status
    # Headers are only sent once.
    display.send_internal_error_headers()
    display.start_display("After error")
    assert response.status_code == status


def test_unique_ids(make_display):
    display, _ = make_display(HtmlParentDisplay)
    assert [display.get_unique_id() for _ in range(3)] == [0, 1, 2]
    other, _ = make_display(HtmlParentDisplay)
    assert other.get_unique_id() == 0


def test_help_link(make_display):
    display, _ = make_display(HtmlParentDisplay)
    assert display.display_help_link("gene_search") == (
        "<span class='help'><a href='#' class='help|gene_search'>[?]</a></span>"
    )


def test_new_request_parameters_are_independent(make_display):
    display, _ = make_display(HtmlParentDisplay, {"page": "gene", "gene_id": "ENSG1"})
    url = display.get_new_request_parameters()
    assert url.page is None
    url.set_page("source")
    assert display.request_parameters.page == "gene"
    assert url.separator == "&amp;"


def test_response_body_accumulates():
    response = HtmlResponse()
    response.write("a")
    response.write("b")
    assert response.body == "ab"
    assert response.media_type == "text/html"
