from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from bgee_web.config import AppConfig
from bgee_web.request_params import PAGE_DOCUMENTATION, RequestParameters

if TYPE_CHECKING:
    from bgee_web.views.factory import HtmlFactory

logger = logging.getLogger(__name__)


CENTERED_ELEMENT_CLASS = "centered-element"
EASY_BGEE_NAME = "Easy Bgee"
MASTER_BGEE_PIPELINE_GITHUB_URL = "https://github.com/BgeeDB/bgee_pipeline/tree/master"
SIB_URL = "https://www.sib.swiss"

PAGE_DESCRIPTION = (
    "Bgee allows to automatically compare gene expression patterns between species, "
    "by referencing expression data on anatomical ontologies, and designing homology "
    "relationships between them."
)
PAGE_KEYWORDS = (
    "bgee, gene expression, evolution, ontology, anatomy, development, evo-devo database, "
    "anatomical ontology, developmental ontology, gene expression evolution"
)


class HtmlResponse:
    """
    The response being built for one request: status, headers and body.

    Displays write into it; the HTTP layer (or the CLI) turns it into the
    actual output once the display is done.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.headers: Dict[str, str] = {}
        self.media_type = "text/html"
        self._chunks: List[str] = []

    def write(self, text: str) -> None:
        self._chunks.append(text)

    @property
    def body(self) -> str:
        return "".join(self._chunks)


def html_entities(text: Optional[str]) -> str:
    """Escape HTML entities in `text`; apostrophes become `&apos;`."""
    if text is None:
        return ""
    return html.escape(str(text), quote=True).replace("&#x27;", "&apos;")


class HtmlParentDisplay:
    """
    Parent of all HTML displays: page scaffolding, CSS/JS inclusion and
    HTTP status decisions.

    Subclasses needing their own CSS or JS override `include_css` /
    `include_js` and call the parent hook, so that the common files are
    always present.
    """

    def __init__(
        self,
        response: HtmlResponse,
        request_parameters: RequestParameters,
        config: AppConfig,
        factory: Optional["HtmlFactory"] = None,
    ) -> None:
        self.response = response
        self.request_parameters = request_parameters
        self.config = config
        self.factory = factory
        self.headers_already_sent = False
        self._unique_id = 0

    # ---------------------------------------------------------------- output

    def write(self, text: str) -> None:
        self.response.write(text)

    def writeln(self, text: str) -> None:
        self.response.write(text + "\n")

    def get_unique_id(self) -> int:
        id_to_return = self._unique_id
        self._unique_id += 1
        return id_to_return

    # --------------------------------------------------------------- headers

    def send_headers(self, ajax: bool = False) -> None:
        if self.headers_already_sent:
            return
        self.response.media_type = "text/html"
        if ajax:
            self.response.headers["Expires"] = "Thu, 01 Jan 1970 00:00:01 GMT"
            self.response.headers["Cache-Control"] = (
                "no-store, no-cache, must-revalidate, proxy-revalidate, post-check=0, pre-check=0"
            )
            self.response.headers["Pragma"] = "No-cache"
        self.headers_already_sent = True

    def _send_status_headers(self, status_code: int) -> None:
        if self.headers_already_sent:
            return
        self.response.media_type = "text/html"
        self.response.status_code = status_code
        self.headers_already_sent = True

    def send_bad_request_headers(self) -> None:
        self._send_status_headers(400)

    def send_page_not_found_headers(self) -> None:
        self._send_status_headers(404)

    def send_too_many_requests_headers(self) -> None:
        self._send_status_headers(429)

    def send_internal_error_headers(self) -> None:
        self._send_status_headers(500)

    def send_service_unavailable_headers(self) -> None:
        self._send_status_headers(503)

    # -------------------------------------------------------------- skeleton

    def empty_display(self) -> None:
        self.send_headers(ajax=True)
        self.writeln("")

    def start_display(self, title: str) -> None:
        logger.debug(f"Starting display of page {title!r}")
        site = self.config.site
        self.send_headers(ajax=False)
        self.writeln("<!DOCTYPE html>")
        self.writeln("<html lang='en'>")
        self.writeln("<head>")
        self.writeln("<meta charset='UTF-8'>")
        self.writeln("<meta name='viewport' content='width=device-width, initial-scale=1'>")
        self.writeln(f"<title>{html_entities(title)}</title>")
        self.writeln(f"<meta name='description' content='{html_entities(PAGE_DESCRIPTION)}'/>")
        self.writeln(f"<meta name='keywords' content='{html_entities(PAGE_KEYWORDS)}'/>")
        self.writeln(
            f"<link rel='shortcut icon' type='image/x-icon' href='{site.images_root_directory}favicon.ico'/>"
        )
        self.include_css()
        self.include_js()
        self.writeln("</head>")

        self.writeln("<body>")
        self.writeln("<noscript>Sorry, your browser does not support JavaScript!</noscript>")
        self.writeln("<div id='bgee_top'><a id='TOP'></a></div>")
        self.writeln("<div id='sib_container'>")
        self.display_bgee_header()
        if site.archive:
            self.writeln(
                "<div class='alert alert-warning archive-banner'>This is an archived version "
                f"of Bgee ({html_entities(site.release)}).</div>"
            )
        self.writeln("<div id='sib_body'>")

    def end_display(self) -> None:
        self.writeln("</div>")  # close sib_body
        self.writeln("<footer>")
        self.writeln("<div id='sib_footer_content'>")
        self.writeln(f"<a href='{SIB_URL}'>SIB Swiss Institute of Bioinformatics</a>")
        self.writeln("<div id='sib_footer_right'>")
        self.writeln(
            "<a href='#TOP' id='sib_footer_gototop'>"
            "<span style='padding-left: 10px'>Back to the Top</span></a>"
        )
        self.writeln("</div>")
        self.writeln("</div>")
        self.writeln("</footer>")
        self.writeln("</div>")  # close sib_container
        self.writeln("</body>")
        self.writeln("</html>")

    def display_bgee_header(self) -> None:
        site = self.config.site
        url_doc = self.get_new_request_parameters()
        url_doc.set_page(PAGE_DOCUMENTATION)

        self.writeln("<header>")
        self.writeln(
            f"<a href='{site.bgee_root_directory}' title='Go to Bgee home page'>"
            f"<img id='sib_other_logo' src='{site.images_root_directory}bgee_logo.png' "
            "title='Bgee: a dataBase for Gene Expression Evolution' "
            "alt='Bgee: a dataBase for Gene Expression Evolution' /></a>"
        )
        self.writeln("<h1>Bgee: Gene Expression Evolution</h1>")
        self.writeln(
            f"<nav><a href='{url_doc.get_request_url()}' title='Bgee documentation'>Documentation</a></nav>"
        )
        self.writeln(
            f"<a href='{SIB_URL}' target='_blank' rel='noopener' "
            "title='Link to the SIB Swiss Institute of Bioinformatics'>"
            f"<img id='sib_logo' src='{site.images_root_directory}sib_logo.png' "
            "title='Bgee is part of the SIB Swiss Institute of Bioinformatics' "
            "alt='SIB Swiss Institute of Bioinformatics' /></a>"
        )
        self.writeln("</header>")

    # --------------------------------------------------------------- helpers

    def display_help_link(self, cat: str, display: str = "[?]") -> str:
        return f"<span class='help'><a href='#' class='help|{cat}'>{display}</a></span>"

    def get_new_request_parameters(self) -> RequestParameters:
        """A new RequestParameters to generate URLs, using `&amp;` as separator."""
        return self.request_parameters.clone_for_urls(separator="&amp;")

    # --------------------------------------------------------------- CSS/JS

    def include_js(self) -> None:
        """Load the common javascript files. Overriding methods must call it first."""
        self.include_js_file("lib/jquery.min.js")
        self.include_js_file("lib/jquery-ui.min.js")
        self.include_js_file("common.js")
        self.include_js_file("requestparameters.js")
        self.include_js_file("urlparameters.js")

    def include_js_file(self, filename: str) -> None:
        self.writeln(
            "<script type='text/javascript' src='"
            f"{self.config.site.javascript_files_root_directory}{filename}'></script>"
        )

    def include_css(self) -> None:
        """Load the common CSS files. Overriding methods must call it last."""
        self.include_css_file("bgee.css")

    def include_css_file(self, filename: str) -> None:
        self.writeln(
            "<link rel='stylesheet' type='text/css' href='"
            f"{self.config.site.css_files_root_directory}{filename}'/>"
        )


__all__ = [
    "HtmlResponse",
    "HtmlParentDisplay",
    "html_entities",
    "CENTERED_ELEMENT_CLASS",
    "EASY_BGEE_NAME",
    "MASTER_BGEE_PIPELINE_GITHUB_URL",
]
