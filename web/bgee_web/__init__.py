"""
Web interface components for the Bgee gene expression database.

This package contains the HTML displays for each page category, the
front controller dispatching requests to them, configuration loading,
SPARQL client utilities, and the services providing the genes, data
sources and jobs that the displays format.
"""

__all__ = []
