"""SPARQL utilities: HTTP client, endpoint resolution and query builders."""
