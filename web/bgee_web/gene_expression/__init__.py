"""
Gene and expression call services for the Bgee web app.

Implementations in this package rely solely on configuration-provided
endpoints and return domain objects ready to be formatted by the displays.
"""
