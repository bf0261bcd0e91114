"""Leave Portal package.

Organized by feature modules (users, requests, swaps, roster, ...) with a thin
Flask controller layer over service/repository layers. Every repository runs
against either the embedded SQLite store or a hosted MySQL store.
"""

__version__ = "0.1.0"
