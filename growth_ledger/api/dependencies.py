"""
FastAPI dependencies shared by the routers.

The action catalog is built once at startup and kept on
app.state. Tests replace it through dependency_overrides.
"""

from fastapi import Request

from growth_ledger.services.action_catalog import ActionCatalog


def get_action_catalog(request: Request) -> ActionCatalog:
    return request.app.state.action_catalog
