"""
PeopleDesk - FastAPI Dependencies

Shared dependencies for the mock backend API.
"""

from fastapi import Request

from peopledesk.services.resources import ResourceFacades


def get_resource_facades(request: Request) -> ResourceFacades:
    """
    Facades built once by create_app() and kept on the app state.

    The API always serves simulated facades; it is the backend that live
    mode talks to during local development.
    """
    return request.app.state.facades
