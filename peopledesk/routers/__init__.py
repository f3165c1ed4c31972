"""
PeopleDesk - Routers Package

FastAPI route handlers for the mock backend API.

Routers:
- resources: one generated router per entity type (payroll runs, leave
  requests, attendance, benefit enrollments, assets, expense claims)
"""

from peopledesk.routers.resources import build_resource_router

__all__ = ["build_resource_router"]
