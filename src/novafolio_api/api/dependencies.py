"""Shared API dependencies.

Managers are built once in the application lifespan and stored on
``app.state``; routes reach them through these functions.
"""

from fastapi import Request

from ..core.case_manager import CaseManager
from ..core.client_manager import ClientManager
from ..core.document_manager import DocumentManager
from ..core.job_manager import JobManager
from ..core.search_manager import SearchManager


def get_client_manager(request: Request) -> ClientManager:
    return request.app.state.client_manager


def get_case_manager(request: Request) -> CaseManager:
    return request.app.state.case_manager


def get_document_manager(request: Request) -> DocumentManager:
    return request.app.state.document_manager


def get_search_manager(request: Request) -> SearchManager:
    return request.app.state.search_manager


def get_job_manager(request: Request) -> JobManager:
    return request.app.state.job_manager
