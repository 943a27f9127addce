"""Case endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status
from ...core.case_manager import CaseManager
from ...core.exceptions import NovaFolioError
from ...models import Case, CaseCreate, CaseListResponse, CaseUpdate, CreatedResponse
from ..dependencies import get_case_manager

router = APIRouter(prefix="/v1/cases", tags=["cases"])
logger = logging.getLogger(__name__)


@router.get("", response_model=CaseListResponse, summary="List Cases")
async def list_cases(
    client_id: str = Query(..., description="Owning client"),
    q: Optional[str] = None,
    cases: CaseManager = Depends(get_case_manager),
):
    return CaseListResponse(items=await cases.list(client_id, q))


@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Case",
    responses={404: {"description": "Client not found (`client_not_found`)"}},
)
async def create_case(body: CaseCreate, cases: CaseManager = Depends(get_case_manager)):
    try:
        case = await cases.create(body)
        return CreatedResponse(id=case.id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to create case: {e}")
        raise NovaFolioError(str(e)) from e


@router.get("/{case_id}", response_model=Case, summary="Get Case")
async def get_case(case_id: str, cases: CaseManager = Depends(get_case_manager)):
    return await cases.get(case_id)


@router.patch("/{case_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Update Case")
async def update_case(case_id: str, body: CaseUpdate, cases: CaseManager = Depends(get_case_manager)):
    try:
        await cases.update(case_id, body)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to update case {case_id}: {e}")
        raise NovaFolioError(str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{case_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Case",
    description="Delete a case with its documents and pages. Files are removed after the response.",
)
async def delete_case(
    case_id: str,
    background_tasks: BackgroundTasks,
    cases: CaseManager = Depends(get_case_manager),
):
    try:
        locators = await cases.delete(case_id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete case {case_id}: {e}")
        raise NovaFolioError(str(e)) from e

    background_tasks.add_task(cases.remove_files, locators)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
