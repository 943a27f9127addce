"""Client endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from ...core.client_manager import ClientManager
from ...core.exceptions import NovaFolioError
from ...models import Client, ClientCreate, ClientListResponse, ClientUpdate, CreatedResponse
from ..dependencies import get_client_manager

router = APIRouter(prefix="/v1/clients", tags=["clients"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=ClientListResponse,
    summary="List Clients",
    description="Newest first. With `q`, clients whose name starts with or resembles "
                "the term, ordered by name.",
)
async def list_clients(q: Optional[str] = None, clients: ClientManager = Depends(get_client_manager)):
    return ClientListResponse(items=await clients.list(q))


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED, summary="Create Client")
async def create_client(body: ClientCreate, clients: ClientManager = Depends(get_client_manager)):
    try:
        client = await clients.create(body)
        return CreatedResponse(id=client.id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to create client: {e}")
        raise NovaFolioError(str(e)) from e


@router.get(
    "/{client_id}",
    response_model=Client,
    summary="Get Client",
    responses={404: {"description": "Client not found"}},
)
async def get_client(client_id: str, clients: ClientManager = Depends(get_client_manager)):
    return await clients.get(client_id)


@router.patch(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update Client",
    responses={
        400: {"description": "Invalid body or no fields to update"},
        404: {"description": "Client not found"},
    },
)
async def update_client(client_id: str, body: ClientUpdate, clients: ClientManager = Depends(get_client_manager)):
    try:
        await clients.update(client_id, body)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to update client {client_id}: {e}")
        raise NovaFolioError(str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Client",
    description="""
Delete a client together with its cases, documents and indexed pages.

The records are removed in one transaction. Stored files are removed after
the response is sent; failures there are logged only.
    """,
    responses={404: {"description": "Client not found"}},
)
async def delete_client(
    client_id: str,
    background_tasks: BackgroundTasks,
    clients: ClientManager = Depends(get_client_manager),
):
    try:
        locators = await clients.delete(client_id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete client {client_id}: {e}")
        raise NovaFolioError(str(e)) from e

    background_tasks.add_task(clients.remove_files, locators)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
