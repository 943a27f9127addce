"""Client management business logic."""

import logging
from typing import List, Optional
from ..infrastructure.database import DatabaseClient
from ..infrastructure.database.models import ClientModel
from ..infrastructure.storage import BlobStore
from ..models import Client, ClientCreate, ClientUpdate, TenantContext
from .exceptions import ClientNotFound, ValidationFailed

logger = logging.getLogger(__name__)

LIST_LIMIT = 50


def _clean_name(value: str, field: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValidationFailed(field, f"{field} is required")
    return cleaned


class ClientManager:
    """Business logic for client CRUD operations."""

    def __init__(self, db_client: DatabaseClient, blob_store: BlobStore, tenant: TenantContext):
        self.db = db_client
        self.blobs = blob_store
        self.tenant = tenant

    async def list(self, q: Optional[str] = None) -> List[Client]:
        term = (q or "").strip().lower()
        rows = await self.db.list_clients(self.tenant.id, term or None, limit=LIST_LIMIT)
        return [Client.model_validate(row) for row in rows]

    async def get(self, client_id: str) -> Client:
        row = await self.db.get_client(client_id, self.tenant.id)
        if row is None:
            raise ClientNotFound(client_id, code="not_found")
        return Client.model_validate(row)

    async def create(self, data: ClientCreate) -> Client:
        row = await self.db.create_client(ClientModel(
            tenant_id=self.tenant.id,
            name=_clean_name(data.name, "name"),
            tags=list(data.tags),
        ))
        logger.info(f"Created client {row.id}")
        return Client.model_validate(row)

    async def update(self, client_id: str, data: ClientUpdate):
        """Apply the fields present in ``data``.

        Raises:
            ValidationFailed: If no field is given (``no_fields``)
            ClientNotFound: If the client does not exist
        """
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailed(None, "no fields to update", code="no_fields")
        if "name" in updates:
            updates["name"] = _clean_name(updates["name"], "name")

        if not await self.db.update_client(client_id, self.tenant.id, **updates):
            raise ClientNotFound(client_id, code="not_found")

    async def delete(self, client_id: str) -> List[str]:
        """Delete a client with all its cases and documents.

        Returns:
            Storage locators of the deleted documents; the caller removes the
            files once the response is sent
        """
        locators = await self.db.delete_client_cascade(client_id, self.tenant.id)
        if locators is None:
            raise ClientNotFound(client_id, code="not_found")
        return locators

    async def remove_files(self, locators: List[str]) -> int:
        return await self.blobs.remove_many(locators)
