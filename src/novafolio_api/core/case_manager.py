"""Case management business logic."""

import logging
from typing import List, Optional
from ..infrastructure.database import DatabaseClient
from ..infrastructure.database.models import CaseModel
from ..infrastructure.storage import BlobStore
from ..models import Case, CaseCreate, CaseUpdate, TenantContext
from .exceptions import CaseNotFound, ClientNotFound, ValidationFailed

logger = logging.getLogger(__name__)

LIST_LIMIT = 100


class CaseManager:
    """Business logic for case CRUD operations."""

    def __init__(self, db_client: DatabaseClient, blob_store: BlobStore, tenant: TenantContext):
        self.db = db_client
        self.blobs = blob_store
        self.tenant = tenant

    async def list(self, client_id: str, q: Optional[str] = None) -> List[Case]:
        term = (q or "").strip().lower()
        rows = await self.db.list_cases(self.tenant.id, client_id, term or None, limit=LIST_LIMIT)
        return [Case.model_validate(row) for row in rows]

    async def get(self, case_id: str) -> Case:
        row = await self.db.get_case(case_id, self.tenant.id)
        if row is None:
            raise CaseNotFound(case_id, code="not_found")
        return Case.model_validate(row)

    async def create(self, data: CaseCreate) -> Case:
        """Create a case.

        Raises:
            ClientNotFound: If the referenced client does not exist
        """
        client_id = str(data.client_id)
        if await self.db.get_client(client_id, self.tenant.id) is None:
            raise ClientNotFound(client_id)

        title = data.title.strip()
        if not title:
            raise ValidationFailed("title", "title is required")

        row = await self.db.create_case(CaseModel(
            tenant_id=self.tenant.id,
            client_id=client_id,
            title=title,
            status=data.status,
        ))
        logger.info(f"Created case {row.id} for client {client_id}")
        return Case.model_validate(row)

    async def update(self, case_id: str, data: CaseUpdate):
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailed(None, "no fields to update", code="no_fields")
        if "title" in updates:
            updates["title"] = updates["title"].strip()
            if not updates["title"]:
                raise ValidationFailed("title", "title is required")

        if not await self.db.update_case(case_id, self.tenant.id, **updates):
            raise CaseNotFound(case_id, code="not_found")

    async def delete(self, case_id: str) -> List[str]:
        """Delete a case with its documents; returns their storage locators."""
        locators = await self.db.delete_case_cascade(case_id, self.tenant.id)
        if locators is None:
            raise CaseNotFound(case_id, code="not_found")
        return locators

    async def remove_files(self, locators: List[str]) -> int:
        return await self.blobs.remove_many(locators)
