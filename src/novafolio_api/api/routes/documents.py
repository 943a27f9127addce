"""Document endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, Response, UploadFile, status
from fastapi.responses import HTMLResponse
from ...core.document_manager import DocumentManager
from ...core.exceptions import NovaFolioError
from ...models import Document, DocumentListResponse, DocumentRename, JobStatus, UploadResponse
from ..dependencies import get_document_manager

router = APIRouter(prefix="/v1/documents", tags=["documents"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=DocumentListResponse,
    summary="List Documents",
    responses={404: {"description": "Case not found (`case_not_found`)"}},
)
async def list_documents(
    case_id: str = Query(..., description="Owning case"),
    q: Optional[str] = Query(None, description="Name prefix or similar name"),
    documents: DocumentManager = Depends(get_document_manager),
):
    try:
        return DocumentListResponse(items=await documents.list(case_id, q))
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to list documents for case {case_id}: {e}")
        raise NovaFolioError(str(e)) from e


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Document",
    description="""
Upload a PDF or DOCX file into a case.

**Workflow**:
1. Check the case exists and the MIME type is supported
2. Stream the file into the blob store
3. Record the document (display name = sanitized filename, version 1)
4. Respond, then queue page extraction and indexing in the background

The document is searchable once indexing finishes. Indexing failures are
logged and never reported to the uploader; use the reindex endpoint to retry.
    """,
    responses={
        404: {"description": "Case not found (`case_not_found`)"},
        415: {"description": "Not a PDF or DOCX (`unsupported_media_type`)"},
        500: {"description": "Storage failure (`internal_error`)"},
    },
)
async def upload_document(
    background_tasks: BackgroundTasks,
    case_id: str = Form(...),
    file: UploadFile = File(...),
    documents: DocumentManager = Depends(get_document_manager),
):
    try:
        document = await documents.upload(case_id, file.filename, file.content_type, file)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to upload document to case {case_id}: {e}")
        raise NovaFolioError(str(e)) from e

    background_tasks.add_task(documents.schedule_indexing, document)
    return UploadResponse(id=document.id, url=document.storage_url)


@router.get("/{document_id}", response_model=Document, summary="Get Document")
async def get_document(document_id: str, documents: DocumentManager = Depends(get_document_manager)):
    return await documents.get(document_id)


@router.patch(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Rename Document",
    description="Changes only the display name; the stored file keeps its locator.",
)
async def rename_document(
    document_id: str,
    body: DocumentRename,
    documents: DocumentManager = Depends(get_document_manager),
):
    try:
        await documents.rename(document_id, body.name)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to rename document {document_id}: {e}")
        raise NovaFolioError(str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Document")
async def delete_document(
    document_id: str,
    background_tasks: BackgroundTasks,
    documents: DocumentManager = Depends(get_document_manager),
):
    try:
        locator = await documents.delete(document_id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete document {document_id}: {e}")
        raise NovaFolioError(str(e)) from e

    background_tasks.add_task(documents.remove_file, locator)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{document_id}/reindex",
    response_model=JobStatus,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Reindex Document",
    description="Rebuild the document's pages from its stored file and return the finished job.",
    responses={503: {"description": "Indexing backlog full (`indexing_queue_full`)"}},
)
async def reindex_document(document_id: str, documents: DocumentManager = Depends(get_document_manager)):
    try:
        job = await documents.reindex(document_id)
    except NovaFolioError:
        raise
    except Exception as e:
        logger.error(f"Failed to reindex document {document_id}: {e}")
        raise NovaFolioError(str(e)) from e
    return JobStatus(**job.to_dict())


@router.get(
    "/{document_id}/html",
    response_class=HTMLResponse,
    summary="DOCX Preview",
    responses={415: {"description": "Document is not a DOCX"}},
)
async def document_html(document_id: str, documents: DocumentManager = Depends(get_document_manager)):
    return HTMLResponse(await documents.render_html(document_id))
