"""Repository file API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from models.repository import FileDetails, FileList, FileRequest
from services.content_resolver import ContentResolver
from services.tracked_files import list_tracked_files

from .deps import get_repository_root, get_resolver

router = APIRouter()


@router.get("", response_model=FileList)
async def get_tracked_files(root: str = Depends(get_repository_root)) -> FileList:
    """List files in the working tree, minus git metadata and ignored paths"""
    files = await run_in_threadpool(list_tracked_files, root)
    return FileList(files=files)


@router.post("/details", response_model=FileDetails)
async def get_file_details(
    request: FileRequest,
    resolver: ContentResolver = Depends(get_resolver),
) -> FileDetails:
    """Current content, last committed content and state of one file"""
    snapshot = await run_in_threadpool(resolver.get_snapshot, request.filename)
    return FileDetails.from_snapshot(snapshot)
