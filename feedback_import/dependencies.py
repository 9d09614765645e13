from typing import Annotated

from fastapi import Depends

from feedback_import.database import get_db
from feedback_import.imports.service import ImportService
from feedback_import.posts.repository import PostRepository
from feedback_import.posts.service import PostService


def get_post_repo() -> PostRepository:
    return PostRepository(get_db())


def get_post_service() -> PostService:
    return PostService(get_post_repo())


def get_import_service() -> ImportService:
    return ImportService(get_post_service())


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
