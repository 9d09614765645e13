from fastapi import APIRouter, Query

from feedback_import.dependencies import PostServiceDep
from feedback_import.posts.schemas import (
    PostCreate,
    PostResponse,
    VoteSeedRequest,
    VoteSeedResponse,
)

router = APIRouter()


@router.post("/", status_code=201, response_model=PostResponse)
async def create_post(data: PostCreate, service: PostServiceDep) -> PostResponse:
    return await service.create_post(data)


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    service: PostServiceDep,
    board_id: str = Query(),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[PostResponse]:
    return await service.list_by_board(board_id, limit, offset)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, service: PostServiceDep) -> PostResponse:
    return await service.get_by_id(post_id)


@router.post("/{post_id}/votes/seed", response_model=VoteSeedResponse)
async def seed_votes(
    post_id: str,
    data: VoteSeedRequest,
    service: PostServiceDep,
) -> VoteSeedResponse:
    return await service.seed_votes(post_id, data.count)
