from pydantic import BaseModel, Field

from feedback_import.posts.models import PostStatus


class PostCreate(BaseModel):
    board_id: str
    status: PostStatus = PostStatus.open
    title: str
    description: str | None = None
    author_name: str | None = None
    author_email: str | None = None
    created_at: str | None = None


class PostResponse(BaseModel):
    id: str
    board_id: str
    title: str
    description: str | None
    status: str
    author_name: str | None
    author_email: str | None
    vote_count: int
    created_at: str
    updated_at: str


class VoteSeedRequest(BaseModel):
    count: int = Field(ge=0)


class VoteSeedResponse(BaseModel):
    post_id: str
    seeded: int
    vote_count: int
