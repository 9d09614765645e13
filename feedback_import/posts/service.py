from datetime import UTC, datetime
from uuid import uuid4

import structlog

from feedback_import.config import settings
from feedback_import.exceptions import NotFoundError, ValidationError
from feedback_import.posts.repository import PostRepository
from feedback_import.posts.schemas import PostCreate, PostResponse, VoteSeedResponse

logger = structlog.get_logger()

MAX_TITLE_LENGTH = 300


class PostService:
    def __init__(self, repo: PostRepository, max_seeded_votes: int | None = None) -> None:
        self._repo = repo
        self._max_seeded_votes = (
            settings.max_seeded_votes if max_seeded_votes is None else max_seeded_votes
        )

    async def create_post(self, data: PostCreate) -> PostResponse:
        title = data.title.strip()
        if not title:
            raise ValidationError("Title is required")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")

        now = datetime.now(UTC).isoformat()
        post_id = str(uuid4())

        await self._repo.insert(
            {
                "id": post_id,
                "board_id": data.board_id,
                "title": title,
                "description": data.description,
                "status": str(data.status),
                "author_name": data.author_name,
                "author_email": data.author_email,
                "created_at": data.created_at or now,
                "updated_at": now,
            }
        )

        row = await self._repo.get_by_id(post_id)
        if row is None:
            raise ValidationError("Failed to create post")

        logger.info("post_created", post_id=post_id, board_id=data.board_id)
        return self._to_response(row)

    async def seed_votes(self, post_id: str, count: int) -> VoteSeedResponse:
        if count < 0:
            raise ValidationError("Vote count must not be negative")
        if count > self._max_seeded_votes:
            raise ValidationError(f"Cannot seed more than {self._max_seeded_votes} votes")

        existing = await self._repo.get_by_id(post_id)
        if existing is None:
            raise NotFoundError("Post", post_id)

        if count == 0:
            return VoteSeedResponse(post_id=post_id, seeded=0, vote_count=existing["vote_count"])

        now = datetime.now(UTC).isoformat()
        vote_count = await self._repo.add_seeded_votes(
            post_id, [str(uuid4()) for _ in range(count)], now
        )

        logger.info("votes_seeded", post_id=post_id, count=count, vote_count=vote_count)
        return VoteSeedResponse(post_id=post_id, seeded=count, vote_count=vote_count)

    async def get_by_id(self, post_id: str) -> PostResponse:
        row = await self._repo.get_by_id(post_id)
        if row is None:
            raise NotFoundError("Post", post_id)
        return self._to_response(row)

    async def list_by_board(
        self, board_id: str, limit: int = 50, offset: int = 0
    ) -> list[PostResponse]:
        rows = await self._repo.list_by_board(board_id, limit, offset)
        return [self._to_response(row) for row in rows]

    def _to_response(self, row: dict) -> PostResponse:
        return PostResponse(
            id=row["id"],
            board_id=row["board_id"],
            title=row["title"],
            description=row["description"],
            status=row["status"],
            author_name=row["author_name"],
            author_email=row["author_email"],
            vote_count=row["vote_count"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
