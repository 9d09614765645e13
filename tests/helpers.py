"""Helper utilities for tests."""

import asyncio

from feedback_import.exceptions import ValidationError
from feedback_import.posts.schemas import PostCreate, PostResponse


class FakePostCreator:
    """In-memory stand-in for the create-post / seed-votes collaborator.

    Args:
        fail_titles: Titles whose creation should raise a ValidationError.
        fail_seeding: When True, every seed_votes call raises.
    """

    def __init__(self, fail_titles: set[str] | None = None, fail_seeding: bool = False):
        self.fail_titles = fail_titles or set()
        self.fail_seeding = fail_seeding
        self.created: list[PostCreate] = []
        self.seeded: list[tuple[str, int]] = []

    async def create_post(self, data: PostCreate) -> PostResponse:
        if data.title in self.fail_titles:
            raise ValidationError(f"Rejected title '{data.title}'")

        self.created.append(data)
        post_id = f"post-{len(self.created)}"
        return PostResponse(
            id=post_id,
            board_id=data.board_id,
            title=data.title,
            description=data.description,
            status=str(data.status),
            author_name=data.author_name,
            author_email=data.author_email,
            vote_count=0,
            created_at=data.created_at or "2026-01-01T00:00:00+00:00",
            updated_at="2026-01-01T00:00:00+00:00",
        )

    async def seed_votes(self, post_id: str, count: int) -> None:
        if self.fail_seeding:
            raise RuntimeError("vote service unavailable")
        self.seeded.append((post_id, count))


def make_csv(header: str, *lines: str) -> str:
    """Join a header and data lines into CSV text with a trailing newline."""
    return "\n".join([header, *lines]) + "\n"


class GatedPostCreator(FakePostCreator):
    """FakePostCreator whose create_post blocks until ``release`` is set.

    ``started`` is set as soon as the first create_post call is waiting.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def create_post(self, data: PostCreate) -> PostResponse:
        self.started.set()
        await self.release.wait()
        return await super().create_post(data)
