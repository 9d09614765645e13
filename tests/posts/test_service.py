import pytest

from feedback_import.exceptions import NotFoundError, ValidationError
from feedback_import.imports.batch import BatchImporter
from feedback_import.imports.models import ColumnMapping, TargetField
from feedback_import.posts.models import PostStatus
from feedback_import.posts.repository import PostRepository
from feedback_import.posts.schemas import PostCreate


class TestPostService:
    """Tests for PostService."""

    async def test_create_post(self, post_service):
        post = await post_service.create_post(
            PostCreate(
                board_id="b1",
                title="  Dark mode  ",
                status=PostStatus.planned,
                author_email="jane@example.com",
            )
        )

        assert post.id
        assert post.title == "Dark mode"
        assert post.status == "planned"
        assert post.vote_count == 0
        assert post.author_email == "jane@example.com"

    async def test_created_at_kept_when_given(self, post_service):
        post = await post_service.create_post(
            PostCreate(board_id="b1", title="Old idea", created_at="2023-05-01")
        )

        assert post.created_at == "2023-05-01"

    async def test_blank_title_rejected(self, post_service):
        with pytest.raises(ValidationError, match="Title is required"):
            await post_service.create_post(PostCreate(board_id="b1", title="   "))

    async def test_long_title_rejected(self, post_service):
        with pytest.raises(ValidationError, match="at most"):
            await post_service.create_post(PostCreate(board_id="b1", title="x" * 301))

    async def test_seed_votes(self, post_service, db):
        post = await post_service.create_post(PostCreate(board_id="b1", title="Popular"))

        seeded = await post_service.seed_votes(post.id, 12)

        assert seeded.seeded == 12
        assert seeded.vote_count == 12
        assert (await post_service.get_by_id(post.id)).vote_count == 12
        assert await PostRepository(db).count_votes(post.id) == 12

    async def test_seed_zero_votes(self, post_service):
        post = await post_service.create_post(PostCreate(board_id="b1", title="Quiet"))

        seeded = await post_service.seed_votes(post.id, 0)

        assert seeded.seeded == 0
        assert seeded.vote_count == 0

    async def test_seed_votes_limits(self, post_service):
        post = await post_service.create_post(PostCreate(board_id="b1", title="Too many"))

        with pytest.raises(ValidationError):
            await post_service.seed_votes(post.id, 1001)
        with pytest.raises(ValidationError):
            await post_service.seed_votes(post.id, -1)

    async def test_seed_votes_unknown_post(self, post_service):
        with pytest.raises(NotFoundError):
            await post_service.seed_votes("missing", 3)

    async def test_get_by_id_not_found(self, post_service):
        with pytest.raises(NotFoundError):
            await post_service.get_by_id("missing")

    async def test_list_by_board(self, post_service):
        await post_service.create_post(PostCreate(board_id="b1", title="One"))
        await post_service.create_post(PostCreate(board_id="b1", title="Two"))
        await post_service.create_post(PostCreate(board_id="b2", title="Elsewhere"))

        posts = await post_service.list_by_board("b1")

        assert sorted(p.title for p in posts) == ["One", "Two"]

    async def test_usable_as_batch_collaborator(self, post_service):
        """Test the service plugs straight into the batch importer."""
        mapping = [
            ColumnMapping(column="Title", field=TargetField.title),
            ColumnMapping(column="Votes", field=TargetField.votes),
        ]
        rows = [{"Title": "Dark mode", "Votes": "150"}, {"Title": "", "Votes": "5"}]

        result = await BatchImporter(post_service, batch_delay=0).run(rows, mapping, "b1")

        assert result.success_count == 1
        post = await post_service.get_by_id(result.created_posts[0].id)
        assert post.vote_count == 150
