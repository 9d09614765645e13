import aiosqlite
import structlog

logger = structlog.get_logger()

_POST_COLUMNS = """
    id, board_id, title, description, status, author_name,
    author_email, vote_count, created_at, updated_at
"""


class PostRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def insert(self, post: dict) -> None:
        await self._db.execute(
            """
            INSERT INTO posts (
                id, board_id, title, description, status, author_name,
                author_email, vote_count, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                post["id"],
                post["board_id"],
                post["title"],
                post.get("description"),
                post["status"],
                post.get("author_name"),
                post.get("author_email"),
                post["created_at"],
                post["updated_at"],
            ),
        )
        await self._db.commit()

    async def get_by_id(self, post_id: str) -> dict | None:
        cursor = await self._db.execute(
            f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?",
            (post_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def list_by_board(self, board_id: str, limit: int = 50, offset: int = 0) -> list[dict]:
        cursor = await self._db.execute(
            f"""
            SELECT {_POST_COLUMNS}
            FROM posts
            WHERE board_id = ?
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (board_id, limit, offset),
        )
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def add_seeded_votes(self, post_id: str, vote_ids: list[str], created_at: str) -> int:
        """Insert anonymous seeded votes and bump the cached count. Returns the new vote_count."""
        await self._db.executemany(
            """
            INSERT INTO votes (id, post_id, voter_label, is_seeded, created_at)
            VALUES (?, ?, NULL, 1, ?)
            """,
            [(vote_id, post_id, created_at) for vote_id in vote_ids],
        )
        await self._db.execute(
            """
            UPDATE posts
            SET vote_count = vote_count + ?, updated_at = ?
            WHERE id = ?
            """,
            (len(vote_ids), created_at, post_id),
        )
        await self._db.commit()

        cursor = await self._db.execute("SELECT vote_count FROM posts WHERE id = ?", (post_id,))
        row = await cursor.fetchone()
        return row["vote_count"] if row else 0

    async def count_votes(self, post_id: str) -> int:
        cursor = await self._db.execute(
            "SELECT COUNT(*) AS cnt FROM votes WHERE post_id = ?",
            (post_id,),
        )
        row = await cursor.fetchone()
        return row["cnt"] if row else 0
