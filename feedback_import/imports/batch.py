import asyncio
from collections.abc import Callable
from typing import Protocol

import structlog

from feedback_import.exceptions import ImportFailedError
from feedback_import.imports.models import ColumnMapping
from feedback_import.imports.normalizer import build_payload
from feedback_import.imports.schemas import CreatedPost, ImportResult, ImportRowError
from feedback_import.posts.schemas import PostCreate, PostResponse

logger = structlog.get_logger()

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY = 0.1

ProgressCallback = Callable[[int], None]


class PostCreator(Protocol):
    async def create_post(self, data: PostCreate) -> PostResponse: ...

    async def seed_votes(self, post_id: str, count: int) -> object: ...


def progress_percent(done: int, total: int) -> int:
    """Whole-number percentage, rounding halves up."""
    if total <= 0:
        return 100
    return (done * 200 + total) // (2 * total)


class BatchImporter:
    def __init__(
        self,
        creator: PostCreator,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._creator = creator
        self._batch_size = batch_size
        self._batch_delay = batch_delay

    async def run(
        self,
        rows: list[dict[str, str]],
        mapping: list[ColumnMapping],
        board_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Create one post per row, batch by batch, collecting per-row failures.

        A failing row never stops the run. Anything that escapes the row
        handling aborts the whole run with ImportFailedError and no result.
        """
        result = ImportResult(total_rows=len(rows))
        total = len(rows)

        logger.info("import_started", board_id=board_id, total_rows=total)

        try:
            for start in range(0, total, self._batch_size):
                batch = rows[start : start + self._batch_size]

                for offset, row in enumerate(batch):
                    await self._import_row(row, start + offset + 1, mapping, board_id, result)

                percent = progress_percent(start + len(batch), total)
                logger.debug("import_batch_done", processed=start + len(batch), progress=percent)
                if on_progress is not None:
                    on_progress(percent)

                await asyncio.sleep(self._batch_delay)
        except Exception as exc:
            logger.exception("import_failed", board_id=board_id, error=str(exc))
            raise ImportFailedError() from exc

        logger.info(
            "import_completed",
            board_id=board_id,
            total_rows=total,
            succeeded=result.success_count,
            failed=result.error_count,
        )
        return result

    async def _import_row(
        self,
        row: dict[str, str],
        row_number: int,
        mapping: list[ColumnMapping],
        board_id: str,
        result: ImportResult,
    ) -> None:
        try:
            payload = build_payload(mapping, row, board_id)
            created = await self._creator.create_post(payload.to_create())

            if payload.votes > 0:
                await self._seed_votes(created.id, payload.votes, row_number)

            result.success_count += 1
            result.created_posts.append(CreatedPost(id=created.id, title=payload.title))
        except Exception as exc:
            result.error_count += 1
            result.errors.append(
                ImportRowError(row=row_number, field="general", message=str(exc) or "Unknown error")
            )
            logger.warning("import_row_failed", row=row_number, error=str(exc))

    async def _seed_votes(self, post_id: str, count: int, row_number: int) -> None:
        # Seeding outcome is not part of the row's success/failure accounting
        try:
            await self._creator.seed_votes(post_id, count)
        except Exception as exc:
            logger.warning(
                "vote_seed_failed",
                row=row_number,
                post_id=post_id,
                count=count,
                error=str(exc),
            )
