"""GitHub push ingestion: turns pushed commits into code change entries."""

from collections.abc import Iterable, Mapping

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.attribution import (
    attribute_commit,
    classify_change,
    describe_touched_files,
    is_merge_commit,
)
from tracker.models.account import Profile
from tracker.schemas.webhook import PushEvent
from tracker.services.code_change import CodeChangeService

logger = structlog.get_logger()


class GitHubIngestService:
    """Service for processing GitHub push events."""

    def __init__(self, db: AsyncSession, aliases: Mapping[str, Iterable[str]]):
        self.db = db
        self.aliases = aliases
        self.code_changes = CodeChangeService(db)

    async def _profiles(self) -> list[Profile]:
        result = await self.db.execute(
            select(Profile).order_by(Profile.created_at.asc(), Profile.username.asc())
        )
        return list(result.scalars().all())

    async def process_push(self, event: PushEvent) -> int:
        """
        Record one code change per attributable commit.

        Merge commits and commits without a matching developer are skipped.
        Rows are committed one at a time, so a failure part-way keeps the
        rows written before it.

        Returns:
            Number of code changes created
        """
        profiles = await self._profiles()
        created = 0

        logger.info("github_push_received", commits=len(event.commits), ref=event.ref)

        for commit in event.commits:
            if is_merge_commit(commit.message):
                logger.info("commit_skipped", commit_id=commit.id, reason="merge")
                continue

            profile = attribute_commit(
                commit.author.name,
                commit.author.username,
                profiles,
                self.aliases,
            )
            if profile is None:
                logger.info(
                    "commit_skipped",
                    commit_id=commit.id,
                    reason="no_matching_developer",
                    author=commit.author.name,
                )
                continue

            await self.code_changes.record(
                profile,
                file_path=describe_touched_files(commit.added, commit.modified, commit.removed),
                description=commit.message,
                change_type=classify_change(commit.message),
                github_url=commit.url,
            )
            created += 1

        logger.info("github_push_processed", changes_created=created)
        return created
