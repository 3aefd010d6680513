"""PostgreSQL implementation of Comment repository."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Table, and_, asc, desc, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from discuss.domain.error import ConflictError, NotFoundError
from discuss.domain.model import Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import CommentId, CommentStatus, CommentTarget, Flag, UserId
from discuss.persistence.mappers import (
    comment_to_dict,
    row_to_comment,
    row_to_edit,
    row_to_flag,
    row_to_like,
)
from discuss.persistence.tables import (
    comment_edits_table,
    comment_flags_table,
    comment_likes_table,
    comments_table,
)

c = comments_table.c

# Visible means listed to readers: live and not moderated away
_VISIBLE = and_(c.is_deleted.is_(False), c.status == CommentStatus.ACTIVE.value)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository.

    Counters are changed with single UPDATE statements (``col = col + n``)
    and set membership with INSERT .. ON CONFLICT DO NOTHING / DELETE ..
    RETURNING, so concurrent requests never overwrite each other.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _load_children(
        self, table: Table, comment_ids: List[Any], order_column
    ) -> Dict[Any, List[Dict[str, Any]]]:
        """Load rows of a per-comment collection table for many comments."""
        grouped: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
        if not comment_ids:
            return grouped
        stmt = (
            select(table)
            .where(table.c.comment_id.in_(comment_ids))
            .order_by(table.c.comment_id, order_column)
        )
        result = await self.session.execute(stmt)
        for row in result.fetchall():
            data = row._asdict()
            grouped[data["comment_id"]].append(data)
        return grouped

    async def _hydrate(self, rows: Sequence[Any]) -> List[Comment]:
        """Attach likes, flags and edit history to comment rows."""
        dicts = [row._asdict() for row in rows]
        ids = [d["id"] for d in dicts]
        likes = await self._load_children(
            comment_likes_table, ids, comment_likes_table.c.liked_at
        )
        flags = await self._load_children(
            comment_flags_table, ids, comment_flags_table.c.flagged_at
        )
        edits = await self._load_children(
            comment_edits_table, ids, comment_edits_table.c.id
        )
        return [
            row_to_comment(
                d,
                likes=[row_to_like(r) for r in likes.get(d["id"], [])],
                flags=[row_to_flag(r) for r in flags.get(d["id"], [])],
                edit_history=[row_to_edit(r) for r in edits.get(d["id"], [])],
            )
            for d in dicts
        ]

    async def _fetch(self, stmt) -> List[Comment]:
        result = await self.session.execute(stmt)
        return await self._hydrate(result.fetchall())

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        comments = await self._fetch(select(comments_table).where(c.id == comment_id))
        return comments[0] if comments else None

    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        stmt = comments_table.insert().values(**comment_to_dict(comment))
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Comment {comment.id} could not be stored: {e.orig}") from e

        return await self.find_by_id(comment.id) or comment

    def _target_filter(self, target: CommentTarget):
        return and_(c.target_kind == target.kind.value, c.target_id == target.id)

    async def find_roots(
        self,
        target: CommentTarget,
        offset: int = 0,
        limit: int = 20,
        newest_first: bool = True,
    ) -> List[Comment]:
        """Find visible root comments attached to a target."""
        order = desc(c.created_at) if newest_first else asc(c.created_at)
        stmt = (
            select(comments_table)
            .where(self._target_filter(target))
            .where(c.parent_id.is_(None))
            .where(_VISIBLE)
            .order_by(order, c.id)
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch(stmt)

    async def count_roots(self, target: CommentTarget) -> int:
        """Count visible root comments attached to a target."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(self._target_filter(target))
            .where(c.parent_id.is_(None))
            .where(_VISIBLE)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_replies(
        self,
        parent_id: CommentId,
        offset: int = 0,
        limit: int = 10,
        newest_first: bool = False,
    ) -> List[Comment]:
        """Find a page of visible direct replies to a comment."""
        order = desc(c.created_at) if newest_first else asc(c.created_at)
        stmt = (
            select(comments_table)
            .where(c.parent_id == parent_id)
            .where(_VISIBLE)
            .order_by(order, c.id)
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch(stmt)

    async def count_replies(self, parent_id: CommentId) -> int:
        """Count visible direct replies to a comment."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(c.parent_id == parent_id)
            .where(_VISIBLE)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_reply_previews(
        self,
        parent_ids: Sequence[CommentId],
        limit: int,
        newest_first: bool = False,
    ) -> Dict[CommentId, List[Comment]]:
        """Find the first ``limit`` visible replies of each parent."""
        previews: Dict[CommentId, List[Comment]] = {pid: [] for pid in parent_ids}
        if not parent_ids or limit <= 0:
            return previews

        order = desc(c.created_at) if newest_first else asc(c.created_at)
        position = (
            func.row_number()
            .over(partition_by=c.parent_id, order_by=(order, c.id))
            .label("position")
        )
        ranked = (
            select(comments_table, position)
            .where(c.parent_id.in_(list(parent_ids)))
            .where(_VISIBLE)
            .subquery()
        )
        stmt = (
            select(ranked)
            .where(ranked.c.position <= limit)
            .order_by(ranked.c.parent_id, ranked.c.position)
        )
        for reply in await self._fetch(stmt):
            previews[reply.parent_id].append(reply)
        return previews

    async def find_children(self, parent_ids: Iterable[CommentId]) -> List[Comment]:
        """Find all visible direct children of the given parents."""
        ids = list(parent_ids)
        if not ids:
            return []
        stmt = (
            select(comments_table)
            .where(c.parent_id.in_(ids))
            .where(_VISIBLE)
            .order_by(c.created_at, c.id)
        )
        return await self._fetch(stmt)

    async def find_by_author(
        self,
        author_id: UserId,
        offset: int = 0,
        limit: int = 20,
    ) -> List[Comment]:
        """Find visible comments by a specific author."""
        stmt = (
            select(comments_table)
            .where(c.author_id == author_id)
            .where(_VISIBLE)
            .order_by(desc(c.created_at))
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch(stmt)

    async def count_by_author(self, author_id: UserId) -> int:
        """Count visible comments by a specific author."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(c.author_id == author_id)
            .where(_VISIBLE)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def search(
        self,
        text: str,
        target: Optional[CommentTarget] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> List[Comment]:
        """Case-insensitive literal substring search over content."""
        stmt = (
            select(comments_table)
            .where(c.content.ilike(f"%{_escape_like(text)}%", escape="\\"))
            .where(_VISIBLE)
        )
        if target is not None:
            stmt = stmt.where(self._target_filter(target))
        stmt = stmt.order_by(desc(c.created_at)).limit(limit).offset(offset)
        return await self._fetch(stmt)

    async def adjust_reply_count(self, comment_id: CommentId, delta: int) -> None:
        """Atomically add delta to reply_count (minimum 0)."""
        stmt = (
            update(comments_table)
            .where(c.id == comment_id)
            .values(reply_count=func.greatest(c.reply_count + delta, 0))
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Comment", str(comment_id))
        await self.session.flush()

    async def add_like(
        self, comment_id: CommentId, user_id: UserId, liked_at: datetime
    ) -> bool:
        """Insert a like if absent and bump like_count."""
        stmt = (
            pg_insert(comment_likes_table)
            .values(comment_id=comment_id, user_id=user_id, liked_at=liked_at)
            .on_conflict_do_nothing(constraint="uq_comment_like")
            .returning(comment_likes_table.c.user_id)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise NotFoundError("Comment", str(comment_id)) from e

        if result.first() is None:
            return False

        await self.session.execute(
            update(comments_table)
            .where(c.id == comment_id)
            .values(like_count=c.like_count + 1)
        )
        await self.session.flush()
        return True

    async def remove_like(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Delete a like if present and drop like_count."""
        stmt = (
            comment_likes_table.delete()
            .where(comment_likes_table.c.comment_id == comment_id)
            .where(comment_likes_table.c.user_id == user_id)
            .returning(comment_likes_table.c.user_id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            return False

        await self.session.execute(
            update(comments_table)
            .where(c.id == comment_id)
            .values(like_count=func.greatest(c.like_count - 1, 0))
        )
        await self.session.flush()
        return True

    async def add_flag(self, comment_id: CommentId, flag: Flag) -> Optional[int]:
        """Insert a flag if the user has none yet and bump flag_count."""
        stmt = (
            pg_insert(comment_flags_table)
            .values(
                comment_id=comment_id,
                user_id=flag.user_id,
                reason=flag.reason.value,
                description=flag.description,
                flagged_at=flag.flagged_at,
            )
            .on_conflict_do_nothing(constraint="uq_comment_flag")
            .returning(comment_flags_table.c.user_id)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise NotFoundError("Comment", str(comment_id)) from e

        if result.first() is None:
            return None

        counted = await self.session.execute(
            update(comments_table)
            .where(c.id == comment_id)
            .values(flag_count=c.flag_count + 1)
            .returning(c.flag_count)
        )
        await self.session.flush()
        return counted.scalar_one()

    async def update_content(
        self,
        comment_id: CommentId,
        content: str,
        mentions: Sequence[UserId],
        edited_at: datetime,
    ) -> Optional[Comment]:
        """Replace content of a live comment, recording the replaced text."""
        # Row lock so the text we archive is the text we overwrite
        locked = await self.session.execute(
            select(c.content)
            .where(c.id == comment_id)
            .where(c.is_deleted.is_(False))
            .with_for_update()
        )
        previous = locked.scalar_one_or_none()
        if previous is None:
            return None

        await self.session.execute(
            comment_edits_table.insert().values(
                comment_id=comment_id, content=previous, edited_at=edited_at
            )
        )
        await self.session.execute(
            update(comments_table)
            .where(c.id == comment_id)
            .values(
                content=content,
                mentions=list(mentions),
                is_edited=True,
                updated_at=edited_at,
            )
        )
        await self.session.flush()
        return await self.find_by_id(comment_id)

    async def mark_deleted(
        self, comment_id: CommentId, placeholder: str, deleted_at: datetime
    ) -> Optional[Comment]:
        """Soft-delete a live comment."""
        stmt = (
            update(comments_table)
            .where(c.id == comment_id)
            .where(c.is_deleted.is_(False))
            .values(
                is_deleted=True,
                deleted_at=deleted_at,
                content=placeholder,
                updated_at=deleted_at,
            )
            .returning(c.id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            return None

        await self.session.flush()
        return await self.find_by_id(comment_id)

    async def transition_status(
        self,
        comment_id: CommentId,
        expected: Iterable[CommentStatus],
        status: CommentStatus,
        notes: Optional[str] = None,
    ) -> Optional[Comment]:
        """Compare-and-set the moderation status."""
        values: Dict[str, Any] = {"status": status.value, "updated_at": func.now()}
        if notes is not None:
            values["moderation_notes"] = notes

        stmt = (
            update(comments_table)
            .where(c.id == comment_id)
            .where(c.status.in_([s.value for s in expected]))
            .values(**values)
            .returning(c.id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            return None

        await self.session.flush()
        return await self.find_by_id(comment_id)
