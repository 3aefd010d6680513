"""Thread assembly: paginated and expanded views of comment trees."""

import logfire

from discuss.config import CommentSettings
from discuss.domain.error import NotFoundError, ValidationError
from discuss.domain.model import Comment, Pagination, ThreadEntry, ThreadNode, ThreadPage
from discuss.domain.repository import CommentRepository
from discuss.domain.value import CommentId, CommentTarget, TargetKind, UserId

from .base import Service


class ThreadService(Service):
    """Read-side service assembling comment threads.

    Listings only include visible comments (not deleted, status active).
    Aggregates are read straight from the store on every call.
    """

    def __init__(
        self, comment_repository: CommentRepository, settings: CommentSettings
    ) -> None:
        """Initialize thread service.

        Args:
            comment_repository: Comment repository
            settings: Comment engine rules (page sizes, thread depth)
        """
        self.comment_repository = comment_repository
        self.settings = settings

    def _page_size(self, page_size: int | None) -> int:
        if page_size is None:
            return self.settings.default_page_size
        return max(1, min(page_size, self.settings.max_page_size))

    async def get_thread_page(
        self,
        target: CommentTarget,
        page: int = 1,
        page_size: int | None = None,
        reply_page_size: int | None = None,
        newest_first: bool = True,
        replies_newest_first: bool | None = None,
    ) -> ThreadPage:
        """Get a page of root comments with the first replies of each.

        Args:
            target: Idea or domain whose discussion to read
            page: 1-based page number
            page_size: Root comments per page
            reply_page_size: Replies attached to each root (0 for none)
            newest_first: Order roots by newest first
            replies_newest_first: Order attached replies by newest first;
                defaults to the configured order

        Returns:
            Thread page with pagination over root comments only

        Raises:
            ValidationError: If the target is a comment
        """
        if target.kind == TargetKind.COMMENT:
            raise ValidationError("Thread pages are read for ideas and domains")

        page = max(1, page)
        size = self._page_size(page_size)
        reply_limit = (
            self.settings.reply_page_size
            if reply_page_size is None
            else max(0, min(reply_page_size, self.settings.max_page_size))
        )
        if replies_newest_first is None:
            replies_newest_first = self.settings.replies_newest_first

        with logfire.span(
            "thread_service.get_thread_page",
            target_kind=target.kind.value,
            target_id=str(target.id),
            page=page,
            page_size=size,
        ):
            roots = await self.comment_repository.find_roots(
                target,
                offset=(page - 1) * size,
                limit=size,
                newest_first=newest_first,
            )
            total = await self.comment_repository.count_roots(target)

            previews: dict[CommentId, list[Comment]] = {}
            if roots and reply_limit > 0:
                previews = await self.comment_repository.find_reply_previews(
                    [root.id for root in roots],
                    limit=reply_limit,
                    newest_first=replies_newest_first,
                )

            entries = [
                ThreadEntry(
                    comment=root,
                    replies=previews.get(root.id, []),
                    reply_count=root.reply_count,
                )
                for root in roots
            ]

            logfire.info(
                "Thread page assembled",
                target_id=str(target.id),
                roots=len(entries),
                total=total,
            )
            return ThreadPage(
                entries=entries,
                pagination=Pagination.build(page, size, len(entries), total),
            )

    async def get_replies(
        self,
        parent_id: CommentId,
        page: int = 1,
        page_size: int | None = None,
        newest_first: bool = False,
    ) -> tuple[Comment, list[Comment], Pagination]:
        """Get a page of direct replies ("load more replies").

        Works for soft-deleted parents so that live replies under a deleted
        comment stay reachable.

        Args:
            parent_id: Parent comment ID
            page: 1-based page number
            page_size: Replies per page
            newest_first: Order replies by newest first

        Returns:
            The parent, the page of replies and pagination metadata

        Raises:
            NotFoundError: If the parent does not exist
        """
        page = max(1, page)
        size = self._page_size(page_size)

        with logfire.span(
            "thread_service.get_replies", parent_id=str(parent_id), page=page
        ):
            parent = await self.comment_repository.find_by_id(parent_id)
            if parent is None:
                raise NotFoundError("Comment", str(parent_id))

            replies = await self.comment_repository.find_replies(
                parent_id,
                offset=(page - 1) * size,
                limit=size,
                newest_first=newest_first,
            )
            total = await self.comment_repository.count_replies(parent_id)
            return parent, replies, Pagination.build(page, size, len(replies), total)

    async def get_full_thread(self, comment_id: CommentId) -> ThreadNode:
        """Expand a comment and all of its visible descendants.

        Levels are fetched one at a time with a depth counter, so the number
        of nested levels is bounded by the maximum thread level. Replies
        below a comment on the last level are flattened onto it in
        chronological order. Hidden or deleted descendants are pruned with
        their subtrees; the requested comment itself is always returned.

        Args:
            comment_id: Comment at the top of the thread

        Returns:
            Expanded thread

        Raises:
            NotFoundError: If the comment does not exist
        """
        max_level = self.settings.max_thread_level

        with logfire.span("thread_service.get_full_thread", comment_id=str(comment_id)):
            root = await self.comment_repository.find_by_id(comment_id)
            if root is None:
                raise NotFoundError("Comment", str(comment_id))

            children_of: dict[CommentId, list[Comment]] = {}
            anchors: list[Comment] = []
            frontier: list[Comment] = []
            if root.thread_level >= max_level:
                anchors.append(root)
            else:
                frontier.append(root)

            depth = 0
            while frontier and depth < max_level:
                children = await self.comment_repository.find_children(
                    [node.id for node in frontier]
                )
                frontier = []
                for child in children:
                    children_of.setdefault(child.parent_id, []).append(child)
                    if child.thread_level >= max_level:
                        anchors.append(child)
                    else:
                        frontier.append(child)
                depth += 1

            flattened = await self._collect_flattened(anchors)

            node_count = (
                1
                + sum(len(c) for c in children_of.values())
                + sum(len(c) for c in flattened.values())
            )
            logfire.info(
                "Full thread expanded",
                comment_id=str(comment_id),
                levels=depth,
                nodes=node_count,
            )
            return self._build_tree(root, children_of, flattened)

    async def _collect_flattened(
        self, anchors: list[Comment]
    ) -> dict[CommentId, list[Comment]]:
        """Gather every visible descendant of each last-level comment."""
        flattened: dict[CommentId, list[Comment]] = {a.id: [] for a in anchors}
        anchor_of: dict[CommentId, CommentId] = {a.id: a.id for a in anchors}
        frontier = list(anchor_of)

        while frontier:
            children = await self.comment_repository.find_children(frontier)
            frontier = []
            for child in children:
                if child.id in anchor_of:
                    continue
                anchor_id = anchor_of[child.parent_id]
                anchor_of[child.id] = anchor_id
                flattened[anchor_id].append(child)
                frontier.append(child.id)

        for replies in flattened.values():
            replies.sort(key=lambda c: c.created_at)
        return flattened

    @staticmethod
    def _build_tree(
        root: Comment,
        children_of: dict[CommentId, list[Comment]],
        flattened: dict[CommentId, list[Comment]],
    ) -> ThreadNode:
        # Post-order over an explicit stack; children are built before parents
        order: list[Comment] = []
        stack = [root]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(children_of.get(node.id, []))

        built: dict[CommentId, ThreadNode] = {}
        for node in reversed(order):
            if node.id in flattened:
                replies = [ThreadNode(comment=c) for c in flattened[node.id]]
            else:
                replies = [built[c.id] for c in children_of.get(node.id, [])]
            built[node.id] = ThreadNode(comment=node, replies=replies)
        return built[root.id]

    async def search(
        self,
        text: str,
        target: CommentTarget | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> list[Comment]:
        """Search visible comments by text, newest first.

        Args:
            text: Case-insensitive text to look for
            target: Optional target to restrict the search to
            page: 1-based page number
            page_size: Results per page

        Returns:
            Matching comments

        Raises:
            ValidationError: If the query is empty
        """
        query = text.strip()
        if not query:
            raise ValidationError("Search query is required")

        page = max(1, page)
        size = self._page_size(page_size)
        with logfire.span("thread_service.search", query_length=len(query), page=page):
            results = await self.comment_repository.search(
                query, target=target, offset=(page - 1) * size, limit=size
            )
            logfire.info("Comment search", results=len(results))
            return results

    async def get_user_comments(
        self, author_id: UserId, page: int = 1, page_size: int | None = None
    ) -> tuple[list[Comment], Pagination]:
        """Get a page of an author's visible comments, newest first."""
        page = max(1, page)
        size = self._page_size(page_size)
        with logfire.span(
            "thread_service.get_user_comments", author_id=str(author_id), page=page
        ):
            comments = await self.comment_repository.find_by_author(
                author_id, offset=(page - 1) * size, limit=size
            )
            total = await self.comment_repository.count_by_author(author_id)
            return comments, Pagination.build(page, size, len(comments), total)
