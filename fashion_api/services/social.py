"""
Social features: posts, likes, comments, follows and the home feed.
"""

import logging
import re
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from fashion_api.db.models import Follow, PostComment, PostLike, SocialPost
from fashion_api.schemas.common import Pagination
from fashion_api.schemas.social import CommentCreate, PostCreate, PostUpdate
from fashion_api.services.pagination import paginate


logger = logging.getLogger(__name__)


def slugify(text: str, max_length: int = 80) -> str:
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
    return slug[:max_length].rstrip('-')


class SocialService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Posts
    # =========================================================================
    def create_post(self, user_id: str, data: PostCreate) -> SocialPost:
        base = slugify(data.title or '') or data.post_type
        post = SocialPost(
            user_id=user_id,
            slug=f'{base}-{uuid.uuid4().hex[:8]}',
            **data.model_dump(),
        )
        self.db.add(post)
        self.db.commit()
        logger.info(f'Post {post.slug} created by {user_id}')
        return post

    def _is_following(self, follower_id: str, following_id: str) -> bool:
        return (
            self.db.scalar(
                select(Follow.id).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
            )
            is not None
        )

    def _can_view(self, post: SocialPost, viewer_id: str) -> bool:
        if post.user_id == viewer_id or post.visibility == 'public':
            return True
        if post.visibility == 'followers':
            return self._is_following(viewer_id, post.user_id)
        return False

    def get_post(self, post_id: str, viewer_id: str) -> SocialPost:
        post = self.db.get(SocialPost, post_id)
        if post is None or not self._can_view(post, viewer_id):
            raise NotFoundError('Post', post_id)
        return post

    def _owned_post(self, post_id: str, user_id: str) -> SocialPost:
        post = self.db.get(SocialPost, post_id)
        if post is None:
            raise NotFoundError('Post', post_id)
        if post.user_id != user_id:
            raise PermissionDeniedError('You can only modify your own posts')
        return post

    def update_post(self, post_id: str, user_id: str, data: PostUpdate) -> SocialPost:
        post = self._owned_post(post_id, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(post, field, value)
        self.db.commit()
        return post

    def delete_post(self, post_id: str, user_id: str) -> None:
        post = self._owned_post(post_id, user_id)
        self.db.execute(delete(PostLike).where(PostLike.post_id == post_id))
        self.db.execute(delete(PostComment).where(PostComment.post_id == post_id))
        self.db.delete(post)
        self.db.commit()

    def user_posts(
        self, author_id: str, viewer_id: str, page: int, limit: int
    ) -> tuple[list[SocialPost], Pagination]:
        visible = ['public']
        if viewer_id == author_id:
            visible += ['followers', 'private']
        elif self._is_following(viewer_id, author_id):
            visible.append('followers')

        stmt = (
            select(SocialPost)
            .where(SocialPost.user_id == author_id, SocialPost.visibility.in_(visible))
            .order_by(SocialPost.created_at.desc(), SocialPost.id)
        )
        return paginate(self.db, stmt, page, limit)

    def feed(self, user_id: str, page: int, limit: int) -> tuple[list[SocialPost], Pagination]:
        """Posts by followed users and the user, newest first."""
        following = select(Follow.following_id).where(Follow.follower_id == user_id)
        stmt = (
            select(SocialPost)
            .where(
                (SocialPost.user_id == user_id) | SocialPost.user_id.in_(following),
                SocialPost.visibility.in_(['public', 'followers']),
            )
            .order_by(SocialPost.created_at.desc(), SocialPost.id)
        )
        return paginate(self.db, stmt, page, limit)

    # =========================================================================
    # Likes and comments
    # =========================================================================
    def toggle_like(self, post_id: str, user_id: str) -> tuple[bool, int]:
        post = self.get_post(post_id, user_id)
        existing = self.db.scalar(
            select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
        )
        if existing is not None:
            self.db.delete(existing)
            post.likes_count = max(post.likes_count - 1, 0)
            liked = False
        else:
            self.db.add(PostLike(post_id=post_id, user_id=user_id))
            post.likes_count += 1
            liked = True
        self.db.commit()
        return liked, post.likes_count

    def add_comment(self, post_id: str, user_id: str, data: CommentCreate) -> PostComment:
        post = self.get_post(post_id, user_id)
        comment = PostComment(post_id=post_id, user_id=user_id, content=data.content.strip())
        self.db.add(comment)
        post.comments_count += 1
        self.db.commit()
        return comment

    def list_comments(
        self, post_id: str, viewer_id: str, page: int, limit: int
    ) -> tuple[list[PostComment], Pagination]:
        self.get_post(post_id, viewer_id)
        stmt = (
            select(PostComment)
            .where(PostComment.post_id == post_id)
            .order_by(PostComment.created_at.asc(), PostComment.id)
        )
        return paginate(self.db, stmt, page, limit)

    def delete_comment(self, comment_id: str, user_id: str) -> None:
        comment = self.db.get(PostComment, comment_id)
        if comment is None:
            raise NotFoundError('Comment', comment_id)
        post = self.db.get(SocialPost, comment.post_id)
        # Authors moderate comments on their own posts
        if comment.user_id != user_id and (post is None or post.user_id != user_id):
            raise PermissionDeniedError('You cannot delete this comment')
        self.db.delete(comment)
        if post is not None:
            post.comments_count = max(post.comments_count - 1, 0)
        self.db.commit()

    # =========================================================================
    # Follows
    # =========================================================================
    def follow(self, follower_id: str, following_id: str) -> Follow:
        if follower_id == following_id:
            raise ValidationError('You cannot follow yourself')
        if self._is_following(follower_id, following_id):
            raise ConflictError('Already following this user')

        follow = Follow(follower_id=follower_id, following_id=following_id)
        self.db.add(follow)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError('Already following this user') from e
        return follow

    def unfollow(self, follower_id: str, following_id: str) -> None:
        result = self.db.execute(
            delete(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
        )
        if result.rowcount == 0:
            raise NotFoundError('Follow', following_id)
        self.db.commit()

    def followers(self, user_id: str, page: int, limit: int) -> tuple[list[str], Pagination]:
        stmt = (
            select(Follow.follower_id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id)
        )
        return paginate(self.db, stmt, page, limit)

    def following(self, user_id: str, page: int, limit: int) -> tuple[list[str], Pagination]:
        stmt = (
            select(Follow.following_id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id)
        )
        return paginate(self.db, stmt, page, limit)
