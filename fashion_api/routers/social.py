"""
Social Router.

Posts, likes, comments, follows and the home feed.
"""

import logging

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.marketplace import LikeToggleResponse
from fashion_api.schemas.social import (
    CommentCreate,
    CommentList,
    CommentResponse,
    FollowList,
    FollowResponse,
    PostCreate,
    PostList,
    PostResponse,
    PostUpdate,
)
from fashion_api.services.social import SocialService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/social', tags=['Social'])

PageQuery = Query(default=1, ge=1)
LimitQuery = Query(default=20, ge=1, le=100)


# =============================================================================
# Posts
# =============================================================================
@router.post('/posts', response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(user: CurrentUserDep, db: DbDep, data: PostCreate):
    return PostResponse.model_validate(SocialService(db).create_post(user.id, data))


@router.get('/feed', response_model=PostList)
def feed(user: CurrentUserDep, db: DbDep, page: int = PageQuery, limit: int = LimitQuery):
    """Posts from followed users and yourself, newest first."""
    posts, pagination = SocialService(db).feed(user.id, page, limit)
    return PostList(posts=[PostResponse.model_validate(p) for p in posts], pagination=pagination)


@router.get('/posts/{post_id}', response_model=PostResponse)
def get_post(post_id: str, user: CurrentUserDep, db: DbDep):
    return PostResponse.model_validate(SocialService(db).get_post(post_id, user.id))


@router.patch('/posts/{post_id}', response_model=PostResponse)
def update_post(post_id: str, user: CurrentUserDep, db: DbDep, data: PostUpdate):
    return PostResponse.model_validate(SocialService(db).update_post(post_id, user.id, data))


@router.delete('/posts/{post_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: str, user: CurrentUserDep, db: DbDep):
    SocialService(db).delete_post(post_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get('/users/{user_id}/posts', response_model=PostList)
def user_posts(user_id: str, user: CurrentUserDep, db: DbDep, page: int = PageQuery, limit: int = LimitQuery):
    posts, pagination = SocialService(db).user_posts(user_id, user.id, page, limit)
    return PostList(posts=[PostResponse.model_validate(p) for p in posts], pagination=pagination)


# =============================================================================
# Likes + Comments
# =============================================================================
@router.post('/posts/{post_id}/like', response_model=LikeToggleResponse)
def toggle_post_like(post_id: str, user: CurrentUserDep, db: DbDep):
    liked, count = SocialService(db).toggle_like(post_id, user.id)
    return LikeToggleResponse(liked=liked, likes_count=count)


@router.post('/posts/{post_id}/comments', response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(post_id: str, user: CurrentUserDep, db: DbDep, data: CommentCreate):
    return CommentResponse.model_validate(SocialService(db).add_comment(post_id, user.id, data))


@router.get('/posts/{post_id}/comments', response_model=CommentList)
def list_comments(post_id: str, user: CurrentUserDep, db: DbDep, page: int = PageQuery, limit: int = LimitQuery):
    comments, pagination = SocialService(db).list_comments(post_id, user.id, page, limit)
    return CommentList(comments=[CommentResponse.model_validate(c) for c in comments], pagination=pagination)


@router.delete('/comments/{comment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: str, user: CurrentUserDep, db: DbDep):
    SocialService(db).delete_comment(comment_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Follows
# =============================================================================
@router.post('/users/{user_id}/follow', response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
def follow_user(user_id: str, user: CurrentUserDep, db: DbDep):
    SocialService(db).follow(user.id, user_id)
    return FollowResponse(follower_id=user.id, following_id=user_id, following=True)


@router.delete('/users/{user_id}/follow', response_model=FollowResponse)
def unfollow_user(user_id: str, user: CurrentUserDep, db: DbDep):
    SocialService(db).unfollow(user.id, user_id)
    return FollowResponse(follower_id=user.id, following_id=user_id, following=False)


@router.get('/users/{user_id}/followers', response_model=FollowList)
def followers(user_id: str, user: CurrentUserDep, db: DbDep, page: int = PageQuery, limit: int = LimitQuery):
    ids, pagination = SocialService(db).followers(user_id, page, limit)
    return FollowList(user_ids=ids, pagination=pagination)


@router.get('/users/{user_id}/following', response_model=FollowList)
def following(user_id: str, user: CurrentUserDep, db: DbDep, page: int = PageQuery, limit: int = LimitQuery):
    ids, pagination = SocialService(db).following(user_id, page, limit)
    return FollowList(user_ids=ids, pagination=pagination)
