"""
Social feature models: posts, comments, follows.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from fashion_api.schemas.common import CamelModel, Pagination


PostType = Literal['outfit', 'item', 'inspiration']
PostVisibility = Literal['public', 'followers', 'private']


class PostCreate(CamelModel):
    post_type: PostType
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    image_urls: list[str] = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    wardrobe_item_ids: list[str] = Field(default_factory=list)
    visibility: PostVisibility = 'public'


class PostUpdate(CamelModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    tags: list[str] | None = None
    visibility: PostVisibility | None = None


class PostResponse(CamelModel):
    id: str
    user_id: str
    slug: str
    post_type: str
    title: str | None
    description: str | None
    image_urls: list[str]
    tags: list[str]
    wardrobe_item_ids: list[str]
    visibility: str
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime


class PostList(CamelModel):
    posts: list[PostResponse]
    pagination: Pagination


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(CamelModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime


class CommentList(CamelModel):
    comments: list[CommentResponse]
    pagination: Pagination


class FollowResponse(CamelModel):
    follower_id: str
    following_id: str
    following: bool


class FollowList(CamelModel):
    user_ids: list[str]
    pagination: Pagination
