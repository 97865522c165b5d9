from pydantic import BaseModel
from typing import Optional


class BlogCreate(BaseModel):
    title: str
    content: str
    author_name: str = ""
    author_username: str = ""
    meta_title: str = ""
    meta_description: str = ""
    slug: str = ""
    published: bool = False


class BlogUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    author_name: Optional[str] = None
    author_username: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    slug: Optional[str] = None
    published: Optional[bool] = None


class BlogResponse(BaseModel):
    id: str
    title: str
    content: str
    author_name: str
    author_username: str
    meta_title: str
    meta_description: str
    slug: str
    created: str
    updated: str
    published: bool
