from .blogs import BlogCreate, BlogUpdate, BlogResponse

__all__ = [
    "BlogCreate", "BlogUpdate", "BlogResponse",
]
