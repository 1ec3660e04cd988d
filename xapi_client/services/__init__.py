"""
Service layer modules orchestrate domain workflows (posts, media, users)
on top of the HTTP dispatcher.
"""

__all__ = [
    "post_service",
    "media_service",
]
