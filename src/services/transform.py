"""
Projection of stored documents to their API representation
"""

from typing import Any, Dict, Mapping


def _project(document: Mapping[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    return {public: document.get(internal) for public, internal in fields.items()}


POST_FIELDS = {
    "id": "id",
    "title": "title",
    "message": "message",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
}

COMMENT_FIELDS = {
    "id": "id",
    "message": "message",
    "postId": "post_id",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
}


def transform_post(document: Mapping[str, Any]) -> Dict[str, Any]:
    return _project(document, POST_FIELDS)


def transform_comment(document: Mapping[str, Any]) -> Dict[str, Any]:
    return _project(document, COMMENT_FIELDS)
