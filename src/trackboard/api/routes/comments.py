"""Comment endpoints."""

from fastapi import APIRouter, status

from trackboard.api.dependencies import StateStoreDep
from trackboard.api.models import (
    APIResponse,
    CommentCreate,
    CommentResponse,
    comment_to_response,
)

router = APIRouter(tags=["comments"])


@router.get(
    "/tickets/{ticket_id}/comments",
    response_model=APIResponse[list[CommentResponse]],
)
def list_comments(ticket_id: str, store: StateStoreDep) -> APIResponse[list[CommentResponse]]:
    """List a ticket's comments, oldest first."""
    comments = store.list_comments(ticket_id)
    return APIResponse(data=[comment_to_response(c) for c in comments])


@router.post(
    "/tickets/{ticket_id}/comments",
    response_model=APIResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    ticket_id: str, comment: CommentCreate, store: StateStoreDep
) -> APIResponse[CommentResponse]:
    """Add a comment to a ticket."""
    created = store.add_comment(ticket_id, author=comment.author, content=comment.content)
    return APIResponse(data=comment_to_response(created))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: str, store: StateStoreDep) -> None:
    """Delete a comment."""
    store.delete_comment(comment_id)
