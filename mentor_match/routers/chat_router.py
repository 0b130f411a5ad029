# mentor_match/routers/chat_router.py
from fastapi import APIRouter, Depends, HTTPException, Path
from typing import List

from ..services import ChatService
from ..dependencies.service_dependencies import get_chat_service
from ..utils.response_enricher import ResponseEnricher
from ..schemas import ChatMessageCreate, ChatMessageResponse, UnreadCountResponse
from ..models import User
from ..security import get_current_active_user
from ..exceptions import BusinessLogicError

router = APIRouter(prefix="/api/mentors/chat", tags=["chat"])

@router.get("/{match_id}", response_model=List[ChatMessageResponse])
def get_chat_messages(
    match_id: int = Path(..., description="The ID of the match"),
    current_user: User = Depends(get_current_active_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Messages for a match, oldest first. Marks messages addressed to you as read."""
    try:
        messages = chat_service.list_messages(current_user.id, match_id)
        return ResponseEnricher.enrich_messages(messages)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/{match_id}", response_model=ChatMessageResponse, status_code=201)
def send_chat_message(
    payload: ChatMessageCreate,
    match_id: int = Path(..., description="The ID of the match"),
    current_user: User = Depends(get_current_active_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Send a message to the other party of the match"""
    try:
        message = chat_service.send_message(current_user.id, match_id, payload.message, payload.message_type)
        return ResponseEnricher.enrich_messages([message])[0]
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/{match_id}/unread", response_model=UnreadCountResponse)
def get_unread_count(
    match_id: int = Path(..., description="The ID of the match"),
    current_user: User = Depends(get_current_active_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Number of unread messages addressed to you in a match"""
    try:
        return UnreadCountResponse(match_id=match_id, unread=chat_service.unread_count(current_user.id, match_id))
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
