# mentor_match/routers/mentorship_router.py
from fastapi import APIRouter, Depends, HTTPException, Path
from typing import List

from ..services import MentorshipService
from ..dependencies.service_dependencies import get_mentorship_service
from ..utils.response_enricher import ResponseEnricher
from ..schemas import (
    AvailableMentorResponse,
    MentorMatchResponse,
    MentorshipRequestCreate,
    MentorshipResponseCreate,
)
from ..models import User
from ..security import get_current_active_user
from ..exceptions import BusinessLogicError

router = APIRouter(prefix="/api/mentors", tags=["mentorship"])

@router.get("/available", response_model=List[AvailableMentorResponse])
def get_available_mentors(
    current_user: User = Depends(get_current_active_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """List active mentors (excluding yourself) with a compatibility score"""
    scored = mentorship_service.list_available_mentors(current_user.id)
    return ResponseEnricher.enrich_available_mentors(scored)

@router.get("/matches", response_model=List[MentorMatchResponse])
def get_matches(
    current_user: User = Depends(get_current_active_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """All matches you take part in, as mentor or mentee, newest first"""
    matches = mentorship_service.list_matches_for_user(current_user.id)
    return ResponseEnricher.enrich_matches(matches)

@router.post("/request", response_model=MentorMatchResponse, status_code=201)
def request_mentorship(
    payload: MentorshipRequestCreate,
    current_user: User = Depends(get_current_active_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Send a mentorship request to a mentor (identified by their user id)"""
    try:
        match = mentorship_service.request_mentorship(current_user.id, payload.mentor_id, payload.message)
        return ResponseEnricher.enrich_single_match(match)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/respond", response_model=MentorMatchResponse)
def respond_to_request(
    payload: MentorshipResponseCreate,
    current_user: User = Depends(get_current_active_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """Accept or decline a pending request addressed to you"""
    try:
        match = mentorship_service.respond_to_request(
            current_user.id, payload.match_id, payload.status, payload.message
        )
        return ResponseEnricher.enrich_single_match(match)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/matches/{match_id}/complete", response_model=MentorMatchResponse)
def complete_mentorship(
    match_id: int = Path(..., description="The ID of the match to complete"),
    current_user: User = Depends(get_current_active_user),
    mentorship_service: MentorshipService = Depends(get_mentorship_service)
):
    """End a mentorship as either party"""
    try:
        match = mentorship_service.complete_mentorship(current_user.id, match_id)
        return ResponseEnricher.enrich_single_match(match)
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
