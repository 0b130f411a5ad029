from typing import Dict, Any, List, Tuple
from ..models import MentorMatch, MentorProfile, ChatMessage
from ..schemas import (
    MentorMatchResponse,
    MatchMentorSummary,
    MatchMenteeSummary,
    AvailableMentorResponse,
    MentorProfileResponse,
    ChatMessageResponse,
)

class ResponseEnricher:
    @staticmethod
    def enrich_matches(matches: List[MentorMatch]) -> List[Dict[str, Any]]:
        """Adds both parties' names and display fields to matches"""
        enriched = []
        for match in matches:
            mentor, mentee = match.mentor, match.mentee
            response = MentorMatchResponse(
                id=match.id,
                status=match.status,
                match_score=match.match_score,
                request_message=match.request_message,
                response_message=match.response_message,
                created_at=match.created_at,
                matched_at=match.matched_at,
                completed_at=match.completed_at,
                mentor=MatchMentorSummary(
                    id=mentor.id,
                    user_id=mentor.user_id,
                    first_name=mentor.user.first_name if mentor.user else None,
                    last_name=mentor.user.last_name if mentor.user else None,
                    bio=mentor.bio,
                    areas_of_strength=mentor.areas_of_strength or [],
                    years_of_experience=mentor.years_of_experience or 0,
                ),
                mentee=MatchMenteeSummary(
                    id=mentee.id,
                    user_id=mentee.user_id,
                    first_name=mentee.user.first_name if mentee.user else None,
                    last_name=mentee.user.last_name if mentee.user else None,
                    bio=mentee.bio,
                    learning_goals=mentee.learning_goals or [],
                    career_stage=mentee.career_stage,
                ),
            )
            enriched.append(response.model_dump())
        return enriched

    @staticmethod
    def enrich_single_match(match: MentorMatch) -> Dict[str, Any]:
        return ResponseEnricher.enrich_matches([match])[0]

    @staticmethod
    def enrich_available_mentors(scored: List[Tuple[MentorProfile, int]]) -> List[Dict[str, Any]]:
        enriched = []
        for mentor, score in scored:
            data = MentorProfileResponse.model_validate(mentor).model_dump()
            data.update(
                first_name=mentor.user.first_name if mentor.user else None,
                last_name=mentor.user.last_name if mentor.user else None,
                match_score=score,
            )
            enriched.append(AvailableMentorResponse.model_validate(data).model_dump())
        return enriched

    @staticmethod
    def enrich_messages(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
        """Adds the sender's display name to chat messages"""
        enriched = []
        for message in messages:
            msg_dict = ChatMessageResponse.model_validate(message).model_dump()
            msg_dict["sender_name"] = message.sender.display_name if message.sender else None
            enriched.append(msg_dict)
        return enriched
