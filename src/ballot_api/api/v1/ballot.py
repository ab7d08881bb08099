"""Ballot endpoints for an open voter session.

GET /ballot lists the positions in ballot order with their candidates;
POST /ballot/votes records one vote (or a PASS) per position.
"""

from collections import defaultdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.dependencies import get_async_session, get_voter_session
from ballot_api.models.voter import VoterSession
from ballot_api.schemas.ballot import (
    BallotPosition,
    BallotResponse,
    CandidateResponse,
    CastVoteRequest,
    VoteResponse,
)
from ballot_api.services import vote_service
from ballot_api.services.candidate_service import list_candidates
from ballot_api.services.position_service import PositionNotFoundError, list_positions
from ballot_api.services.session_service import get_session_voter
from ballot_api.services.vote_service import DuplicateVoteError, InvalidCandidateError, VotingClosedError
from ballot_api.services.voter_service import VoterNotFoundError

ballot_router = APIRouter(prefix="/ballot", tags=["ballot"])


@ballot_router.get("", response_model=BallotResponse)
async def get_ballot(
    voter_session: Annotated[VoterSession, Depends(get_voter_session)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BallotResponse:
    """Return the ballot with a per-position ``voted`` flag for this voter."""
    try:
        voter = await get_session_voter(session, voter_session)
    except VoterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    by_position: dict[str, list[CandidateResponse]] = defaultdict(list)
    for candidate in await list_candidates(session):
        by_position[str(candidate.position_id)].append(CandidateResponse.model_validate(candidate))

    voted = set(voter.voted_positions)
    positions = [
        BallotPosition(
            id=position.id,
            title=position.title,
            order=position.order,
            candidates=by_position.get(str(position.id), []),
            voted=str(position.id) in voted,
        )
        for position in await list_positions(session)
    ]
    return BallotResponse(positions=positions, votes_cast=len(voted))


@ballot_router.post("/votes", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
async def cast_vote(
    request: CastVoteRequest,
    voter_session: Annotated[VoterSession, Depends(get_voter_session)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> VoteResponse:
    """Cast a vote for a candidate, or ``PASS`` to abstain."""
    try:
        result = await vote_service.cast_vote(session, voter_session, request.position_id, request.candidate_id)
    except VotingClosedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except PositionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except DuplicateVoteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except InvalidCandidateError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except VoterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    vote = result.vote
    return VoteResponse(
        voter_id=vote.voter_id,
        position_id=vote.position_id,
        candidate_id=vote.candidate_id,
        candidate_name=vote.candidate_name,
        timestamp=vote.timestamp,
        session_closed=result.session_closed,
    )
