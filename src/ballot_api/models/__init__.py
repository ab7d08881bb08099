"""ORM model registry. Import all models so Alembic autogenerate discovers them."""

from ballot_api.models.ballot import Candidate, Position, Vote
from ballot_api.models.election_config import ElectionConfig
from ballot_api.models.user import User
from ballot_api.models.voter import Voter, VoterSession

__all__ = [
    "Candidate",
    "ElectionConfig",
    "Position",
    "User",
    "Vote",
    "Voter",
    "VoterSession",
]
