from labmatch.clients.exceptions import ClientError, ClientRecordError
from labmatch.clients.models import CandidateScore, ClientRecord, MatchAction, MatchDecision
from labmatch.clients.resolver import ClientIdentityResolver

__all__ = [
    "CandidateScore",
    "ClientError",
    "ClientIdentityResolver",
    "ClientRecord",
    "ClientRecordError",
    "MatchAction",
    "MatchDecision",
]
