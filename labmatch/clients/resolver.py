"""Decides whether a consolidated identity belongs to an existing client.

Each candidate earns points over the fields both sides carry:

=============  ======  ==========================================
field          points  rule
=============  ======  ==========================================
name           0-3     similarity >= 0.9 / 0.7 / 0.5 -> 3 / 2 / 1
date of birth  3       exact match
sex            1       exact match
=============  ======  ==========================================

A field missing on either side is left out of both earned and possible
points. Confidence is earned / possible.
"""

from collections.abc import Sequence

from labmatch.clients.exceptions import ClientRecordError
from labmatch.clients.models import CandidateScore, ClientRecord, MatchAction, MatchDecision
from labmatch.clients.similarity import name_points, name_similarity, normalize_name
from labmatch.consolidation.models import ConfidenceTier, ConsolidatedIdentity
from labmatch.logging.logger import Log
from labmatch.normalization.text import TextFolder

NAME_WEIGHT = 3
DATE_OF_BIRTH_WEIGHT = 3
SEX_WEIGHT = 1

REUSE_THRESHOLD = 0.85
CONFIRM_THRESHOLD = 0.65


class ClientIdentityResolver:
    def __init__(self, folder: TextFolder | None = None) -> None:
        self._folder = folder or TextFolder()

    def resolve(
        self,
        identity: ConsolidatedIdentity,
        candidates: Sequence[ClientRecord],
    ) -> MatchDecision:
        """Pick the best candidate, or decide a new record is needed.

        Raises:
            ClientRecordError: if a candidate has no id.
        """
        for index, candidate in enumerate(candidates):
            if not candidate.id:
                raise ClientRecordError(f"Candidate client at index {index} has no id")

        if not identity.name and not identity.date_of_birth:
            Log.info("Identity has neither name nor date of birth; manual selection required")
            return MatchDecision(
                client=None,
                confidence=ConfidenceTier.LOW,
                requires_confirmation=True,
                suggested_action=MatchAction.MANUAL_SELECT,
            )

        scores = tuple(self.score(identity, candidate) for candidate in candidates)
        best_index: int | None = None
        for index, score in enumerate(scores):
            # Strictly greater: on equal scores the earlier candidate stays.
            if best_index is None or score.confidence > scores[best_index].confidence:
                best_index = index

        if best_index is not None and scores[best_index].confidence >= CONFIRM_THRESHOLD:
            best = scores[best_index]
            confident = best.confidence >= REUSE_THRESHOLD
            decision = MatchDecision(
                client=candidates[best_index],
                confidence=ConfidenceTier.HIGH if confident else ConfidenceTier.MEDIUM,
                requires_confirmation=not confident,
                suggested_action=MatchAction.REUSE_EXISTING,
                match_score=best.confidence,
                scores=scores,
            )
        else:
            decision = MatchDecision(
                client=None,
                confidence=ConfidenceTier.HIGH,
                requires_confirmation=True,
                suggested_action=MatchAction.CREATE_NEW,
                match_score=scores[best_index].confidence if best_index is not None else 0.0,
                scores=scores,
            )
        Log.info(
            f"Client decision: {decision.suggested_action.value} "
            f"(score {decision.match_score:.2f}, {len(candidates)} candidates)"
        )
        return decision

    def score(self, identity: ConsolidatedIdentity, candidate: ClientRecord) -> CandidateScore:
        earned = 0
        possible = 0
        similarity: float | None = None

        identity_name = normalize_name(identity.name, self._folder)
        candidate_name = normalize_name(candidate.full_name, self._folder)
        if identity_name and candidate_name:
            similarity = name_similarity(identity_name, candidate_name)
            earned += name_points(similarity)
            possible += NAME_WEIGHT

        if identity.date_of_birth and candidate.date_of_birth:
            possible += DATE_OF_BIRTH_WEIGHT
            if identity.date_of_birth == candidate.date_of_birth:
                earned += DATE_OF_BIRTH_WEIGHT

        if identity.sex and candidate.sex:
            possible += SEX_WEIGHT
            if identity.sex.casefold() == candidate.sex.casefold():
                earned += SEX_WEIGHT

        confidence = earned / possible if possible else 0.0
        Log.debug(
            f"Scored client {candidate.id}: {earned}/{possible}",
            similarity=similarity,
        )
        return CandidateScore(
            client_id=candidate.id,
            confidence=confidence,
            earned_points=earned,
            possible_points=possible,
            name_similarity=similarity,
        )
