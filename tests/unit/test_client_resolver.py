import pytest

from labmatch.clients.exceptions import ClientError, ClientRecordError
from labmatch.clients.models import ClientRecord, MatchAction
from labmatch.clients.resolver import CONFIRM_THRESHOLD, ClientIdentityResolver
from labmatch.clients.similarity import name_points, name_similarity, normalize_name
from labmatch.consolidation.models import ConfidenceTier, ConsolidatedIdentity
from labmatch.normalization.text import TextFolder


def _identity(**fields: str) -> ConsolidatedIdentity:
    return ConsolidatedIdentity(**fields)


class TestSimilarity:
    def test_token_order_and_punctuation_ignored(self, folder: TextFolder) -> None:
        assert normalize_name("Smith, John", folder) == "john smith"
        assert normalize_name("  JOHN   smith ", folder) == "john smith"

    def test_accents_folded(self, folder: TextFolder) -> None:
        assert normalize_name("José García", folder) == normalize_name("Jose Garcia", folder)

    def test_edit_distance_ratio(self) -> None:
        assert name_similarity("abcdefghij", "abcdefxxxx") == pytest.approx(0.6)
        assert name_similarity("jon smyth", "john smith") == pytest.approx(0.8)
        assert name_similarity("", "") == 0.0

    @pytest.mark.parametrize(
        ("similarity", "points"),
        [(1.0, 3), (0.9, 3), (0.8, 2), (0.7, 2), (0.6, 1), (0.5, 1), (0.49, 0)],
    )
    def test_tiered_points(self, similarity: float, points: int) -> None:
        assert name_points(similarity) == points


class TestScore:
    def test_missing_fields_are_skipped(self) -> None:
        score = ClientIdentityResolver().score(
            _identity(name="John Smith", date_of_birth="1980-05-01", sex="male"),
            ClientRecord(id="c1", full_name="John Smith"),
        )
        assert (score.earned_points, score.possible_points) == (3, 3)
        assert score.confidence == 1.0

    def test_sex_compared_case_insensitively(self) -> None:
        score = ClientIdentityResolver().score(
            _identity(name="John Smith", sex="male"),
            ClientRecord(id="c1", full_name="John Smith", sex="Male"),
        )
        assert score.earned_points == 4

    def test_nothing_comparable(self) -> None:
        score = ClientIdentityResolver().score(
            _identity(date_of_birth="1980-05-01"),
            ClientRecord(id="c1", full_name="John Smith"),
        )
        assert score.possible_points == 0
        assert score.confidence == 0.0
        assert score.name_similarity is None


class TestResolve:
    def test_exact_match_reused_without_confirmation(self) -> None:
        candidate = ClientRecord(id="c1", full_name="John Smith", date_of_birth="1980-05-01")
        decision = ClientIdentityResolver().resolve(
            _identity(name="John Smith", date_of_birth="1980-05-01"), [candidate]
        )
        assert decision.suggested_action is MatchAction.REUSE_EXISTING
        assert decision.client == candidate
        assert decision.confidence is ConfidenceTier.HIGH
        assert not decision.requires_confirmation
        assert decision.match_score == 1.0

    def test_reordered_name_is_exact(self) -> None:
        decision = ClientIdentityResolver().resolve(
            _identity(name="Smith, John"), [ClientRecord(id="c1", full_name="John Smith")]
        )
        assert decision.match_score == 1.0
        assert decision.suggested_action is MatchAction.REUSE_EXISTING

    def test_accented_name_is_exact(self) -> None:
        decision = ClientIdentityResolver().resolve(
            _identity(name="José García"), [ClientRecord(id="c1", full_name="Jose Garcia")]
        )
        assert decision.match_score == 1.0

    def test_close_name_needs_confirmation(self) -> None:
        candidate = ClientRecord(id="c1", full_name="John Smith", date_of_birth="1980-05-01")
        decision = ClientIdentityResolver().resolve(
            _identity(name="Jon Smyth", date_of_birth="1980-05-01"), [candidate]
        )
        assert decision.match_score == pytest.approx(5 / 6)
        assert decision.suggested_action is MatchAction.REUSE_EXISTING
        assert decision.confidence is ConfidenceTier.MEDIUM
        assert decision.requires_confirmation

    def test_matching_sex_lifts_close_name_to_high(self) -> None:
        candidate = ClientRecord(
            id="c1", full_name="John Smith", date_of_birth="1980-05-01", sex="male"
        )
        decision = ClientIdentityResolver().resolve(
            _identity(name="Jon Smyth", date_of_birth="1980-05-01", sex="male"), [candidate]
        )
        assert decision.match_score == pytest.approx(6 / 7)
        assert decision.confidence is ConfidenceTier.HIGH
        assert not decision.requires_confirmation

    def test_distant_name_creates_new(self) -> None:
        decision = ClientIdentityResolver().resolve(
            _identity(name="Joan Smithers"), [ClientRecord(id="c1", full_name="John Smith")]
        )
        assert decision.suggested_action is MatchAction.CREATE_NEW
        assert decision.client is None
        assert 0 < decision.match_score < CONFIRM_THRESHOLD

    def test_weak_name_match_without_birth_date_creates_new(self) -> None:
        resolver = ClientIdentityResolver()
        identity = _identity(name="Abcdefghij")
        candidate = ClientRecord(id="c1", full_name="Abcdefxxxx")
        score = resolver.score(identity, candidate)
        assert score.name_similarity == pytest.approx(0.6)
        decision = resolver.resolve(identity, [candidate])
        assert decision.suggested_action is MatchAction.CREATE_NEW
        assert decision.client is None
        assert decision.match_score == pytest.approx(1 / 3)

    def test_date_of_birth_mismatch_creates_new(self) -> None:
        candidate = ClientRecord(id="c1", full_name="John Smith", date_of_birth="1975-02-02")
        decision = ClientIdentityResolver().resolve(
            _identity(name="John Smith", date_of_birth="1980-05-01"), [candidate]
        )
        assert decision.match_score == pytest.approx(0.5)
        assert decision.suggested_action is MatchAction.CREATE_NEW

    def test_no_candidates(self) -> None:
        decision = ClientIdentityResolver().resolve(_identity(name="John Smith"), [])
        assert decision.suggested_action is MatchAction.CREATE_NEW
        assert decision.confidence is ConfidenceTier.HIGH
        assert decision.requires_confirmation
        assert decision.match_score == 0.0
        assert decision.scores == ()

    def test_best_candidate_wins(self) -> None:
        candidates = [
            ClientRecord(id="c1", full_name="Mary Jones"),
            ClientRecord(id="c2", full_name="John Smith"),
        ]
        decision = ClientIdentityResolver().resolve(_identity(name="John Smith"), candidates)
        assert decision.client is not None
        assert decision.client.id == "c2"
        assert [score.client_id for score in decision.scores] == ["c1", "c2"]

    def test_tie_goes_to_first_candidate(self) -> None:
        candidates = [
            ClientRecord(id="c1", full_name="John Smith", status="archived"),
            ClientRecord(id="c2", full_name="John Smith"),
        ]
        decision = ClientIdentityResolver().resolve(_identity(name="John Smith"), candidates)
        assert decision.client is not None
        assert decision.client.id == "c1"

    def test_identity_without_name_or_birth_date(self) -> None:
        decision = ClientIdentityResolver().resolve(
            _identity(sex="female"), [ClientRecord(id="c1", full_name="Jane Doe", sex="female")]
        )
        assert decision.suggested_action is MatchAction.MANUAL_SELECT
        assert decision.confidence is ConfidenceTier.LOW
        assert decision.requires_confirmation
        assert decision.client is None

    def test_candidate_without_id_raises(self) -> None:
        candidates = [ClientRecord(id="c1", full_name="A B"), ClientRecord(id="", full_name="C D")]
        with pytest.raises(ClientRecordError, match="index 1 has no id"):
            ClientIdentityResolver().resolve(_identity(name="John Smith"), candidates)

    def test_client_record_error_hierarchy(self) -> None:
        assert issubclass(ClientRecordError, ClientError)
        assert issubclass(ClientRecordError, ValueError)
