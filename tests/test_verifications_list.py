import pytest
from fastapi.testclient import TestClient

import verifications
from main import app
from models import QuestionVerification
from schemas.verifications import VerificationFilters
from verifications import batch_limit, list_verifications

client = TestClient(app)


def _ids(result):
    return [v.id for v in result.items]


def test_list_unfiltered_newest_first(store):
    res = list_verifications(store)
    assert _ids(res) == ["v1", "v2", "v3"]
    assert res.total == 3
    assert res.has_more is False


def test_list_status_only(store):
    res = list_verifications(store, VerificationFilters(status="approved", difficulty="all"))
    assert _ids(res) == ["v3"]
    assert res.total == 1


def test_list_three_predicates_are_all_applied(store):
    f = VerificationFilters(status="pending", difficulty="4", reference_source="aqa")
    res = list_verifications(store, f)
    assert _ids(res) == ["v1"]
    assert res.total == 1


def test_list_reference_source_case_insensitive(store):
    res = list_verifications(store, VerificationFilters(reference_source="AQA"))
    assert _ids(res) == ["v1", "v3"]


def test_list_reference_source_wildcards_are_literal(store):
    res = list_verifications(store, VerificationFilters(reference_source="%"))
    assert res.total == 0


@pytest.mark.parametrize(
    "value, expected",
    [("challenge", ["v1"]), ("regular", ["v2", "v3"]), ("all", ["v1", "v2", "v3"])],
)
def test_list_challenge_flag(store, value, expected):
    res = list_verifications(store, VerificationFilters(challenge_question=value))
    assert _ids(res) == expected
    assert res.total == len(expected)


def test_list_topic_filter_parent_covers_subtopics(store):
    res = list_verifications(store, VerificationFilters(topic_ids=[1]))
    assert _ids(res) == ["v1", "v3"]


def test_list_topic_filter_subtopic(store):
    res = list_verifications(store, VerificationFilters(topic_ids=[21]))
    assert _ids(res) == ["v2"]


def test_list_topic_filter_combined_with_difficulty(store):
    res = list_verifications(store, VerificationFilters(topic_ids=[11, 21], difficulty=7))
    assert _ids(res) == ["v2"]


def test_list_limit_and_has_more(store):
    res = list_verifications(store, limit=2)
    assert _ids(res) == ["v1", "v2"]
    assert res.total == 3
    assert res.has_more is True

    res = list_verifications(store, limit=3)
    assert res.has_more is False


@pytest.mark.parametrize(
    "filters",
    [
        VerificationFilters(status="bogus"),
        VerificationFilters(difficulty="hard"),
        VerificationFilters(difficulty=11),
        VerificationFilters(challenge_question="maybe"),
        VerificationFilters(reference_source="   "),
    ],
)
def test_list_unknown_filter_values_match_everything(store, filters):
    assert list_verifications(store, filters).total == 3


def test_list_items_satisfy_every_predicate(store):
    combos = [
        VerificationFilters(status="pending", challenge_question="regular"),
        VerificationFilters(difficulty=4, reference_source="paper"),
        VerificationFilters(status="approved", difficulty=4, challenge_question="regular", topic_ids=[1]),
    ]
    for f in combos:
        res = list_verifications(store, f)
        for v in res.items:
            if f.status != "all":
                assert v.status == f.status
            if f.difficulty != "all":
                assert v.question_difficulty == int(f.difficulty)
            if f.reference_source:
                assert f.reference_source.lower() in (v.reference_source or "").lower()
            if f.challenge_question == "regular":
                assert not (v.metadata or {}).get("challengeQuestion")
        assert res.total == len(res.items)


def test_list_sort_by_difficulty(store):
    res = list_verifications(store, VerificationFilters(sort_by="difficulty"))
    assert _ids(res)[0] == "v2"


def test_list_joined_display_fields(store):
    v1 = list_verifications(store).items[0]
    assert v1.question_specification.startswith("Solve x^2")
    assert v1.subject_title == "Mathematics"
    assert v1.subject_slug == "mathematics"
    assert v1.metadata == {"challengeQuestion": True}


def test_list_endpoint(store):
    r = client.get("/verifications", params={"status": "approved", "difficulty": "all"})
    assert r.status_code == 200
    body = r.json()
    assert [v["id"] for v in body["items"]] == ["v3"]
    assert body["total"] == 1 and body["has_more"] is False


def test_list_endpoint_topic_ids_and_limit(store):
    r = client.get("/verifications", params={"topic_ids": [1, 2], "limit": 1})
    body = r.json()
    assert r.status_code == 200
    assert len(body["items"]) == 1
    assert body["total"] == 3 and body["has_more"] is True


def test_list_endpoint_rejects_out_of_range_limit(store):
    r = client.get("/verifications", params={"limit": 0})
    assert r.status_code == 422


def test_configured_batch_size_is_clamped(store, monkeypatch):
    monkeypatch.setattr(verifications, "DEFAULT_BATCH_SIZE", 500)
    assert batch_limit() == verifications.MAX_BATCH_SIZE

    monkeypatch.setattr(verifications, "DEFAULT_BATCH_SIZE", 0)
    assert batch_limit() == 1
    res = list_verifications(store)
    assert _ids(res) == ["v1"] and res.has_more is True


def test_challenge_flag_compared_as_text(store):
    store.add_all(
        [
            QuestionVerification(id="v4", question_id="q2", meta={"challengeQuestion": "true"}),
            QuestionVerification(id="v5", question_id="q2", meta={"challengeQuestion": "yes please"}),
        ]
    )
    store.commit()

    challenge = list_verifications(store, VerificationFilters(challenge_question="challenge"))
    assert sorted(_ids(challenge)) == ["v1", "v4"]

    regular = list_verifications(store, VerificationFilters(challenge_question="regular"))
    assert sorted(_ids(regular)) == ["v2", "v3", "v5"]
