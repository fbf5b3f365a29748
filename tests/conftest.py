import os
import tempfile
from datetime import UTC, datetime, timedelta

# must be set before db.py is imported anywhere
_DB_PATH = os.path.join(tempfile.gettempdir(), "question_verification_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"

import pytest  # noqa: E402

import models  # noqa: E402
from db import Base, SessionLocal, engine  # noqa: E402

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def seed(db) -> None:
    db.add(models.Subject(id=454, title="Mathematics", slug="mathematics"))
    db.add_all(
        [
            models.Topic(id=1, title="Algebra", slug="algebra", subject_id=454),
            models.Topic(id=11, title="Linear Equations", slug="linear-equations", parent_topic_id=1, subject_id=454),
            models.Topic(id=12, title="Quadratic Equations", slug="quadratic-equations", parent_topic_id=1, subject_id=454),
            models.Topic(id=2, title="Calculus", slug="calculus", subject_id=454),
            models.Topic(id=21, title="Differentiation", slug="differentiation", parent_topic_id=2, subject_id=454),
            models.Topic(id=22, title="Integration", slug="integration", parent_topic_id=2, subject_id=454),
            models.Topic(id=3, title="Mechanics", slug="mechanics", subject_id=454),
        ]
    )
    db.flush()

    topics = {t.id: t for t in db.query(models.Topic).all()}

    # q1: open-response, with a stale revision that must never be shown
    db.add(models.Question(id="q1", subject_id=454, specification="Solve x^2 + 5x + 6 = 0",
                           question_type="LA", level="AS", paper="Paper 1", difficulty=4,
                           topics=[topics[12]]))
    db.add(models.QuestionRevision(id=100, question_id="q1"))
    db.add(models.QuestionRevision(id=101, question_id="q1"))
    db.add_all(
        [
            models.QuestionPart(id="p-old", revision_id=100, content="old part", order=1),
            # inserted out of order on purpose
            models.QuestionPart(id="p2", revision_id=101, content="Hence sketch the curve", marks=2, order=2),
            models.QuestionPart(id="p1", revision_id=101, content="Find x", markscheme="x=-2 or x=-3", marks=3, order=1),
        ]
    )

    # reference question: multiple choice
    db.add(models.Question(id="q-ref", subject_id=454, specification="Solve x^2 - 4 = 0",
                           question_type="MCQ", difficulty=3, is_staging=False,
                           topics=[topics[12]]))
    db.add(models.QuestionRevision(id=200, question_id="q-ref"))
    db.add_all(
        [
            models.QuestionOption(id="o2", revision_id=200, content="x = 4", correct=False, order=2),
            models.QuestionOption(id="o1", revision_id=200, content="x = ±2", correct=True, order=1,
                                  markscheme="difference of squares"),
        ]
    )

    db.add(models.Question(id="q2", subject_id=454, specification="Differentiate x^3",
                           question_type="SA", difficulty=7, topics=[topics[21]]))
    db.add(models.Question(id="q3", subject_id=454, specification="Solve 2x + 1 = 5",
                           question_type="SA", difficulty=4, topics=[topics[11]]))
    db.flush()

    for qid, rev in (("q1", 101), ("q-ref", 200)):
        db.get(models.Question, qid).current_revision_id = rev

    db.add_all(
        [
            models.QuestionVerification(
                id="v1", question_id="q1", reference_question_id="q-ref",
                reference_source="AQA 2019 Paper 1", status="pending",
                meta={"challengeQuestion": True}, created_at=T0 + timedelta(minutes=3),
            ),
            models.QuestionVerification(
                id="v2", question_id="q2", reference_source="Edexcel 2020",
                status="pending", meta=None, created_at=T0 + timedelta(minutes=2),
            ),
            models.QuestionVerification(
                id="v3", question_id="q3", reference_question_id="q-gone",
                reference_source="aqa 2021 paper 2", status="approved",
                approver_user_ids=["u0"], meta={"challengeQuestion": False},
                created_at=T0 + timedelta(minutes=1),
            ),
        ]
    )
    db.commit()


@pytest.fixture()
def store():
    """Fresh schema with the seeded question store; yields an open session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed(db)
    with SessionLocal() as db:
        yield db
