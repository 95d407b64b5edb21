"""
Flip a directed edge (like or follow) and report the new state.

The edge row is deleted by its composite key first; only when nothing was
deleted is it inserted. The unique constraint on the pair decides concurrent
inserts: the loser sees IntegrityError, finds the winner's row and reports
the edge as present. No existence check runs before the delete.
"""

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tuneshare.core.errors import InternalError, NotFoundError
from tuneshare.models import Base, Follow, Like

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _EdgeSpec:
    model: type[Base]
    source_column: str
    target_column: str
    target_label: str


class EdgeKind(enum.Enum):
    LIKE = _EdgeSpec(Like, "user_id", "track_id", "Track")
    FOLLOW = _EdgeSpec(Follow, "follower_id", "following_id", "User")


def _key_filter(spec: _EdgeSpec, source_id: int, target_id: int) -> tuple:
    return (
        getattr(spec.model, spec.source_column) == source_id,
        getattr(spec.model, spec.target_column) == target_id,
    )


def _delete_edge(session: Session, spec: _EdgeSpec, source_id: int, target_id: int) -> int:
    """Delete the edge row; returns the number of rows removed (0 or 1)."""
    return (
        session.query(spec.model)
        .filter(*_key_filter(spec, source_id, target_id))
        .delete(synchronize_session=False)
    )


def _create_edge(session: Session, spec: _EdgeSpec, source_id: int, target_id: int) -> None:
    session.add(spec.model(**{spec.source_column: source_id, spec.target_column: target_id}))
    session.flush()


def edge_exists(session: Session, kind: EdgeKind, source_id: int, target_id: int) -> bool:
    spec = kind.value
    return (
        session.query(spec.model.id)
        .filter(*_key_filter(spec, source_id, target_id))
        .first()
        is not None
    )


def toggle_edge(session: Session, kind: EdgeKind, source_id: int, target_id: int) -> bool:
    """
    Flip the (source_id, target_id) edge of the given kind and commit.

    Returns True when the edge exists afterwards, False when it was removed.
    Raises NotFoundError when the insert violates a constraint other than the
    pair's uniqueness (the target is gone) and InternalError on store failures.
    """
    spec = kind.value
    try:
        if _delete_edge(session, spec, source_id, target_id) > 0:
            session.commit()
            logger.info(
                "Edge removed",
                extra={"edge": kind.name, "source_id": source_id, "target_id": target_id},
            )
            return False
        try:
            _create_edge(session, spec, source_id, target_id)
            session.commit()
        except IntegrityError:
            session.rollback()
            if edge_exists(session, kind, source_id, target_id):
                # A concurrent request inserted the same pair first.
                logger.info(
                    "Edge created concurrently; treating as present",
                    extra={"edge": kind.name, "source_id": source_id, "target_id": target_id},
                )
                return True
            raise NotFoundError(f"{spec.target_label} does not exist") from None
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Edge toggle failed: %s", e)
        raise InternalError("An error occurred while updating the relationship.") from e
    logger.info(
        "Edge created",
        extra={"edge": kind.name, "source_id": source_id, "target_id": target_id},
    )
    return True
