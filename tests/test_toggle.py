"""Tests for tuneshare.services.toggle and the profile totals built on its edges (SQLite)."""

import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import IntegrityError, OperationalError

from tuneshare.core.database import build_engine, build_session_factory
from tuneshare.core.errors import InternalError, NotFoundError, ValidationError
from tuneshare.models import Base, Follow, Like, Track, User
from tuneshare.services import toggle
from tuneshare.services.toggle import EdgeKind, edge_exists, toggle_edge
from tuneshare.services.track_service import toggle_like
from tuneshare.services.user_service import get_user_profile, toggle_follow


def _user(username: str) -> User:
    return User(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        password_hash="x",
    )


class _StoreTestCase(unittest.TestCase):
    """Fresh file-backed database (one connection per session) with two users and a track."""

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.engine = build_engine(f"sqlite:///{os.path.join(self.tmpdir.name, 'test.db')}")
        Base.metadata.create_all(self.engine)
        self.factory = build_session_factory(self.engine)
        self.db = self.factory()
        self.alice = _user("alice")
        self.bob = _user("bob")
        self.db.add_all([self.alice, self.bob])
        self.db.flush()
        self.track = Track(
            title="Song",
            audio_file_url="https://cdn/a.mp3",
            duration="3:00",
            author_id=self.bob.id,
        )
        self.db.add(self.track)
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()
        self.tmpdir.cleanup()

    def _like_rows(self) -> int:
        return (
            self.db.query(Like)
            .filter(Like.user_id == self.alice.id, Like.track_id == self.track.id)
            .count()
        )


class TestToggleLike(_StoreTestCase):
    """Sequential toggles flip the like on and off."""

    def test_like_unlike_like(self) -> None:
        self.assertTrue(toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id))
        self.assertEqual(self._like_rows(), 1)
        self.assertFalse(toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id))
        self.assertEqual(self._like_rows(), 0)
        self.assertTrue(toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id))
        self.assertEqual(self._like_rows(), 1)

    def test_like_missing_track_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            toggle_like(self.db, self.alice.id, 9999)


class TestToggleFollow(_StoreTestCase):
    """toggle_follow creates then removes the Follow(A, U) row."""

    def test_follow_then_unfollow(self) -> None:
        self.assertTrue(toggle_follow(self.db, self.alice.id, self.bob.id))
        self.assertTrue(edge_exists(self.db, EdgeKind.FOLLOW, self.alice.id, self.bob.id))
        self.assertFalse(edge_exists(self.db, EdgeKind.FOLLOW, self.bob.id, self.alice.id))

        self.assertFalse(toggle_follow(self.db, self.alice.id, self.bob.id))
        self.assertEqual(self.db.query(Follow).count(), 0)

    def test_self_follow_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            toggle_follow(self.db, self.alice.id, self.alice.id)

    def test_follow_missing_user_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            toggle_follow(self.db, self.alice.id, 9999)


class TestProfileTotals(_StoreTestCase):
    """Profile totals count each table by its own key column."""

    def test_counts_follow_edges_and_tracks(self) -> None:
        toggle_follow(self.db, self.alice.id, self.bob.id)
        # Alice also authors a track, so a count keyed on the wrong table would disagree.
        self.db.add(
            Track(
                title="Other",
                audio_file_url="https://cdn/b.mp3",
                duration="1:00",
                author_id=self.alice.id,
            )
        )
        self.db.commit()

        bob = get_user_profile(self.db, "bob", self.alice.id)
        self.assertEqual((bob.total_tracks, bob.total_followers, bob.total_followings), (1, 1, 0))
        self.assertTrue(bob.followed_by_me)

        alice = get_user_profile(self.db, "alice", None)
        self.assertEqual(
            (alice.total_tracks, alice.total_followers, alice.total_followings), (1, 0, 1)
        )
        self.assertFalse(alice.followed_by_me)
        self.assertIsNone(get_user_profile(self.db, "nobody", None))


class TestToggleRace(_StoreTestCase):
    """Two toggles that both miss on delete: one insert wins, the other reports True too."""

    def test_concurrent_create_recovers(self) -> None:
        real_delete = toggle._delete_edge
        other = self.factory()
        results: list[bool] = []
        raced = False

        def delete_then_lose_race(session, spec, source_id, target_id):
            nonlocal raced
            if not raced:
                raced = True
                # Our delete saw nothing; the concurrent request now deletes nothing and inserts.
                results.append(toggle_edge(other, EdgeKind.LIKE, source_id, target_id))
                return 0
            return real_delete(session, spec, source_id, target_id)

        try:
            with patch.object(toggle, "_delete_edge", side_effect=delete_then_lose_race):
                results.append(toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id))
        finally:
            other.close()

        self.assertEqual(results, [True, True])
        self.assertEqual(self._like_rows(), 1)
        # A later sequential toggle flips the edge off.
        self.assertFalse(toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id))
        self.assertEqual(self._like_rows(), 0)

    def test_unrelated_integrity_error_is_not_found(self) -> None:
        err = IntegrityError("INSERT INTO likes", {}, Exception("FOREIGN KEY constraint failed"))
        with patch.object(toggle, "_create_edge", side_effect=err):
            with self.assertRaises(NotFoundError):
                toggle_edge(self.db, EdgeKind.LIKE, self.alice.id, self.track.id)
        self.assertEqual(self._like_rows(), 0)


class TestToggleStoreFailure(unittest.TestCase):
    """Connectivity errors surface as InternalError after rolling back."""

    def test_operational_error(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.side_effect = OperationalError(
            "DELETE FROM likes", {}, Exception("connection refused")
        )
        with self.assertRaises(InternalError):
            toggle_edge(session, EdgeKind.LIKE, 1, 2)
        session.rollback.assert_called_once()
        session.commit.assert_not_called()


if __name__ == "__main__":
    unittest.main()
