"""Track creation/deletion, feed and per-user listings, and like toggling."""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func
from sqlalchemy.orm import Session

from tuneshare.core.errors import AuthorizationError, NotFoundError
from tuneshare.models import Like, Track, User
from tuneshare.schemas.track import CreateTrackRequest, TrackAuthor, UserTrackResponse
from tuneshare.services.media import MediaUploader
from tuneshare.services.toggle import EdgeKind, toggle_edge

logger = logging.getLogger(__name__)


async def upload_track_media(
    payload: CreateTrackRequest, uploader: MediaUploader
) -> tuple[str, str | None]:
    """Upload the audio (and cover, if given) to the media host; returns the hosted URLs."""
    audio_url = await uploader.upload(str(payload.audio_file_url))
    cover_url = None
    if payload.cover_image_url is not None:
        cover_url = await uploader.upload(str(payload.cover_image_url))
    return audio_url, cover_url


def save_track(
    session: Session,
    author_id: int,
    payload: CreateTrackRequest,
    audio_url: str,
    cover_url: str | None,
) -> Track:
    track = Track(
        title=payload.title,
        artist=payload.artist,
        duration=payload.duration,
        audio_file_url=audio_url,
        cover_image_url=cover_url,
        author_id=author_id,
    )
    session.add(track)
    session.commit()
    # Track.author is joined-eager, so refresh loads it with the row.
    session.refresh(track)
    logger.info("Track created", extra={"track_id": track.id, "author_id": author_id})
    return track


async def create_track(
    session: Session,
    author_id: int,
    payload: CreateTrackRequest,
    uploader: MediaUploader,
) -> Track:
    """
    Upload media on the event loop, then persist in the threadpool: the session
    is synchronous and must not block other requests.
    """
    audio_url, cover_url = await upload_track_media(payload, uploader)
    return await run_in_threadpool(
        save_track, session, author_id, payload, audio_url, cover_url
    )


def delete_track(session: Session, user_id: int, track_id: int) -> bool:
    """Delete a track owned by user_id. Ownership is read from the store, never the token."""
    track = session.get(Track, track_id)
    if track is None:
        raise NotFoundError("Track does not exist")
    if track.author_id != user_id:
        raise AuthorizationError("You can't delete someone else's track")
    session.query(Like).filter(Like.track_id == track_id).delete(synchronize_session=False)
    session.delete(track)
    session.commit()
    logger.info("Track deleted", extra={"track_id": track_id, "author_id": user_id})
    return True


def get_feed_tracks(session: Session, limit: int) -> list[Track]:
    return (
        session.query(Track)
        .order_by(Track.created_at.desc(), Track.id.desc())
        .limit(limit)
        .all()
    )


def get_track_by_id(session: Session, track_id: int) -> Track:
    track = session.get(Track, track_id)
    if track is None:
        raise NotFoundError("Track does not exist")
    return track


def get_user_tracks(
    session: Session, username: str, viewer_id: int | None
) -> list[UserTrackResponse]:
    """Tracks by username, newest first, with like totals and whether the viewer liked each."""
    author = session.query(User).filter(User.username == username).first()
    if author is None:
        return []
    tracks = (
        session.query(Track)
        .filter(Track.author_id == author.id)
        .order_by(Track.created_at.desc(), Track.id.desc())
        .all()
    )
    if not tracks:
        return []
    track_ids = [t.id for t in tracks]

    like_counts = dict(
        session.query(Like.track_id, func.count(Like.id))
        .filter(Like.track_id.in_(track_ids))
        .group_by(Like.track_id)
        .all()
    )
    liked_ids: set[int] = set()
    if viewer_id is not None:
        liked_ids = {
            row.track_id
            for row in session.query(Like.track_id)
            .filter(Like.user_id == viewer_id, Like.track_id.in_(track_ids))
            .all()
        }

    author_out = TrackAuthor.model_validate(author)
    return [
        UserTrackResponse.model_validate(
            {
                **{c.name: getattr(t, c.name) for c in Track.__table__.columns},
                "author": author_out,
                "total_like_count": like_counts.get(t.id, 0),
                "has_liked": t.id in liked_ids,
            }
        )
        for t in tracks
    ]


def toggle_like(session: Session, user_id: int, track_id: int) -> bool:
    """Like or unlike a track; returns True when the track is now liked."""
    if session.get(Track, track_id) is None:
        raise NotFoundError("Track does not exist")
    return toggle_edge(session, EdgeKind.LIKE, user_id, track_id)
