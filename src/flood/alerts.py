"""
Community danger alerts: expiry, ranking and display helpers.

Alerts, votes and comments are stored by the hosted backend; this module
only works on records already fetched from it.

Ranking: rank = vote_score * 10 + comment_count, highest first.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from src import config


@dataclass(frozen=True)
class DangerAlert:
    """A user-reported danger alert."""

    id: str
    user_id: str
    location_text: str
    lat: float
    lng: float
    message: str
    created_at: datetime
    expires_at: datetime
    photo_url: Optional[str] = None
    score: int = 0
    comment_count: int = 0

    @property
    def rank(self) -> int:
        return rank_key(self.score, self.comment_count)

    @classmethod
    def from_dict(cls, data: dict) -> "DangerAlert":
        """Build from a backend row (ISO-8601 timestamps)."""
        created_at = _parse_timestamp(data["created_at"])
        expires_raw = data.get("expires_at")
        expires_at = _parse_timestamp(expires_raw) if expires_raw else default_expiry(created_at)
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            location_text=data["location_text"],
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            message=data["message"],
            created_at=created_at,
            expires_at=expires_at,
            photo_url=data.get("photo_url"),
        )


@dataclass(frozen=True)
class AlertVote:
    alert_id: str
    user_id: str
    vote: int  # -1 or 1

    def __post_init__(self):
        if self.vote not in (-1, 1):
            raise ValueError(f"vote must be -1 or 1, got {self.vote}")


@dataclass(frozen=True)
class AlertComment:
    alert_id: str
    user_id: str
    comment: str


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    # Backends commonly emit a trailing "Z" for UTC
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def default_expiry(created_at: datetime) -> datetime:
    """Alerts expire ALERT_TTL_HOURS after creation."""
    return created_at + timedelta(hours=config.ALERT_TTL_HOURS)


def is_expired(alert: DangerAlert, now: datetime) -> bool:
    return alert.expires_at <= now


def active_alerts(alerts: Iterable[DangerAlert], now: datetime) -> List[DangerAlert]:
    """Drop alerts whose expiry time has passed."""
    return [a for a in alerts if not is_expired(a, now)]


def rank_key(score: int, comment_count: int) -> int:
    """Vote score dominates, then discussion."""
    return score * 10 + comment_count


def rank_alerts(
    alerts: Iterable[DangerAlert],
    votes: Iterable[AlertVote],
    comments: Iterable[AlertComment],
) -> List[DangerAlert]:
    """
    Attach vote score and comment count to each alert and sort by rank.

    Alerts with equal rank keep their input order.

    Returns:
        New DangerAlert instances with score and comment_count filled in
    """
    vote_score: dict[str, int] = {}
    for v in votes:
        vote_score[v.alert_id] = vote_score.get(v.alert_id, 0) + v.vote

    comment_count: dict[str, int] = {}
    for c in comments:
        comment_count[c.alert_id] = comment_count.get(c.alert_id, 0) + 1

    enriched = [
        replace(a, score=vote_score.get(a.id, 0), comment_count=comment_count.get(a.id, 0))
        for a in alerts
    ]
    enriched.sort(key=lambda a: a.rank, reverse=True)
    return enriched


def validate_alert_message(message: str) -> str:
    """
    Return the trimmed message, or raise ValueError if it is too short.
    """
    trimmed = (message or "").strip()
    if len(trimmed) < config.MIN_ALERT_MESSAGE_LENGTH:
        raise ValueError(
            f"Message should be at least {config.MIN_ALERT_MESSAGE_LENGTH} characters"
        )
    return trimmed


def format_age(created_at: datetime, now: datetime) -> str:
    """Compact age label: '12m ago', '5h ago', '3d ago'."""
    minutes = int((now - created_at).total_seconds() // 60)
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 48:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
