"""Pydantic models mirroring the face-recognition API payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class AlertStatus(str, Enum):
    """Alert lifecycle states; Verified and Rejected are terminal."""

    PENDING = "Pending"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


ALERT_STATUSES: tuple[str, ...] = tuple(status.value for status in AlertStatus)


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class CriminalRecord(_ApiModel):
    """Criminal record as stored by the backend."""

    person_id: str
    name: str
    crime_type: str | None = None
    gender: str | None = None
    state: str | None = None
    district: str | None = None
    age_range: str | None = None
    images: List[str] = Field(default_factory=list)
    s3_paths: List[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None

    @property
    def primary_s3_path(self) -> str | None:
        return self.s3_paths[0] if self.s3_paths else None


class MatchResult(_ApiModel):
    """One candidate identity returned by a match call. Confidence is 0-100."""

    person_id: str
    name: str
    confidence: float
    crime_type: str | None = None
    face_id: str | None = None
    image_url: str | None = None
    gender: str | None = None
    state: str | None = None
    district: str | None = None
    age_range: str | None = None


class MatchResponse(_ApiModel):
    query_image_url: str | None = None
    matches: List[MatchResult] = Field(default_factory=list)
    total_matches: int = 0
    processing_time_ms: float | None = None

    @property
    def top_match(self) -> MatchResult | None:
        return self.matches[0] if self.matches else None


class MatchRequest(BaseModel):
    """JSON body for ``POST /api/v1/match/url``."""

    image_url: str
    max_results: int | None = None
    similarity_threshold: float | None = None
    create_alert: bool | None = None
    sender_id: str | None = None


class Alert(_ApiModel):
    """Backend-raised record of a match event awaiting human disposition."""

    alert_id: str
    query_image_url: str | None = None
    matches: List[MatchResult] = Field(default_factory=list)
    sender_id: str | None = None
    status: str = AlertStatus.PENDING.value
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == AlertStatus.PENDING.value


class EnrollmentData(_ApiModel):
    person_id: str | None = None
    face_id: str | None = None
    image_url: str | None = None


class EnrollmentResponse(_ApiModel):
    success: bool = False
    message: str = ""
    data: EnrollmentData | None = None
    total_criminals: int = 0
    total_images_indexed: int = 0
    errors: List[str] = Field(default_factory=list)


class PresignedUrl(_ApiModel):
    presigned_url: str
    expires_in: int = 0
    s3_key: str | None = None
    note: str | None = None


class HealthReport(BaseModel):
    """Outcome of the diagnostic ``/health`` probe."""

    success: bool
    message: str
    details: Any = None


__all__ = [
    "ALERT_STATUSES",
    "Alert",
    "AlertStatus",
    "CriminalRecord",
    "EnrollmentData",
    "EnrollmentResponse",
    "HealthReport",
    "MatchRequest",
    "MatchResponse",
    "MatchResult",
    "PresignedUrl",
]
