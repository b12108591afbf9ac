"""Client for the face-recognition API (enrollment, matching, alerts, images)."""

from .errors import ApiError, ClientValidationError, HttpStatusError, NetworkError, UnknownError
from .http import FaceApiClient, Page, TokenStore, unwrap_envelope, unwrap_page
from .models import Alert, AlertStatus, CriminalRecord, EnrollmentResponse, MatchResponse, MatchResult
from .uploads import UploadFile

__all__ = [
    "Alert",
    "AlertStatus",
    "ApiError",
    "ClientValidationError",
    "CriminalRecord",
    "EnrollmentResponse",
    "FaceApiClient",
    "HttpStatusError",
    "MatchResponse",
    "MatchResult",
    "NetworkError",
    "Page",
    "TokenStore",
    "UnknownError",
    "UploadFile",
    "unwrap_envelope",
    "unwrap_page",
]
