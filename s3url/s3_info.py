from dataclasses import dataclass, replace
from enum import Enum

from .errors import AllocationError

__all__ = [
    'S3Service',
    'S3Info',
    'clone_s3info',
    'clear_s3info',
    'dump_s3info',
]

# Upper bound on the length of dump_s3info() output
DUMP_LIMIT = 8192


class S3Service(Enum):
    UNKNOWN = "unknown"
    S3 = "s3"
    GS3 = "gs3"


@dataclass
class S3Info:
    """
    Identity of an S3 (or S3-compatible) bucket endpoint.

    Attributes:
        host: Canonical host to connect to, e.g. 's3.us-west-2.amazonaws.com'.
        region: Storage region, e.g. 'us-west-2'.
        bucket: Bucket name.
        rootkey: Object key prefix inside the bucket, without the bucket segment.
        profile: Name of the AWS profile in effect ('no' if none is active).
        svc: Which object-store family the host belongs to.

    A partially filled S3Info may be handed to process_s3_url(), which
    completes it in place.
    """
    host: str | None = None
    region: str | None = None
    bucket: str | None = None
    rootkey: str | None = None
    profile: str | None = None
    svc: S3Service = S3Service.UNKNOWN


def clone_s3info(s3: S3Info) -> S3Info:
    """Return an independent copy of s3; nothing is returned if the copy fails."""
    try:
        return replace(s3)
    except MemoryError as e:
        raise AllocationError(f"Could not copy S3 info: {dump_s3info(s3)}") from e


def clear_s3info(s3: S3Info | None) -> None:
    if s3 is None:
        return
    s3.host = None
    s3.region = None
    s3.bucket = None
    s3.rootkey = None
    s3.profile = None
    s3.svc = S3Service.UNKNOWN


def dump_s3info(s3: S3Info) -> str:
    def _field(value):
        return value if value is not None else "null"

    text = (
        f"host={_field(s3.host)} "
        f"region={_field(s3.region)} "
        f"bucket={_field(s3.bucket)} "
        f"rootkey={_field(s3.rootkey)} "
        f"profile={_field(s3.profile)}"
    )
    return text[:DUMP_LIMIT]
