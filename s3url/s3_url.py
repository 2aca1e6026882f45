import logging
from enum import Enum
from typing import NamedTuple

from .errors import URLFormatError, ObjectStoreConfigError
from .s3_auth import resolve_active_profile, resolve_default_region
from .s3_info import S3Info, S3Service
from .utils import (
    AWS_HOST, GOOGLE_HOST, S3_SCHEME, GS3_SCHEME, NO_PROFILE,
    ParsedURI, parse_uri, split_delim, join_segments, endswith,
)

__all__ = [
    'UrlFormat',
    'HostMatch',
    'classify_s3_host',
    'rebuild_s3_url',
    'process_s3_url',
    'canonicalize_s3_url',
    'is_s3_url',
]

logger = logging.getLogger(__name__)


class UrlFormat(Enum):
    """
    The URL shapes understood by rebuild_s3_url():

        S3_SCHEME       s3://<bucket>/<path>
        GS3_SCHEME      gs3://<bucket>/<path>
        PATH            https://s3.amazonaws.com/<bucket>/<path>
        PATH_REGION     https://s3.<region>.amazonaws.com/<bucket>/<path>
        VIRTUAL         https://<bucket>.s3.amazonaws.com/<path>
        VIRTUAL_REGION  https://<bucket>.s3.<region>.amazonaws.com/<path>
        GOOGLE          https://storage.googleapis.com/<bucket>/<path>
        OTHER           https://<host>/<bucket>/<path>
    """
    S3_SCHEME = "s3"
    GS3_SCHEME = "gs3"
    PATH = "path"
    PATH_REGION = "path-region"
    VIRTUAL = "virtual"
    VIRTUAL_REGION = "virtual-region"
    GOOGLE = "google"
    OTHER = "other"


class HostMatch(NamedTuple):
    """What classify_s3_host() could read off the scheme and host.

    host is only set for shapes whose host is passed through (GOOGLE, OTHER);
    region and bucket are None when the host does not carry them.
    """
    format: UrlFormat
    svc: S3Service
    host: str | None = None
    region: str | None = None
    bucket: str | None = None


def _is_s3_label(label):
    return label.lower() == "s3"


def _classify_aws_host(url, labels):
    if len(labels) == 3:
        return HostMatch(UrlFormat.PATH, S3Service.S3)
    if len(labels) == 4:
        if _is_s3_label(labels[0]):
            return HostMatch(UrlFormat.PATH_REGION, S3Service.S3, region=labels[1])
        if _is_s3_label(labels[1]):
            return HostMatch(UrlFormat.VIRTUAL, S3Service.S3, bucket=labels[0])
        raise URLFormatError(f"Unrecognized AWS S3 host '{url.host}' in '{url}'")
    if len(labels) == 5:
        if not _is_s3_label(labels[1]):
            raise URLFormatError(f"Unrecognized AWS S3 host '{url.host}' in '{url}'")
        return HostMatch(UrlFormat.VIRTUAL_REGION, S3Service.S3, region=labels[2], bucket=labels[0])
    raise URLFormatError(
        f"Unrecognized AWS S3 host '{url.host}' in '{url}' "
        f"(expected 3 to 5 labels, got {len(labels)})"
    )


def classify_s3_host(url: ParsedURI) -> HostMatch:
    """
    Work out which S3 URL shape url has, and pull the bucket and region out
    of its host where the shape puts them there.

    Raises:
        URLFormatError: If url has no host, or has an amazonaws.com host that
            matches none of the AWS shapes.
    """
    if not url.host:
        raise URLFormatError(f"Invalid S3 URL: Missing host: {url}")

    labels = split_delim(url.host, '.')

    if url.scheme == S3_SCHEME and len(labels) == 1:
        return HostMatch(UrlFormat.S3_SCHEME, S3Service.S3, bucket=labels[0])
    if url.scheme == GS3_SCHEME and len(labels) == 1:
        return HostMatch(UrlFormat.GS3_SCHEME, S3Service.GS3, bucket=labels[0])
    if endswith(url.host, AWS_HOST):
        return _classify_aws_host(url, labels)
    if url.host.lower() == GOOGLE_HOST:
        return HostMatch(UrlFormat.GOOGLE, S3Service.GS3, host=url.host)
    return HostMatch(UrlFormat.OTHER, S3Service.UNKNOWN, host=url.host)


def rebuild_s3_url(url: ParsedURI, s3: S3Info | None = None, *,
                   region_resolver=resolve_default_region) -> tuple[ParsedURI, S3Info]:
    """
    Rebuild an S3 URL into canonical path-style form:

        https://s3.<region>.amazonaws.com/<bucket>/<path>    (AWS)
        https://storage.googleapis.com/<bucket>/<path>       (Google)
        https://<host>/<bucket>/<path>                       (anything else)

    The region comes from the host if it has one, else from s3.region, else
    from region_resolver(url). The bucket comes from the host if it has one,
    else from the first path segment, else from s3.bucket.

    Args:
        url: The URL to rebuild. It is not modified.
        s3: Optional S3Info carrying an already known region/bucket. Its
            bucket, region and svc are updated in place; host is left alone.
        region_resolver: Callable returning the default region for a URL.

    Returns:
        tuple: (canonical ParsedURI, S3Info). The S3Info is s3 itself when
        one was passed in.

    Raises:
        URLFormatError: The URL does not match any S3 shape.
        ObjectStoreConfigError: No region or no bucket could be found.
    """
    match = classify_s3_host(url)
    pathsegments = split_delim(url.path, '/')

    region = match.region
    if not region and s3 is not None:
        region = s3.region
    if not region:
        region = region_resolver(url)
    if not region:
        raise ObjectStoreConfigError(f"Could not determine a region for '{url}'")

    bucket = match.bucket
    if not bucket and pathsegments:
        bucket = pathsegments.pop(0)
    if not bucket and s3 is not None:
        bucket = s3.bucket
    if not bucket:
        raise ObjectStoreConfigError(f"Could not determine a bucket for '{url}'")

    if match.svc is S3Service.S3:
        host = f"s3.{region}{AWS_HOST}"
    elif match.svc is S3Service.GS3:
        host = GOOGLE_HOST
    else:
        host = match.host

    newurl = url.clone()
    newurl.scheme = "https"
    newurl.host = host
    newurl.path = "/" + "/".join([bucket] + pathsegments)

    logger.debug(
        f"Rebuilt {match.format.value} URL '{url}' as '{newurl}' "
        f"(bucket={bucket} region={region})"
    )

    if s3 is None:
        s3 = S3Info()
    s3.bucket = bucket
    s3.region = region
    s3.svc = match.svc
    return newurl, s3


def process_s3_url(url: ParsedURI, s3: S3Info, *,
                   profile_resolver=resolve_active_profile,
                   region_resolver=resolve_default_region) -> ParsedURI:
    """
    Fill in s3 for url and return url rebuilt in canonical path-style form.

    On return s3.profile, s3.host, s3.region, s3.bucket, s3.rootkey and s3.svc
    are all set. If an error is raised, s3 should be considered invalid.

    Raises:
        URLFormatError: url or s3 is None, or url does not match an S3 shape.
        ObjectStoreConfigError: No region or no bucket could be found.
    """
    if url is None or s3 is None:
        raise URLFormatError("process_s3_url requires both a URL and an S3Info")

    s3.profile = profile_resolver(url) or NO_PROFILE

    newurl, s3 = rebuild_s3_url(url, s3, region_resolver=region_resolver)
    s3.host = newurl.host

    # Root key is the canonical path minus the leading bucket segment
    pathsegments = split_delim(newurl.path, '/')
    s3.rootkey = join_segments(pathsegments[1:])
    return newurl


def canonicalize_s3_url(uri: str, s3: S3Info | None = None, **resolvers) -> tuple[str, S3Info]:
    """
    Convert an S3 URL string into its canonical https path-style string.

    >>> canonicalize_s3_url("https://mybucket.s3.us-west-2.amazonaws.com/a/b")[0]
    'https://s3.us-west-2.amazonaws.com/mybucket/a/b'

    Keyword arguments (profile_resolver, region_resolver) are passed on to
    process_s3_url().
    """
    if s3 is None:
        s3 = S3Info()
    newurl = process_s3_url(parse_uri(uri), s3, **resolvers)
    return newurl.rebuild(), s3


def is_s3_url(url: ParsedURI | None) -> bool:
    """Check if a url has indicators that signal an S3 or Google S3 url."""
    if url is None:
        return False
    scheme = (url.scheme or "").lower()
    if scheme in (S3_SCHEME, GS3_SCHEME):
        return True
    modes = url.modes
    if S3_SCHEME in modes or GS3_SCHEME in modes:
        return True
    if url.host is not None:
        if endswith(url.host, AWS_HOST):
            return True
        if url.host.lower() == GOOGLE_HOST:
            return True
    return False
