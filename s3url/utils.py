import copy
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit, parse_qsl

from .errors import URLFormatError

__all__ = [
    'ParsedURI',
    'parse_uri',
    'split_delim',
    'join_segments',
    'endswith',
]

AWS_HOST = ".amazonaws.com"
GOOGLE_HOST = "storage.googleapis.com"

S3_SCHEME = "s3"
GS3_SCHEME = "gs3"

DEFAULT_AWS_REGION = "us-east-1"

# Profile name recorded when no profile is active
NO_PROFILE = "no"


@dataclass
class ParsedURI:
    """
    A URL split into the parts the S3 helpers work with.

    The parts are plain attributes and may be reassigned in place; call
    `rebuild()` (or `str()`) to get the full URL string back.
    """
    scheme: str
    host: str | None = None
    path: str = ""
    port: str | None = None
    userinfo: str | None = None
    query: str = ""
    fragment: str = ""

    @property
    def netloc(self) -> str:
        netloc = self.host or ""
        if self.userinfo is not None:
            netloc = f"{self.userinfo}@{netloc}"
        if self.port:
            netloc = f"{netloc}:{self.port}"
        return netloc

    @property
    def fragment_params(self) -> dict[str, str]:
        """The fragment read as `key=value&key=value`; bare keys map to ''."""
        return dict(parse_qsl(self.fragment, keep_blank_values=True))

    @property
    def modes(self) -> list[str]:
        """Lower-cased entries of the `mode=` fragment key, e.g. `#mode=s3,zarr`."""
        value = self.fragment_params.get("mode", "")
        return [m.strip().lower() for m in value.split(",") if m.strip()]

    def clone(self) -> "ParsedURI":
        return copy.copy(self)

    def rebuild(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))

    def __str__(self) -> str:
        return self.rebuild()


def _split_netloc(netloc):
    userinfo, at, hostport = netloc.rpartition("@")
    if not at:
        userinfo = None
    if hostport.startswith("["):
        # IPv6 literal, keep the brackets with the host
        end = hostport.find("]")
        if end < 0:
            return userinfo, hostport, None
        host, rest = hostport[:end + 1], hostport[end + 1:]
        port = rest[1:] if rest.startswith(":") else None
    else:
        host, _, port = hostport.partition(":")
    return userinfo, host, (port or None)


def parse_uri(uri: str) -> ParsedURI:
    """
    Parse a URL string into a ParsedURI.

    Args:
        uri: The input URI/URL string, e.g. 's3://bucket/key' or
             'https://bucket.s3.us-west-2.amazonaws.com/key'.

    Returns:
        ParsedURI with the host case preserved.

    Raises:
        URLFormatError: If the URI has no scheme or its host part is malformed.
    """
    try:
        parsed = urlsplit(uri)
    except ValueError as e:
        raise URLFormatError(f"Invalid URI: {e}: {uri}") from e
    if not parsed.scheme:
        raise URLFormatError(f"Invalid URI: Missing scheme (e.g., 's3://', 'https://'): {uri}")
    userinfo, host, port = _split_netloc(parsed.netloc)
    return ParsedURI(
        scheme=parsed.scheme.lower(),
        host=host or None,
        path=parsed.path,
        port=port,
        userinfo=userinfo,
        query=parsed.query,
        fragment=parsed.fragment,
    )


def split_delim(text, delim):
    """Split text on delim, dropping empty segments."""
    if not text:
        return []
    return [segment for segment in text.split(delim) if segment]


def join_segments(segments, delim="/"):
    return delim.join(segments)


def endswith(text, suffix):
    if text is None or suffix is None:
        return False
    return text.endswith(suffix)
