"""Unit tests for the S3Info lifecycle helpers."""

from __future__ import annotations

import dataclasses

import pytest

import visionlab.s3url.s3_info as s3_info
from visionlab.s3url.errors import AllocationError
from visionlab.s3url.s3_info import (
    S3Info,
    S3Service,
    clear_s3info,
    clone_s3info,
    dump_s3info,
)


@pytest.fixture
def populated() -> S3Info:
    """A fully populated S3Info."""
    return S3Info(
        host="s3.us-west-2.amazonaws.com",
        region="us-west-2",
        bucket="mybucket",
        rootkey="a/b/c",
        profile="default",
        svc=S3Service.S3,
    )


def test_clone_copies_every_field(populated: S3Info) -> None:
    """A clone compares equal but is a distinct object."""
    copy = clone_s3info(populated)

    assert copy == populated
    assert copy is not populated


def test_clone_is_independent(populated: S3Info) -> None:
    """Changing the clone does not change the original."""
    copy = clone_s3info(populated)
    copy.bucket = "otherbucket"

    assert populated.bucket == "mybucket"


def test_clone_failure_raises_allocation_error(
    monkeypatch: pytest.MonkeyPatch, populated: S3Info
) -> None:
    """Running out of memory mid-copy surfaces as AllocationError."""

    def failing_replace(obj: object, **changes: object) -> object:
        raise MemoryError

    monkeypatch.setattr(s3_info, "replace", failing_replace)

    with pytest.raises(AllocationError):
        clone_s3info(populated)


def test_clear_resets_every_field(populated: S3Info) -> None:
    """clear_s3info leaves an empty S3Info behind."""
    clear_s3info(populated)

    assert populated == S3Info()


def test_clear_is_idempotent(populated: S3Info) -> None:
    """Clearing twice, or clearing None, is harmless."""
    clear_s3info(populated)
    clear_s3info(populated)
    clear_s3info(None)

    assert populated == S3Info()


def test_dump_after_clear_prints_null(populated: S3Info) -> None:
    """Unset fields are rendered as 'null'."""
    clear_s3info(populated)

    assert dump_s3info(populated) == "host=null region=null bucket=null rootkey=null profile=null"


def test_dump_renders_all_fields(populated: S3Info) -> None:
    """Every string field appears in the dump."""
    assert dump_s3info(populated) == (
        "host=s3.us-west-2.amazonaws.com region=us-west-2 bucket=mybucket "
        "rootkey=a/b/c profile=default"
    )


def test_dump_is_bounded() -> None:
    """Very long fields are truncated."""
    info = S3Info(rootkey="k" * (s3_info.DUMP_LIMIT * 2))

    assert len(dump_s3info(info)) == s3_info.DUMP_LIMIT


def test_s3info_defaults_to_unknown_service() -> None:
    """A new S3Info has no service kind."""
    assert S3Info().svc is S3Service.UNKNOWN
    assert all(
        getattr(S3Info(), field.name) is None
        for field in dataclasses.fields(S3Info)
        if field.name != "svc"
    )
