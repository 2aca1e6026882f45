"""Shared fixtures for the S3 URL tests."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

AWS_ENV_VARS = (
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_CONFIG_FILE",
    "AWS_SHARED_CREDENTIALS_FILE",
)

Resolver = typ.Callable[[object], typ.Optional[str]]


@pytest.fixture(autouse=True)
def isolated_aws_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the AWS config files at an empty directory and clear AWS_* env."""
    for variable in AWS_ENV_VARS:
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    return tmp_path


@pytest.fixture
def fixed() -> typ.Callable[[typ.Optional[str]], Resolver]:
    """Build a resolver that always answers the given value."""

    def factory(value: str | None) -> Resolver:
        def resolver(url: object) -> str | None:
            return value

        return resolver

    return factory
