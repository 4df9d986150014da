"""Tests for ra.core.errors module."""

from ra.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.VALIDATION_FAILED) == 3
    assert int(ErrorCode.RELEASE_FAILED) == 4
    assert int(ErrorCode.CONFIG_ERROR) == 5


def test_str_is_human_readable() -> None:
    assert str(ErrorCode.VALIDATION_FAILED) == "validation failed"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.RELEASE_FAILED.is_success
