"""Unit tests for custom exceptions."""

import pytest

from playback_bridge.exceptions import (
    BridgeException,
    CredentialMissingException,
    ErrorCode,
    NoDeviceException,
    NothingFoundException,
    OAuthCallbackException,
    UpstreamAuthException,
    UpstreamRequestException,
    VolumeValidationException,
)


def test_bridge_exception_defaults():
    exc = BridgeException(message="Simple error")

    assert exc.message == "Simple error"
    assert exc.code == ErrorCode.BRIDGE_ERROR
    assert exc.status_code == 500
    assert exc.details == {}
    assert str(exc) == "Simple error"


@pytest.mark.parametrize(
    ("exc", "code", "status_code"),
    [
        (CredentialMissingException(), ErrorCode.CREDENTIAL_MISSING, 500),
        (UpstreamAuthException(), ErrorCode.UPSTREAM_AUTH_ERROR, 500),
        (UpstreamRequestException("boom", upstream_status=502), ErrorCode.UPSTREAM_REQUEST_ERROR, 500),
        (NoDeviceException(), ErrorCode.NO_DEVICE, 500),
        (NothingFoundException("zzz"), ErrorCode.NOTHING_FOUND, 404),
        (VolumeValidationException(101), ErrorCode.VALIDATION_ERROR, 400),
        (OAuthCallbackException("bad state"), ErrorCode.OAUTH_CALLBACK_ERROR, 400),
    ],
)
def test_status_codes(exc, code, status_code):
    assert isinstance(exc, BridgeException)
    assert exc.code == code
    assert exc.status_code == status_code


def test_upstream_request_exception_details():
    exc = UpstreamRequestException("Spotify API error: Restriction violated", upstream_status=403, reason="UNKNOWN")

    assert exc.upstream_status == 403
    assert exc.reason == "UNKNOWN"
    assert exc.details == {"upstream_status": 403, "reason": "UNKNOWN"}


def test_nothing_found_keeps_query():
    exc = NothingFoundException("Bohemian Rhapsody")

    assert exc.message == "Nothing found"
    assert exc.details["query"] == "Bohemian Rhapsody"


def test_volume_validation_message():
    exc = VolumeValidationException(-1)

    assert exc.message == "Volume must be 0-100"
    assert exc.details == {"level": -1}
