"""Tests for container SAS generation."""

import base64
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from blobstage.auth.credentials import AccountType, StorageAccountCredentials
from blobstage.auth.exceptions import InvalidSignatureWindowError, SignatureError
from blobstage.storage.sas import (
    SignatureWindow,
    full_container_permissions,
    mint_container_sas,
    parse_signature_window,
)


@pytest.fixture
def credentials():
    """Credentials with a valid base64 account key."""
    key = base64.b64encode(b"test-account-key-12345678901234567890").decode()
    return StorageAccountCredentials(AccountType.DEFAULT, "testaccount", key)


@pytest.fixture
def container_url():
    return "https://testaccount.blob.core.windows.net/bench"


class TestSignatureWindow:
    """Test signature window construction."""

    def test_from_hours(self):
        start = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        window = SignatureWindow.from_hours(start, 2)
        assert window.start == start
        assert window.expiry == start + timedelta(hours=2)

    def test_normalizes_to_utc(self):
        """Test that aware times in any zone are converted to UTC."""
        plus_five = timezone(timedelta(hours=5))
        start = datetime(2026, 10, 18, 12, 0, tzinfo=plus_five)

        window = SignatureWindow.from_hours(start, 1)

        assert window.start.tzinfo == timezone.utc
        assert window.start == datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)
        assert window.expiry == datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)

    def test_naive_times_become_aware(self):
        window = SignatureWindow.from_hours(datetime(2026, 10, 18, 12, 0), 1)
        assert window.start.utcoffset() == timedelta(0)
        assert window.expiry.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("hours", [0, -1])
    def test_rejects_non_positive_duration(self, hours):
        start = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        with pytest.raises(InvalidSignatureWindowError):
            SignatureWindow.from_hours(start, hours)

    def test_rejects_sub_second_window(self):
        """Test windows that collapse once encoded to whole seconds."""
        start = datetime(2026, 10, 18, 12, 0, 0, 100, tzinfo=timezone.utc)
        with pytest.raises(InvalidSignatureWindowError):
            SignatureWindow(start=start, expiry=start + timedelta(microseconds=500))

    def test_window_error_is_signature_error(self):
        start = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        with pytest.raises(SignatureError):
            SignatureWindow(start=start, expiry=start)


class TestMintContainerSas:
    """Test signing container URLs."""

    def test_signed_url_shape(self, credentials, container_url):
        start = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        window = SignatureWindow.from_hours(start, 2)

        signed_url = mint_container_sas(credentials, "bench", container_url, window)

        parsed = urlparse(signed_url)
        params = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == container_url
        assert params["sr"] == ["c"]
        assert set(params["sp"][0]) == set("racwdl")
        assert params["st"] == ["2026-10-18T12:00:00Z"]
        assert params["se"] == ["2026-10-18T14:00:00Z"]
        assert "sig" in params

    def test_encoded_expiry_after_start_in_utc(self, credentials, container_url):
        """Test that a window given in a non-UTC zone is encoded in UTC."""
        minus_seven = timezone(timedelta(hours=-7))
        start = datetime(2026, 10, 18, 20, 30, tzinfo=minus_seven)
        window = SignatureWindow.from_hours(start, 1)

        signed_url = mint_container_sas(credentials, "bench", container_url, window)
        st, se = parse_signature_window(signed_url)

        assert st == datetime(2026, 10, 19, 3, 30, tzinfo=timezone.utc)
        assert se == datetime(2026, 10, 19, 4, 30, tzinfo=timezone.utc)
        assert se > st

    def test_trailing_slash_is_dropped(self, credentials):
        window = SignatureWindow.from_hours(datetime.now(timezone.utc), 1)
        signed_url = mint_container_sas(
            credentials, "bench", "https://testaccount.blob.core.windows.net/bench/", window
        )
        assert signed_url.startswith("https://testaccount.blob.core.windows.net/bench?")

    def test_signer_receives_scope(self, credentials, container_url):
        calls = []

        def signer(**kwargs):
            calls.append(kwargs)
            return "sv=x&sig=y"

        window = SignatureWindow.from_hours(datetime.now(timezone.utc), 1)
        signed_url = mint_container_sas(credentials, "bench", container_url, window, signer=signer)

        assert signed_url == container_url + "?sv=x&sig=y"
        assert calls[0]["account_name"] == "testaccount"
        assert calls[0]["container_name"] == "bench"
        assert calls[0]["start"] == window.start
        assert calls[0]["expiry"] == window.expiry

    def test_signer_failure_raises_signature_error(self, credentials, container_url):
        def signer(**kwargs):
            raise ValueError("bad key")

        window = SignatureWindow.from_hours(datetime.now(timezone.utc), 1)
        with pytest.raises(SignatureError, match="bad key"):
            mint_container_sas(credentials, "bench", container_url, window, signer=signer)

    def test_invalid_account_key(self, container_url):
        credentials = StorageAccountCredentials(AccountType.DEFAULT, "testaccount", "not base64!")
        window = SignatureWindow.from_hours(datetime.now(timezone.utc), 1)
        with pytest.raises(SignatureError):
            mint_container_sas(credentials, "bench", container_url, window)


def test_full_container_permissions():
    permissions = full_container_permissions()
    assert permissions.read and permissions.add and permissions.create
    assert permissions.write and permissions.delete and permissions.list


def test_parse_signature_window_without_times():
    assert parse_signature_window("https://a.blob.core.windows.net/c") == (None, None)
