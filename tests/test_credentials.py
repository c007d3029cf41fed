"""
Credentials tests

Covers loading profiles from INI files, the environment and direct
construction. Files are written to pytest's tmp_path.
"""

import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from remoteit.credentials import (
    CredentialProfiles,
    Credentials,
    default_credentials_path,
    load_from_disk,
)
from remoteit.errors import CredentialsError, CredentialsNotFoundError, MalformedCredentialsError
from remoteit.types import AccessKeyPair


# ============================================================
# Helpers
# ============================================================

def write_credentials(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "credentials"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


# ============================================================
# Tests - Credentials
# ============================================================

class TestCredentials:
    def test_decodes_secret(self):
        credentials = Credentials(r3_access_key_id="foo", r3_secret_access_key="YmFy")
        assert credentials.access_key_id == "foo"
        assert credentials.key == b"bar"

    def test_key_pair_snapshot(self):
        credentials = Credentials("foo", "YmFy")
        assert credentials.to_key_pair() == AccessKeyPair("foo", b"bar")

    def test_invalid_base64(self):
        with pytest.raises(MalformedCredentialsError, match="base64"):
            Credentials("foo", "not base64!")

    def test_missing_fields(self):
        with pytest.raises(MalformedCredentialsError):
            Credentials("", "YmFy")
        with pytest.raises(MalformedCredentialsError):
            Credentials("foo", "")

    def test_repr_hides_secret(self):
        text = repr(Credentials("foo", "YmFy"))
        assert "foo" in text
        assert "YmFy" not in text
        assert "[REDACTED]" in text

    def test_equality(self):
        assert Credentials("foo", "YmFy") == Credentials("foo", "YmFy")
        assert Credentials("foo", "YmFy") != Credentials("foo", "YmF6")
        assert len({Credentials("foo", "YmFy"), Credentials("foo", "YmFy")}) == 1


# ============================================================
# Tests - Environment
# ============================================================

class TestFromEnv:
    def test_loads(self):
        credentials = Credentials.from_env({"R3_ACCESS_KEY_ID": "foo", "R3_SECRET_ACCESS_KEY": "YmFy"})
        assert credentials == Credentials("foo", "YmFy")

    def test_missing_variables(self):
        with pytest.raises(CredentialsNotFoundError) as exc_info:
            Credentials.from_env({"R3_ACCESS_KEY_ID": "foo"})
        assert "R3_SECRET_ACCESS_KEY" in str(exc_info.value)
        assert "R3_ACCESS_KEY_ID" not in str(exc_info.value)

    def test_empty_variable_is_missing(self):
        with pytest.raises(CredentialsNotFoundError):
            Credentials.from_env({"R3_ACCESS_KEY_ID": "", "R3_SECRET_ACCESS_KEY": "YmFy"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("R3_ACCESS_KEY_ID", "foo")
        monkeypatch.setenv("R3_SECRET_ACCESS_KEY", "YmFy")
        assert Credentials.from_env().access_key_id == "foo"


# ============================================================
# Tests - Credentials file
# ============================================================

class TestLoadFromDisk:
    def test_empty_file(self, tmp_path):
        profiles = load_from_disk(write_credentials(tmp_path, ""))
        assert profiles.is_empty()
        assert len(profiles) == 0

    def test_single_profile(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [default]
            R3_ACCESS_KEY_ID=foo
            R3_SECRET_ACCESS_KEY=YmFy
            """,
        )
        profiles = Credentials.load_from_disk(path)
        assert len(profiles) == 1
        assert "default" in profiles
        assert profiles.profile("default") == Credentials("foo", "YmFy")

    def test_multiple_profiles(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [default]
            R3_ACCESS_KEY_ID=foo
            R3_SECRET_ACCESS_KEY=YmFy

            [other]
            R3_ACCESS_KEY_ID=baz
            R3_SECRET_ACCESS_KEY=cXV4
            """,
        )
        profiles = load_from_disk(str(path))
        assert sorted(profiles) == ["default", "other"]
        assert profiles.profile("other").key == b"qux"

    def test_take_profile_removes_it(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [default]
            R3_ACCESS_KEY_ID=foo
            R3_SECRET_ACCESS_KEY=YmFy
            """,
        )
        profiles = load_from_disk(path)
        assert profiles.take_profile("default") == Credentials("foo", "YmFy")
        assert profiles.take_profile("default") is None
        assert profiles.is_empty()

    def test_unknown_profile(self, tmp_path):
        profiles = load_from_disk(write_credentials(tmp_path, "[default]\nR3_ACCESS_KEY_ID=foo\nR3_SECRET_ACCESS_KEY=YmFy\n"))
        assert profiles.profile("missing") is None
        assert profiles.take_profile("missing") is None
        assert len(profiles) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(CredentialsNotFoundError):
            load_from_disk(tmp_path / "does-not-exist")

    def test_not_ini(self, tmp_path):
        path = write_credentials(tmp_path, "R3_ACCESS_KEY_ID=foo\n")
        with pytest.raises(MalformedCredentialsError, match="could not be parsed"):
            load_from_disk(path)

    def test_profile_missing_key(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [default]
            R3_ACCESS_KEY_ID=foo
            """,
        )
        with pytest.raises(MalformedCredentialsError, match="R3_SECRET_ACCESS_KEY"):
            load_from_disk(path)

    def test_bad_secret_reported_on_retrieval(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [broken]
            R3_ACCESS_KEY_ID=foo
            R3_SECRET_ACCESS_KEY=not base64!
            """,
        )
        profiles = load_from_disk(path)
        assert "broken" in profiles
        with pytest.raises(MalformedCredentialsError, match=r"profile \[broken\]"):
            profiles.profile("broken")

    def test_percent_sign_is_literal(self, tmp_path):
        path = write_credentials(
            tmp_path,
            """
            [default]
            R3_ACCESS_KEY_ID=foo%bar
            R3_SECRET_ACCESS_KEY=YmFy
            """,
        )
        assert load_from_disk(path).profile("default").access_key_id == "foo%bar"

    def test_default_path(self, tmp_path):
        with patch("remoteit.credentials.Path.home", return_value=tmp_path):
            assert default_credentials_path() == tmp_path / ".remoteit" / "credentials"

    def test_home_not_found(self):
        with patch("remoteit.credentials.Path.home", side_effect=RuntimeError("no home")):
            with pytest.raises(CredentialsNotFoundError):
                load_from_disk()

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(CredentialsError):
            load_from_disk(tmp_path / "does-not-exist")


class TestCredentialProfiles:
    def test_direct_construction(self):
        profiles = CredentialProfiles(
            {"default": {"r3_access_key_id": "foo", "r3_secret_access_key": "YmFy"}}
        )
        assert profiles.profile("default").key == b"bar"
        assert "YmFy" not in repr(profiles)
