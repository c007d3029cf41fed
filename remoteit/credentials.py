"""
remote.it credentials

Credentials are usually kept in ``~/.remoteit/credentials``, an INI file with
one section per profile:

    [default]
    R3_ACCESS_KEY_ID=...
    R3_SECRET_ACCESS_KEY=...

This is the location remote.it recommends, not the most secure one. If you
keep credentials elsewhere, construct Credentials directly or use
Credentials.from_env().
"""

import base64
import binascii
import configparser
import os
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

from .constants import (
    CREDENTIALS_DIR,
    CREDENTIALS_FILE,
    ENV_ACCESS_KEY_ID,
    ENV_SECRET_ACCESS_KEY,
)
from .errors import CredentialsNotFoundError, MalformedCredentialsError
from .types import AccessKeyPair

_ACCESS_KEY_OPTION = "r3_access_key_id"
_SECRET_KEY_OPTION = "r3_secret_access_key"


def _decode_secret(secret: str) -> bytes:
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedCredentialsError(f"secret access key is not valid base64: {e}")


class Credentials:
    """
    Access key id with its base64 secret, as issued by remote.it

    Example:
        ```python
        credentials = Credentials(
            r3_access_key_id="foo",
            r3_secret_access_key="YmFy",
        )
        client = R3Client(credentials)
        ```
    """

    def __init__(self, r3_access_key_id: str, r3_secret_access_key: str):
        if not r3_access_key_id:
            raise MalformedCredentialsError("access key id is required")
        if not r3_secret_access_key:
            raise MalformedCredentialsError("secret access key is required")

        self._key = _decode_secret(r3_secret_access_key)
        self.r3_access_key_id = r3_access_key_id
        self.r3_secret_access_key = r3_secret_access_key

    def __repr__(self) -> str:
        return f"Credentials(r3_access_key_id={self.r3_access_key_id!r}, r3_secret_access_key='[REDACTED]')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Credentials):
            return NotImplemented
        return (
            self.r3_access_key_id == other.r3_access_key_id
            and self.r3_secret_access_key == other.r3_secret_access_key
        )

    def __hash__(self) -> int:
        return hash((self.r3_access_key_id, self.r3_secret_access_key))

    @property
    def access_key_id(self) -> str:
        return self.r3_access_key_id

    @property
    def key(self) -> bytes:
        """Decoded secret, the HMAC key"""
        return self._key

    def to_key_pair(self) -> AccessKeyPair:
        """Immutable snapshot used for signing"""
        return AccessKeyPair(self.r3_access_key_id, bytes(self._key))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """
        Load credentials from R3_ACCESS_KEY_ID and R3_SECRET_ACCESS_KEY

        Raises:
            CredentialsNotFoundError: either variable is unset or empty
            MalformedCredentialsError: the secret is not base64
        """
        env = os.environ if environ is None else environ
        key_id = env.get(ENV_ACCESS_KEY_ID)
        secret = env.get(ENV_SECRET_ACCESS_KEY)

        missing = [name for name, value in ((ENV_ACCESS_KEY_ID, key_id), (ENV_SECRET_ACCESS_KEY, secret)) if not value]
        if missing:
            raise CredentialsNotFoundError(f"Missing environment variables: {', '.join(missing)}")

        return cls(key_id, secret)  # type: ignore[arg-type]

    @classmethod
    def load_from_disk(
        cls, custom_credentials_path: Optional[Union[str, Path]] = None
    ) -> "CredentialProfiles":
        """See load_from_disk()"""
        return load_from_disk(custom_credentials_path)


class CredentialProfiles:
    """
    Profiles read from a credentials file

    Secrets are unverified until a profile is retrieved with profile() or
    take_profile().
    """

    def __init__(self, profiles: Optional[Dict[str, Dict[str, str]]] = None):
        self._profiles: Dict[str, Dict[str, str]] = dict(profiles or {})

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, profile_name: object) -> bool:
        return profile_name in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __repr__(self) -> str:
        return f"CredentialProfiles(profiles={sorted(self._profiles)!r})"

    def is_empty(self) -> bool:
        return not self._profiles

    def profile(self, profile_name: str) -> Optional[Credentials]:
        """
        Returns:
            Validated Credentials, or None if no such profile exists

        Raises:
            MalformedCredentialsError: the profile's secret is not base64
        """
        raw = self._profiles.get(profile_name)
        if raw is None:
            return None
        return self._build(profile_name, raw)

    def take_profile(self, profile_name: str) -> Optional[Credentials]:
        """
        Like profile(), but removes the profile. A profile can be taken once.
        """
        raw = self._profiles.pop(profile_name, None)
        if raw is None:
            return None
        return self._build(profile_name, raw)

    @staticmethod
    def _build(profile_name: str, raw: Dict[str, str]) -> Credentials:
        try:
            return Credentials(raw[_ACCESS_KEY_OPTION], raw[_SECRET_KEY_OPTION])
        except MalformedCredentialsError as e:
            raise MalformedCredentialsError(f"profile [{profile_name}]: {e}")


def default_credentials_path() -> Path:
    """~/.remoteit/credentials"""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise CredentialsNotFoundError(f"The user's home directory could not be found: {e}")
    return home / CREDENTIALS_DIR / CREDENTIALS_FILE


def load_from_disk(custom_credentials_path: Optional[Union[str, Path]] = None) -> CredentialProfiles:
    """
    Load remote.it credential profiles from an INI file

    Args:
        custom_credentials_path: Override of ~/.remoteit/credentials

    Raises:
        CredentialsNotFoundError: file or home directory missing or unreadable
        MalformedCredentialsError: file cannot be parsed, or a profile lacks a key

    Example:
        ```python
        profiles = load_from_disk()
        credentials = profiles.take_profile("default")
        ```
    """
    path = Path(custom_credentials_path) if custom_credentials_path else default_credentials_path()

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CredentialsNotFoundError(f"The credentials file could not be read: {path}: {e}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read_string(content, source=str(path))
    except configparser.Error as e:
        raise MalformedCredentialsError(f"The credentials file could not be parsed: {e}")

    profiles: Dict[str, Dict[str, str]] = {}
    for section in parser.sections():
        options = dict(parser.items(section))
        missing = [opt.upper() for opt in (_ACCESS_KEY_OPTION, _SECRET_KEY_OPTION) if not options.get(opt)]
        if missing:
            raise MalformedCredentialsError(
                f"profile [{section}] is missing {', '.join(missing)} in {path}"
            )
        profiles[section] = {
            _ACCESS_KEY_OPTION: options[_ACCESS_KEY_OPTION],
            _SECRET_KEY_OPTION: options[_SECRET_KEY_OPTION],
        }

    return CredentialProfiles(profiles)
