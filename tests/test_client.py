"""
R3Client / AsyncR3Client tests

Transports are mocked at _make_request or at the session; signatures in
the captured headers are checked against the signing functions.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from remoteit import AsyncR3Client, Credentials, R3Client
from remoteit.auth.canonical import build_request_descriptor, canonicalize_request
from remoteit.auth.http_signature import build_auth_header
from remoteit.auth.signing import create_signature
from remoteit.errors import (
    FileUploadError,
    InvalidCredentialsError,
    InvalidInputError,
    NetworkError,
    UnauthenticatedError,
)
from remoteit.operations import custom_operation
from remoteit.types import AccessKeyPair, FileUpload, R3ClientConfig
from remoteit.upload import encode_upload_form
from remoteit.utils.retry import RetryPolicy

CREDENTIALS = Credentials(r3_access_key_id="foo", r3_secret_access_key="YmFy")
NO_DELAY = RetryPolicy(max_retries=2, backoff_ms=[0])
DATES = ["Mon, 01 Jan 2024 00:00:00 GMT", "Mon, 01 Jan 2024 00:00:05 GMT"]

UPLOAD_RESPONSE = {
    "fileId": "file-1",
    "fileVersionId": "version-1",
    "version": 1,
    "name": "hello.sh",
    "executable": True,
    "ownerId": "owner-1",
    "fileArguments": [],
}


# ============================================================
# Helpers
# ============================================================

def make_client(**kwargs):
    client = R3Client(CREDENTIALS, retry_policy=NO_DELAY, **kwargs)
    client._http_client._make_request = MagicMock(return_value={"data": {"login": {"id": "u1"}}})
    return client


def sent(client, call=0):
    """(method, url, headers, body) of a captured request."""
    return client._http_client._make_request.call_args_list[call][0]


def write_script(tmp_path):
    path = tmp_path / "hello.sh"
    path.write_text("#!/bin/sh\necho hello\n")
    return path


# ============================================================
# Tests - Configuration
# ============================================================

class TestConfiguration:
    def test_defaults(self):
        client = R3Client(CREDENTIALS)
        assert client.base_url == "https://api.remote.it"
        assert client.host == "api.remote.it"
        assert client.auth_scheme == "http-signature"
        assert client.access_key_id == "foo"

    def test_base_url_trailing_slash(self):
        client = R3Client(CREDENTIALS, base_url="http://localhost:8080/")
        assert client.base_url == "http://localhost:8080"
        assert client.host == "localhost:8080"

    def test_accepts_key_pair(self):
        client = R3Client(AccessKeyPair("foo", b"bar"))
        assert client.access_key_id == "foo"

    def test_invalid_key_pair(self):
        with pytest.raises(InvalidCredentialsError):
            R3Client(AccessKeyPair("foo bar", b"bar"))

    def test_missing_credentials(self):
        with pytest.raises(ValueError, match="credentials are required"):
            R3Client(None)

    def test_wrong_credentials_type(self):
        with pytest.raises(TypeError):
            R3Client("foo:bar")

    def test_invalid_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            R3Client(CREDENTIALS, base_url="api.remote.it")

    def test_base_url_with_query_rejected(self):
        with pytest.raises(ValueError, match="no query or fragment"):
            R3Client(CREDENTIALS, base_url="https://api.remote.it/?x=1")

    def test_invalid_auth_scheme(self):
        with pytest.raises(ValueError, match="auth_scheme"):
            R3Client(CREDENTIALS, auth_scheme="basic")

    def test_from_config(self):
        policy = RetryPolicy(max_retries=0)
        config = R3ClientConfig(credentials=CREDENTIALS, auth_scheme="canonical", retry_config=policy, timeout=5)
        client = R3Client.from_config(config)
        assert client.auth_scheme == "canonical"
        assert client.retry_policy is policy
        assert client.timeout == 5

    def test_from_config_default_retry_policy(self):
        client = R3Client.from_config(R3ClientConfig(credentials=CREDENTIALS))
        assert client.retry_policy.max_retries == 3

    def test_services_are_cached(self):
        client = R3Client(CREDENTIALS)
        assert client.scripting is client.scripting
        assert client.devices is client.devices
        assert client.organizations is client.organizations


# ============================================================
# Tests - GraphQL requests
# ============================================================

class TestGraphQL:
    def test_execute(self):
        client = make_client()
        response = client.execute(custom_operation("query { login { id } }"))

        assert response.data == {"login": {"id": "u1"}}
        method, url, headers, body = sent(client)
        assert method == "POST"
        assert url == "https://api.remote.it/graphql/v1"
        assert json.loads(body) == {
            "operationName": None,
            "query": "query { login { id } }",
            "variables": {},
        }

    def test_body_is_compact_json(self):
        client = make_client()
        client.send_graphql_request({"query": "{ a }"})
        assert sent(client)[3] == b'{"query":"{ a }"}'

    def test_http_signature_headers(self):
        client = make_client()
        client.scripting.list_files()

        _, _, headers, _ = sent(client)
        assert headers["Content-Type"] == "application/json"
        assert headers["Authorization"] == build_auth_header(
            "foo", b"bar", "application/json", "POST", "/graphql/v1", headers["Date"]
        )

    def test_canonical_headers(self):
        client = make_client(auth_scheme="canonical")
        client.devices.list(limit=10)

        _, _, headers, body = sent(client)
        assert headers["X-Access-Key-Id"] == "foo"
        assert headers["Content-Type"] == "application/json"
        assert "Authorization" not in headers

        descriptor = build_request_descriptor("POST", "/graphql/v1", None, body, headers["X-Timestamp"])
        expected = create_signature(b"bar", canonicalize_request(descriptor), "hex")
        assert headers["X-Signature"] == expected

    def test_base_url_path_prefix_is_signed(self):
        client = make_client(base_url="https://proxy.example/remoteit/")
        client.scripting.list_files()

        _, url, headers, _ = sent(client)
        assert url == "https://proxy.example/remoteit/graphql/v1"
        assert headers["Authorization"] == build_auth_header(
            "foo",
            b"bar",
            "application/json",
            "POST",
            "/remoteit/graphql/v1",
            headers["Date"],
            host="proxy.example",
        )

    def test_base_url_path_prefix_is_signed_canonical(self):
        client = make_client(base_url="https://proxy.example/remoteit", auth_scheme="canonical")
        client.scripting.list_files()

        _, url, headers, body = sent(client)
        assert url == "https://proxy.example/remoteit/graphql/v1"
        descriptor = build_request_descriptor(
            "POST", "/remoteit/graphql/v1", None, body, headers["X-Timestamp"]
        )
        assert headers["X-Signature"] == create_signature(b"bar", canonicalize_request(descriptor), "hex")

    def test_graphql_errors_returned(self):
        client = make_client()
        client._http_client._make_request.return_value = {
            "data": None,
            "errors": [{"message": "Not found"}],
        }
        response = client.organizations.get_owned()
        assert not response.ok
        assert response.errors[0].message == "Not found"

    def test_retry_is_signed_again(self):
        client = make_client()
        client._http_client._make_request.side_effect = [
            NetworkError("reset"),
            {"data": {}},
        ]

        with patch("remoteit.auth.http_signature.get_date", side_effect=DATES):
            client.scripting.list_jobs(limit=1)

        first, second = sent(client, 0)[2], sent(client, 1)[2]
        assert [first["Date"], second["Date"]] == DATES
        assert first["Authorization"] != second["Authorization"]

    def test_unauthenticated_raised(self):
        client = make_client()
        client._http_client._make_request.side_effect = UnauthenticatedError("Signature mismatch")
        with pytest.raises(UnauthenticatedError):
            client.scripting.list_files()
        assert client._http_client._make_request.call_count == 1

    def test_debug_output_hides_signature(self, capsys):
        client = R3Client(CREDENTIALS, debug=True)
        session = MagicMock()
        response = MagicMock(status_code=200, text='{"data": {}}', headers={})
        session.request.return_value = response
        client._http_client._session = session

        client.scripting.list_files()

        headers = session.request.call_args[1]["headers"]
        signature = headers["Authorization"].split('signature="')[1].rstrip('"')
        out = capsys.readouterr().out
        assert signature not in out
        assert "[REDACTED]" in out

    def test_context_manager_closes_session(self):
        with R3Client(CREDENTIALS) as client:
            session = MagicMock()
            client._http_client._session = session
        session.close.assert_called_once()


# ============================================================
# Tests - File upload
# ============================================================

class TestUpload:
    def test_form_fields(self, tmp_path):
        upload = FileUpload("hello.sh", write_script(tmp_path), executable=True, short_desc="Says hello")
        body, content_type = encode_upload_form(upload, boundary="boundary123")

        assert content_type == "multipart/form-data; boundary=boundary123"
        assert b'name="hello.sh"' in body
        assert b'filename="hello.sh"' in body
        assert b"echo hello" in body
        assert b'name="executable"\r\n\r\ntrue' in body
        assert b'name="shortDesc"\r\n\r\nSays hello' in body
        assert b"longDesc" not in body

    def test_file_name_required(self, tmp_path):
        with pytest.raises(ValueError, match="file_name"):
            encode_upload_form(FileUpload("", write_script(tmp_path), executable=False))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            encode_upload_form(FileUpload("x", tmp_path / "missing.sh", executable=False))

    def test_upload(self, tmp_path):
        client = make_client()
        client._http_client._make_request.return_value = UPLOAD_RESPONSE

        result = client.upload_file(FileUpload("hello.sh", write_script(tmp_path), executable=True))

        assert result.file_id == "file-1"
        assert result.version == 1
        assert result.executable is True
        method, url, headers, body = sent(client)
        assert url == "https://api.remote.it/graphql/v1/file/upload"
        assert headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert headers["Authorization"] == build_auth_header(
            "foo", b"bar", headers["Content-Type"], "POST", "/graphql/v1/file/upload", headers["Date"]
        )
        assert b"echo hello" in body

    def test_rejected_upload(self, tmp_path):
        client = make_client()
        client._http_client._make_request.side_effect = InvalidInputError("file too large")

        with pytest.raises(FileUploadError) as exc_info:
            client.upload_file(FileUpload("hello.sh", write_script(tmp_path), executable=True))

        assert exc_info.value.message == "file too large"
        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value.__cause__, InvalidInputError)

    def test_auth_failure_keeps_type(self, tmp_path):
        client = make_client()
        client._http_client._make_request.side_effect = UnauthenticatedError("Signature mismatch")

        with pytest.raises(UnauthenticatedError):
            client.upload_file(FileUpload("hello.sh", write_script(tmp_path), executable=True))

    def test_malformed_upload_response(self, tmp_path):
        client = make_client()
        client._http_client._make_request.return_value = {"fileId": "file-1"}

        with pytest.raises(NetworkError, match="upload response"):
            client.upload_file(FileUpload("hello.sh", write_script(tmp_path), executable=True))


# ============================================================
# Tests - Async client
# ============================================================

class TestAsyncClient:
    @pytest.mark.asyncio
    async def test_execute(self):
        async with AsyncR3Client(CREDENTIALS, retry_policy=NO_DELAY) as client:
            client._http_client._make_request = AsyncMock(return_value={"data": {"files": []}})

            response = await client.scripting.list_files()

            assert response.data == {"files": []}
            method, url, headers, body = client._http_client._make_request.call_args[0]
            assert url == "https://api.remote.it/graphql/v1"
            assert headers["Authorization"].startswith('Signature keyId="foo"')
            assert json.loads(body)["operationName"] == "GetFiles"

    @pytest.mark.asyncio
    async def test_retry_is_signed_again(self):
        async with AsyncR3Client(CREDENTIALS, retry_policy=NO_DELAY, auth_scheme="canonical") as client:
            client._http_client._make_request = AsyncMock(side_effect=[NetworkError("reset"), {"data": {}}])

            with patch(
                "remoteit.auth.signing.build_request_descriptor",
                wraps=build_request_descriptor,
            ) as build:
                await client.devices.list()

            assert build.call_count == 2
            assert client._http_client._make_request.await_count == 2

    @pytest.mark.asyncio
    async def test_upload(self, tmp_path):
        async with AsyncR3Client(CREDENTIALS, retry_policy=NO_DELAY) as client:
            client._http_client._make_request = AsyncMock(return_value=UPLOAD_RESPONSE)

            result = await client.scripting.upload_file(
                FileUpload("hello.sh", write_script(tmp_path), executable=True)
            )

            assert result.file_version_id == "version-1"

    @pytest.mark.asyncio
    async def test_rejected_upload(self, tmp_path):
        async with AsyncR3Client(CREDENTIALS, retry_policy=NO_DELAY) as client:
            client._http_client._make_request = AsyncMock(side_effect=InvalidInputError("bad form"))

            with pytest.raises(FileUploadError):
                await client.upload_file(FileUpload("hello.sh", write_script(tmp_path), executable=True))
