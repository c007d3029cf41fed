"""
remote.it API endpoints and wire header names
"""

# Base URL for the remote.it API
BASE_URL = "https://api.remote.it"

# Host the signing string is bound to
API_HOST = "api.remote.it"

# GraphQL endpoint. Append to BASE_URL to get the full URL.
GRAPHQL_PATH = "/graphql/v1"

# Multipart file upload endpoint. Append to BASE_URL to get the full URL.
FILE_UPLOAD_PATH = "/graphql/v1/file/upload"

# Default location of the credentials file, relative to the home directory
CREDENTIALS_DIR = ".remoteit"
CREDENTIALS_FILE = "credentials"

# Environment variables read by Credentials.from_env()
ENV_ACCESS_KEY_ID = "R3_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "R3_SECRET_ACCESS_KEY"

# Headers produced by the canonical signing scheme
HEADER_ACCESS_KEY_ID = "X-Access-Key-Id"
HEADER_TIMESTAMP = "X-Timestamp"
HEADER_SIGNATURE = "X-Signature"

# Components covered by the HTTP-Signature Authorization header
HTTP_SIGNATURE_HEADERS = "(request-target) host date content-type"
HTTP_SIGNATURE_ALGORITHM = "hmac-sha256"

JSON_CONTENT_TYPE = "application/json"

# Headers never printed in debug output
SENSITIVE_HEADERS = ("Authorization", HEADER_SIGNATURE)
