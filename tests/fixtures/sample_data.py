"""Sample registry payloads for testing."""

import json

REGISTRY_URL = "http://registry.test:5000"

# Catalog
REGISTRY_CATALOG = {
    "repositories": [
        "library/alpine",
        "team/app",
        "team/tools/lint",
        "team/tools/format",
    ]
}

# Tags
TEAM_APP_TAGS = {"name": "team/app", "tags": ["latest", "v1.10", "v1.2"]}

# Auth
BEARER_CHALLENGE = (
    'Bearer realm="http://registry.test:5000/v2/token",'
    'service="registry.test",scope="repository:team/app:pull"'
)
TOKEN_RESPONSE = {"token": "s3cr3t-token"}

# Manifests
V1_COMPATIBILITY = {
    "architecture": "amd64",
    "config": {
        "Labels": {
            "maintainer": "team@example.com",
            "org.opencontainers.image.version": "1.0",
        }
    },
    "created": "2024-03-01T12:00:00.000000000Z",
    "docker_version": "24.0.7",
    "os": "linux",
}

V1_COMPATIBILITY_NO_LABELS = {
    "architecture": "arm64",
    "config": {"Labels": None},
    "created": "2024-02-01T08:30:00Z",
    "os": "linux",
}

SCHEMA1_MANIFEST = {
    "name": "team/app",
    "tag": "1.0",
    "history": [
        {"v1Compatibility": json.dumps(V1_COMPATIBILITY)},
        {"v1Compatibility": json.dumps({"created": "2023-01-01T00:00:00Z", "os": "linux"})},
    ],
}

SCHEMA1_MANIFEST_NO_V1 = {
    "name": "team/app",
    "history": [{"somethingElse": "{}"}],
}
