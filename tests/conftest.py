"""Shared fixtures for search index tests."""

from pathlib import Path

import pytest

from sg_techdocs_search.models import ManifestEntry

PAGES = {
    "index.md": """---
title: Home
---
# ScotAccount Technical Documentation

Welcome to the technical documentation for the Scottish Government digital identity service.
""",
    "getting-started.md": """---
title: Getting Started
---
# Getting Started

Connect your service to ScotAccount in about 30 minutes.

## PKCE Implementation

Every authorisation request must use PKCE with the S256 method.

```javascript
const verifier = generateVerifier();
```
""",
    "architecture.md": """# Architecture

ScotAccount is an OpenID Connect provider. Relying parties redirect users to the authorisation endpoint.
""",
    "scotaccount-guide.md": """# Implementation Guide

Register your redirect URIs and configure client authentication with a private key JWT.
""",
    "scotaccount-token-validation-module.md": """# Token Validation Module

Fetch signing keys from the jwks endpoint and cache them. Verify the signature, issuer,
audience and expiry of every ID token before trusting its claims.
""",
    "integration-examples.md": """# Integration Examples

Examples for Node.js, Python, Java and .NET show the full authentication flow.
""",
    "scotaccount-modular-structure.md": """# Modular Structure

The service is split into discovery, session and verification modules.
""",
}


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a directory holding the documentation pages.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        Path to the content directory.
    """
    directory = tmp_path / "src"
    directory.mkdir()
    for name, text in PAGES.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def manifest() -> list[ManifestEntry]:
    """Create a manifest covering the test pages.

    Returns:
        Manifest entries in site order.
    """
    return [
        ManifestEntry("index.md", "/", "Home"),
        ManifestEntry("getting-started.md", "/getting-started/", "Getting Started"),
        ManifestEntry("architecture.md", "/architecture/", "Architecture"),
        ManifestEntry("scotaccount-guide.md", "/scotaccount-guide/", "Implementation Guide"),
        ManifestEntry(
            "scotaccount-token-validation-module.md",
            "/scotaccount-token-validation-module/",
            "Token Validation Module",
        ),
        ManifestEntry("integration-examples.md", "/integration-examples/", "Integration Examples"),
        ManifestEntry("scotaccount-modular-structure.md", "/scotaccount-modular-structure/", "Modular Structure"),
    ]
