"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from docsite.config import (
    Config,
    LiveReloadConfig,
    PlaygroundConfig,
    ServerConfig,
    SiteConfig,
)

SAMPLE_MANIFEST = {
    "name": "Acme API",
    "colors": {"primary": "#0EA5E9"},
    "navigation": {
        "tabs": [
            {
                "tab": "Guides",
                "groups": [{"group": "Getting Started", "pages": ["introduction"]}],
            },
            {
                "tab": "API Reference",
                "groups": [
                    {"group": "Auth", "pages": ["auth/login", "auth/register"]},
                ],
            },
        ]
    },
}

SAMPLE_PAGES = {
    "introduction.mdx": """---
title: Introduction
description: Start here
---
import { Card } from "./components"

# Introduction

Welcome to the **Acme** API.

## Authentication

Every request needs a token.
""",
    "auth/login.mdx": """---
title: Login
api: "POST /v1/auth/login"
playground_body:
  email: user@example.com
---

# Login

Exchange credentials for a token.

```json
{"token": "abc"}
```
""",
    "auth/register.md": """# Register

Create an account.
""",
}


def write_site(
    source_dir: Path,
    manifest: dict[str, object] | None = None,
    pages: dict[str, str] | None = None,
) -> Path:
    """Write a manifest and content files under source_dir."""
    source_dir.mkdir(parents=True, exist_ok=True)
    (source_dir / "docs.json").write_text(json.dumps(manifest or SAMPLE_MANIFEST))
    for relative, text in (pages if pages is not None else SAMPLE_PAGES).items():
        path = source_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return source_dir


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Creates source_dir and returns a Config instance suitable for testing.
    Use exist_ok=True to allow other fixtures to also create the docs dir.
    """
    source_dir = tmp_path / "docs"
    source_dir.mkdir(exist_ok=True)

    return Config(
        site=SiteConfig(source_dir=source_dir, output_dir=tmp_path / "build"),
        server=ServerConfig(),
        playground=PlaygroundConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def sample_site(test_config: Config) -> Path:
    """Populate the test config's source directory with a three-page site."""
    return write_site(test_config.site.source_dir)


@pytest.fixture
def make_site():
    """Factory writing a manifest and content files into a directory."""
    return write_site
