"""Core type definitions."""

from typing import NewType

# Manifest page key: content path without extension (e.g., "auth/login")
# Distinct from filesystem Path to catch type mismatches
PagePath = NewType("PagePath", str)
