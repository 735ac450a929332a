"""Canonical application record resolution and conflict detection."""
