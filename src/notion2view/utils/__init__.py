"""Shared utilities for notion2view."""
