"""Shared utilities for protomap."""
