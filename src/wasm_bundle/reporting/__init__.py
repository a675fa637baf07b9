"""Reporting helpers for pipeline outcomes."""
