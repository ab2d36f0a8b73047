"""Jira Helper: a local web companion for a Jira server."""

__version__ = "0.1.0"
