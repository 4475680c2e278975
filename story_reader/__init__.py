"""
Read-only Jira story reader: retrieval, JQL construction and acceptance criteria resolution.
"""
__version__ = "1.0.0"
