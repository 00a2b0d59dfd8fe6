"""Narrow boundaries to the filesystem and the remote source."""
