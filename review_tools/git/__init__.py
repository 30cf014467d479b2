"""
Git tools for the commit review assistant.

This package provides:
- Repository access (revisions, diffs, logs, file contents)
- Resolution of CLI hash inputs into a commit range
- Extraction of the diff and touched text files for a range
"""

from .changeset import (
    ChangeSet,
    ChangeSetExtractor,
    filter_text_files,
    is_text_file,
    unique_paths,
)
from .repository import GitRepository
from .revisions import CommitRange, CommitRef, RevisionInput, RevisionResolver

__all__ = [
    "ChangeSet",
    "ChangeSetExtractor",
    "CommitRange",
    "CommitRef",
    "GitRepository",
    "RevisionInput",
    "RevisionResolver",
    "filter_text_files",
    "is_text_file",
    "unique_paths",
]
