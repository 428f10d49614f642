"""Remote content store."""

from navsphere.store.github import CommitResult, GitHubContentStore

__all__ = ["CommitResult", "GitHubContentStore"]
