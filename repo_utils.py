import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from history_builder import MAX_COMMITS

load_dotenv()


@dataclass(frozen=True)
class RepoConfig:
    owner: str
    repo: str
    token: Optional[str] = None
    max_commits: int = MAX_COMMITS


def get_repo_config(owner=None, repo=None, token=None, max_commits=None):
    """Build the repository config, filling anything not passed from the environment / .env"""
    owner = owner or os.getenv("REPO_OWNER")
    repo = repo or os.getenv("REPO")
    token = token or os.getenv("GITHUB_ACCESS_TOKEN") or None

    if not owner:
        raise ValueError("REPO_OWNER environment variable is not set.")
    if not repo:
        raise ValueError("REPO environment variable is not set.")

    if max_commits is None:
        raw = os.getenv("MAX_COMMITS")
        if raw:
            try:
                max_commits = int(raw)
            except ValueError:
                raise ValueError(f"MAX_COMMITS must be an integer, got {raw!r}") from None
        else:
            max_commits = MAX_COMMITS
    if max_commits <= 0:
        raise ValueError(f"MAX_COMMITS must be positive, got {max_commits}")

    return RepoConfig(owner=owner, repo=repo, token=token, max_commits=max_commits)
