"""Walk a branch's history page by page into a sha -> CommitNode graph."""

import logging
from dataclasses import dataclass, field
from typing import Dict

from commit_cache import CommitCache, CommitNode

logger = logging.getLogger(__name__)

# Histories longer than this are cut off. A common ancestor older than the
# cut on either branch will not show up in the result.
MAX_COMMITS = 1000


@dataclass(frozen=True)
class HistorySummary:
    """What is left of a BranchHistory once the frontier is computed"""

    branch: str
    commits: int
    truncated: bool


@dataclass
class BranchHistory:
    """Commits visited walking back from a branch tip"""

    branch: str
    commits: Dict[str, CommitNode] = field(default_factory=dict)
    truncated: bool = False

    def summary(self) -> HistorySummary:
        return HistorySummary(self.branch, len(self.commits), self.truncated)

    def keys(self):
        return self.commits.keys()

    def values(self):
        return self.commits.values()

    def get(self, sha, default=None):
        return self.commits.get(sha, default)

    def __getitem__(self, sha):
        return self.commits[sha]

    def __contains__(self, sha):
        return sha in self.commits

    def __len__(self):
        return len(self.commits)

    def __iter__(self):
        return iter(self.commits)


def build_ancestry(fetcher, branch, cache: CommitCache, max_commits=MAX_COMMITS) -> BranchHistory:
    """Fetch up to max_commits commits of branch, reusing nodes already in cache.

    Fetch errors propagate as they are and no partial history is returned.
    Hitting max_commits is not an error: the history comes back with
    ``truncated`` set.
    """
    if max_commits <= 0:
        raise ValueError(f"max_commits must be positive, got {max_commits}")

    history = BranchHistory(branch)
    cursor = None
    fetched = 0

    while True:
        page = fetcher.fetch_page(branch, cursor)
        if not page.commits:
            break

        for sha, parents in page.commits:
            if fetched >= max_commits:
                history.truncated = True
                break
            history.commits[sha] = cache.add(sha, parents)
            fetched += 1

        if history.truncated or not page.has_more:
            break
        if fetched >= max_commits:
            history.truncated = True
            break
        cursor = page.next_cursor

    if history.truncated:
        logger.warning("History of %s truncated at %d commits; older common commits will be missed",
                       branch, max_commits)
    logger.info("Loaded %d commits for %s", len(history), branch)
    return history
