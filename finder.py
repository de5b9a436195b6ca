"""Find the last common commits of two branches of a GitHub repository."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Set

from commit_cache import CommitCache
from dag_utils import dangling_parents, find_frontier
from history_builder import MAX_COMMITS, build_ancestry
from history_fetcher import GitHubHistoryFetcher

logger = logging.getLogger(__name__)


class LastCommonCommitsFinder:
    """
    Finds the most recent commits shared by two branches.

    Every branch history is fetched fresh on each call; only individual
    commits are remembered, in ``cache``, and reused across calls. The cache
    lives as long as the finder and is never trimmed.
    """

    def __init__(self, owner: str, repo: str, token: Optional[str] = None, *,
                 fetcher=None, cache: Optional[CommitCache] = None,
                 max_commits: int = MAX_COMMITS, parallel: bool = False):
        self.owner = owner
        self.repo = repo
        self.fetcher = fetcher or GitHubHistoryFetcher(owner, repo, token)
        self.cache = cache if cache is not None else CommitCache()
        self.max_commits = max_commits
        self.parallel = parallel
        self.last_summaries = None

    def _build(self, branch):
        return build_ancestry(self.fetcher, branch, self.cache, self.max_commits)

    def find_last_common_commits(self, branch_a: str, branch_b: str) -> Set[str]:
        """Return the shas of the last commits reachable from both branches.

        Fetch errors are raised unchanged. If either history was cut off at
        ``max_commits`` the result only covers the loaded part; check
        ``truncated`` or ``last_summaries`` afterwards.
        """
        self.last_summaries = None

        if self.parallel:
            with ThreadPoolExecutor(max_workers=2) as executor:
                future_a = executor.submit(self._build, branch_a)
                future_b = executor.submit(self._build, branch_b)
                history_a = future_a.result()
                history_b = future_b.result()
        else:
            history_a = self._build(branch_a)
            history_b = self._build(branch_b)

        for history in (history_a, history_b):
            if history.truncated:
                logger.debug("%s has %d parents outside the loaded history",
                             history.branch, len(dangling_parents(history)))

        result = find_frontier(history_a, history_b, self.cache)
        self.last_summaries = (history_a.summary(), history_b.summary())
        logger.info("Last common commits of %s and %s: %d", branch_a, branch_b, len(result))
        return result

    @property
    def truncated(self) -> bool:
        """Whether either history of the last successful call hit max_commits"""
        if self.last_summaries is None:
            return False
        return any(summary.truncated for summary in self.last_summaries)


def create_finder(owner, repo, token=None, **kwargs):
    return LastCommonCommitsFinder(owner, repo, token, **kwargs)
