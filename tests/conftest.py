import pytest

from commit_cache import CommitCache, CommitNode
from history_fetcher import HistoryPage


class FakeFetcher:
    """Serves scripted history for each branch, page_size entries at a time."""

    def __init__(self, histories, page_size=100, errors=None):
        self.histories = histories
        self.page_size = page_size
        self.errors = errors or {}
        self.calls = []

    def fetch_page(self, branch, cursor=None):
        self.calls.append((branch, cursor))
        error = self.errors.get((branch, cursor))
        if error is not None:
            raise error
        entries = self.histories[branch]
        start = int(cursor) if cursor is not None else 0
        chunk = entries[start:start + self.page_size]
        has_more = start + self.page_size < len(entries)
        return HistoryPage(
            commits=tuple((sha, tuple(parents)) for sha, parents in chunk),
            has_more=has_more,
            next_cursor=str(start + self.page_size) if has_more else None,
        )


def make_graph(**parents):
    """make_graph(b=['a'], a=[]) -> {'b': CommitNode('b', ('a',)), ...}"""
    return {sha: CommitNode(sha, tuple(p)) for sha, p in parents.items()}


def linear_history(prefix, count, base=None):
    """Newest-first entries of a chain prefix{count-1} -> ... -> prefix0 -> base"""
    entries = []
    for i in range(count - 1, -1, -1):
        if i > 0:
            parents = [f"{prefix}{i - 1}"]
        else:
            parents = [base] if base else []
        entries.append((f"{prefix}{i}", parents))
    return entries


@pytest.fixture
def cache():
    return CommitCache()
