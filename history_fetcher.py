"""Fetch pages of branch history from the GitHub GraphQL API.

A fetcher is anything with a ``fetch_page(branch, cursor)`` method that
returns a ``HistoryPage``. ``GitHubHistoryFetcher`` is the one talking to
GitHub; tests use in-memory fakes with the same method.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import requests

from errors import BranchNotFound, MalformedPage, RemoteUnavailable, Unauthorized

logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_API_URL = "https://api.github.com/graphql"

HISTORY_QUERY = """
query($owner: String!, $name: String!, $qualifiedName: String!,
      $first: Int!, $after: String, $parentsFirst: Int!) {
  repository(owner: $owner, name: $name) {
    ref(qualifiedName: $qualifiedName) {
      target {
        ... on Commit {
          history(first: $first, after: $after) {
            pageInfo {
              hasNextPage
              endCursor
            }
            edges {
              node {
                oid
                parents(first: $parentsFirst) {
                  edges {
                    node {
                      oid
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class HistoryPage:
    """One page of history: (sha, parent shas) entries, newest first"""

    commits: Tuple[Tuple[str, Tuple[str, ...]], ...]
    has_more: bool = False
    next_cursor: Optional[str] = None


def _require_dict(container, key, field):
    value = container.get(key)
    if not isinstance(value, dict):
        raise MalformedPage(field)
    return value


def _require_list(container, key, field):
    value = container.get(key)
    if not isinstance(value, list):
        raise MalformedPage(field)
    return value


def _edge_oid(edge, field):
    if not isinstance(edge, dict):
        raise MalformedPage(field)
    node = _require_dict(edge, 'node', f"{field}.node")
    oid = node.get('oid')
    if not isinstance(oid, str) or not oid:
        raise MalformedPage(f"{field}.node.oid")
    return node, oid


def parse_history_response(payload, branch):
    """Validate a GraphQL response body and turn it into a HistoryPage"""
    if not isinstance(payload, dict):
        raise MalformedPage('data')

    errors = payload.get('errors')
    data = payload.get('data')
    repository = data.get('repository') if isinstance(data, dict) else None

    if errors and repository is None:
        messages = '; '.join(
            str(error.get('message', error)) if isinstance(error, dict) else str(error)
            for error in errors
        )
        error_types = {error.get('type') for error in errors if isinstance(error, dict)}
        if 'NOT_FOUND' in error_types:
            raise BranchNotFound(branch, messages)
        if 'FORBIDDEN' in error_types:
            raise Unauthorized(f"GraphQL errors: {messages}")
        raise RemoteUnavailable(f"GraphQL errors: {messages}")

    if not isinstance(data, dict):
        raise MalformedPage('data')
    # An explicit null means "does not exist"; an absent key is a broken page
    if 'repository' not in data:
        raise MalformedPage('data.repository')
    if repository is None:
        raise BranchNotFound(branch, 'repository not found')
    if not isinstance(repository, dict):
        raise MalformedPage('data.repository')

    if 'ref' not in repository:
        raise MalformedPage('repository.ref')
    ref = repository['ref']
    if ref is None:
        raise BranchNotFound(branch)
    if not isinstance(ref, dict):
        raise MalformedPage('repository.ref')

    target = _require_dict(ref, 'target', 'ref.target')
    history = _require_dict(target, 'history', 'target.history')
    page_info = _require_dict(history, 'pageInfo', 'history.pageInfo')
    edges = _require_list(history, 'edges', 'history.edges')

    commits = []
    for edge in edges:
        node, sha = _edge_oid(edge, 'history.edges')
        parents = []
        parent_connection = node.get('parents')
        if parent_connection is not None:
            if not isinstance(parent_connection, dict):
                raise MalformedPage('node.parents')
            for parent_edge in _require_list(parent_connection, 'edges', 'parents.edges'):
                parents.append(_edge_oid(parent_edge, 'parents.edges')[1])
        commits.append((sha, tuple(parents)))

    has_more = page_info.get('hasNextPage')
    if not isinstance(has_more, bool):
        raise MalformedPage('pageInfo.hasNextPage')
    next_cursor = page_info.get('endCursor')
    if has_more and not isinstance(next_cursor, str):
        raise MalformedPage('pageInfo.endCursor')

    return HistoryPage(
        commits=tuple(commits),
        has_more=has_more,
        next_cursor=next_cursor if has_more else None,
    )


class GitHubHistoryFetcher:
    def __init__(self, owner: str, repo: str, token: Optional[str] = None,
                 session: Optional[requests.Session] = None, page_size: int = 100,
                 parents_limit: int = 10, timeout: float = 30,
                 endpoint: str = GITHUB_GRAPHQL_API_URL):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.session = session or requests.Session()
        self.page_size = page_size
        self.parents_limit = parents_limit
        self.timeout = timeout
        self.endpoint = endpoint

    def _headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def fetch_page(self, branch: str, cursor: Optional[str] = None) -> HistoryPage:
        """Fetch one page of history for branch, starting after cursor"""
        body = {
            'query': HISTORY_QUERY,
            'variables': {
                'owner': self.owner,
                'name': self.repo,
                'qualifiedName': branch,
                'first': self.page_size,
                'after': cursor,
                'parentsFirst': self.parents_limit,
            },
        }
        logger.debug("Requesting history of %s/%s@%s after %s", self.owner, self.repo, branch, cursor)

        try:
            response = self.session.post(self.endpoint, json=body, headers=self._headers(),
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteUnavailable(f"Request to {self.endpoint} failed: {e}") from e

        if response.status_code == 401:
            raise Unauthorized(f"Credentials rejected: {response.text}")
        if response.status_code == 403:
            if 'rate limit' in response.text.lower():
                raise RemoteUnavailable(f"Rate limited: {response.text}")
            raise Unauthorized(f"Access forbidden: {response.text}")
        if not 200 <= response.status_code < 300:
            raise RemoteUnavailable(f"Error code: {response.status_code}. Response: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteUnavailable(f"Response is not JSON: {e}") from e

        page = parse_history_response(payload, branch)
        logger.debug("Got %d commits for %s (has_more=%s)", len(page.commits), branch, page.has_more)
        return page
