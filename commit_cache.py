import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CommitNode:
    """A commit and the ids of its parents, in the order the remote lists them"""

    sha: str
    parents: Tuple[str, ...] = ()


class CommitCache:
    """Commits seen so far, keyed by sha and shared across branch builds.

    Entries are write-once: the first node stored for a sha is the one every
    later build gets back. Nothing is ever evicted, so a finder that walks
    many unrelated branches keeps every commit it has seen in memory.
    """

    def __init__(self):
        self._nodes: Dict[str, CommitNode] = {}
        self._lock = threading.Lock()

    def get(self, sha: str) -> Optional[CommitNode]:
        return self._nodes.get(sha)

    def add(self, sha: str, parents) -> CommitNode:
        """Store a node for sha unless one exists; return the stored node"""
        node = self._nodes.get(sha)
        if node is not None:
            return node
        with self._lock:
            node = self._nodes.get(sha)
            if node is None:
                node = CommitNode(sha, tuple(parents))
                self._nodes[sha] = node
            return node

    def __contains__(self, sha) -> bool:
        return sha in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
