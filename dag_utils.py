def common_commits(graph_a, graph_b):
    """Shas present in both graphs"""
    return set(graph_a.keys()) & set(graph_b.keys())


def _parents_of(sha, graph_a, graph_b, cache):
    node = graph_a.get(sha) or graph_b.get(sha)
    if node is None and cache is not None:
        node = cache.get(sha)
    if node is None:
        return ()
    return node.parents


def find_frontier(graph_a, graph_b, cache=None):
    """
    Find the last common commits of two branch graphs.
    A common commit is dropped when it is a parent of another common commit,
    since that more recent commit already has it as an ancestor.
    """
    common = common_commits(graph_a, graph_b)
    frontier = set(common)

    for sha in common:
        for parent_sha in _parents_of(sha, graph_a, graph_b, cache):
            # Parents outside the intersection (including ones cut off by
            # truncation) are ignored
            if parent_sha in common:
                frontier.discard(parent_sha)

    return frontier


def dangling_parents(graph):
    """Parent shas referenced in graph but not loaded into it"""
    missing = set()
    for node in graph.values():
        for parent_sha in node.parents:
            if parent_sha not in graph:
                missing.add(parent_sha)
    return missing

