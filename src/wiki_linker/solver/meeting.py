import logging
from typing import Dict, List, Tuple

from wiki_linker.models import PathNode

logger = logging.getLogger(__name__)

Meeting = Tuple[PathNode, PathNode]


def find_meetings(forward: List[PathNode], backward: List[PathNode]) -> List[Meeting]:
    """
    Pair up forward and backward frontier nodes that reached the same page.

    Only the current frontiers are compared, not either visited history.
    Each meeting page yields exactly one pair, even if a frontier repeats an id.
    """
    by_id: Dict[int, PathNode] = {}
    for node in backward:
        by_id.setdefault(node.page_id, node)

    meetings: List[Meeting] = []
    matched = set()
    for node in forward:
        other = by_id.get(node.page_id)
        if other is None or node.page_id in matched:
            continue
        matched.add(node.page_id)
        meetings.append((node, other))

    if meetings:
        logger.info(f"Frontiers meet at {len(meetings)} page(s)")
    return meetings
