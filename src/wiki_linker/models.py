"""
Data models for the link search.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class PathNode:
    """
    One page reached during the search, plus the way it was reached.

    Nodes form persistent linked lists through ``previous``: every node
    discovered from the same page shares that page's node as its tail, and
    no node is ever changed after creation.

    Two nodes compare (and hash) equal when they name the same page,
    whichever path led to them. Frontier deduplication and meeting detection
    rely on this.
    """
    page_id: int
    previous: Optional["PathNode"] = field(default=None, compare=False, repr=False)

    def _ancestors(self):
        node = self.previous
        while node is not None:
            yield node
            node = node.previous

    def links(self) -> List[int]:
        """Ancestor ids, root first, excluding this node."""
        ids = [node.page_id for node in self._ancestors()]
        ids.reverse()
        return ids

    def depth(self) -> int:
        """Number of hops from the root of this node's direction."""
        return sum(1 for _ in self._ancestors())

    def __str__(self):
        return " -> ".join(str(page_id) for page_id in self.links() + [self.page_id])


class SearchOutcome(str, Enum):
    FOUND = "found"
    DEAD_END = "dead_end"            # forward frontier emptied
    NO_BACKLINKS = "no_backlinks"    # backward frontier emptied


class SearchResult(BaseModel):
    """Result of one bidirectional search."""
    start_title: str = Field(..., description="Title the search started from")
    end_title: str = Field(..., description="Title the search was looking for")
    outcome: SearchOutcome = Field(..., description="How the search terminated")
    paths: List[str] = Field(default_factory=list, description="Rendered meeting paths, one per meeting pair")
    forward_explored: int = Field(0, description="Distinct pages reached going forward")
    backward_explored: int = Field(0, description="Distinct pages reached going backward")
    message: Optional[str] = Field(None, description="Diagnostic for searches that found nothing")
    computation_time_ms: float = Field(0.0, description="Wall time of the search in milliseconds")

    @property
    def found(self) -> bool:
        return self.outcome == SearchOutcome.FOUND

    def summary_line(self) -> str:
        return (
            f"In the end, there were {self.forward_explored} links going forward and "
            f"{self.backward_explored} links going backwards that were added to the graph."
        )

    def lines(self) -> List[str]:
        """The result listing: every path (or the diagnostic), then the summary."""
        body = list(self.paths) if self.found else [self.message or self.outcome.value]
        return body + [self.summary_line()]
