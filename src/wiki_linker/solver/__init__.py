# Bidirectional link search over a lazily queried wiki graph

from .search import BidirectionalSearch, SearchPhase
from .source import GraphSource
from .expander import Direction, FrontierExpander, VisitedSet
from .redirects import RedirectResolver
from .meeting import find_meetings
from .renderer import PathRenderer, render_path

__all__ = [
    "BidirectionalSearch",
    "SearchPhase",
    "GraphSource",
    "Direction",
    "FrontierExpander",
    "VisitedSet",
    "RedirectResolver",
    "find_meetings",
    "PathRenderer",
    "render_path",
]
