"""
Wiki Linker - Core Library

Finds connecting link paths between two pages of a MediaWiki site with a
bidirectional breadth-first search over the live API.
"""

from .models import PathNode, SearchOutcome, SearchResult
from .solver import BidirectionalSearch, GraphSource

__all__ = ['PathNode', 'SearchOutcome', 'SearchResult', 'BidirectionalSearch', 'GraphSource']
