"""
Wikipedia module for wiki_linker.

HTTP access to MediaWiki sites, exposed through the GraphSource interface
the search engine consumes.
"""

from .client import MediaWikiClient

__all__ = ['MediaWikiClient']
