"""
FrontierExpander and VisitedSet tests against an in-memory graph.
"""

import asyncio
import logging

import pytest

from wiki_linker.models import PathNode
from wiki_linker.solver.expander import Direction, FrontierExpander, VisitedSet


@pytest.mark.unit
class TestVisitedSet:

    def test_filter_drops_expanded_pages(self):
        visited = VisitedSet()
        visited.mark([PathNode(1), PathNode(2)])

        survivors = visited.filter([PathNode(2), PathNode(3), PathNode(1), PathNode(4)])

        assert [node.page_id for node in survivors] == [3, 4]
        assert 1 in visited and 3 not in visited
        assert len(visited) == 2

    def test_filter_keeps_first_of_repeated_ids(self):
        first = PathNode(5, PathNode(1))
        second = PathNode(5, PathNode(2))

        survivors = VisitedSet().filter([first, second])

        assert len(survivors) == 1
        assert survivors[0] is first

    def test_filter_is_idempotent(self):
        visited = VisitedSet()
        frontier = [PathNode(1), PathNode(2)]
        visited.mark(frontier)

        assert visited.filter(frontier) == []
        assert visited.filter(frontier) == []


@pytest.mark.unit
class TestFrontierExpander:

    @pytest.mark.asyncio
    async def test_new_nodes_point_back_to_their_source(self, make_source):
        source = make_source({1: [2, 3], 2: [4]})
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))
        root = PathNode(1)

        frontier = await expander.expand([root])

        assert [node.page_id for node in frontier] == [2, 3]
        assert all(node.previous is root for node in frontier)
        assert all(node.depth() == 1 for node in frontier)
        assert 1 in expander.visited

    @pytest.mark.asyncio
    async def test_already_expanded_pages_are_not_revisited(self, make_source):
        # 1 -> 2 -> 1 loops back, 2 -> 2 links to itself
        source = make_source({1: [2], 2: [1, 2, 3]})
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))

        level_one = await expander.expand([PathNode(1)])
        level_two = await expander.expand(level_one)

        assert [node.page_id for node in level_two] == [3]
        assert level_two[0].links() == [1, 2]
        assert level_two[0].depth() == 2

    @pytest.mark.asyncio
    async def test_frontier_has_no_repeated_ids(self, make_source):
        source = make_source({1: [2, 3], 2: [4], 3: [4, 4]})
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))

        level_one = await expander.expand([PathNode(1)])
        level_two = await expander.expand(level_one)

        assert [node.page_id for node in level_two] == [4]
        # Discovered through page 2 first
        assert level_two[0].links() == [1, 2]

    @pytest.mark.asyncio
    async def test_failed_page_does_not_abort_the_pass(self, make_source, caplog):
        source = make_source({1: [10], 2: [20], 3: [30]}, no_content=[2])
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))

        with caplog.at_level(logging.WARNING):
            frontier = await expander.expand([PathNode(1), PathNode(2), PathNode(3)])

        assert [node.page_id for node in frontier] == [10, 30]
        assert "failed" in caplog.text
        # Still counts as expanded
        assert 2 in expander.visited

    @pytest.mark.asyncio
    async def test_api_error_on_one_page_does_not_abort_the_pass(self, make_source, caplog):
        source = make_source({1: [10], 2: [20], 3: [30, 31]}, failing=[2])
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))

        with caplog.at_level(logging.WARNING):
            frontier = await expander.expand([PathNode(1), PathNode(2), PathNode(3)])

        assert [node.page_id for node in frontier] == [10, 30, 31]
        assert "2 / 3 failed (Wikipedia API error nosuchpageid" in caplog.text
        assert sorted(source.calls["outgoing_links"]) == [1, 2, 3]
        assert 2 in expander.visited

    @pytest.mark.asyncio
    async def test_dead_end_gives_empty_frontier(self, make_source):
        source = make_source({1: []})
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(4))

        assert await expander.expand([PathNode(1)]) == []

    @pytest.mark.asyncio
    async def test_pool_bounds_concurrent_queries(self, make_source):
        links = {page_id: [page_id + 100] for page_id in range(1, 11)}
        source = make_source(links, delay=0.01)
        expander = FrontierExpander(Direction.FORWARD, source.outgoing_links, asyncio.Semaphore(3))

        frontier = await expander.expand([PathNode(page_id) for page_id in range(1, 11)])

        assert len(frontier) == 10
        assert len(source.calls["outgoing_links"]) == 10
        assert source.max_in_flight <= 3
        assert source.max_in_flight > 1

    @pytest.mark.asyncio
    async def test_backward_direction_uses_given_fetch(self, make_source):
        source = make_source({5: [1], 6: [1]})
        expander = FrontierExpander(Direction.BACKWARD, source.incoming_links, asyncio.Semaphore(2))

        frontier = await expander.expand([PathNode(1)])

        assert sorted(node.page_id for node in frontier) == [5, 6]
        assert Direction.BACKWARD.marker == "\\"
