#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for regions, located values, id allocation and element trees."""

import pytest

from vimwiki_ast.ast.ids import IdAllocator, IdPool
from vimwiki_ast.ast.location import Located, Position, Region
from vimwiki_ast.ast.nodes import (
    Comment,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    Header,
    InlineElementContainer,
    Paragraph,
    Text,
)
from vimwiki_ast.ast.transforms import strip_comments
from vimwiki_ast.ast.tree import ElementForest, ElementTree
from vimwiki_ast.ast.utils import collect, count_element_types, walk
from vimwiki_ast.exceptions import IdSpaceExhaustedError
from vimwiki_ast.parsers.page import parse_page


@pytest.mark.unit
class TestRegion:
    """Test regions and positions."""

    def test_contains(self) -> None:
        """Test the end offset is exclusive."""
        region = Region(2, 3)
        assert region.contains(2)
        assert region.contains(4)
        assert not region.contains(5)
        assert not region.contains(1)

    def test_empty_region_contains_nothing(self) -> None:
        """Test an empty region contains no offset."""
        assert not Region(4, 0).contains(4)

    def test_validation(self) -> None:
        """Test negative values and reversed positions are rejected."""
        with pytest.raises(ValueError):
            Region(-1, 0)
        with pytest.raises(ValueError):
            Region(0, -1)
        with pytest.raises(ValueError):
            Region(0, 1, Position(2, 1), Position(1, 1))

    def test_positions_order(self) -> None:
        """Test positions compare by line, then column."""
        assert Position(1, 9) < Position(2, 1)
        assert Position(2, 1) < Position(2, 2)

    def test_str(self) -> None:
        """Test the readable forms."""
        assert str(Region(0, 4, Position(1, 1), Position(1, 4))) == "1:1-1:4"
        assert str(Region(3, 2)) == "[3, 5)"

    def test_dict_form(self) -> None:
        """Test region dictionaries carry positions when present."""
        region = Region(5, 2, Position(2, 1), Position(2, 2))
        assert region.to_dict() == {
            "offset": 5,
            "length": 2,
            "start": {"line": 2, "column": 1},
            "end": {"line": 2, "column": 2},
        }
        assert Region.from_dict(region.to_dict()) == region
        assert Region(1, 1).to_dict() == {"offset": 1, "length": 1}


@pytest.mark.unit
class TestLocated:
    """Test located value equality."""

    def test_loose_equality_ignores_region(self) -> None:
        """Test == compares elements only."""
        assert Located(Text("a"), Region(0, 1)) == Located(Text("a"), Region(9, 1))
        assert Located(Text("a")) != Located(Text("b"))

    def test_strict_equality(self) -> None:
        """Test strict_eq compares regions as well."""
        a = Located(Text("a"), Region(0, 1))
        assert a.strict_eq(Located(Text("a"), Region(0, 1)))
        assert not a.strict_eq(Located(Text("a"), Region(1, 1)))

    def test_strict_equality_is_deep(self) -> None:
        """Test nested regions take part in strict comparison."""
        first = parse_page("*bold*").elements[0]
        second = parse_page("*bold*").elements[0]
        assert first.strict_eq(second)

        shifted = parse_page("  *bold*").elements[0]
        assert first == shifted
        assert not first.strict_eq(shifted)

    def test_map_keeps_region(self) -> None:
        """Test map transforms the element only."""
        located = Located("abc", Region(1, 3)).map(str.upper)
        assert located.element == "ABC"
        assert located.region == Region(1, 3)

    def test_unhashable(self) -> None:
        """Test located values cannot be hashed."""
        with pytest.raises(TypeError):
            hash(Located(Text("a")))


@pytest.mark.unit
class TestIdAllocation:
    """Test id allocators and pools."""

    def test_pool_draws_ranges(self) -> None:
        """Test ids run through consecutive ranges."""
        allocator = IdAllocator(range_size=2)
        pool = IdPool(allocator)
        assert [pool.next_id() for _ in range(5)] == [0, 1, 2, 3, 4]
        assert pool.ranges == [range(0, 2), range(2, 4), range(4, 6)]

    def test_released_ranges_are_reused(self) -> None:
        """Test a released range is handed out again."""
        allocator = IdAllocator(range_size=3)
        with IdPool(allocator) as pool:
            pool.next_id()
        assert allocator.free_count == 1
        assert IdPool(allocator).next_id() == 0

    def test_exhaustion(self) -> None:
        """Test running out of ids raises."""
        allocator = IdAllocator(range_size=2, max_id=3)
        allocator.next_range()
        allocator.next_range()
        with pytest.raises(IdSpaceExhaustedError):
            allocator.next_range()

    def test_merge(self) -> None:
        """Test merging moves ranges to the receiving pool."""
        allocator = IdAllocator(range_size=2)
        first, second = IdPool(allocator), IdPool(allocator)
        first.next_id()
        second.next_id()
        first.merge(second)
        assert first.ranges == [range(0, 2), range(2, 4)]
        assert second.ranges == []

    def test_merge_requires_same_allocator(self) -> None:
        """Test pools of different allocators cannot merge."""
        with pytest.raises(ValueError):
            IdPool(IdAllocator()).merge(IdPool(IdAllocator()))

    def test_invalid_range_size(self) -> None:
        """Test the range size must be positive."""
        with pytest.raises(ValueError):
            IdAllocator(range_size=0)


@pytest.mark.unit
class TestElementForest:
    """Test id-indexed trees over parsed pages."""

    def test_preorder_ids(self) -> None:
        """Test a node's id is allocated before its children's."""
        forest = ElementForest.from_page(parse_page("abc*bold*def"), IdAllocator())
        elements = {node.id: node.element for node in forest}
        assert isinstance(elements[0], Paragraph)
        assert elements[1] == Text("abc")
        assert isinstance(elements[2], DecoratedText)
        assert elements[3] == Text("bold")
        assert elements[4] == Text("def")
        assert len(forest) == 5

    def test_each_block_is_a_tree(self) -> None:
        """Test every top-level block gets its own id range."""
        forest = ElementForest.from_page(parse_page("one\n\ntwo\n"), IdAllocator())
        assert [root.id for root in forest.roots()] == [0, 10]

    def test_find_at_offset_returns_deepest(self) -> None:
        """Test offset lookup finds the innermost element."""
        forest = ElementForest.from_page(parse_page("abc*bold*def"), IdAllocator())
        node = forest.find_at_offset(5)
        assert node.element == Text("bold")
        assert [a.id for a in forest.ancestors(node.id)] == [2, 0]
        assert forest.depth(node.id) == 2

    def test_find_at_offset_on_delimiter(self) -> None:
        """Test an offset on a delimiter lands on the decorated element."""
        forest = ElementForest.from_page(parse_page("abc*bold*def"), IdAllocator())
        assert isinstance(forest.find_at_offset(3).element, DecoratedText)

    def test_find_at_offset_outside(self) -> None:
        """Test an offset outside every region finds nothing."""
        forest = ElementForest.from_page(parse_page("one\n\ntwo\n"), IdAllocator())
        assert forest.find_at_offset(4) is None
        assert forest.find_at_offset(100) is None

    def test_find_at_offset_line_ending(self) -> None:
        """Test a block's line ending belongs to the block only."""
        forest = ElementForest.from_page(parse_page("= Title =\n"), IdAllocator())
        assert isinstance(forest.find_at_offset(9).element, Header)

    def test_navigation(self) -> None:
        """Test parent, children, siblings and descendants."""
        forest = ElementForest.from_page(parse_page("abc*bold*def"), IdAllocator())
        assert forest.parent(3).id == 2
        assert [c.id for c in forest.children(0)] == [1, 2, 4]
        assert [s.id for s in forest.siblings(2)] == [1, 4]
        assert [s.id for s in forest.siblings_before(4)] == [1, 2]
        assert [d.id for d in forest.descendants(0)] == [1, 2, 4, 3]
        assert forest.root_for(3).id == 0
        assert forest.parent(0) is None

    def test_release_returns_ranges(self) -> None:
        """Test releasing a forest gives its ranges back."""
        allocator = IdAllocator()
        forest = ElementForest.from_page(parse_page("one\n\ntwo\n"), allocator)
        forest.release()
        assert allocator.free_count == 2

    def test_merge_unchecked(self) -> None:
        """Test trees from one allocator combine into a forest."""
        allocator = IdAllocator()
        page = parse_page("one\n\ntwo\n")
        trees = [ElementTree.from_located(block, IdPool(allocator)) for block in page.elements]
        forest = ElementForest.merge_unchecked(trees)
        assert [root.id for root in forest.roots()] == [trees[0].root_id, trees[1].root_id]
        assert trees[1].root().element == page.elements[1].element

    def test_overlapping_roots_first_root_wins(self) -> None:
        """Test a later root is not searched once an earlier root contains the offset."""
        allocator = IdAllocator()
        shallow = ElementTree.from_located(Located(Text("outer"), Region(0, 10)), IdPool(allocator))
        deep = ElementTree.from_located(
            Located(DecoratedText(Decoration.BOLD, [Located(Text("inner"), Region(2, 3))]), Region(0, 10)),
            IdPool(allocator),
        )

        forest = ElementForest.merge_unchecked([shallow, deep])
        assert forest.find_at_offset(3).id == shallow.root_id
        assert forest.find_at_offset(3).element == Text("outer")

        reversed_forest = ElementForest.merge_unchecked([deep, shallow])
        assert reversed_forest.find_at_offset(3).element == Text("inner")
        assert reversed_forest.find_at_offset(8).id == deep.root_id

    def test_later_root_used_when_earlier_roots_miss(self) -> None:
        """Test lookup falls through to the first root that contains the offset."""
        allocator = IdAllocator()
        first = ElementTree.from_located(Located(Text("a"), Region(0, 2)), IdPool(allocator))
        second = ElementTree.from_located(Located(Text("b"), Region(1, 5)), IdPool(allocator))
        forest = ElementForest.merge_unchecked([first, second])
        assert forest.find_at_offset(1).id == first.root_id
        assert forest.find_at_offset(4).id == second.root_id
        assert forest.find_at_offset(6) is None


@pytest.mark.unit
class TestWalkAndTransform:
    """Test page walking helpers and transformers."""

    def test_walk_is_preorder(self) -> None:
        """Test walk visits parents before children."""
        names = [type(located.element).__name__ for located in walk(parse_page("= a *b* =\n"))]
        assert names == ["Header", "Text", "DecoratedText", "Text"]

    def test_collect_by_type(self) -> None:
        """Test collecting elements of one type."""
        page = parse_page("a *b* c *d*\n")
        found = collect(page, DecoratedText)
        assert [located.element.to_text() for located in found] == ["b", "d"]

    def test_collect_by_predicate(self) -> None:
        """Test collecting with a predicate."""
        page = parse_page("a *b* _c_\n")
        found = collect(page, predicate=lambda e: isinstance(e, DecoratedText) and e.kind is Decoration.ITALIC)
        assert len(found) == 1

    def test_count_element_types(self) -> None:
        """Test counting elements by class name."""
        counts = count_element_types(parse_page("= a =\n\nb *c*\n"))
        assert counts["Header"] == 1
        assert counts["Paragraph"] == 1
        assert counts["Text"] == 3

    def test_strip_comments_removes_blocks_and_inline(self) -> None:
        """Test comments of both kinds are removed."""
        page = parse_page("%% gone\ntext %% also gone\n")
        stripped = strip_comments(page)
        assert not collect(stripped, Comment)
        assert not collect(stripped, CommentInline)
        assert stripped.elements[0].element.lines[0].to_text() == "text "

    def test_strip_comments_drops_emptied_containers(self) -> None:
        """Test a paragraph holding only comments disappears."""
        paragraph = Paragraph([InlineElementContainer([Located(CommentInline(CommentKind.LINE, ["x"]))])])
        page = parse_page("")
        page.elements.append(Located(paragraph, Region(0, 0)))
        assert strip_comments(page).elements == []

    def test_strip_comments_keeps_regions(self) -> None:
        """Test surviving elements keep their regions."""
        page = parse_page("%% gone\n= Title =\n")
        stripped = strip_comments(page)
        assert stripped.elements[0].region == page.elements[1].region
