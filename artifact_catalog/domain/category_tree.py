# artifact_catalog/domain/category_tree.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..models.category import PATH_SEPARATOR, Category
from .errors import CategoryNotFound, InvalidArgument, InvalidOperation, OutOfRange


def _by_position(categories: Iterable[Category]) -> List[Category]:
    return sorted(categories, key=lambda c: (c.position, c.id))


class CategoryTree:
    """
    Arena of categories keyed by id.

    Parent links are ids resolved through the arena; each category keeps an
    ordered list of child ids. The tree works on whatever slice the caller
    loaded, so a sibling set is only guaranteed dense if all of its members
    were loaded. Every category whose name, position or path changes is
    recorded and handed back by `pop_dirty()` for persistence.
    """

    def __init__(self) -> None:
        self._nodes: Dict[int, Category] = {}
        self._dirty: Dict[int, Category] = {}

    @classmethod
    def from_categories(cls, categories: Iterable[Optional[Category]]) -> "CategoryTree":
        tree = cls()
        for category in categories:
            if category is None:
                continue
            if category.id is None:
                raise InvalidArgument("Loaded category has no id")
            tree._nodes[category.id] = category

        for category in tree._nodes.values():
            category.subcategory_ids = []
        for category in _by_position(tree._nodes.values()):
            parent_id = category.parent_category_id
            if parent_id is not None and parent_id in tree._nodes:
                tree._nodes[parent_id].subcategory_ids.append(category.id)
        return tree

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # ─────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────
    def get(self, category_id: Optional[int]) -> Category:
        try:
            return self._nodes[category_id]
        except KeyError:
            raise CategoryNotFound(category_id) from None

    def parent_of(self, category: Category) -> Optional[Category]:
        if category.parent_category_id is None:
            return None
        return self.get(category.parent_category_id)

    def subcategories(self, category_id: int) -> List[Category]:
        return [self._nodes[i] for i in self.get(category_id).subcategory_ids]

    def roots(self) -> List[Category]:
        return _by_position(c for c in self._nodes.values() if c.parent_category_id is None)

    def top_level(self) -> List[Category]:
        """Roots of the loaded slice: true roots plus categories whose parent was not loaded."""
        return _by_position(
            c for c in self._nodes.values()
            if c.parent_category_id is None or c.parent_category_id not in self._nodes
        )

    def descendants(self, category_id: int) -> List[Category]:
        """Pre-order walk of the loaded subtree, parents before children."""
        out: List[Category] = []
        stack = list(reversed(self.subcategories(category_id)))
        while stack:
            node = stack.pop()
            out.append(node)
            stack.extend(reversed(self.subcategories(node.id)))
        return out

    def is_empty(self, category_id: int) -> bool:
        category = self.get(category_id)
        return not category.subcategory_ids and not category.artifact_ids

    def level(self, category_id: int) -> int:
        path = self.get(category_id).path
        return path.count(PATH_SEPARATOR) if path else 0

    # ─────────────────────────────────────────────────────────────
    # Paths
    # ─────────────────────────────────────────────────────────────
    def refresh_path(self, category_id: int) -> Category:
        category = self.get(category_id)
        parent = self.parent_of(category)
        if parent is None:
            path = str(category.id)
        else:
            path = f"{parent.path}{PATH_SEPARATOR}{category.id}"
        if category.path != path:
            category.path = path
            self._mark(category)
        return category

    # ─────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────
    def add_root(self, category: Optional[Category]) -> Category:
        self._require_new(category)
        category.parent_category_id = None
        category.position = len(self.roots())
        category.subcategory_ids = []
        self._nodes[category.id] = category
        self.refresh_path(category.id)
        self._mark(category)
        return category

    def add_subcategory(self, parent_id: int, child: Optional[Category]) -> Category:
        self._require_new(child)
        parent = self.get(parent_id)

        child.parent_category_id = parent.id
        child.position = len(parent.subcategory_ids)
        child.subcategory_ids = []
        self._nodes[child.id] = child
        self.refresh_path(child.id)
        parent.subcategory_ids.append(child.id)
        self._mark(child)
        return child

    def modify_category(self, category_id: int, new_name: Optional[str]) -> Category:
        if new_name is None or not new_name.strip():
            raise InvalidArgument("Category name cannot be empty")

        category = self.get(category_id)
        if category.name != new_name:
            category.name = new_name
            self._mark(category)

        # Path only depends on ids; the subtree is still refreshed on every rename.
        self.refresh_path(category_id)
        for descendant in self.descendants(category_id):
            self.refresh_path(descendant.id)
        return category

    def rearrange(self, category_id: int, new_position: int) -> List[Category]:
        category = self.get(category_id)
        parent = self.parent_of(category)
        if parent is None:
            raise InvalidOperation("Cannot rearrange root category")

        siblings = _by_position(self.subcategories(parent.id))
        if new_position < 0 or new_position > len(siblings) - 1:
            raise OutOfRange(
                f"new_position {new_position} is outside [0, {len(siblings) - 1}]"
            )

        ordered = [s for s in siblings if s.id != category.id]
        ordered.insert(new_position, category)
        self._reindex(ordered, parent)
        return ordered

    def delete_subcategory(self, parent_id: int, child_id: Optional[int]) -> Category:
        if child_id is None:
            raise InvalidArgument("child category is required")
        parent = self.get(parent_id)
        child = self.get(child_id)
        if child.parent_category_id != parent.id:
            raise InvalidArgument(f"Category {child_id} is not a subcategory of {parent_id}")
        if not self.is_empty(child_id):
            raise InvalidOperation("Cannot delete non-empty category")

        remaining = [c for c in _by_position(self.subcategories(parent.id)) if c.id != child_id]
        self._forget(child)
        self._reindex(remaining, parent)
        return child

    def delete_root(self, category_id: int) -> Category:
        category = self.get(category_id)
        if category.parent_category_id is not None:
            raise InvalidOperation(f"Category {category_id} is not a root category")
        if not self.is_empty(category_id):
            raise InvalidOperation("Cannot delete non-empty category")

        remaining = [c for c in self.roots() if c.id != category_id]
        self._forget(category)
        self._reindex(remaining)
        return category

    def delete(self, category_id: int) -> Category:
        category = self.get(category_id)
        if category.parent_category_id is None:
            return self.delete_root(category_id)
        return self.delete_subcategory(category.parent_category_id, category_id)

    # ─────────────────────────────────────────────────────────────
    # Bookkeeping
    # ─────────────────────────────────────────────────────────────
    def pop_dirty(self) -> List[Category]:
        changed = list(self._dirty.values())
        self._dirty.clear()
        return changed

    def check_invariants(self) -> List[str]:
        """
        Report dense-position and path violations among fully loaded sibling
        sets (children of loaded parents, plus the roots).
        """
        problems: List[str] = []
        sibling_sets = [("roots", self.roots())]
        sibling_sets += [(f"children of {c.id}", self.subcategories(c.id)) for c in self._nodes.values()]
        for label, siblings in sibling_sets:
            positions = sorted(s.position for s in siblings)
            if positions != list(range(len(siblings))):
                problems.append(f"{label}: positions {positions} are not dense")

        for category in self._nodes.values():
            parent = self._nodes.get(category.parent_category_id) if category.parent_category_id is not None else None
            if category.parent_category_id is None:
                expected = str(category.id)
            elif parent is None:
                continue
            else:
                expected = f"{parent.path}{PATH_SEPARATOR}{category.id}"
            if category.path != expected:
                problems.append(f"category {category.id}: path {category.path!r} != {expected!r}")
        return problems

    def _require_new(self, category: Optional[Category]) -> None:
        if category is None:
            raise InvalidArgument("category is required")
        if category.id is None:
            raise InvalidArgument("category must have an id before it is attached")
        if category.id in self._nodes:
            raise InvalidOperation(f"Category {category.id} is already attached")

    def _reindex(self, ordered: List[Category], parent: Optional[Category] = None) -> None:
        for index, sibling in enumerate(ordered):
            if sibling.position != index:
                sibling.position = index
                self._mark(sibling)
        if parent is not None:
            parent.subcategory_ids = [s.id for s in ordered]

    def _forget(self, category: Category) -> None:
        self._nodes.pop(category.id, None)
        self._dirty.pop(category.id, None)

    def _mark(self, category: Category) -> None:
        self._dirty[category.id] = category
