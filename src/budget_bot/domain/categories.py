from collections.abc import Iterable, Iterator

# Must match the category list of the spreadsheet service.
DEFAULT_CATEGORIES = (
    "food",
    "transport",
    "shopping",
    "entertainment",
    "healthcare",
    "others",
)


def parse_category_list(raw_categories: str | None) -> list[str]:
    if not raw_categories:
        return []
    parts = [part.strip().lower() for part in raw_categories.split(",")]
    categories: list[str] = []
    seen = set()
    for part in parts:
        if part and part not in seen:
            categories.append(part)
            seen.add(part)
    return categories


class CategorySet:
    """Ordered, read-only set of expense categories with case-insensitive lookup."""

    def __init__(self, names: Iterable[str] = DEFAULT_CATEGORIES) -> None:
        normalized: list[str] = []
        for name in names:
            value = name.strip().lower()
            if value and value not in normalized:
                normalized.append(value)
        if not normalized:
            raise ValueError("CategorySet requires at least one category")
        self._names = tuple(normalized)

    @classmethod
    def from_string(cls, raw_categories: str | None) -> "CategorySet":
        return cls(parse_category_list(raw_categories) or DEFAULT_CATEGORIES)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def match(self, candidate: str) -> str | None:
        value = candidate.strip().lower()
        return value if value in self._names else None

    def __contains__(self, candidate: object) -> bool:
        return isinstance(candidate, str) and self.match(candidate) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategorySet):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"CategorySet({list(self._names)!r})"
