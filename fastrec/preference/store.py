"""
Dual-Indexed Preference Store

Memory-dense, immutable user-item preference matrix kept in two views:
    - by_user[uidx] -> ordered (iidx, weight) sequence
    - by_item[iidx] -> ordered (uidx, weight) sequence

Build Pipeline:
    1. Pre-size both views to the index collaborators' counts, all slots absent
    2. Single sequential pass over records, lazily allocating a mutable
       profile on first use of a slot
    3. Compile every mutable profile into contiguous numpy arrays

Invariants:
    - Every record appears exactly once in each view
    - sum(user profile sizes) == sum(item profile sizes) == num_preferences
    - Absent profiles own no storage; lookups return EMPTY_ADJACENCY

Algorithmic Complexity:
    - Build: O(P) time, O(P) extra memory for P records
    - Profile lookup: O(1)
    - Memory at rest: 12 bytes per preference per view + one slot per index

Thread Safety:
    - Construction is single-threaded
    - All read operations are lock-free and safe for concurrent use
"""

from __future__ import annotations

from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    TextIO,
    Tuple,
    Union,
)

from fastrec.core.errors import ParseError, QueryError
from fastrec.core.protocols import IndexProtocol, Parser
from fastrec.core.types import EMPTY_ADJACENCY, Adjacency, IdxPref, MutableAdjacency
from fastrec.data.parsers import identity, parse_str, parse_weight
from fastrec.observability.logging import get_logger

logger = get_logger(__name__)

TokenParser = Parser[Any]


class _StoreBuilder:
    """Accumulates both views in one pass; slots stay None until used."""

    __slots__ = ("_by_user", "_by_item", "_num_preferences")

    def __init__(self, num_users: int, num_items: int) -> None:
        self._by_user: List[Optional[MutableAdjacency]] = [None] * num_users
        self._by_item: List[Optional[MutableAdjacency]] = [None] * num_items
        self._num_preferences = 0

    def add(self, uidx: int, iidx: int, weight: float) -> None:
        u_profile = self._by_user[uidx]
        if u_profile is None:
            u_profile = self._by_user[uidx] = MutableAdjacency()
        u_profile.append(iidx, weight)

        i_profile = self._by_item[iidx]
        if i_profile is None:
            i_profile = self._by_item[iidx] = MutableAdjacency()
        i_profile.append(uidx, weight)

        self._num_preferences += 1

    def compile(
        self,
        user_index: Optional[IndexProtocol],
        item_index: Optional[IndexProtocol],
    ) -> PreferenceStore:
        by_user = [p.build() if p is not None else None for p in self._by_user]
        by_item = [p.build() if p is not None else None for p in self._by_item]
        return PreferenceStore(
            by_user, by_item, self._num_preferences, user_index, item_index
        )


# =============================================================================
# RECORD RESOLUTION
# =============================================================================
def _resolve_index(
    raw: Any,
    parser: TokenParser,
    index: IndexProtocol,
    field_name: str,
) -> int:
    try:
        raw_id = parser(raw)
        idx = index.get_index(raw_id)
    except (ValueError, TypeError) as exc:
        raise ParseError.invalid_token(field_name, raw, cause=exc) from exc

    if idx < 0:
        raise ParseError.unknown_id(field_name, raw_id)
    if idx >= index.count:
        raise ParseError.index_out_of_range(field_name, idx, index.count)
    return idx


def _resolve_weight(raw: Any, parser: TokenParser) -> float:
    try:
        weight = float(parser(raw))
    except (ValueError, TypeError) as exc:
        raise ParseError.invalid_weight(raw, str(exc), cause=exc) from exc
    if weight != weight:
        raise ParseError.invalid_weight(raw, "NaN weight")
    return weight


def _as_index(value: Any, field_name: str) -> int:
    """Integral value as an index; bools and fractional values are rejected."""
    if isinstance(value, bool):
        raise ParseError.invalid_token(field_name, value)
    try:
        idx = int(value)
    except (ValueError, TypeError, OverflowError) as exc:
        raise ParseError.invalid_token(field_name, value, cause=exc) from exc
    if idx != value:
        raise ParseError.invalid_token(field_name, value)
    return idx


def _split_record(position: int, record: Sequence[Any]) -> Tuple[Any, Any, Any]:
    if isinstance(record, (str, bytes)):
        raise ParseError.malformed_record(position, record)
    try:
        size = len(record)
        if size < 2:
            raise ParseError.malformed_record(position, record)
        weight = record[2] if size >= 3 else None
        return record[0], record[1], weight
    except (TypeError, KeyError) as exc:
        raise ParseError.malformed_record(position, record) from exc


def _iter_tsv(lines: Iterable[str]) -> Iterator[Tuple[int, Tuple[Any, Any, Any]]]:
    """(line number, (user, item, weight-or-None)); extra fields dropped."""
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        tokens = line.split("\t", 3)
        if len(tokens) < 2:
            raise ParseError.malformed_record(line_number, line)
        yield line_number, _split_record(line_number, tokens)


# =============================================================================
# PREFERENCE STORE
# =============================================================================
class PreferenceStore:
    """
    Immutable dual-indexed sparse preference store.

    Architecture:
        - _by_user: uidx -> Adjacency (or None for no profile)
        - _by_item: iidx -> Adjacency (or None for no profile)
        - Index collaborators kept only for callers translating back to raw ids

    Example:
        >>> users = SimpleIndex(["u0", "u1"])
        >>> items = SimpleIndex(["i0", "i1", "i2"])
        >>> store = PreferenceStore.build(
        ...     [("u0", "i0", 1.0), ("u0", "i1", 1.0), ("u1", "i0", 1.0)],
        ...     users, items,
        ... )
        >>> store.num_preferences
        3
    """

    __slots__ = (
        "_by_user", "_by_item", "_num_preferences",
        "_user_index", "_item_index",
    )

    def __init__(
        self,
        by_user: List[Optional[Adjacency]],
        by_item: List[Optional[Adjacency]],
        num_preferences: int,
        user_index: Optional[IndexProtocol] = None,
        item_index: Optional[IndexProtocol] = None,
    ) -> None:
        self._by_user = by_user
        self._by_item = by_item
        self._num_preferences = num_preferences
        self._user_index = user_index
        self._item_index = item_index

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------
    @classmethod
    def build(
        cls,
        records: Iterable[Sequence[Any]],
        user_index: IndexProtocol,
        item_index: IndexProtocol,
        user_parser: TokenParser = identity,
        item_parser: TokenParser = identity,
        weight_parser: TokenParser = parse_weight,
    ) -> PreferenceStore:
        """
        Build from raw ``(user, item[, weight])`` records.

        Args:
            records: Iterable of raw records; a missing weight takes the
                weight parser's default
            user_index: Raw user id -> index collaborator
            item_index: Raw item id -> index collaborator
            user_parser: Raw user token -> user id
            item_parser: Raw item token -> item id
            weight_parser: Raw weight token (or None) -> float

        Raises:
            ParseError: on the first record that cannot be resolved; nothing
                is built in that case

        Complexity: O(P)
        """
        positioned = (
            (position, _split_record(position, record))
            for position, record in enumerate(records, start=1)
        )
        return cls._build(
            positioned, user_index, item_index,
            user_parser, item_parser, weight_parser,
        )

    @classmethod
    def load(
        cls,
        source: Union[str, TextIO],
        user_index: IndexProtocol,
        item_index: IndexProtocol,
        user_parser: TokenParser = parse_str,
        item_parser: TokenParser = parse_str,
        weight_parser: TokenParser = parse_weight,
    ) -> PreferenceStore:
        """
        Load tab-separated ``user \\t item \\t [weight] \\t [ignored...]`` lines.

        Args:
            source: File path or open text stream

        Raises:
            ParseError: annotated with the offending line number
            OSError: if the path cannot be opened
        """
        with logger.context(source=source if isinstance(source, str) else "<stream>"):
            if isinstance(source, str):
                with open(source, "r", encoding="utf-8") as f:
                    return cls._build(
                        _iter_tsv(f), user_index, item_index,
                        user_parser, item_parser, weight_parser,
                    )
            return cls._build(
                _iter_tsv(source), user_index, item_index,
                user_parser, item_parser, weight_parser,
            )

    @classmethod
    def from_indexed(
        cls,
        records: Iterable[Sequence[Any]],
        num_users: int,
        num_items: int,
    ) -> PreferenceStore:
        """
        Build from already-indexed ``(uidx, iidx[, weight])`` records.

        Indices are range-checked; weights follow the default weight parser.
        """
        builder = _StoreBuilder(num_users, num_items)
        for position, record in enumerate(records, start=1):
            uidx, iidx, raw_weight = _split_record(position, record)
            try:
                uidx = _as_index(uidx, "user")
                iidx = _as_index(iidx, "item")
                if not 0 <= uidx < num_users:
                    raise ParseError.index_out_of_range("user", uidx, num_users)
                if not 0 <= iidx < num_items:
                    raise ParseError.index_out_of_range("item", iidx, num_items)
                weight = _resolve_weight(raw_weight, parse_weight)
            except ParseError as err:
                raise err.at_position(position) from err.cause
            builder.add(uidx, iidx, weight)
        return builder.compile(None, None)

    @classmethod
    def _build(
        cls,
        positioned: Iterable[Tuple[int, Tuple[Any, Any, Any]]],
        user_index: IndexProtocol,
        item_index: IndexProtocol,
        user_parser: TokenParser,
        item_parser: TokenParser,
        weight_parser: TokenParser,
    ) -> PreferenceStore:
        with logger.timed("Built preference store") as summary:
            builder = _StoreBuilder(user_index.count, item_index.count)

            for position, (raw_user, raw_item, raw_weight) in positioned:
                try:
                    uidx = _resolve_index(raw_user, user_parser, user_index, "user")
                    iidx = _resolve_index(raw_item, item_parser, item_index, "item")
                    weight = _resolve_weight(raw_weight, weight_parser)
                except ParseError as err:
                    logger.error("Preference build aborted", position=position, error=err.to_dict())
                    raise err.at_position(position) from err.cause
                builder.add(uidx, iidx, weight)

            store = builder.compile(user_index, item_index)
            summary.update(
                num_users=store.num_users,
                num_items=store.num_items,
                num_preferences=store.num_preferences,
            )
        return store

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def num_users(self) -> int:
        return len(self._by_user)

    @property
    def num_items(self) -> int:
        return len(self._by_item)

    @property
    def num_preferences(self) -> int:
        return self._num_preferences

    @property
    def user_index(self) -> Optional[IndexProtocol]:
        return self._user_index

    @property
    def item_index(self) -> Optional[IndexProtocol]:
        return self._item_index

    # -------------------------------------------------------------------------
    # Profile Access
    # -------------------------------------------------------------------------
    def user_profile(self, uidx: int) -> Adjacency:
        """(iidx, weight) arrays of a user; EMPTY_ADJACENCY if none."""
        if not 0 <= uidx < len(self._by_user):
            raise QueryError.out_of_range(uidx, len(self._by_user))
        profile = self._by_user[uidx]
        return EMPTY_ADJACENCY if profile is None else profile

    def item_profile(self, iidx: int) -> Adjacency:
        """(uidx, weight) arrays of an item; EMPTY_ADJACENCY if none."""
        if not 0 <= iidx < len(self._by_item):
            raise QueryError.out_of_range(iidx, len(self._by_item))
        profile = self._by_item[iidx]
        return EMPTY_ADJACENCY if profile is None else profile

    def user_preferences(self, uidx: int) -> List[IdxPref]:
        return [IdxPref(i, v) for i, v in self.user_profile(uidx).pairs()]

    def item_preferences(self, iidx: int) -> List[IdxPref]:
        return [IdxPref(u, v) for u, v in self.item_profile(iidx).pairs()]

    def user_profile_size(self, uidx: int) -> int:
        return len(self.user_profile(uidx))

    def item_profile_size(self, iidx: int) -> int:
        return len(self.item_profile(iidx))

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------
    def users_with_preferences(self) -> Iterator[int]:
        return (uidx for uidx, p in enumerate(self._by_user) if p is not None)

    def items_with_preferences(self) -> Iterator[int]:
        return (iidx for iidx, p in enumerate(self._by_item) if p is not None)

    def num_users_with_preferences(self) -> int:
        return sum(1 for p in self._by_user if p is not None)

    def num_items_with_preferences(self) -> int:
        return sum(1 for p in self._by_item if p is not None)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------
    def transpose(self) -> PreferenceStore:
        """Same preferences with user and item roles swapped. O(1), shares arrays."""
        return PreferenceStore(
            self._by_item, self._by_user, self._num_preferences,
            self._item_index, self._user_index,
        )

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------
    def stats(self) -> dict:
        """Get store statistics."""
        users_with = self.num_users_with_preferences()
        items_with = self.num_items_with_preferences()
        return {
            "num_users": self.num_users,
            "num_items": self.num_items,
            "num_preferences": self._num_preferences,
            "num_users_with_preferences": users_with,
            "num_items_with_preferences": items_with,
            "avg_user_profile": self._num_preferences / max(1, users_with),
            "avg_item_profile": self._num_preferences / max(1, items_with),
            "density": self._num_preferences / max(1, self.num_users * self.num_items),
        }

    def __repr__(self) -> str:
        return (
            f"PreferenceStore(num_users={self.num_users}, "
            f"num_items={self.num_items}, "
            f"num_preferences={self._num_preferences})"
        )


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = ["PreferenceStore"]
