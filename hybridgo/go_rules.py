"""Strategic-board rules: placement, capture by liberties, suicide and territory."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from hybridgo.constants import BLACK, COLORS, GO_BOARD_SIZE, STONE_FORTRESS, STONE_NORMAL, WHITE, opponent
from hybridgo.errors import SuicideError
from hybridgo.grid import BoardGrid


@dataclass(frozen=True, slots=True)
class Stone:
    """One stone on the strategic board."""

    color: str
    kind: str = STONE_NORMAL

    @property
    def is_fortress(self) -> bool:
        return self.kind == STONE_FORTRESS


@dataclass(slots=True)
class PlacementOutcome:
    """Accepted placement and the enemy stones it removed."""

    row: int
    col: int
    color: str
    kind: str = STONE_NORMAL
    captured: list[tuple[int, int]] = field(default_factory=list)

    @property
    def captured_count(self) -> int:
        return len(self.captured)


class GoRulesEngine:
    """Rule engine bound to one strategic grid.

    Groups are maximal orthogonally connected sets of same-color stones of
    either kind. A group holding a fortress stone is never captured and never
    counts as a suicide, so a fortress anchors every stone connected to it.
    """

    def __init__(self, grid: BoardGrid[Stone] | None = None, size: int = GO_BOARD_SIZE) -> None:
        self.grid: BoardGrid[Stone] = grid if grid is not None else BoardGrid(size, size)

    @property
    def size(self) -> int:
        return self.grid.rows

    @property
    def center(self) -> tuple[int, int]:
        return self.grid.rows // 2, self.grid.cols // 2

    def get_stone_at(self, row: int, col: int) -> Stone | None:
        return self.grid.get(row, col)

    def remove_stone(self, row: int, col: int) -> bool:
        return self.grid.remove(row, col) is not None

    def clear(self) -> None:
        self.grid.clear()

    def restore(self, stones: list[dict[str, object]]) -> None:
        """Replace the board contents with ``stones`` (as produced by :meth:`stones`)."""
        self.grid.clear()
        for cell in stones:
            stone = Stone(color=str(cell["color"]), kind=str(cell.get("kind", STONE_NORMAL)))
            self.grid.place(int(cell["row"]), int(cell["col"]), stone)

    def find_group(self, row: int, col: int) -> set[tuple[int, int]]:
        """Breadth-first flood fill over same-color stones starting at (row, col)."""
        start = self.grid.get(row, col)
        if start is None:
            return set()

        group = {(row, col)}
        queue = deque([(row, col)])
        while queue:
            cur_row, cur_col = queue.popleft()
            for n_row, n_col in self.grid.neighbors(cur_row, cur_col):
                if (n_row, n_col) in group:
                    continue
                stone = self.grid.get(n_row, n_col)
                if stone is not None and stone.color == start.color:
                    group.add((n_row, n_col))
                    queue.append((n_row, n_col))
        return group

    def liberties(self, group: set[tuple[int, int]]) -> set[tuple[int, int]]:
        found: set[tuple[int, int]] = set()
        for row, col in group:
            for n_row, n_col in self.grid.neighbors(row, col):
                if self.grid.get(n_row, n_col) is None:
                    found.add((n_row, n_col))
        return found

    def _is_anchored(self, group: set[tuple[int, int]]) -> bool:
        for row, col in group:
            stone = self.grid.get(row, col)
            if stone is not None and stone.is_fortress:
                return True
        return False

    def place_stone(self, row: int, col: int, color: str) -> PlacementOutcome:
        """Place a normal stone, remove captured enemy groups and reject suicide.

        Raises ``OutOfBoundsError`` / ``OccupiedCellError`` before touching the
        board and ``SuicideError`` after restoring it.
        """
        if color not in COLORS:
            raise ValueError(f"unknown color: {color!r}")
        self.grid.place(row, col, Stone(color=color))

        enemy = opponent(color)
        captured: list[tuple[int, int]] = []
        for n_row, n_col in self.grid.neighbors(row, col):
            neighbor = self.grid.get(n_row, n_col)
            if neighbor is None or neighbor.color != enemy:
                continue
            group = self.find_group(n_row, n_col)
            if self._is_anchored(group) or self.liberties(group):
                continue
            for g_row, g_col in sorted(group):
                self.grid.remove(g_row, g_col)
                captured.append((g_row, g_col))

        if not captured:
            own_group = self.find_group(row, col)
            if not self._is_anchored(own_group) and not self.liberties(own_group):
                self.grid.remove(row, col)
                raise SuicideError(f"stone at ({row}, {col}) would have no liberties")

        return PlacementOutcome(row=row, col=col, color=color, captured=captured)

    def place_fortress(self, row: int, col: int, color: str) -> PlacementOutcome:
        """Place a fortress stone; it neither captures nor can be captured."""
        if color not in COLORS:
            raise ValueError(f"unknown color: {color!r}")
        self.grid.place(row, col, Stone(color=color, kind=STONE_FORTRESS))
        return PlacementOutcome(row=row, col=col, color=color, kind=STONE_FORTRESS)

    def compute_territory(self) -> dict[str, int]:
        """Count empty regions bordered by exactly one color.

        Recomputed from scratch on every call; regions bordered by both
        colors or by no stone at all are dame.
        """
        territory = {BLACK: 0, WHITE: 0}
        visited: set[tuple[int, int]] = set()

        for row, col in self.grid.empty_cells():
            if (row, col) in visited:
                continue
            size, borders = self._flood_region(row, col, visited)
            if len(borders) == 1:
                territory[next(iter(borders))] += size
        return territory

    def _flood_region(
        self,
        row: int,
        col: int,
        visited: set[tuple[int, int]],
    ) -> tuple[int, set[str]]:
        queue = deque([(row, col)])
        visited.add((row, col))
        borders: set[str] = set()
        size = 0
        while queue:
            cur_row, cur_col = queue.popleft()
            size += 1
            for n_row, n_col in self.grid.neighbors(cur_row, cur_col):
                stone = self.grid.get(n_row, n_col)
                if stone is not None:
                    borders.add(stone.color)
                elif (n_row, n_col) not in visited:
                    visited.add((n_row, n_col))
                    queue.append((n_row, n_col))
        return size, borders

    def center_occupant(self) -> str | None:
        stone = self.grid.get(*self.center)
        return stone.color if stone is not None else None

    def stones(self) -> list[dict[str, object]]:
        return [
            {"row": row, "col": col, "color": stone.color, "kind": stone.kind}
            for row, col, stone in self.grid.occupied()
        ]
