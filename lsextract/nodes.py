"""Grid nodes and ordered node containers.

A :class:`Node` pairs a grid index with a scalar value (a distance, or a
field sample when the node belongs to a narrow band).  Nodes order by
value only, which is what the per-axis tie-break sort relies on.

A :class:`NodeContainer` is an append-only sequence of nodes kept in
discovery order.  The extractor fills two of them per run and callers
hand one in as the narrow band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
GridIndex = Tuple[int, ...]
_IntArray = npt.NDArray[np.integer]
_Array = npt.NDArray[np.floating]


# ===========================================================================
# Node
# ===========================================================================

@dataclass(frozen=True)
class Node:
    """A ``(index, value)`` pair ordered by *value*.

    *index* is normalised to a tuple of Python ints so nodes built from
    numpy rows compare and hash like nodes built from literals.
    """

    index: GridIndex
    value: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", tuple(int(i) for i in self.index))
        object.__setattr__(self, "value", float(self.value))

    def __lt__(self, other: Node) -> bool:
        return self.value < other.value

    def __gt__(self, other: Node) -> bool:
        return self.value > other.value


# ===========================================================================
# NodeContainer
# ===========================================================================

class NodeContainer:
    """Ordered, append-only collection of :class:`Node` objects."""

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._nodes: List[Node] = list(nodes)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, i: int) -> Node:
        return self._nodes[i]

    def __repr__(self) -> str:
        return f"NodeContainer(size={len(self._nodes)})"

    def size(self) -> int:
        """Number of nodes stored."""
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, node: Node) -> None:
        """Insert *node* after the last stored node."""
        self._nodes.append(node)

    def insert(self, index: Sequence[int], value: float) -> Node:
        """Build a node from *index* and *value*, append it and return it."""
        node = Node(tuple(index), value)
        self._nodes.append(node)
        return node

    def clear(self) -> None:
        self._nodes.clear()

    # ------------------------------------------------------------------
    # numpy interchange
    # ------------------------------------------------------------------

    def indices(self) -> List[GridIndex]:
        return [n.index for n in self._nodes]

    def values(self) -> List[float]:
        return [n.value for n in self._nodes]

    def to_arrays(self) -> Tuple[_IntArray, _Array]:
        """Return ``(indices, values)`` as numpy arrays.

        Returns
        -------
        indices:
            Shape ``(M, N)`` integer array, one row per node.  An empty
            container gives shape ``(0, 0)``.
        values:
            Shape ``(M,)`` float64 array.
        """
        if not self._nodes:
            return np.empty((0, 0), dtype=np.int64), np.empty(0, dtype=np.float64)
        idx = np.array(self.indices(), dtype=np.int64)
        val = np.array(self.values(), dtype=np.float64)
        return idx, val

    @classmethod
    def from_arrays(cls, indices: npt.ArrayLike, values: npt.ArrayLike) -> NodeContainer:
        """Build a container from an ``(M, N)`` index array and ``(M,)`` values."""
        idx = np.asarray(indices, dtype=np.int64)
        val = np.asarray(values, dtype=np.float64)
        if idx.ndim != 2:
            raise ValueError(f"indices must be 2-D (M, N), got shape {idx.shape}")
        if val.shape != (idx.shape[0],):
            raise ValueError(
                f"values shape {val.shape} does not match {idx.shape[0]} indices"
            )
        return cls(Node(tuple(row), v) for row, v in zip(idx.tolist(), val.tolist()))
