"""
tensor.py

Lambda7 Interaction Tensors
---------------------------

T_2D : M x M -> M        (transition matrix: state followed by morphism)
T_3D : M x M x M -> M    (history[0], history[1], incoming morphism)

Both tables are partial: a cell without a rule holds the NO_RULE sentinel,
which is never confused with a valid ordinal.

Tables are built by applying an ordered list of rule patches to an empty
table. Later patches override earlier, more generic ones
(e.g. beta-reduction beats identity absorption at T_3D[λ][I][@]), so the
order of TENSOR_2D_RULES / TENSOR_3D_RULES is part of the contract.

The built tables are frozen into nested tuples and memoised process-wide;
they are safe to share between evaluators and threads.
"""

import threading
from typing import Any, Callable, Iterator, List, Sequence, Tuple

from .basis import BASIS_SIZE, GLYPHS, Morphism, to_index


# ==========================================
# NO RULE SENTINEL
# ==========================================

class _NoRule:
    """Marker for an undefined tensor cell."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_RULE"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_NoRule, ())


NO_RULE = _NoRule()


def is_no_rule(x: Any) -> bool:
    """Check if a tensor cell is undefined."""
    return x is NO_RULE


def _check_cell(cell: Any) -> Any:
    if cell is NO_RULE:
        return cell
    if isinstance(cell, Morphism):
        return cell
    raise TypeError(f"Tensor cell must be a Morphism or NO_RULE, got {cell!r}")


# ==========================================
# TENSOR TYPES
# ==========================================

class Tensor2D:
    """Immutable partial function M x M -> M."""

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[Sequence[Any]]):
        if len(cells) != BASIS_SIZE or any(len(row) != BASIS_SIZE for row in cells):
            raise ValueError(f"Tensor2D must be {BASIS_SIZE}x{BASIS_SIZE}")
        self._cells = tuple(tuple(_check_cell(c) for c in row) for row in cells)

    def lookup(self, row: Any, col: Any):
        return self._cells[to_index(row)][to_index(col)]

    def __getitem__(self, key: Tuple[Any, Any]):
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Tensor2D is indexed as T[row, col]")
        return self.lookup(*key)

    @property
    def cells(self) -> Tuple[Tuple[Any, ...], ...]:
        return self._cells

    def defined_cells(self) -> Iterator[Tuple[Tuple[Morphism, Morphism], Morphism]]:
        for i, row in enumerate(self._cells):
            for j, cell in enumerate(row):
                if cell is not NO_RULE:
                    yield (Morphism(i), Morphism(j)), cell

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tensor2D):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        return f"Tensor2D(defined={sum(1 for _ in self.defined_cells())})"


class Tensor3D:
    """Immutable partial function M x M x M -> M."""

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[Sequence[Sequence[Any]]]):
        if len(cells) != BASIS_SIZE or any(
            len(plane) != BASIS_SIZE or any(len(row) != BASIS_SIZE for row in plane)
            for plane in cells
        ):
            raise ValueError(f"Tensor3D must be {BASIS_SIZE}x{BASIS_SIZE}x{BASIS_SIZE}")
        self._cells = tuple(
            tuple(tuple(_check_cell(c) for c in row) for row in plane)
            for plane in cells
        )

    def lookup(self, first: Any, second: Any, incoming: Any):
        return self._cells[to_index(first)][to_index(second)][to_index(incoming)]

    def __getitem__(self, key: Tuple[Any, Any, Any]):
        if not isinstance(key, tuple) or len(key) != 3:
            raise TypeError("Tensor3D is indexed as T[first, second, incoming]")
        return self.lookup(*key)

    @property
    def cells(self) -> Tuple[Tuple[Tuple[Any, ...], ...], ...]:
        return self._cells

    def defined_cells(self) -> Iterator[Tuple[Tuple[Morphism, Morphism, Morphism], Morphism]]:
        for i, plane in enumerate(self._cells):
            for j, row in enumerate(plane):
                for k, cell in enumerate(row):
                    if cell is not NO_RULE:
                        yield (Morphism(i), Morphism(j), Morphism(k)), cell

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tensor3D):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        return f"Tensor3D(defined={sum(1 for _ in self.defined_cells())})"


# ==========================================
# 2D RULES (applied in order)
# ==========================================

_I = Morphism.IDENTITY


def _identity_absorption_2d(T: List[List[Any]]) -> None:
    # I -> X = X, X -> I = X
    for x in Morphism:
        T[_I][x] = x
        T[x][_I] = x


def _involution_2d(T: List[List[Any]]) -> None:
    # ¬(¬X) -> X
    T[Morphism.NOT][Morphism.NOT] = _I


def _beta_identity_2d(T: List[List[Any]]) -> None:
    # (λx.x)(A) -> A
    T[Morphism.LAMBDA][Morphism.APPLY] = _I


def _conditional_2d(T: List[List[Any]]) -> None:
    # Cond stays in the Cond state until its arguments resolve
    T[_I][Morphism.COND] = Morphism.COND
    T[Morphism.COND][_I] = Morphism.COND
    T[Morphism.COND][Morphism.APPLY] = Morphism.COND


def _pairing_2d(T: List[List[Any]]) -> None:
    T[_I][Morphism.PAIR] = Morphism.PAIR


TENSOR_2D_RULES: Tuple[Tuple[str, Callable[[List[List[Any]]], None]], ...] = (
    ("identity_absorption", _identity_absorption_2d),
    ("involution", _involution_2d),
    ("beta_identity", _beta_identity_2d),
    ("conditional", _conditional_2d),
    ("pairing", _pairing_2d),
)


# ==========================================
# 3D RULES (applied in order)
# ==========================================

def _identity_absorption_3d(T: List[List[List[Any]]]) -> None:
    # I in first or second position forwards the incoming morphism;
    # I as the incoming morphism keeps the prior dominant one.
    for i in Morphism:
        for j in Morphism:
            T[_I][i][j] = j
            T[i][_I][j] = j
            T[i][j][_I] = i


def _double_negation_3d(T: List[List[List[Any]]]) -> None:
    T[_I][Morphism.NOT][Morphism.NOT] = _I


def _beta_reduction_3d(T: List[List[List[Any]]]) -> None:
    # (λx.x)(I) -> I, overrides absorption which would yield @
    T[Morphism.LAMBDA][_I][Morphism.APPLY] = _I


TENSOR_3D_RULES: Tuple[Tuple[str, Callable[[List[List[List[Any]]]], None]], ...] = (
    ("identity_absorption", _identity_absorption_3d),
    ("double_negation", _double_negation_3d),
    ("beta_reduction", _beta_reduction_3d),
)


# ==========================================
# BUILDERS
# ==========================================

def build_tensor_2d(rules=TENSOR_2D_RULES) -> Tensor2D:
    """Apply 2D rule patches in order to an empty table and freeze it."""
    T = [[NO_RULE] * BASIS_SIZE for _ in range(BASIS_SIZE)]
    for _name, patch in rules:
        patch(T)
    return Tensor2D(T)


def build_tensor_3d(rules=TENSOR_3D_RULES) -> Tensor3D:
    """Apply 3D rule patches in order to an empty table and freeze it."""
    T = [
        [[NO_RULE] * BASIS_SIZE for _ in range(BASIS_SIZE)]
        for _ in range(BASIS_SIZE)
    ]
    for _name, patch in rules:
        patch(T)
    return Tensor3D(T)


# Process-wide tables, built lazily once
_TENSOR_LOCK = threading.Lock()
_TENSOR_2D = None
_TENSOR_3D = None


def get_tensor_2d() -> Tensor2D:
    """Get the shared 2D tensor, building it on first use."""
    global _TENSOR_2D
    with _TENSOR_LOCK:
        if _TENSOR_2D is None:
            _TENSOR_2D = build_tensor_2d()
    return _TENSOR_2D


def get_tensor_3d() -> Tensor3D:
    """Get the shared 3D tensor, building it on first use."""
    global _TENSOR_3D
    with _TENSOR_LOCK:
        if _TENSOR_3D is None:
            _TENSOR_3D = build_tensor_3d()
    return _TENSOR_3D


# ==========================================
# DEBUG RENDERING
# ==========================================

def _cell_glyph(cell: Any) -> str:
    return "." if cell is NO_RULE else GLYPHS[cell]


def format_tensor_2d(tensor: Tensor2D, width: int = 5) -> str:
    """Render the 2D tensor as a transition matrix ('.' = no rule)."""
    header = "      " + "".join(g.ljust(width) for g in GLYPHS)
    lines = [
        "--- Interaction Tensor T (Transition Matrix) ---",
        header,
        "    " + "—" * (BASIS_SIZE * width),
    ]
    for i, row in enumerate(tensor.cells):
        lines.append(f"  {GLYPHS[i]} | " + "".join(_cell_glyph(c).ljust(width) for c in row))
    lines.append("-" * len(header))
    return "\n".join(lines)


def format_tensor_3d(tensor: Tensor3D, width: int = 5) -> str:
    """Render the 3D tensor as one plane per first morphism."""
    lines = ["--- 3D Interaction Tensor T_3D ---"]
    for i, plane in enumerate(tensor.cells):
        lines.append("")
        lines.append(f"Plane {GLYPHS[i]} (first morphism):")
        lines.append("      " + "".join(g.ljust(width) for g in GLYPHS))
        lines.append("    " + "—" * (BASIS_SIZE * width))
        for j, row in enumerate(plane):
            lines.append(f"  {GLYPHS[j]} | " + "".join(_cell_glyph(c).ljust(width) for c in row))
    return "\n".join(lines)
