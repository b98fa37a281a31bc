"""
lambda7/canonical.py - Shared Canonicalization Logic
"""
import hashlib
import json
from typing import Any

from .basis import BASIS_SIZE, Morphism, morphism_name, to_index
from .derivation import Derivation, Literal, SubDerivation


def render_step(step: Any) -> str:
    """
    Human-readable form of one step.

    Morphisms render as their glyph, literals as their repr, and
    sub-derivations as a bracketed nested rendering.
    """
    if isinstance(step, Morphism) or (_is_ordinal(step) and 0 <= step < BASIS_SIZE):
        return morphism_name(step)
    if isinstance(step, Literal):
        return repr(step.value)
    if isinstance(step, SubDerivation):
        return "[" + render_derivation(step.derivation) + "]"
    return f"<{step!r}>"


def render_derivation(derivation: Derivation) -> str:
    """Render a derivation as space-separated steps, e.g. ``1 2 'multiply' @``."""
    return " ".join(render_step(s) for s in derivation)


def canonical_json(obj: Any) -> str:
    """
    Canonical JSON serialization (lambda7-canonical-v1):
        - sorted keys
        - no whitespace separation
        - ensure_ascii=True
        - reject NaN/Infinity (allow_nan=False)
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True, allow_nan=False)


def _is_ordinal(step: Any) -> bool:
    # Plain ordinals are accepted by the field evaluator
    return isinstance(step, int) and not isinstance(step, (bool, Morphism))


def _encode_value(value: Any) -> Any:
    """
    Tag containers and morphism values so that JSON does not conflate them
    (Literal(¬) vs Literal(4), (1, 2) vs [1, 2]).
    """
    if isinstance(value, Morphism):
        return {"morphism": int(value)}
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, tuple):
        return {"tuple": [_encode_value(v) for v in value]}
    if isinstance(value, list):
        return {"list": [_encode_value(v) for v in value]}
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"Literal dict keys must be strings, got {key!r}")
        return {"dict": {k: _encode_value(v) for k, v in value.items()}}
    raise TypeError(f"Literal value is not hashable as canonical JSON: {value!r}")


def _encode_step(step: Any) -> Any:
    if isinstance(step, Morphism):
        return {"m": int(step)}
    if _is_ordinal(step):
        return {"m": to_index(step)}
    if isinstance(step, Literal):
        return {"lit": _encode_value(step.value)}
    if isinstance(step, SubDerivation):
        return {"sub": [_encode_step(s) for s in step.derivation]}
    raise TypeError(f"Not a derivation step: {step!r}")


def derivation_hash(derivation: Derivation) -> str:
    """
    SHA-256 over the canonical JSON form of a derivation.

    Plain ordinals hash the same as the Morphism they name. Literal values
    must be None, bool, int, float, str, Morphism, or tuples, lists and
    str-keyed dicts of those; anything else raises TypeError (ValueError
    for NaN/Infinity).
    """
    payload = canonical_json([_encode_step(s) for s in derivation]).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()
