"""Pattern Safety Analyzer

Static ReDoS gate for user-supplied regular expressions. Patterns are
tokenized into a small atom tree (literals, classes, groups with their
alternation branches, quantifiers) and inspected structurally:

REJECT
- longer than the configured ceiling
- nested quantifiers: a repeated group whose body can end in an unbounded
  quantifier, e.g. (a+)+, (a*)*, (\\w+\\s?)+, (x(a+){2})*
- two or more unbounded wildcards (.* / .+)
- a repeated alternation whose branches share a prefix, e.g. (a|ab)+
- anything `re` refuses to compile
WARN (accepted)
- a single unbounded wildcard
- an unbounded quantified character class ([a-z]+, \\d*, \\w+)

The analyzer is pure. PatternCache holds compiled patterns for the process.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from enum import Enum

from fieldcheck.errors import ErrorCode

MAX_PATTERN_LENGTH = 10_000

_CLASS_ESCAPES = frozenset("dDwWsS")
_ANCHOR_ESCAPES = frozenset("AbBZz")


class Verdict(Enum):
    ACCEPT = "accept"
    WARN = "warn"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class PatternAnalysis:
    """Outcome of analyzing one pattern."""
    pattern: str
    verdict: Verdict
    reason: str | None = None
    code: ErrorCode | None = None
    compiled: re.Pattern | None = field(default=None, compare=False, repr=False)

    @property
    def accepted(self) -> bool: return self.verdict is not Verdict.REJECT

    @classmethod
    def accept(cls, pattern: str, compiled: re.Pattern) -> PatternAnalysis:
        return cls(pattern, Verdict.ACCEPT, compiled=compiled)

    @classmethod
    def warn(cls, pattern: str, reason: str, compiled: re.Pattern) -> PatternAnalysis:
        return cls(pattern, Verdict.WARN, reason, compiled=compiled)

    @classmethod
    def reject(cls, pattern: str, reason: str, code: ErrorCode = ErrorCode.E2101_UNSAFE_PATTERN) -> PatternAnalysis:
        return cls(pattern, Verdict.REJECT, reason, code)


@dataclass(slots=True)
class _Quant:
    min: int
    max: int | None

    @property
    def unbounded(self) -> bool: return self.max is None

    @property
    def repeats(self) -> bool: return self.max is None or self.max > 1


@dataclass(slots=True)
class _Atom:
    kind: str  # literal, dot, class, anchor, group
    text: str = ""
    quant: _Quant | None = None
    branches: list[list[_Atom]] = field(default_factory=list)
    lookaround: bool = False

    @property
    def unbounded(self) -> bool: return self.quant is not None and self.quant.unbounded

    @property
    def optional(self) -> bool: return self.quant is not None and self.quant.min == 0

    @property
    def signature(self) -> str:
        q = "" if self.quant is None else f"{{{self.quant.min},{self.quant.max}}}"
        return f"{self.kind}:{self.text}{q}"


def _read_class(pattern: str, i: int) -> int:
    """Index just past the character class starting at pattern[i] == '['."""
    n = len(pattern)
    j = i + 1
    if j < n and pattern[j] == "^": j += 1
    if j < n and pattern[j] == "]": j += 1
    while j < n:
        c = pattern[j]
        if c == "\\": j += 2; continue
        if c == "]": return j + 1
        j += 1
    return n


def _read_brace(pattern: str, i: int) -> tuple[_Quant, int] | None:
    """Parse {m}, {m,}, {,n} or {m,n} at pattern[i]; None when it is a literal brace."""
    end = pattern.find("}", i)
    if end == -1: return None
    body = pattern[i + 1:end]
    lo, sep, hi = body.partition(",")
    if not (lo.isdigit() or (sep and lo == "")): return None
    if hi and not hi.isdigit(): return None
    if not lo and not hi: return None
    low = int(lo) if lo else 0
    if not sep: return _Quant(low, low), end + 1
    return _Quant(low, int(hi) if hi else None), end + 1


def _group_prefix(pattern: str, i: int) -> tuple[int, bool, bool]:
    """Skip a group opener at pattern[i] == '('.

    Returns (next index, is lookaround, is a bare inline-flag group like (?i)).
    """
    n = len(pattern)
    if i + 1 >= n or pattern[i + 1] != "?": return i + 1, False, False
    j = i + 2
    if j < n and pattern[j] in "=!": return j + 1, True, False
    if pattern.startswith("<=", j) or pattern.startswith("<!", j): return j + 2, True, False
    if pattern.startswith("P<", j) or pattern.startswith("<", j):
        close = pattern.find(">", j)
        return (close + 1 if close != -1 else n), False, False
    if pattern.startswith("P=", j):
        close = pattern.find(")", j)
        return (close if close != -1 else n), False, False
    if j < n and pattern[j] == "(":  # conditional (?(id)yes|no)
        close = pattern.find(")", j)
        return (close + 1 if close != -1 else n), False, False
    k = j
    while k < n and (pattern[k].isalpha() or pattern[k] == "-"): k += 1
    if k < n and pattern[k] == ")": return k + 1, False, True
    if k < n and pattern[k] == ":": return k + 1, False, False
    return j, False, False


def tokenize(pattern: str) -> list[list[_Atom]]:
    """Parse `pattern` into the alternation branches of its top level.

    Iterative so that deeply nested groups never exhaust the interpreter stack.
    Malformed input is tokenized leniently; `re.compile` reports it.
    """
    root = _Atom("group")
    root.branches.append([])
    stack = [root]
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        branch = stack[-1].branches[-1]
        if c == "\\":
            nxt = pattern[i + 1] if i + 1 < n else ""
            if nxt in _CLASS_ESCAPES: branch.append(_Atom("class", "\\" + nxt))
            elif nxt in _ANCHOR_ESCAPES: branch.append(_Atom("anchor", "\\" + nxt))
            else: branch.append(_Atom("literal", nxt))
            i += 2
        elif c == "[":
            end = _read_class(pattern, i)
            branch.append(_Atom("class", pattern[i:end]))
            i = end
        elif c == "(":
            i, lookaround, flags_only = _group_prefix(pattern, i)
            if flags_only: continue
            group = _Atom("group", lookaround=lookaround)
            group.branches.append([])
            branch.append(group)
            stack.append(group)
        elif c == ")":
            if len(stack) > 1: stack.pop()
            i += 1
        elif c == "|":
            stack[-1].branches.append([])
            i += 1
        elif c in "*+?":
            quant = {"*": _Quant(0, None), "+": _Quant(1, None), "?": _Quant(0, 1)}[c]
            i += 1
            if i < n and pattern[i] in "?+": i += 1  # lazy / possessive
            if branch and branch[-1].quant is None and branch[-1].kind != "anchor": branch[-1].quant = quant
        elif c == "{" and (brace := _read_brace(pattern, i)) is not None:
            quant, i = brace
            if i < n and pattern[i] in "?+": i += 1
            if branch and branch[-1].quant is None and branch[-1].kind != "anchor": branch[-1].quant = quant
        elif c == ".":
            branch.append(_Atom("dot", "."))
            i += 1
        elif c in "^$":
            branch.append(_Atom("anchor", c))
            i += 1
        else:
            branch.append(_Atom("literal", c))
            i += 1
    return root.branches


def _walk(branches: list[list[_Atom]]):
    pending = [atom for branch in branches for atom in branch]
    while pending:
        atom = pending.pop()
        yield atom
        for branch in atom.branches: pending.extend(branch)


def _can_end_unbounded(branches: list[list[_Atom]]) -> bool:
    """True when some branch may finish with an unbounded quantified atom."""
    pending = list(branches)
    while pending:
        branch = pending.pop()
        for atom in reversed(branch):
            if atom.unbounded: return True
            if atom.kind == "group" and not atom.lookaround: pending.extend(atom.branches)
            if not atom.optional: break
    return False


def _alternatives(branches: list[list[_Atom]]) -> list[list[_Atom]]:
    """Branches with bare group wrappers opened: `((a|ab))` offers `a` and `ab`."""
    found: list[list[_Atom]] = []
    pending = list(reversed(branches))
    while pending:
        branch = pending.pop()
        if len(branch) == 1 and branch[0].kind == "group" and branch[0].quant is None and not branch[0].lookaround:
            pending.extend(reversed(branch[0].branches))
        else:
            found.append(branch)
    return found


def _shares_prefix(branches: list[list[_Atom]]) -> bool:
    if len(branches) < 2: return False
    firsts = [branch[0].signature if branch else "" for branch in branches]
    return "" in firsts or len(set(firsts)) < len(firsts)


def analyze(pattern: str, *, max_length: int = MAX_PATTERN_LENGTH, flags: int = 0) -> PatternAnalysis:
    """Classify `pattern` as ACCEPT, WARN or REJECT."""
    if len(pattern) > max_length:
        return PatternAnalysis.reject(pattern, f"pattern length {len(pattern)} exceeds maximum of {max_length}")

    atoms = list(_walk(tokenize(pattern)))
    for atom in atoms:
        if atom.kind != "group" or atom.lookaround or atom.quant is None or not atom.quant.repeats: continue
        if _can_end_unbounded(atom.branches):
            return PatternAnalysis.reject(pattern, "nested quantifiers can cause catastrophic backtracking")
        if _shares_prefix(_alternatives(atom.branches)):
            return PatternAnalysis.reject(pattern, "repeated alternation with overlapping branches can cause catastrophic backtracking")

    wildcards = sum(1 for atom in atoms if atom.kind == "dot" and atom.unbounded)
    if wildcards >= 2:
        return PatternAnalysis.reject(pattern, f"{wildcards} unbounded wildcards can cause polynomial backtracking")

    try:
        compiled = re.compile(pattern, flags)
    except (re.error, RecursionError) as exc:
        return PatternAnalysis.reject(pattern, f"invalid regex syntax: {exc}", ErrorCode.E2102_INVALID_PATTERN)

    if wildcards == 1:
        return PatternAnalysis.warn(pattern, "unbounded wildcard may be slow on long inputs; bound the length first", compiled)
    if any(atom.kind == "class" and atom.unbounded for atom in atoms):
        return PatternAnalysis.warn(pattern, "unbounded character class may be slow on long inputs; bound the length first", compiled)
    return PatternAnalysis.accept(pattern, compiled)


class PatternCache:
    """Process-wide compiled pattern cache.

    Populated under a lock during plan compilation. Reads never lock.
    """

    def __init__(self):
        self._patterns: dict[tuple[str, int], re.Pattern] = {}
        self._lock = threading.Lock()

    def get(self, pattern: str, flags: int = 0) -> re.Pattern | None:
        return self._patterns.get((pattern, flags))

    def prime(self, pattern: str, flags: int = 0, compiled: re.Pattern | None = None) -> re.Pattern:
        key = (pattern, flags)
        cached = self._patterns.get(key)
        if cached is not None: return cached
        with self._lock:
            cached = self._patterns.get(key)
            if cached is None:
                cached = compiled if compiled is not None else re.compile(pattern, flags)
                self._patterns[key] = cached
            return cached

    def clear(self) -> None:
        with self._lock: self._patterns.clear()

    def __contains__(self, pattern: str) -> bool:
        return (pattern, 0) in self._patterns

    def __len__(self) -> int: return len(self._patterns)


pattern_cache = PatternCache()
