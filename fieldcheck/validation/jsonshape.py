"""JSON Shape Check

Single-pass structural JSON recognizer. No regex, no recursion: containers
are tracked on an explicit stack so pathological nesting costs memory
proportional to the input and never touches the interpreter recursion limit.

Grammar enforced:
- exactly one top-level value of any JSON type, surrounding whitespace allowed
- object keys are strings, entries separated by ',' with no trailing comma
- string escapes limited to \\" \\\\ \\/ \\b \\f \\n \\r \\t and \\uXXXX
- no raw control characters (< U+0020) inside strings
- numbers: optional '-', no leading zeros, digits on both sides of '.',
  exponent with at least one digit
"""
from __future__ import annotations

_WS = " \t\n\r"
_ESCAPES = frozenset('"\\/bfnrt')
_HEX = frozenset("0123456789abcdefABCDEF")
_LITERALS = ("true", "false", "null")

_VALUE, _KEY, _AFTER = 0, 1, 2


def _skip_ws(s: str, i: int) -> int:
    n = len(s)
    while i < n and s[i] in _WS: i += 1
    return i


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _scan_digits(s: str, i: int) -> int:
    n = len(s)
    while i < n and _is_digit(s[i]): i += 1
    return i


def scan_string(s: str, i: int) -> int:
    """Index past the string literal opening at s[i], or -1 when malformed."""
    n = len(s)
    j = i + 1
    while j < n:
        c = s[j]
        if c == '"':
            return j + 1
        if c == "\\":
            if j + 1 >= n: return -1
            esc = s[j + 1]
            if esc in _ESCAPES:
                j += 2
            elif esc == "u":
                if j + 6 > n or not all(h in _HEX for h in s[j + 2:j + 6]): return -1
                j += 6
            else:
                return -1
        elif c < " ":
            return -1
        else:
            j += 1
    return -1


def scan_number(s: str, i: int) -> int:
    """Index past the number starting at s[i], or -1 when malformed."""
    n = len(s)
    if i < n and s[i] == "-": i += 1
    if i >= n: return -1
    if s[i] == "0":
        i += 1
    elif _is_digit(s[i]):
        i = _scan_digits(s, i)
    else:
        return -1
    if i < n and s[i] == ".":
        end = _scan_digits(s, i + 1)
        if end == i + 1: return -1
        i = end
    if i < n and s[i] in "eE":
        i += 1
        if i < n and s[i] in "+-": i += 1
        end = _scan_digits(s, i)
        if end == i: return -1
        i = end
    return i


def is_valid_json(text: str) -> bool:
    """True when `text` is exactly one well-formed JSON value."""
    s = text.strip(_WS)
    n = len(s)
    if n == 0: return False

    stack: list[str] = []
    expect = _VALUE
    i = 0
    while True:
        i = _skip_ws(s, i)
        if expect == _AFTER:
            if not stack: return i == n
            if i >= n: return False
            c, top = s[i], stack[-1]
            if c == ",":
                expect = _KEY if top == "{" else _VALUE
                i += 1
            elif (c == "}" and top == "{") or (c == "]" and top == "["):
                stack.pop()
                i += 1
            else:
                return False
            continue

        if i >= n: return False
        c = s[i]

        if expect == _KEY:
            if c != '"': return False
            i = scan_string(s, i)
            if i < 0: return False
            i = _skip_ws(s, i)
            if i >= n or s[i] != ":": return False
            i += 1
            expect = _VALUE
            continue

        if c in "{[":
            close = "}" if c == "{" else "]"
            stack.append(c)
            i = _skip_ws(s, i + 1)
            if i < n and s[i] == close:
                stack.pop()
                i += 1
                expect = _AFTER
            else:
                expect = _KEY if c == "{" else _VALUE
            continue

        if c == '"':
            i = scan_string(s, i)
        elif c == "-" or _is_digit(c):
            i = scan_number(s, i)
        else:
            for literal in _LITERALS:
                if s.startswith(literal, i):
                    i += len(literal)
                    break
            else:
                return False
        if i < 0: return False
        expect = _AFTER
