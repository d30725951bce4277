"""Gate wheel, channels and centers of the Human Design bodygraph."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

# Gate 41 opens at 2°00' Aquarius; gates then follow the zodiac in this order.
WHEEL_START = 302.0
GATE_SPAN = 360.0 / 64
LINE_SPAN = GATE_SPAN / 6

GATE_ORDER: List[int] = [
    41, 19, 13, 49, 30, 55, 37, 63, 22, 36, 25, 17, 21, 51, 42, 3,
    27, 24, 2, 23, 8, 20, 16, 35, 45, 12, 15, 52, 39, 53, 62, 56,
    31, 33, 7, 4, 29, 59, 40, 64, 47, 6, 46, 18, 48, 57, 32, 50,
    28, 44, 1, 43, 14, 34, 9, 5, 26, 11, 10, 58, 38, 54, 61, 60,
]

CENTER_GATES: Dict[str, Tuple[int, ...]] = {
    "HEAD": (64, 61, 63),
    "AJNA": (47, 24, 4, 17, 43, 11),
    "THROAT": (62, 23, 56, 35, 12, 45, 33, 8, 31, 20, 16),
    "G": (1, 13, 25, 46, 2, 15, 10, 7),
    "HEART": (21, 40, 26, 51),
    "SACRAL": (5, 14, 29, 59, 9, 3, 42, 27, 34),
    "SOLAR_PLEXUS": (36, 22, 37, 6, 49, 55, 30),
    "SPLEEN": (48, 57, 44, 50, 32, 28, 18),
    "ROOT": (53, 60, 52, 19, 39, 41, 58, 38, 54),
}

MOTORS: FrozenSet[str] = frozenset({"SACRAL", "SOLAR_PLEXUS", "HEART", "ROOT"})

CHANNELS: List[Tuple[int, int]] = [
    (1, 8), (2, 14), (3, 60), (4, 63), (5, 15), (6, 59), (7, 31), (9, 52),
    (10, 20), (10, 34), (10, 57), (11, 56), (12, 22), (13, 33), (16, 48),
    (17, 62), (18, 58), (19, 49), (20, 34), (20, 57), (21, 45), (23, 43),
    (24, 61), (25, 51), (26, 44), (27, 50), (28, 38), (29, 46), (30, 41),
    (32, 54), (34, 57), (35, 36), (37, 40), (39, 55), (42, 53), (47, 64),
]

GATE_CENTER: Dict[int, str] = {
    gate: center for center, gates in CENTER_GATES.items() for gate in gates
}


def gate_and_line(lon: float) -> Tuple[int, int]:
    """Return the (gate, line) activated by an ecliptic longitude."""
    offset = (lon - WHEEL_START) % 360.0
    idx = int(offset // GATE_SPAN) % 64
    line = int((offset - idx * GATE_SPAN) // LINE_SPAN) + 1
    return GATE_ORDER[idx], min(line, 6)


def active_channels(gates: FrozenSet[int]) -> List[Tuple[int, int]]:
    return [ch for ch in CHANNELS if ch[0] in gates and ch[1] in gates]


def center_links(channels: List[Tuple[int, int]]) -> Dict[str, set]:
    """Adjacency between centers joined by the given channels."""
    links: Dict[str, set] = {}
    for a, b in channels:
        ca, cb = GATE_CENTER[a], GATE_CENTER[b]
        links.setdefault(ca, set()).add(cb)
        links.setdefault(cb, set()).add(ca)
    return links


def components(links: Dict[str, set]) -> List[FrozenSet[str]]:
    """Connected groups of defined centers, in sorted order of first member."""
    seen: set = set()
    groups: List[FrozenSet[str]] = []
    for start in sorted(links):
        if start in seen:
            continue
        stack, group = [start], set()
        while stack:
            node = stack.pop()
            if node in group:
                continue
            group.add(node)
            stack.extend(links.get(node, ()))
        seen |= group
        groups.append(frozenset(group))
    return groups


def connected(links: Dict[str, set], source: str, targets) -> bool:
    if source not in links:
        return False
    targets = set(targets)
    stack, seen = [source], set()
    while stack:
        node = stack.pop()
        if node in targets:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(links.get(node, ()))
    return False
