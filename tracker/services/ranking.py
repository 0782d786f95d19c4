"""Experience points and rank tiers.

A ladder is a tuple of ``(threshold, tier)`` pairs in ascending threshold
order whose first entry is always ``(0, entry_tier)``, so every
non-negative experience value maps to exactly one tier.
"""

from typing import Iterable, Mapping, Tuple

DEFAULT_TIERS = ((1000, "diamond"), (500, "gold"), (250, "silver"), (100, "bronze"))
DEFAULT_ENTRY_TIER = "beginner"

Ladder = Tuple[Tuple[int, str], ...]


def build_ladder(tiers: Iterable[Tuple[int, str]] = DEFAULT_TIERS,
                 entry_tier: str = DEFAULT_ENTRY_TIER) -> Ladder:
    steps = sorted((int(t), str(name).strip()) for t, name in tiers)
    thresholds = [t for t, _ in steps]
    names = [entry_tier] + [n for _, n in steps]
    if any(t <= 0 for t in thresholds):
        raise ValueError("rank thresholds must be positive integers")
    if len(set(thresholds)) != len(thresholds):
        raise ValueError("rank thresholds must be distinct")
    if any(not n for n in names) or len(set(names)) != len(names):
        raise ValueError("rank tier names must be non-empty and distinct")
    return ((0, entry_tier),) + tuple(steps)


def parse_tiers(raw: str) -> Tuple[Tuple[int, str], ...]:
    """Parse ``"1000:diamond,500:gold"`` into threshold/name pairs."""
    out = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        threshold, sep, name = chunk.partition(":")
        if not sep:
            raise ValueError(f"rank tier {chunk!r} is not in threshold:name form")
        try:
            out.append((int(threshold), name.strip()))
        except ValueError:
            raise ValueError(f"rank threshold {threshold!r} is not an integer") from None
    return tuple(out)


def ladder_from_config(config: Mapping) -> Ladder:
    raw = config.get("RANK_TIERS")
    tiers = parse_tiers(raw) if raw is not None else DEFAULT_TIERS
    return build_ladder(tiers, config.get("RANK_ENTRY_TIER") or DEFAULT_ENTRY_TIER)


def xp_for_percentage(percentage: float) -> int:
    # 10% = 1 XP, uncapped
    if percentage <= 0:
        return 0
    return int(percentage // 10)


def rank_for_xp(xp: int, ladder: Ladder = None) -> str:
    ladder = ladder or build_ladder()
    if xp < 0:
        raise ValueError("experience cannot be negative")
    tier = ladder[0][1]
    for threshold, name in ladder:
        if xp >= threshold:
            tier = name
        else:
            break
    return tier


def tier_index(tier: str, ladder: Ladder = None) -> int:
    """Position of a tier in the ladder, 0 being the entry tier."""
    ladder = ladder or build_ladder()
    for i, (_, name) in enumerate(ladder):
        if name == tier:
            return i
    raise ValueError(f"unknown rank tier {tier!r}")

