from __future__ import annotations

from typing import Literal, get_args


PlatformFamily = Literal["Nintendo", "PlayStation", "Xbox", "PC", "Other"]
FamilyFilter = Literal["All", "Nintendo", "PlayStation", "Xbox", "PC", "Other"]

PLATFORM_FAMILIES: tuple[PlatformFamily, ...] = get_args(PlatformFamily)
FAMILY_FILTERS: tuple[FamilyFilter, ...] = get_args(FamilyFilter)

# Closed table: new platform codes must be added here.
_PLATFORM_TABLE: dict[str, PlatformFamily] = {
    **{code: "Nintendo" for code in ("SWITCH", "WII", "WIIU", "DS", "3DS", "GBA", "GC", "N64", "SNES", "NES")},
    **{code: "PlayStation" for code in ("PS", "PS2", "PS3", "PS4", "PS5", "PSP", "PSV")},
    **{code: "Xbox" for code in ("XB", "XBOX", "X360", "XONE", "XSERIES")},
    "PC": "PC",
}


def classify(label: str | None) -> PlatformFamily:
    if label is None:
        return "Other"
    return _PLATFORM_TABLE.get(str(label).strip().upper(), "Other")


def is_family_filter(value: object) -> bool:
    return value in FAMILY_FILTERS
