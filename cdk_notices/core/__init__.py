"""Version ranges, inventory scanning and notice matching for cdk-notices."""

from .inventory import InventoryScanner, ModuleFact, ToolVersionFact, scan_inventory
from .matcher import AffectedComponent, Notice, NoticeMatcher, is_applicable, matches
from .ranges import MalformedRangeError, VersionRange, parse, satisfies

__all__ = [
    "AffectedComponent",
    "InventoryScanner",
    "MalformedRangeError",
    "ModuleFact",
    "Notice",
    "NoticeMatcher",
    "ToolVersionFact",
    "VersionRange",
    "is_applicable",
    "matches",
    "parse",
    "satisfies",
    "scan_inventory",
]
