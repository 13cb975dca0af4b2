"""Inventory of the tool and library modules used by a synthesized application."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Union

from ..utils.logging import get_logger


TREE_ARTIFACT_TYPE = "cdk:tree"
DEFAULT_TREE_FILE = "tree.json"
MANIFEST_FILE = "manifest.json"


@dataclass(frozen=True)
class ToolVersionFact:
    """The version of the running command-line tool."""

    version: str


@dataclass(frozen=True)
class ModuleFact:
    """A library module (and optionally a construct type) found in the app tree."""

    module_name: str
    module_version: str
    construct_type_fqn: Optional[str] = None


InventoryFact = Union[ToolVersionFact, ModuleFact]


@dataclass
class ConstructNode:
    """A node of the synthesized construct tree."""

    id: str
    path: str = ""
    fqn: Optional[str] = None
    version: Optional[str] = None
    children: List["ConstructNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConstructNode":
        """Build a node (and its subtree) from tree.json data.

        Raises:
            ValueError: If the data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Tree node must be an object, got {type(data).__name__}")

        info = data.get("constructInfo") or {}
        if not isinstance(info, dict):
            raise ValueError("constructInfo must be an object")
        for key in ("fqn", "version"):
            if not isinstance(info.get(key), (str, type(None))):
                raise ValueError(f"constructInfo.{key} must be a string")

        raw_children = data.get("children") or {}
        if isinstance(raw_children, dict):
            raw_children = list(raw_children.values())
        elif not isinstance(raw_children, list):
            raise ValueError("children must be an object or a list")

        return cls(
            id=str(data.get("id", "")),
            path=str(data.get("path", "")),
            fqn=info.get("fqn"),
            version=info.get("version"),
            children=[cls.from_dict(child) for child in raw_children],
        )

    def walk(self) -> Iterator["ConstructNode"]:
        """Yield this node and every descendant."""
        yield self
        for child in self.children:
            yield from child.walk()


def module_name_of(fqn: str) -> str:
    """Return the module part of a construct fqn.

    `aws-cdk-lib.aws_s3.Bucket` -> `aws-cdk-lib`,
    `@aws-cdk/aws-apigatewayv2-alpha.HttpApi` -> `@aws-cdk/aws-apigatewayv2-alpha`.
    """
    return fqn.split(".", 1)[0]


class InventoryScanner:
    """Reads a cloud assembly directory and reports which modules it uses."""

    def __init__(self, cli_version: str) -> None:
        """Initialize the scanner.

        Args:
            cli_version: Version of the running tool, always reported as a fact
        """
        self.cli_version = cli_version
        self.logger = get_logger("InventoryScanner")

    def scan(self, outdir: Optional[Union[str, Path]]) -> Set[InventoryFact]:
        """Collect inventory facts for the application synthesized into `outdir`.

        Missing or malformed assembly data yields only the tool version fact.
        """
        facts: Set[InventoryFact] = {ToolVersionFact(self.cli_version)}

        if not outdir:
            return facts

        tree = self.load_tree(Path(outdir))
        if tree is None:
            return facts

        for node in tree.walk():
            if node.fqn and node.version:
                facts.add(ModuleFact(
                    module_name=module_name_of(node.fqn),
                    module_version=str(node.version),
                    construct_type_fqn=node.fqn,
                ))

        self.logger.debug(f"Found {len(facts) - 1} module facts in {outdir}")
        return facts

    def load_tree(self, outdir: Path) -> Optional[ConstructNode]:
        """Load the construct tree of a cloud assembly into memory.

        Returns:
            Root node, or None if the tree is absent or unreadable
        """
        tree_file = self._resolve_tree_file(outdir)
        if tree_file is None:
            return None

        try:
            with open(tree_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return ConstructNode.from_dict(data["tree"])
        except FileNotFoundError:
            self.logger.debug(f"No construct tree at {tree_file}")
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, RecursionError) as e:
            self.logger.warning(f"Ignoring malformed construct tree {tree_file}: {e}")
        return None

    def _resolve_tree_file(self, outdir: Path) -> Optional[Path]:
        manifest_file = outdir / MANIFEST_FILE
        try:
            with open(manifest_file, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except FileNotFoundError:
            return outdir / DEFAULT_TREE_FILE
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable manifest {manifest_file}: {e}")
            return None

        artifacts = manifest.get("artifacts") if isinstance(manifest, dict) else None
        if not isinstance(artifacts, dict):
            return None

        for artifact in artifacts.values():
            if isinstance(artifact, dict) and artifact.get("type") == TREE_ARTIFACT_TYPE:
                properties = artifact.get("properties")
                tree_file = properties.get("file") if isinstance(properties, dict) else None
                return outdir / (tree_file if isinstance(tree_file, str) else DEFAULT_TREE_FILE)

        self.logger.debug(f"No {TREE_ARTIFACT_TYPE} artifact in {manifest_file}")
        return None


def scan_inventory(outdir: Optional[Union[str, Path]], cli_version: str) -> Set[InventoryFact]:
    """Convenience function to scan an assembly directory.

    Args:
        outdir: Cloud assembly directory
        cli_version: Version of the running tool

    Returns:
        Set of inventory facts
    """
    return InventoryScanner(cli_version).scan(outdir)
