"""Load a workspace description (repositories, libraries, project) from YAML.

Example::

    repositories:
      - name: local
        priority: 0
        bundles:
          - name: com.acme.api
            version: 2.0.0
            exports: [{package: com.acme.api, version: "2.0"}]
            imports: [{package: org.slf4j, version: "[1.7,2)"}]
    libraries:
      - name: logging
        version: 1.0
        imports: [{package: org.slf4j}]
    project:
      name: demo
      imports: [{package: com.acme.api}]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml
from jsonschema import Draft7Validator

from constants import Constants
from model.elements import (
    Bundle,
    Library,
    LibraryImport,
    PackageExport,
    PackageImport,
    Project,
    RequiredBundle,
)

from .manager import RepositoryManager
from .memory import InMemoryBundleRepository

logger = logging.getLogger(__name__)

_VERSION = {"type": ["string", "number", "null"]}

_PACKAGE_IMPORT = {
    "type": "object",
    "required": ["package"],
    "properties": {
        "package": {"type": "string", "minLength": 1},
        "version": _VERSION,
        "optional": {"type": "boolean"},
    },
    "additionalProperties": False,
}

_REQUIRED_BUNDLE = {
    "type": "object",
    "required": ["bundle"],
    "properties": {
        "bundle": {"type": "string", "minLength": 1},
        "version": _VERSION,
        "optional": {"type": "boolean"},
    },
    "additionalProperties": False,
}

_LIBRARY_IMPORT = {
    "type": "object",
    "required": ["library"],
    "properties": {
        "library": {"type": "string", "minLength": 1},
        "version": _VERSION,
    },
    "additionalProperties": False,
}

_EXPORT = {
    "oneOf": [
        {"type": "string", "minLength": 1},
        {
            "type": "object",
            "required": ["package"],
            "properties": {"package": {"type": "string", "minLength": 1}, "version": _VERSION},
            "additionalProperties": False,
        },
    ]
}

_REQUIREMENT_LISTS = {
    "imports": {"type": "array", "items": _PACKAGE_IMPORT},
    "requires": {"type": "array", "items": _REQUIRED_BUNDLE},
    "libraries": {"type": "array", "items": _LIBRARY_IMPORT},
}

_BUNDLE = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": _VERSION,
        "synchronized": {"type": "boolean"},
        "indexed": {"type": "boolean"},
        "sync_error": {"type": "string"},
        "exports": {"type": "array", "items": _EXPORT},
        **_REQUIREMENT_LISTS,
    },
    "additionalProperties": False,
}

WORKSPACE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["project"],
    "properties": {
        "repositories": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "priority": {"type": "integer"},
                    "bundles": {"type": "array", "items": _BUNDLE},
                },
                "additionalProperties": False,
            },
        },
        "libraries": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "version": _VERSION,
                    "imports": {"type": "array", "items": _PACKAGE_IMPORT},
                },
                "additionalProperties": False,
            },
        },
        "project": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "bundles": {"type": "array", "items": _BUNDLE},
                **_REQUIREMENT_LISTS,
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


class WorkspaceError(ValueError):
    """Raised when a workspace file cannot be read or is invalid."""


@dataclass
class Workspace:
    """A loaded workspace: the project to resolve and where to look."""
    project: Project
    manager: RepositoryManager
    repositories: List[InMemoryBundleRepository] = field(default_factory=list)


def _text(value) -> Any:
    # YAML reads 2.0 as a float
    return None if value is None else str(value)


def _package_import(data: Dict[str, Any]) -> PackageImport:
    return PackageImport(data["package"], _text(data.get("version")), bool(data.get("optional", False)))


def _requirements(data: Dict[str, Any]):
    imports = [_package_import(d) for d in data.get("imports", [])]
    requires = [
        RequiredBundle(d["bundle"], _text(d.get("version")), bool(d.get("optional", False)))
        for d in data.get("requires", [])
    ]
    libraries = [LibraryImport(d["library"], _text(d.get("version"))) for d in data.get("libraries", [])]
    return imports, requires, libraries


def _export(data) -> PackageExport:
    if isinstance(data, str):
        return PackageExport(data)
    return PackageExport(data["package"], _text(data.get("version")))


def _bundle(data: Dict[str, Any]) -> Bundle:
    imports, requires, libraries = _requirements(data)
    return Bundle(
        data["name"],
        version=_text(data.get("version")),
        exports=[_export(e) for e in data.get("exports", [])],
        imports=imports,
        requires=requires,
        libraries=libraries,
        synchronized=bool(data.get("synchronized", True)),
        sync_error=data.get("sync_error"),
        indexed=bool(data.get("indexed", True)),
    )


def validate_workspace(data: Any) -> None:
    """Validate raw workspace data against WORKSPACE_SCHEMA.

    Raises:
        WorkspaceError: naming the path of the first problem found.
    """
    validator = Draft7Validator(WORKSPACE_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join(str(p) for p in first.path)
        raise WorkspaceError(f"Invalid workspace at '{path}': {first.message}")


def build_workspace(data: Dict[str, Any]) -> Workspace:
    """Build model objects and a RepositoryManager from validated data."""
    validate_workspace(data)
    manager = RepositoryManager()
    repositories = []
    try:
        for repo_data in data.get("repositories", []):
            repo = InMemoryBundleRepository(
                repo_data["name"], [_bundle(b) for b in repo_data.get("bundles", [])]
            )
            manager.add_repository(repo, repo_data.get("priority", Constants.DEFAULT_PRIORITY))
            repositories.append(repo)

        for lib_data in data.get("libraries", []):
            manager.add_library(Library(
                lib_data["name"],
                _text(lib_data.get("version")),
                [_package_import(d) for d in lib_data.get("imports", [])],
            ))

        project_data = data["project"]
        imports, requires, libraries = _requirements(project_data)
        project = Project(project_data["name"])
        for bundle_data in project_data.get("bundles", []):
            project.add_child(_bundle(bundle_data))
        for requirement in [*imports, *requires, *libraries]:
            project.add_child(requirement)
    except ValueError as e:
        raise WorkspaceError(f"Invalid workspace: {e}") from e

    logger.debug(
        "Loaded workspace %s with %d repositories",
        project.name,
        len(repositories),
    )
    return Workspace(project=project, manager=manager, repositories=repositories)


def load_workspace(path: str) -> Workspace:
    """Read and build the workspace described by the YAML file at ``path``.

    Raises:
        WorkspaceError: if the file is missing, unreadable, not YAML, or invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise WorkspaceError(f"Cannot read workspace {path}: {e}") from e
    except yaml.YAMLError as e:
        raise WorkspaceError(f"Workspace {path} is not valid YAML: {e}") from e
    return build_workspace(data)
