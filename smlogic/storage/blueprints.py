"""Blueprint store: saves compiled schemes into the game's blueprint folder.

Each blueprint lives in its own folder named by a random uuid, holding
``blueprint.json`` and ``description.json``. Blueprints are looked up by the
``name`` field of their description, never by folder name.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from smlogic.models.blueprint import NO_DESCRIPTION, Blueprint, BlueprintDescription

logger = logging.getLogger(__name__)

BLUEPRINT_FILE = "blueprint.json"
DESCRIPTION_FILE = "description.json"


def _write_json(path: Path, data: dict[str, Any]) -> None:
    """Write next to the target first so readers never see a partial file."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class BlueprintStore:
    def __init__(self, folder: Path) -> None:
        self.folder = folder

    @classmethod
    def from_folder(cls, folder: str | os.PathLike[str], create: bool = False) -> BlueprintStore:
        path = Path(folder)
        if create:
            path.mkdir(parents=True, exist_ok=True)
        if not path.is_dir():
            raise NotADirectoryError(f"Blueprint folder '{path}' does not exist")
        return cls(path)

    def _read_description(self, folder: Path) -> BlueprintDescription | None:
        descr_file = folder / DESCRIPTION_FILE
        if not descr_file.is_file():
            return None
        try:
            with open(descr_file, encoding="utf-8") as f:
                return BlueprintDescription.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.debug("Skipping unreadable description %s: %s", descr_file, e)
            return None

    def find(self, name: str) -> Path | None:
        """Folder of the blueprint whose description is named ``name``."""
        for entry in sorted(self.folder.iterdir()):
            if not entry.is_dir():
                continue
            description = self._read_description(entry)
            if description is not None and description.name == name:
                return entry
        return None

    def names(self) -> list[str]:
        found = []
        for entry in sorted(self.folder.iterdir()):
            if entry.is_dir():
                description = self._read_description(entry)
                if description is not None:
                    found.append(description.name)
        return found

    def save(self, name: str, blueprint: Blueprint | dict[str, Any], overwrite: bool = True) -> bool:
        """Write ``blueprint`` under ``name``; returns False if it exists and ``overwrite`` is off."""
        if isinstance(blueprint, Blueprint):
            blueprint = blueprint.model_dump()

        folder = self.find(name)
        if folder is not None:
            if not overwrite:
                logger.info("Blueprint %r already exists in %s, not overwriting", name, folder.name)
                return False
            previous = self._read_description(folder)
            text = previous.description if previous is not None else NO_DESCRIPTION
            logger.info("Overwriting blueprint %r in %s", name, folder.name)
        else:
            folder = self.folder / str(uuid.uuid4())
            folder.mkdir(parents=True, exist_ok=True)
            text = NO_DESCRIPTION
            logger.info("Created blueprint %r in %s", name, folder.name)

        _write_json(folder / BLUEPRINT_FILE, blueprint)
        description = BlueprintDescription(description=text, local_id=folder.name, name=name)
        _write_json(folder / DESCRIPTION_FILE, description.to_json())
        return True

    def load(self, name: str) -> Blueprint:
        folder = self.find(name)
        if folder is None:
            raise LookupError(f"Blueprint {name!r} does not exist")
        with open(folder / BLUEPRINT_FILE, encoding="utf-8") as f:
            return Blueprint.model_validate(json.load(f))

    def set_description(self, name: str, text: str) -> None:
        folder = self.find(name)
        if folder is None:
            raise LookupError(f"Blueprint {name!r} does not exist")
        description = BlueprintDescription(description=text, local_id=folder.name, name=name)
        _write_json(folder / DESCRIPTION_FILE, description.to_json())
