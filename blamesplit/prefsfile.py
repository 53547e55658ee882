# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameSplit, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os

from blamesplit.qt import *

logger = logging.getLogger(__name__)


class PrefsFile:
    """
    Dataclass mixin that loads/saves its fields as a JSON file
    in the application's config directory.

    Keys starting with an underscore are not persisted.
    In test mode, nothing is ever read from or written to disk.
    """

    _filename = ""
    _allowMissingKeys = True

    def fullPath(self) -> str:
        assert self._filename
        prefsDir = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)
        return os.path.join(prefsDir, self._filename)

    def load(self) -> bool:
        if APP_TESTMODE:
            return False

        path = self.fullPath()

        try:
            with open(path, encoding="utf-8") as file:
                obj = json.load(file)
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't load {path}: {exc}")
            return False

        if not isinstance(obj, dict):
            logger.warning(f"Ignoring {path}: top-level object isn't a dict")
            return False

        self.applyDict(obj)
        return True

    def applyDict(self, obj: dict):
        for field in dataclasses.fields(self):
            key = field.name
            if key.startswith("_") or key not in obj:
                continue

            value = obj[key]
            defaultValue = getattr(self, key)

            # Coerce enums back from their JSON value
            if isinstance(defaultValue, enum.Enum):
                try:
                    value = type(defaultValue)(value)
                except ValueError:
                    logger.warning(f"{self._filename}: bad value for {key}: {value!r}")
                    continue
            elif isinstance(defaultValue, bool) != isinstance(value, bool):
                logger.warning(f"{self._filename}: type mismatch for {key}")
                continue
            elif isinstance(defaultValue, (int, float)) and not isinstance(value, (int, float)):
                logger.warning(f"{self._filename}: type mismatch for {key}")
                continue
            elif not isinstance(defaultValue, (int, float)) and type(defaultValue) is not type(value):
                logger.warning(f"{self._filename}: type mismatch for {key}")
                continue

            setattr(self, key, value)

    def toDict(self) -> dict:
        obj = {}
        for field in dataclasses.fields(self):
            key = field.name
            if key.startswith("_"):
                continue
            value = getattr(self, key)
            if isinstance(value, enum.Enum):
                value = value.value
            obj[key] = value
        return obj

    def write(self) -> str:
        if APP_TESTMODE:
            return ""

        path = self.fullPath()
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as file:
            json.dump(self.toDict(), file, indent="\t")
        return path

    def reset(self):
        defaults = type(self)()
        for field in dataclasses.fields(self):
            setattr(self, field.name, getattr(defaults, field.name))
