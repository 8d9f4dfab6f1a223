"""
JSON State Store for studytrack.

Provides portable persistence for:
- The concept collection (key: "concepts")
- The optional Gemini credential (key: "apiKeyConfig")

Storage location: ~/.studytrack/state.json

Layers:
- KeyValueStorage: flat key-value persistence (JSON file or memory)
- ConceptRepository: load()/save() of the concept collection
- ConceptStore: in-memory collection with create/delete/replace and
  change notification
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from studytrack.core.constants import API_KEY_KEY, CONCEPTS_KEY, starter_concepts
from studytrack.core.models import Concept, Difficulty, generate_id

ChangeListener = Callable[[list[Concept]], None]


class ConceptNotFoundError(KeyError):
    """Raised when an operation needs a concept id that is not stored."""

    def __init__(self, concept_id: str):
        super().__init__(concept_id)
        self.concept_id = concept_id

    def __str__(self) -> str:
        return f"Concept not found: {self.concept_id}"


# =============================================================================
# Key-Value Storage
# =============================================================================


class KeyValueStorage(Protocol):
    """Minimal durable key-value interface."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used by tests and dry runs."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """
    Key-value storage backed by a single JSON object on disk.

    Values are stored as strings, the way browser local storage holds them;
    callers serialize structured values themselves. Writes go to a temp
    file first and are moved into place.
    """

    DEFAULT_PATH = Path.home() / ".studytrack" / "state.json"

    def __init__(self, path: Path | None = None):
        """
        Initialize the storage.

        Args:
            path: Custom file path (defaults to ~/.studytrack/state.json)
        """
        self.path = Path(path or self.DEFAULT_PATH).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"JsonFileStorage at {self.path}")

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers bad JSON and bytes that are not UTF-8
            logger.warning(f"Unreadable state file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"State file {self.path} is not a JSON object, ignoring")
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


# =============================================================================
# Concept Repository
# =============================================================================


class ConceptRepository:
    """Serializes the concept collection under the "concepts" key."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def load(self) -> list[Concept]:
        """
        Read the saved collection.

        Returns:
            Saved concepts, or the starter collection when nothing valid is
            stored. Never raises.
        """
        try:
            raw = self.storage.get(CONCEPTS_KEY)
            if raw is None:
                logger.info("No saved concepts, using starter collection")
                return starter_concepts()

            records = json.loads(raw) if isinstance(raw, str) else raw
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            return [Concept.from_dict(record) for record in records]
        except (OSError, AttributeError, TypeError, ValueError, KeyError) as e:
            logger.warning(f"Saved concepts are invalid ({e}), using starter collection")
            return starter_concepts()

    def save(self, concepts: list[Concept]) -> bool:
        """
        Write the whole collection.

        Returns:
            True on success, False if the storage rejected the write
        """
        payload = json.dumps([c.to_dict() for c in concepts])
        try:
            self.storage.set(CONCEPTS_KEY, payload)
        except OSError as e:
            logger.error(f"Failed to save {len(concepts)} concepts: {e}")
            return False
        return True

    def get_api_key(self) -> str | None:
        value = self.storage.get(API_KEY_KEY)
        return str(value) if value else None

    def set_api_key(self, api_key: str | None) -> None:
        if api_key:
            self.storage.set(API_KEY_KEY, api_key)
        else:
            self.storage.delete(API_KEY_KEY)


# =============================================================================
# Concept Store
# =============================================================================


class ConceptStore:
    """
    In-memory concept collection with write-through persistence.

    Every mutation replaces the collection list, saves it, then notifies
    subscribers with the new list.
    """

    def __init__(self, repository: ConceptRepository):
        self.repository = repository
        self._concepts: list[Concept] = repository.load()
        self._listeners: list[ChangeListener] = []

        logger.debug(f"ConceptStore loaded {len(self._concepts)} concepts")

    # =========================================================================
    # Reads
    # =========================================================================

    def all(self) -> list[Concept]:
        """Current collection, in insertion order."""
        return list(self._concepts)

    def get(self, concept_id: str) -> Concept | None:
        for concept in self._concepts:
            if concept.id == concept_id:
                return concept
        return None

    def require(self, concept_id: str) -> Concept:
        concept = self.get(concept_id)
        if concept is None:
            raise ConceptNotFoundError(concept_id)
        return concept

    def __len__(self) -> int:
        return len(self._concepts)

    def __contains__(self, concept_id: str) -> bool:
        return self.get(concept_id) is not None

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, concepts: list[Concept]) -> None:
        self._concepts = concepts
        if not self.repository.save(concepts):
            logger.warning("Concept collection changed but was not persisted")
        snapshot = self.all()
        for listener in list(self._listeners):
            listener(snapshot)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, concept: Concept) -> Concept:
        if concept.id in self:
            raise ValueError(f"Duplicate concept id: {concept.id}")
        self._commit([*self._concepts, concept])
        logger.info(f"Added concept {concept.id} ({concept.title})")
        return concept

    def create(
        self,
        title: str,
        subject: str,
        description: str,
        difficulty: Difficulty | str,
        today: date | None = None,
    ) -> Concept:
        """Create and add a new, unreviewed concept."""
        concept = Concept.new(
            concept_id=generate_id({c.id for c in self._concepts}),
            title=title,
            subject=subject,
            description=description,
            difficulty=difficulty,
            today=today,
        )
        return self.add(concept)

    def delete(self, concept_id: str) -> bool:
        """
        Remove a concept by id.

        Returns:
            True if removed, False if no such id (no-op)
        """
        remaining = [c for c in self._concepts if c.id != concept_id]
        if len(remaining) == len(self._concepts):
            logger.debug(f"Delete ignored, unknown concept {concept_id}")
            return False
        self._commit(remaining)
        logger.info(f"Deleted concept {concept_id}")
        return True

    def replace(self, concept: Concept) -> Concept:
        """Swap in a new version of an existing concept, matched by id."""
        if concept.id not in self:
            raise ConceptNotFoundError(concept.id)
        self._commit([concept if c.id == concept.id else c for c in self._concepts])
        return concept

    def reset(self) -> list[Concept]:
        """Replace the collection with the starter concepts."""
        self._commit(starter_concepts())
        logger.info("Concept collection reset to starter set")
        return self.all()
