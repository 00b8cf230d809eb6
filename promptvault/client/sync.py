"""API-backed store that keeps the local cache in step with the server.

Reads prefer the server and fall back to the cache. Writes go to the server
first and only touch the cache once the server has accepted them; a failed
write is raised to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..app.schemas import CURRENT_EXPORT_VERSION, ExportEnvelope
from .api import ApiClient, ApiError
from .cache import EntityKind, KeyValueStorage, LocalCache, StorageError
from .prompts import Folder, Prompt

logger = logging.getLogger(__name__)

LEGACY_PROMPTS_KEY = "promptvault-prompts"
LEGACY_FOLDERS_KEY = "promptvault-folders"
PROMPTS_BACKUP_KEY = "promptvault-migrated-prompts-backup"
FOLDERS_BACKUP_KEY = "promptvault-migrated-folders-backup"

EntityT = TypeVar("EntityT", bound=BaseModel)


def migrate_to_v2(legacy_prompts: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Upgrade pre-folder prompt records to the current shape."""
    return [
        {**record, "isPinned": False, "folderId": None, "versions": []}
        for record in legacy_prompts
        if isinstance(record, dict)
    ]


def _validate_all(model: Type[EntityT], records: Sequence[Any]) -> List[EntityT]:
    entities: List[EntityT] = []
    for record in records:
        try:
            entities.append(model.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed %s record: %s", model.__name__, record)
    return entities


def parse_import(raw_text: str) -> Optional[Tuple[List[Prompt], List[Folder]]]:
    """Read an export file: a v2 envelope, an older envelope, or a bare v1 array.

    Returns ``None`` when the text is not one of those shapes.
    """
    try:
        data = json.loads(raw_text)
    except (TypeError, json.JSONDecodeError):
        logger.error("Import failed: file is not valid JSON")
        return None

    if isinstance(data, list):
        return _validate_all(Prompt, migrate_to_v2(data)), []

    if isinstance(data, dict) and isinstance(data.get("prompts"), list):
        version = data.get("version")
        records = data["prompts"]
        # Only a numbered older envelope is upgraded; an unversioned one is taken as is.
        numbered = isinstance(version, (int, float)) and not isinstance(version, bool)
        if numbered and version < CURRENT_EXPORT_VERSION:
            records = migrate_to_v2(records)
        folders = data.get("folders") if isinstance(data.get("folders"), list) else []
        return _validate_all(Prompt, records), _validate_all(Folder, folders)

    logger.error("Import failed: unrecognised export format")
    return None


class VaultStore:
    def __init__(self, api: ApiClient, cache: LocalCache) -> None:
        self.api = api
        self.cache = cache

    # Cache access

    def _cached(self, kind: EntityKind, model: Type[EntityT]) -> List[EntityT]:
        return _validate_all(model, self.cache.get(kind))

    def _store(self, kind: EntityKind, entities: Sequence[BaseModel]) -> None:
        self.cache.put(kind, [entity.model_dump(by_alias=True) for entity in entities])

    def _upsert_cached(self, kind: EntityKind, entity: BaseModel) -> None:
        entry = entity.model_dump(by_alias=True)
        cached = self.cache.get(kind)
        for index, existing in enumerate(cached):
            if existing.get("id") == entry["id"]:
                cached[index] = entry
                break
        else:
            cached.append(entry)
        self.cache.put(kind, cached)

    def _remove_cached(self, kind: EntityKind, entity_id: str) -> None:
        cached = self.cache.get(kind)
        self.cache.put(kind, [entry for entry in cached if entry.get("id") != entity_id])

    def _is_cached(self, kind: EntityKind, entity_id: str) -> bool:
        return any(entry.get("id") == entity_id for entry in self.cache.get(kind))

    def cached_prompts(self) -> List[Prompt]:
        return self._cached(EntityKind.PROMPTS, Prompt)

    def cached_folders(self) -> List[Folder]:
        return self._cached(EntityKind.FOLDERS, Folder)

    # Loading

    async def _load(self, kind: EntityKind, model: Type[EntityT], fetch: Callable[[], Any]) -> List[EntityT]:
        try:
            entities = await fetch()
        except (ApiError, ValidationError) as exc:
            logger.error("Failed to fetch %s from API, using cache: %s", kind.value, exc)
            return self._cached(kind, model)
        self._store(kind, entities)
        return list(entities)

    async def load_prompts(self) -> List[Prompt]:
        return await self._load(EntityKind.PROMPTS, Prompt, self.api.list_prompts)

    async def load_folders(self) -> List[Folder]:
        return await self._load(EntityKind.FOLDERS, Folder, self.api.list_folders)

    # Saving

    async def _save(
        self,
        kind: EntityKind,
        entity: EntityT,
        is_new: Optional[bool],
        create: Callable[[EntityT], Any],
        update: Callable[[str, EntityT], Any],
    ) -> EntityT:
        entity_id = entity.id  # type: ignore[attr-defined]
        if is_new is None:
            is_new = not self._is_cached(kind, entity_id)
        try:
            if is_new:
                try:
                    saved = await create(entity)
                except ApiError as exc:
                    if exc.status_code != 409:
                        raise
                    logger.info("%s %s already exists on the server; updating instead", kind.value, entity_id)
                    saved = await update(entity_id, entity)
            else:
                try:
                    saved = await update(entity_id, entity)
                except ApiError as exc:
                    if exc.status_code != 404:
                        raise
                    logger.info("%s %s is missing on the server; creating instead", kind.value, entity_id)
                    saved = await create(entity)
        except ApiError as exc:
            logger.error("Failed to save %s %s to API: %s", kind.value, entity_id, exc)
            raise
        self._upsert_cached(kind, saved)
        return saved

    async def save_prompt(self, prompt: Prompt, is_new: Optional[bool] = None) -> Prompt:
        """Create or update a prompt on the server and record the server's copy.

        ``is_new`` forces the choice; when omitted, a prompt absent from the
        cache is created. A create rejected as a duplicate becomes an update and
        an update of an unknown id becomes a create.
        """
        return await self._save(
            EntityKind.PROMPTS, prompt, is_new, self.api.create_prompt, self.api.update_prompt
        )

    async def save_folder(self, folder: Folder, is_new: Optional[bool] = None) -> Folder:
        return await self._save(
            EntityKind.FOLDERS, folder, is_new, self.api.create_folder, self.api.update_folder
        )

    # Deleting

    async def delete_prompt(self, prompt_id: str) -> None:
        try:
            await self.api.delete_prompt(prompt_id)
        except ApiError as exc:
            logger.error("Failed to delete prompt %s from API: %s", prompt_id, exc)
            raise
        self._remove_cached(EntityKind.PROMPTS, prompt_id)

    async def delete_folder(self, folder_id: str) -> None:
        try:
            await self.api.delete_folder(folder_id)
        except ApiError as exc:
            logger.error("Failed to delete folder %s from API: %s", folder_id, exc)
            raise
        self._remove_cached(EntityKind.FOLDERS, folder_id)
        # The server detaches prompts from a deleted folder; mirror that locally.
        cached = self.cache.get(EntityKind.PROMPTS)
        if any(entry.get("folderId") == folder_id for entry in cached):
            for entry in cached:
                if entry.get("folderId") == folder_id:
                    entry["folderId"] = None
            self.cache.put(EntityKind.PROMPTS, cached)

    # Import / export

    async def import_data(self, prompts: Sequence[Prompt], folders: Sequence[Folder]) -> None:
        try:
            await self.api.import_data(prompts, folders)
        except ApiError as exc:
            logger.error("Failed to import to API: %s", exc)
            raise
        self._store(EntityKind.PROMPTS, prompts)
        self._store(EntityKind.FOLDERS, folders)

    async def import_json(self, raw_text: str) -> bool:
        parsed = parse_import(raw_text)
        if parsed is None:
            return False
        prompts, folders = parsed
        try:
            await self.import_data(prompts, folders)
        except ApiError:
            return False
        return True

    def export_data(self) -> ExportEnvelope:
        return ExportEnvelope(prompts=self.cached_prompts(), folders=self.cached_folders())

    def export_json(self) -> str:
        return json.dumps(self.export_data().model_dump(by_alias=True), indent=2, ensure_ascii=False)

    # Legacy storage

    async def migrate_legacy_storage(self, storage: KeyValueStorage) -> bool:
        """Move data left by the pre-API single-array format into the server.

        The old keys are removed only after a successful import, with a backup
        copy kept under separate keys, so a second run finds nothing to do.
        """
        try:
            raw_prompts = storage.get_item(LEGACY_PROMPTS_KEY)
            raw_folders = storage.get_item(LEGACY_FOLDERS_KEY)
        except StorageError as exc:
            logger.error("Unable to read legacy storage: %s", exc)
            return False

        if not raw_prompts and not raw_folders:
            return False

        try:
            prompt_records = json.loads(raw_prompts) if raw_prompts else []
            folder_records = json.loads(raw_folders) if raw_folders else []
        except json.JSONDecodeError:
            logger.error("Migration failed: legacy storage is not valid JSON")
            return False
        if not isinstance(prompt_records, list) or not isinstance(folder_records, list):
            logger.error("Migration failed: legacy storage does not hold arrays")
            return False

        if prompt_records and isinstance(prompt_records[0], dict) and "isPinned" not in prompt_records[0]:
            prompt_records = migrate_to_v2(prompt_records)

        prompts = _validate_all(Prompt, prompt_records)
        folders = _validate_all(Folder, folder_records)
        if not prompts and not folders:
            return False

        try:
            await self.import_data(prompts, folders)
        except ApiError as exc:
            logger.error("Migration failed: %s", exc)
            return False

        try:
            storage.set_item(PROMPTS_BACKUP_KEY, raw_prompts or "[]")
            storage.set_item(FOLDERS_BACKUP_KEY, raw_folders or "[]")
            storage.remove_item(LEGACY_PROMPTS_KEY)
            storage.remove_item(LEGACY_FOLDERS_KEY)
        except StorageError as exc:
            logger.error("Migrated data but could not clear legacy storage: %s", exc)

        logger.info("Migrated %d prompts and %d folders to API", len(prompts), len(folders))
        return True


__all__ = [
    "VaultStore",
    "migrate_to_v2",
    "parse_import",
]
