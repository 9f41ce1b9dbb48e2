"""
JSON settings store — prefixed key-value persistence in a single file.

Storage failures are logged and degrade to "no value"; they never abort
the caller.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from jsonschema import ValidationError, validate
from pydantic import ValidationError as ModelValidationError

from draftsplice.config.constants import DEFAULT_PROVIDER_SETTINGS, STORAGE_PREFIX
from draftsplice.config.schemas import SAVED_PROMPTS_SCHEMA
from draftsplice.models.completion import ProviderSettings, SavedPrompt

logger = logging.getLogger(__name__)

PROVIDER_SETTINGS_KEY = "provider_settings"
SAVED_PROMPTS_KEY = "saved_prompts"


class JsonSettingsStore:
    """Key-value store persisted as one JSON object on disk."""

    def __init__(self, path: Union[str, Path], prefix: str = STORAGE_PREFIX) -> None:
        self.path = Path(path)
        self.prefix = prefix

    # ------------------------------------------------------------------
    # Raw key-value access
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(self.prefix + key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[self.prefix + key] = value
        self._save(data)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Storage read error (%s): %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        try:
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Storage write error (%s): %s", self.path, e)

    # ------------------------------------------------------------------
    # Provider settings
    # ------------------------------------------------------------------

    def get_provider_settings(self) -> ProviderSettings:
        raw = self.get(PROVIDER_SETTINGS_KEY) or copy.deepcopy(DEFAULT_PROVIDER_SETTINGS)
        try:
            return ProviderSettings.model_validate(raw)
        except ModelValidationError as e:
            logger.warning("Stored provider settings are invalid, using defaults: %s", e)
            return ProviderSettings.model_validate(copy.deepcopy(DEFAULT_PROVIDER_SETTINGS))

    def set_provider_settings(self, settings: ProviderSettings) -> None:
        self.set(PROVIDER_SETTINGS_KEY, settings.to_storage())

    # ------------------------------------------------------------------
    # Saved prompts
    # ------------------------------------------------------------------

    def get_saved_prompts(self) -> List[SavedPrompt]:
        raw = self.get(SAVED_PROMPTS_KEY) or []
        try:
            validate(instance=raw, schema=SAVED_PROMPTS_SCHEMA)
        except ValidationError as e:
            logger.warning("Stored prompts are invalid, ignoring them: %s", e.message)
            return []
        return [SavedPrompt.model_validate(item) for item in raw]

    def set_saved_prompts(self, prompts: List[SavedPrompt]) -> None:
        self.set(SAVED_PROMPTS_KEY, [p.model_dump() for p in prompts])
