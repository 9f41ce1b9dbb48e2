"""
Saved prompt manager — CRUD over the prompt list in the settings store.
"""
import uuid
from typing import List, Optional

from draftsplice.config.constants import DEFAULT_PROMPTS
from draftsplice.models.completion import SavedPrompt
from draftsplice.storage.settings_store import JsonSettingsStore


class PromptManager:
    def __init__(self, store: JsonSettingsStore) -> None:
        self.store = store

    def get_all(self) -> List[SavedPrompt]:
        return self.store.get_saved_prompts()

    def get_by_id(self, prompt_id: str) -> Optional[SavedPrompt]:
        return next((p for p in self.get_all() if p.id == prompt_id), None)

    def add(self, name: str, instruction: str) -> SavedPrompt:
        prompts = self.get_all()
        prompt = SavedPrompt(id=str(uuid.uuid4()), name=name.strip(), instruction=instruction.strip())
        prompts.append(prompt)
        self.store.set_saved_prompts(prompts)
        return prompt

    def update(self, prompt_id: str, name: str, instruction: str) -> bool:
        prompts = self.get_all()
        for i, prompt in enumerate(prompts):
            if prompt.id == prompt_id:
                prompts[i] = prompt.model_copy(update={"name": name.strip(), "instruction": instruction.strip()})
                self.store.set_saved_prompts(prompts)
                return True
        return False

    def delete(self, prompt_id: str) -> bool:
        prompts = self.get_all()
        remaining = [p for p in prompts if p.id != prompt_id]
        if len(remaining) == len(prompts):
            return False
        self.store.set_saved_prompts(remaining)
        return True

    def init_defaults(self) -> None:
        """Seed the default prompts when the list is empty."""
        if self.get_all():
            return
        for name, instruction in DEFAULT_PROMPTS:
            self.add(name, instruction)
