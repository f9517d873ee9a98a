"""Catalog Store interface and an in-memory implementation.

The store is injected wherever catalog data is needed (see
``api.deps``); nothing in the package holds a module-level client.
``InMemoryCatalogStore`` backs tests and local development from a
dataset export.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from ..models.catalog import AddOnOption, Brand, StageDescriptionDoc
from ..models.reseller import AddOnOverride, ResellerConfig, ResellerOverride

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Capability surface the catalog services consume."""

    async def fetch_brand_forest(self) -> list[Brand]: ...

    async def fetch_addon_options(self) -> list[AddOnOption]: ...

    async def fetch_overrides(self, reseller_id: str) -> list[ResellerOverride]: ...

    async def fetch_reseller_config(self, reseller_id: str) -> ResellerConfig | None: ...

    async def fetch_stage_descriptions(
        self, reseller_id: str | None = None
    ) -> list[StageDescriptionDoc]: ...

    async def fetch_addon_overrides(self, reseller_id: str) -> list[AddOnOverride]: ...

    async def save_overrides(self, overrides: list[ResellerOverride]) -> int: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...


def _dereference(value: Any, by_id: dict[str, dict[str, Any]]) -> Any:
    """Replace ``{"_ref": id}`` objects with the referenced documents, when present."""
    if isinstance(value, list):
        return [_dereference(v, by_id) for v in value]
    if isinstance(value, dict):
        ref = value.get("_ref")
        if isinstance(ref, str) and set(value) <= {"_ref", "_type", "_key", "_weak"}:
            return by_id.get(ref, value)
        return {k: _dereference(v, by_id) for k, v in value.items()}
    return value


class InMemoryCatalogStore:
    """Catalog store over documents held in memory."""

    def __init__(
        self,
        brands: Iterable[Brand] = (),
        addon_options: Iterable[AddOnOption] = (),
        overrides: Iterable[ResellerOverride] = (),
        configs: Iterable[ResellerConfig] = (),
        stage_descriptions: Iterable[StageDescriptionDoc] = (),
        addon_overrides: Iterable[AddOnOverride] = (),
    ) -> None:
        self.brands = list(brands)
        self.addon_options = list(addon_options)
        self.overrides = list(overrides)
        self.configs = list(configs)
        self.stage_descriptions = list(stage_descriptions)
        self.addon_overrides = list(addon_overrides)

    @classmethod
    def from_documents(cls, documents: Iterable[dict[str, Any]]) -> "InMemoryCatalogStore":
        """Build a store from raw dataset documents, grouped by ``_type``.

        Stage ``descriptionRef`` references are resolved against the
        ``stageDescription`` documents in the same export.
        """
        documents = list(documents)
        by_id = {d["_id"]: d for d in documents if isinstance(d.get("_id"), str)}
        grouped: dict[str, list[dict[str, Any]]] = {}
        for doc in documents:
            grouped.setdefault(doc.get("_type", ""), []).append(doc)

        stage_docs = grouped.get("stageDescription", []) + grouped.get(
            "resellerStageOverride", []
        )
        return cls(
            brands=[
                Brand.model_validate(_dereference(d, by_id))
                for d in grouped.get("brand", [])
            ],
            addon_options=[
                AddOnOption.model_validate(d) for d in grouped.get("aktPlus", [])
            ],
            overrides=[
                ResellerOverride.model_validate(d)
                for d in grouped.get("resellerOverride", [])
            ],
            configs=[
                ResellerConfig.model_validate(d) for d in grouped.get("resellerUser", [])
            ],
            stage_descriptions=[StageDescriptionDoc.model_validate(d) for d in stage_docs],
            addon_overrides=[
                AddOnOverride.model_validate(d)
                for d in grouped.get("resellerAktPlusOverride", [])
            ],
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryCatalogStore":
        """Load a dataset export: NDJSON (one document per line) or a JSON list."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".ndjson":
            documents = [json.loads(line) for line in text.splitlines() if line.strip()]
        else:
            documents = json.loads(text)
        logger.info("Loaded %d documents from %s", len(documents), path)
        return cls.from_documents(documents)

    async def fetch_brand_forest(self) -> list[Brand]:
        return list(self.brands)

    async def fetch_addon_options(self) -> list[AddOnOption]:
        return list(self.addon_options)

    async def fetch_overrides(self, reseller_id: str) -> list[ResellerOverride]:
        return [o for o in self.overrides if o.reseller_id == reseller_id]

    async def fetch_reseller_config(self, reseller_id: str) -> ResellerConfig | None:
        return next((c for c in self.configs if c.reseller_id == reseller_id), None)

    async def fetch_stage_descriptions(
        self, reseller_id: str | None = None
    ) -> list[StageDescriptionDoc]:
        return [d for d in self.stage_descriptions if d.reseller_id == reseller_id]

    async def fetch_addon_overrides(self, reseller_id: str) -> list[AddOnOverride]:
        return [o for o in self.addon_overrides if o.reseller_id == reseller_id]

    async def save_overrides(self, overrides: list[ResellerOverride]) -> int:
        """Create or replace overrides by document id, else by composite key."""
        for override in overrides:
            for i, current in enumerate(self.overrides):
                same_id = override.id is not None and current.id == override.id
                if same_id or current.key == override.key:
                    self.overrides[i] = override
                    break
            else:
                self.overrides.append(override)
        return len(overrides)

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        return None
