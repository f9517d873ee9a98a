"""Async Catalog Store backed by the Sanity HTTP API.

Queries are GROQ, POSTed to the query endpoint with parameters sent
JSON-encoded. Writes use the mutate endpoint and need a token. Add-on
eligibility is not computed in GROQ; documents are fetched flat and
matched in ``services.addons``.
"""

import time
from typing import Any

import httpx
from pydantic import ValidationError

from ..core.config import Settings
from ..core.exceptions import CatalogStoreError
from ..core.logging import log_external_call, log_store_query
from ..models.catalog import AddOnOption, Brand, StageDescriptionDoc
from ..models.reseller import AddOnOverride, ResellerConfig, ResellerOverride

# -----------------------------------------------------------------------------
# GROQ queries
# -----------------------------------------------------------------------------

BRAND_FOREST_QUERY = """
*[_type == "brand"] {
  _id,
  name,
  slug,
  logo { alt, "asset": asset->{ _id, url } },
  "models": models[]{
    name,
    slug,
    "years": years[]{
      range,
      "engines": engines[]{
        _key,
        label,
        fuel,
        "stages": stages[]{
          name,
          type,
          origHk,
          tunedHk,
          origNm,
          tunedNm,
          price,
          description,
          descriptionRef->{ _id, stageName, description }
        }
      }
    }
  }
}
"""

ADDON_OPTIONS_QUERY = """
*[_type == "aktPlus"] {
  _id,
  title,
  price,
  isUniversal,
  applicableFuelTypes,
  stageCompatibility,
  description,
  "gallery": gallery[]{ _key, alt, caption, "asset": asset->{ _id, url } },
  installationTime,
  compatibilityNotes
}
"""

OVERRIDES_QUERY = """
*[_type == "resellerOverride" && resellerId == $resellerId] {
  _id,
  resellerId,
  brand,
  model,
  year,
  engine,
  stageName,
  price,
  tunedHk,
  tunedNm,
  logo,
  aktplusVisible
}
"""

RESELLER_CONFIG_QUERY = """
*[_type == "resellerUser" && resellerId == $resellerId][0] {
  resellerId,
  logo,
  currency,
  language,
  visibleSections,
  banner
}
"""

STAGE_DESCRIPTIONS_QUERY = """
*[_type == "stageDescription"] { stageName, description }
"""

RESELLER_STAGE_DESCRIPTIONS_QUERY = """
*[_type == "resellerStageOverride" && resellerId == $resellerId] {
  resellerId, stageName, description
}
"""

ADDON_OVERRIDES_QUERY = """
*[_type == "resellerAktPlusOverride" && resellerId == $resellerId] {
  _id,
  resellerId,
  "aktPlusId": aktPlusId->{ _id },
  title,
  description,
  price,
  "gallery": gallery[]{ _key, alt, caption, "asset": asset->{ _id, url } }
}
"""


class SanityCatalogStore:
    """Async client for the Sanity content lake."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.project_id = settings.sanity_project_id
        self.dataset = settings.sanity_dataset
        self.api_version = settings.sanity_api_version
        self.token = settings.sanity_token
        host = "apicdn" if settings.sanity_use_cdn and not self.token else "api"
        self.base_url = f"https://{self.project_id}.{host}.sanity.io/v{self.api_version}"
        # Mutations never go through the CDN
        self.mutate_url = (
            f"https://{self.project_id}.api.sanity.io/v{self.api_version}"
            f"/data/mutate/{self.dataset}"
        )
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        self.client = httpx.AsyncClient(
            timeout=settings.sanity_timeout, headers=headers, transport=transport
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def query(
        self, groq: str, params: dict[str, Any] | None = None, doc_type: str = ""
    ) -> Any:
        """Run a GROQ query and return its ``result``."""
        url = f"{self.base_url}/data/query/{self.dataset}"
        start = time.time()
        try:
            resp = await self.client.post(
                url, json={"query": groq, "params": params or {}}
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            log_external_call("sanity", "query", False, (time.time() - start) * 1000)
            raise CatalogStoreError("query", str(e)) from e
        except ValueError as e:
            raise CatalogStoreError("query", "response was not JSON") from e

        log_store_query("query", doc_type, (time.time() - start) * 1000)
        if not isinstance(payload, dict) or "result" not in payload:
            raise CatalogStoreError("query", "response has no result")
        return payload["result"]

    async def mutate(self, mutations: list[dict[str, Any]]) -> dict[str, Any]:
        """Commit mutations as one transaction."""
        if not self.token:
            raise CatalogStoreError("mutate", "SANITY_TOKEN is required for writes")
        start = time.time()
        try:
            resp = await self.client.post(self.mutate_url, json={"mutations": mutations})
            resp.raise_for_status()
            result = resp.json()
        except httpx.HTTPError as e:
            log_external_call("sanity", "mutate", False, (time.time() - start) * 1000)
            raise CatalogStoreError("mutate", str(e)) from e
        except ValueError as e:
            raise CatalogStoreError("mutate", "response was not JSON") from e
        log_external_call("sanity", "mutate", True, (time.time() - start) * 1000)
        return result

    async def _fetch_list(
        self, model: type, groq: str, doc_type: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        result = await self.query(groq, params, doc_type)
        if result is None:
            return []
        if not isinstance(result, list):
            raise CatalogStoreError("query", f"expected a list of {doc_type} documents")
        try:
            return [model.model_validate(row) for row in result if isinstance(row, dict)]
        except ValidationError as e:
            raise CatalogStoreError("query", f"invalid {doc_type} document: {e}") from e

    # -------------------------------------------------------------------------
    # Catalog Store surface
    # -------------------------------------------------------------------------

    async def fetch_brand_forest(self) -> list[Brand]:
        return await self._fetch_list(Brand, BRAND_FOREST_QUERY, "brand")

    async def fetch_addon_options(self) -> list[AddOnOption]:
        return await self._fetch_list(AddOnOption, ADDON_OPTIONS_QUERY, "aktPlus")

    async def fetch_overrides(self, reseller_id: str) -> list[ResellerOverride]:
        return await self._fetch_list(
            ResellerOverride,
            OVERRIDES_QUERY,
            "resellerOverride",
            {"resellerId": reseller_id},
        )

    async def fetch_reseller_config(self, reseller_id: str) -> ResellerConfig | None:
        result = await self.query(
            RESELLER_CONFIG_QUERY, {"resellerId": reseller_id}, "resellerUser"
        )
        if not isinstance(result, dict):
            return None
        try:
            return ResellerConfig.model_validate(result)
        except ValidationError as e:
            raise CatalogStoreError("query", f"invalid resellerUser document: {e}") from e

    async def fetch_stage_descriptions(
        self, reseller_id: str | None = None
    ) -> list[StageDescriptionDoc]:
        if reseller_id is None:
            return await self._fetch_list(
                StageDescriptionDoc, STAGE_DESCRIPTIONS_QUERY, "stageDescription"
            )
        return await self._fetch_list(
            StageDescriptionDoc,
            RESELLER_STAGE_DESCRIPTIONS_QUERY,
            "resellerStageOverride",
            {"resellerId": reseller_id},
        )

    async def fetch_addon_overrides(self, reseller_id: str) -> list[AddOnOverride]:
        return await self._fetch_list(
            AddOnOverride,
            ADDON_OVERRIDES_QUERY,
            "resellerAktPlusOverride",
            {"resellerId": reseller_id},
        )

    async def save_overrides(self, overrides: list[ResellerOverride]) -> int:
        if not overrides:
            return 0
        await self.mutate([{"createOrReplace": o.to_document()} for o in overrides])
        return len(overrides)

    async def ping(self) -> None:
        await self.query('count(*[_type == "brand"])', doc_type="brand")

    async def close(self) -> None:
        await self.client.aclose()
