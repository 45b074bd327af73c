"""
Client for the named-entity recognition service used to disambiguate authors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from articlequarry.errors import EntityServiceError
from articlequarry.models import EntityType

if TYPE_CHECKING:
    from articlequarry.config import EntityServiceConfig

logger = structlog.get_logger(__name__)


class NamedEntity(BaseModel):
    """One entity as returned by the service; unknown entity types map to ``None``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    representative: str = ""
    type: Optional[EntityType] = None
    salience: float = Field(default=0.0, alias="salience_score")

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: object) -> Optional[EntityType]:
        if isinstance(v, EntityType) or v is None:
            return v
        try:
            return EntityType(str(v).upper())
        except ValueError:
            return None

    @field_validator("salience", mode="before")
    @classmethod
    def default_salience(cls, v: object) -> object:
        return 0.0 if v is None else v


class EntitiesResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entities: List[NamedEntity] = Field(default_factory=list)

    @field_validator("entities", mode="before")
    @classmethod
    def null_entities(cls, v: object) -> object:
        return [] if v is None else v


class HttpEntityRecognizer:
    """Calls ``POST {base_url}/{entity_path}?text=...`` with basic auth.

    Every failure (transport error, non-200 status, undecodable body) is
    logged and reported as ``None`` so author extraction can carry on with
    the regex-only result.
    """

    def __init__(
        self,
        base_url: str,
        entity_path: str = "entities",
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/{entity_path.lstrip('/')}"
        auth = httpx.BasicAuth(username, password or "") if username else None
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._auth = auth
        self.logger = logger.bind(component="entity_recognizer")

    @classmethod
    def from_config(cls, config: EntityServiceConfig) -> HttpEntityRecognizer:
        return cls(
            base_url=config.base_url,
            entity_path=config.entity_path,
            username=config.username,
            password=config.password,
            timeout=config.timeout,
        )

    def get_entities(self, text: str) -> Optional[List[NamedEntity]]:
        try:
            return self._fetch(text)
        except EntityServiceError as exc:
            self.logger.warning("entity_lookup_failed", error=str(exc))
            return None

    def _fetch(self, text: str) -> List[NamedEntity]:
        try:
            response = self._client.post(
                self.url, params={"text": text}, auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT
            )
        except httpx.HTTPError as exc:
            raise EntityServiceError(f"request to {self.url} failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise EntityServiceError(f"entity service answered {response.status_code}")

        try:
            payload = EntitiesResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise EntityServiceError(f"undecodable entity payload: {exc}") from exc

        self.logger.debug("entities_received", count=len(payload.entities))
        return payload.entities

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
