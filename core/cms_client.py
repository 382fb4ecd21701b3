# =============================================================================
# core/cms_client.py  —  HTTP collaborator for the content management API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One async client that plays every external role the orchestrator needs:
#
#     list_content_types()     ContentTypeDirectory  GET  contenttypes
#     fetch(identifier)        ContentTree           GET  contentmanagement/{id}
#     resolve_default_root()   RootResolver          GET  <root redirect path>
#     create(payload)          Create                POST contentmanagement
#     move(identifier, link)   Move                  POST contentmanagement/{id}/move
#
#   Every non-2xx response and every transport failure becomes an
#   UpstreamError.  The status and body are logged; the caller only gets a
#   generic message.
#
# AUTH:
#   Basic auth when a username is configured, else a Bearer token when one
#   is configured, else no Authorization header.
#
# PAGINATION:
#   The content-type list may come back in batches.  The CMS then returns an
#   "x-epi-continuation" header, which is sent back as a request header
#   until no further token arrives.
# =============================================================================

import base64
import logging
import re
from typing import Any, Optional

import httpx

from core.config import CmsSettings
from core.errors import UpstreamError
from core.models import (
    ContentCreatePayload,
    ContentTypeDescriptor,
    DelegateResult,
    ParentLink,
    PropertyDescriptor,
    StructureNode,
)

logger = logging.getLogger(__name__)

CONTINUATION_HEADER = "x-epi-continuation"

# Last numeric content reference in a redirect location, e.g. ".../5_123" or "?id=5".
_LOCATION_ID = re.compile(r"(?:id=|/)(\d+)(?:_\d+)?(?=[/?#&]|$)", re.IGNORECASE)
_LOCATION_GUID = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


# =============================================================================
# JSON -> dataclass parsers
# =============================================================================
def parse_content_type(data: dict) -> ContentTypeDescriptor:
    name = data.get("name") or ""
    properties = tuple(
        PropertyDescriptor(
            name=prop.get("name") or "",
            display_name=prop.get("displayName") or prop.get("name") or "",
        )
        for prop in data.get("properties") or []
        if isinstance(prop, dict)
    )
    return ContentTypeDescriptor(
        name=name,
        display_name=data.get("displayName") or name,
        properties=properties,
        base_type=data.get("baseType") or None,
    )


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def parse_structure_node(data: dict) -> StructureNode:
    """Content JSON (with embedded children) -> StructureNode."""
    link = data.get("contentLink") if isinstance(data.get("contentLink"), dict) else {}
    node_id = _as_int(link.get("id", data.get("id")))
    guid = link.get("guidValue") or data.get("guidValue") or data.get("guid")
    raw_children = data.get("children")
    if raw_children is None:
        raw_children = data.get("items") or []
    return StructureNode(
        name=data.get("name") or "",
        id=node_id,
        guid=guid or None,
        children=[parse_structure_node(child) for child in raw_children if isinstance(child, dict)],
    )


def _response_body(response: httpx.Response) -> Any:
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        logger.error("CMS returned %s with a non-JSON body: %.200s", response.status_code, response.text)
        raise UpstreamError(
            "CMS returned a non-JSON response",
            status=response.status_code,
            body=response.text,
        ) from exc


# =============================================================================
# Client
# =============================================================================
class CmsClient:
    """Async client for the CMS APIs.  Use as `async with CmsClient(...)`."""

    def __init__(
        self,
        settings: CmsSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.api_root + "/",
            headers=self.build_headers(),
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_env(cls) -> "CmsClient":
        return cls(CmsSettings.from_env())

    async def __aenter__(self) -> "CmsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.basic_username:
            raw = f"{self.settings.basic_username}:{self.settings.basic_password or ''}"
            headers["Authorization"] = "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")
        elif self.settings.access_token:
            headers["Authorization"] = f"Bearer {self.settings.access_token}"
        return headers

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("CMS %s %s failed: %s", method, url, exc)
            raise UpstreamError(f"CMS request failed: {method} {url}") from exc
        if response.is_error:
            body = _response_body(response)
            logger.error("CMS %s %s returned %s: %s", method, url, response.status_code, body)
            raise UpstreamError(
                f"CMS request failed: {method} {url} ({response.status_code})",
                status=response.status_code,
                body=body,
            )
        return response

    # --- ContentTypeDirectory ---
    async def list_content_types(self) -> list[ContentTypeDescriptor]:
        types: list[ContentTypeDescriptor] = []
        headers: dict[str, str] = {}
        while True:
            response = await self._request("GET", "contenttypes", headers=headers)
            data = _json(response)
            items = data.get("items", []) if isinstance(data, dict) else data
            types.extend(parse_content_type(item) for item in items or [] if isinstance(item, dict))
            token = response.headers.get(CONTINUATION_HEADER)
            if not token:
                break
            headers = {CONTINUATION_HEADER: token}
        logger.info("Fetched %d content types", len(types))
        return types

    # --- ContentTree ---
    async def fetch(self, identifier: str) -> StructureNode:
        response = await self._request(
            "GET", f"contentmanagement/{identifier}", params={"expand": "children"}
        )
        return parse_structure_node(_json(response))

    # --- RootResolver ---
    async def resolve_default_root(self) -> Optional[str]:
        """Identifier named by the root redirect's Location header, if any."""
        url = f"{self.settings.base_url.rstrip('/')}/{self.settings.root_redirect_path.lstrip('/')}"
        response = await self._request("GET", url, follow_redirects=False)
        location = response.headers.get("location") or ""
        return extract_location_identifier(location)

    # --- Create / Move ---
    async def create(self, payload: ContentCreatePayload) -> DelegateResult:
        response = await self._request("POST", "contentmanagement", json=payload.to_dict())
        return DelegateResult(status=response.status_code, body=_response_body(response))

    async def move(self, content_identifier: str, parent_link: ParentLink) -> DelegateResult:
        response = await self._request(
            "POST",
            f"contentmanagement/{content_identifier}/move",
            json={"parentLink": parent_link.to_dict()},
        )
        return DelegateResult(status=response.status_code, body=_response_body(response))


def extract_location_identifier(location: str) -> Optional[str]:
    """Content id (or GUID) at the end of a redirect location.

    e.g. https://site/episerver/cms/#context=epi.cms.contentdata:///5 -> "5"
    """
    ids = _LOCATION_ID.findall(location)
    if ids:
        return ids[-1]
    guid = _LOCATION_GUID.search(location)
    return guid.group(0) if guid else None
