"""Lightweight wrapper around PokeAPI for species typings."""

from __future__ import annotations

import re
import time
from typing import Any, Dict, List, Optional

import requests


class PokeAPIClientError(RuntimeError):
    """Raised when the PokeAPI request fails."""


class PokeAPIClient:
    """Small helper client with naive in-memory caching."""

    BASE_URL = "https://pokeapi.co/api/v2"

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        cache_ttl: int = 600,
        timeout: int = 10,
        user_agent: str = "poke-predict/0.1 (+https://github.com/)",
    ) -> None:
        self.session = session or requests.Session()
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.user_agent = user_agent
        self._cache: Dict[str, tuple[float, Any]] = {}
        self._types: Dict[str, List[str]] = {}

    def get_pokemon_types(self, name: str) -> List[str]:
        """Types of a species; tries the base form when a forme slug is unknown."""

        slug = self._slugify_name(name)
        if slug in self._types:
            return self._types[slug]
        payload = self._get_json(f"pokemon/{slug}", allow_404=True)
        if payload is None and "-" in slug:
            payload = self._get_json(f"pokemon/{slug.split('-', 1)[0]}", allow_404=True)
        if payload is None:
            raise PokeAPIClientError(f"Unknown species: {name}")
        slots = sorted(payload.get("types", []), key=lambda entry: entry.get("slot", 0))
        types = [entry["type"]["name"] for entry in slots]
        self._types[slug] = types
        return types

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_json(self, endpoint: str, *, allow_404: bool = False) -> Optional[Dict[str, Any]]:
        url = f"{self.BASE_URL}/{endpoint.lstrip('/')}"
        now = time.time()
        cached = self._cache.get(url)
        if cached and now - cached[0] < self.cache_ttl:
            return cached[1]

        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            if response.status_code == 404 and allow_404:
                return None
            response.raise_for_status()
        except requests.RequestException as exc:  # pragma: no cover - network
            raise PokeAPIClientError(str(exc)) from exc

        payload = response.json()
        self._cache[url] = (now, payload)
        return payload

    @staticmethod
    def _slugify_name(name: str) -> str:
        slug = name.strip().lower()
        slug = re.sub(r"[\s\.]+", "-", slug)
        slug = re.sub(r"[^a-z0-9\-]", "", slug)
        return slug.strip("-")
