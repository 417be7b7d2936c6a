"""Download client for Smogon's monthly usage statistics."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Dict, Optional

import requests

from ..statistics import UsageStatistics, UsageWeights, parse_leads

STATS_URL_TEMPLATE = "https://www.smogon.com/stats/{month}/{kind}/{format_id}-{rating}.{ext}"

VALID_RATINGS = (0, 1500, 1630, 1695, 1760, 1825)


class SmogonStatsClientError(RuntimeError):
    """Raised when usage statistics cannot be fetched or decoded."""


class SmogonStatsClient:
    """Fetches chaos + leads files and caches the converted snapshot on disk."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        cache_ttl: int = 3600,
        timeout: int = 30,
        user_agent: str = "poke-predict/0.1 (+https://github.com/)",
        data_dir: str | Path | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.user_agent = user_agent
        self.data_dir = Path(data_dir or Path.cwd() / "data" / "stats")
        self._cache: Dict[str, tuple[float, UsageStatistics]] = {}

    def fetch_statistics(
        self,
        format_id: str,
        month: str,
        rating: int = 1695,
        *,
        refresh: bool = False,
    ) -> UsageStatistics:
        if rating not in VALID_RATINGS:
            raise SmogonStatsClientError(
                f"Unsupported rating cutoff {rating}; expected one of {VALID_RATINGS}"
            )
        key = f"{month}-{format_id}-{rating}"
        now = time.time()
        cached = self._cache.get(key)
        if cached and not refresh and now - cached[0] < self.cache_ttl:
            return cached[1]

        path = self._snapshot_path(key)
        if path.exists() and not refresh:
            try:
                statistics = UsageStatistics.from_dict(json.loads(path.read_text()))
                self._cache[key] = (now, statistics)
                return statistics
            except (json.JSONDecodeError, ValueError):
                path.unlink(missing_ok=True)

        statistics = self._download(format_id, month, rating)
        path.write_text(json.dumps(statistics.to_dict()))
        self._cache[key] = (now, statistics)
        return statistics

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _download(self, format_id: str, month: str, rating: int) -> UsageStatistics:
        chaos_url = self._build_url(month, "chaos", format_id, rating, "json")
        response = self._get(chaos_url)
        if response is None:
            raise SmogonStatsClientError(f"No usage statistics published at {chaos_url}")
        try:
            chaos = response.json()
        except ValueError as exc:
            raise SmogonStatsClientError(f"Malformed chaos JSON from {chaos_url}") from exc

        leads: Optional[Dict[str, UsageWeights]] = None
        leads_response = self._get(self._build_url(month, "leads", format_id, rating, "txt"))
        if leads_response is not None:
            leads = parse_leads(leads_response.text)

        try:
            return UsageStatistics.from_chaos(chaos, leads)
        except ValueError as exc:
            raise SmogonStatsClientError(str(exc)) from exc

    def _get(self, url: str) -> Optional[requests.Response]:
        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except requests.RequestException as exc:  # pragma: no cover - network
            raise SmogonStatsClientError(str(exc)) from exc
        return response

    def _snapshot_path(self, key: str) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / f"{key}.json"

    @staticmethod
    def _build_url(month: str, kind: str, format_id: str, rating: int, ext: str) -> str:
        return STATS_URL_TEMPLATE.format(
            month=month, kind=kind, format_id=format_id, rating=rating, ext=ext
        )
