from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from trendhaven.client.session import AuthStateChannel


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str, payload: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.detail = detail
        self.payload = payload or {}
        super().__init__(f"{status_code} {detail}")


class TrendHavenClient:
    """Async client for the TrendHaven API; auth changes go through ``channel``."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        channel: Optional[AuthStateChannel] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 60.0,
    ):
        self.channel = channel or AuthStateChannel()
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TrendHavenClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        token = self.channel.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        resp = await self._http.request(method, path, headers=self._headers(), **kwargs)
        if resp.is_error:
            try:
                payload = resp.json()
            except ValueError:
                payload = {}
            raise ApiError(resp.status_code, str(payload.get("detail", "request_failed")), payload)
        return resp.json()

    async def _authenticate(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        data = await self._request("POST", path, json=body or {})
        if data.get("token"):
            self.channel.publish(data.get("user"), data["token"])
        return data

    async def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        return await self._authenticate("/auth/signup", {"email": email, "password": password})

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return await self._authenticate("/auth/signin", {"email": email, "password": password})

    async def sign_in_anonymous(self) -> Dict[str, Any]:
        return await self._authenticate("/auth/signin-anonymous")

    async def sign_out(self) -> None:
        try:
            await self._request("POST", "/auth/signout", json={})
        finally:
            self.channel.clear()

    async def current_user(self) -> Optional[Dict[str, Any]]:
        if not self.channel.token:
            return None
        try:
            data = await self._request("GET", "/auth/me")
        except ApiError as e:
            if e.status_code in (401, 403):
                self.channel.clear()
            return None
        return data.get("user")

    async def upload_outfit(
        self,
        image: bytes,
        *,
        filename: str = "outfit.jpg",
        content_type: str = "image/jpeg",
        mood: Optional[str] = None,
        occasion: Optional[str] = None,
        season: Optional[str] = None,
    ) -> Dict[str, Any]:
        fields = {k: v for k, v in {"mood": mood, "occasion": occasion, "season": season}.items() if v}
        data = await self._request(
            "POST", "/outfits/upload", files={"image": (filename, image, content_type)}, data=fields
        )
        return data["outfit"]

    async def list_outfits(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/outfits", params=params)
        return data.get("outfits") or []

    async def recommendations(
        self, mood: Optional[str] = None, occasion: Optional[str] = None, weather: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        body = {k: v for k, v in {"mood": mood, "occasion": occasion, "weather": weather}.items() if v}
        data = await self._request("POST", "/outfits/recommendations", json=body)
        return data.get("recommendations") or []

    async def toggle_favorite(self, outfit_id: str) -> Dict[str, Any]:
        data = await self._request("PATCH", f"/outfits/{outfit_id}/favorite")
        return data["outfit"]

    async def delete_outfit(self, outfit_id: str) -> None:
        await self._request("DELETE", f"/outfits/{outfit_id}")
