import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from config import JUDGE_CONFIG, logger
from exceptions import ConfigurationMissing, JudgeUnavailable


@dataclass(frozen=True)
class JudgeIdentity:
    """A named judge persona: one assistant (system prompt) plus the model answering for it.

    Several identities may share ``assistant_name``; the model is chosen per
    message, so they reuse one cached assistant.
    """
    display_name: str
    assistant_name: str
    system_prompt: str
    llm_provider: str
    model_name: str
    memory: str = "Off"


class JudgeIdentityCache:
    """Assistant ids by assistant name, shared by every request in the process."""

    def __init__(self):
        self._ids: Dict[str, str] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, assistant_name: str) -> Optional[str]:
        return self._ids.get(assistant_name)

    def set(self, assistant_name: str, assistant_id: str) -> None:
        self._ids[assistant_name] = assistant_id

    def lock_for(self, assistant_name: str) -> asyncio.Lock:
        return self._locks.setdefault(assistant_name, asyncio.Lock())

    def __contains__(self, assistant_name: str) -> bool:
        return assistant_name in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class JudgeGateway:
    """Sends one prompt to one judge and returns its raw reply text.

    No retries happen here; each caller decides how to cope with a failed judge.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        identity_cache: Optional[JudgeIdentityCache] = None,
        default_timeout: float = JUDGE_CONFIG.REQUEST_TIMEOUT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.identity_cache = identity_cache if identity_cache is not None else JudgeIdentityCache()
        self.default_timeout = default_timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def ask(self, identity: JudgeIdentity, prompt: str, timeout: Optional[float] = None) -> str:
        if not self.api_key:
            raise ConfigurationMissing("judges", "JUDGE_API_KEY")

        timeout = timeout or self.default_timeout
        try:
            return await asyncio.wait_for(self._ask(identity, prompt, timeout), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Judge {identity.display_name} timed out after {timeout:.0f}s",
                extra={"judge": identity.display_name, "timeout": timeout}
            )
            raise JudgeUnavailable(identity.display_name, f"timed out after {timeout:.0f}s")

    async def _ask(self, identity: JudgeIdentity, prompt: str, timeout: float) -> str:
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                assistant_id = await self._resolve_assistant(client, identity)
                thread_id = await self._create_thread(client, assistant_id, identity)
                content = await self._send_message(client, thread_id, identity, prompt)
        except httpx.HTTPStatusError as e:
            logger.error(
                "Judge %s HTTP error %s for URL %s: %s",
                identity.display_name, e.response.status_code, e.request.url, e.response.text[:300]
            )
            raise JudgeUnavailable(identity.display_name, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Judge %s request error: %s", identity.display_name, str(e))
            raise JudgeUnavailable(identity.display_name, f"request failed: {e}") from e

        if not content or not content.strip():
            raise JudgeUnavailable(identity.display_name, "empty reply")
        return content

    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key}

    async def _resolve_assistant(self, client: httpx.AsyncClient, identity: JudgeIdentity) -> str:
        name = identity.assistant_name
        cached = self.identity_cache.get(name)
        if cached:
            return cached

        async with self.identity_cache.lock_for(name):
            cached = self.identity_cache.get(name)
            if cached:
                return cached

            response = await client.get(f"{self.base_url}/assistants", headers=self._headers())
            if response.status_code == 200:
                for assistant in _as_list(_json_body(response), "assistants"):
                    if not isinstance(assistant, dict):
                        continue
                    if assistant.get("name") == name and assistant.get("assistant_id"):
                        self.identity_cache.set(name, assistant["assistant_id"])
                        return assistant["assistant_id"]

            response = await client.post(
                f"{self.base_url}/assistants",
                headers=self._headers(),
                json={"name": name, "system_prompt": identity.system_prompt.strip()},
            )
            response.raise_for_status()
            assistant_id = _json_object(response, identity, "create-assistant").get("assistant_id")
            if not assistant_id:
                raise JudgeUnavailable(identity.display_name, "no assistant_id in create response")

            logger.info(f"Created judge assistant '{name}'", extra={"assistant": name})
            self.identity_cache.set(name, assistant_id)
            return assistant_id

    async def _create_thread(self, client: httpx.AsyncClient, assistant_id: str, identity: JudgeIdentity) -> str:
        response = await client.post(
            f"{self.base_url}/assistants/{assistant_id}/threads",
            headers=self._headers(),
            json={},
        )
        response.raise_for_status()
        thread_id = _json_object(response, identity, "create-thread").get("thread_id")
        if not thread_id:
            raise JudgeUnavailable(identity.display_name, "no thread_id in create-thread response")
        return thread_id

    async def _send_message(
        self,
        client: httpx.AsyncClient,
        thread_id: str,
        identity: JudgeIdentity,
        prompt: str
    ) -> str:
        response = await client.post(
            f"{self.base_url}/threads/{thread_id}/messages",
            headers=self._headers(),
            data={
                "content": prompt,
                "stream": "false",
                "memory": identity.memory,
                "llm_provider": identity.llm_provider,
                "model_name": identity.model_name,
            },
        )
        response.raise_for_status()
        data = _json_object(response, identity, "message")
        content = data.get("content")
        if not content and isinstance(data.get("message"), dict):
            content = data["message"].get("content")
        if content is not None and not isinstance(content, str):
            raise JudgeUnavailable(identity.display_name, f"reply content is {type(content).__name__}, not text")
        return content or ""


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _json_object(response: httpx.Response, identity: JudgeIdentity, step: str) -> Dict[str, Any]:
    """The response body as a JSON object; anything else means the judge API misbehaved."""
    try:
        payload = response.json()
    except ValueError as e:
        logger.error("Judge %s %s response is not JSON: %s", identity.display_name, step, str(e))
        raise JudgeUnavailable(identity.display_name, f"{step} response is not JSON") from e
    if not isinstance(payload, dict):
        raise JudgeUnavailable(
            identity.display_name, f"{step} response is {type(payload).__name__}, not an object"
        )
    return payload


def _as_list(payload: Any, key: str) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []
