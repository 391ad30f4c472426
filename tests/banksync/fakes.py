"""In-memory stand-in for the bank API, served through httpx.MockTransport."""

from __future__ import annotations

import itertools
import json
from collections import Counter
from typing import Any

import httpx

from banksync.connectors.auth import derive_hash


class FakeBankApi:
    """Implements the nonce/login/whoami/transactions endpoints.

    Nonces are single-use. Failures can be injected per endpoint with
    ``fail_next``, which makes the next N calls to a path answer HTTP 500.
    """

    def __init__(
        self,
        users: dict[str, str] | None = None,
        transactions: dict[str, list[dict[str, Any]]] | None = None,
    ):
        self.users = users or {}
        self.transactions = transactions or {}
        self.fail_next: Counter[str] = Counter()
        self.overrides: dict[str, tuple[int, Any]] = {}
        self.calls: list[str] = []
        self.login_nonces: list[str] = []
        self._nonce_seq = itertools.count(1)
        self._issued: set[str] = set()
        self._tokens: dict[str, str] = {}

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url="https://bank.test", transport=self.transport())

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)

        if self.fail_next[path] > 0:
            self.fail_next[path] -= 1
            return httpx.Response(500, json={"error": "temporarily unavailable"})
        if path in self.overrides:
            status, payload = self.overrides[path]
            return httpx.Response(status, json=payload)

        if path == "/api/nonce":
            nonce = f"nonce-{next(self._nonce_seq)}"
            self._issued.add(nonce)
            return httpx.Response(200, json={"nonce": nonce})
        if path == "/api/login":
            return self._login(json.loads(request.content))
        if path == "/api/whoami":
            token = request.url.params.get("token", "")
            if token in self._tokens:
                return httpx.Response(200, json={"username": self._tokens[token]})
            return httpx.Response(401, json={"error": "invalid token"})
        if path == "/api/transactions":
            token = request.url.params.get("token", "")
            if token not in self._tokens:
                return httpx.Response(401, json={"error": "invalid token"})
            username = self._tokens[token]
            return httpx.Response(
                200, json={"ok": True, "transactions": self.transactions.get(username, [])}
            )
        return httpx.Response(404)

    def _login(self, body: dict[str, str]) -> httpx.Response:
        username, nonce = body.get("username", ""), body.get("nonce", "")
        self.login_nonces.append(nonce)

        if nonce not in self._issued:
            return httpx.Response(200, json={"ok": False, "error": "stale nonce"})
        self._issued.discard(nonce)

        password = self.users.get(username)
        if password is None or body.get("hash") != derive_hash(username, password, nonce):
            return httpx.Response(200, json={"ok": False})

        token = f"token-{username}"
        self._tokens[token] = username
        return httpx.Response(200, json={"ok": True, "token": token})


def raw_transactions(count: int) -> list[dict[str, Any]]:
    """Build ``count`` provider-shaped transactions, newest first."""
    return [
        {"date": f"2024-05-{28 - i:02d}", "desc": f"Purchase {i}", "amount": f"-{i}.50"}
        for i in range(count)
    ]
