"""
Test helper functions and fakes shared across test modules
"""
import json

import httpx

from numberdesk.core.models import PhoneNumberId

ADMIN_PREFIX = "/api/admin/phone-numbers"


def number_entry(id, number, status, assigned_to=None):
    """Admin API list entry"""
    entry = {"_id": id, "number": number, "status": status, "country": "US"}
    if assigned_to:
        entry["assignedTo"] = assigned_to
    return entry


SAMPLE_ENTRIES = [
    number_entry("n1", "+15550000001", "available"),
    number_entry("n2", "+15550000002", "assigned", assigned_to="u-7"),
    number_entry("n3", "+15550000003", "available"),
    number_entry("n4", "+15550000004", "suspended"),
    number_entry("n5", "+15550000005", "available"),
]


def make_ids(*values):
    return [PhoneNumberId(v) for v in values]


class FakeSleep:
    """Records requested pauses instead of waiting"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeAdminApi:
    """In-memory admin API served through httpx.MockTransport"""

    def __init__(self, entries=SAMPLE_ENTRIES, fail_ids=(), reputation=None):
        self.entries = [dict(entry) for entry in entries]
        self.fail_ids = set(fail_ids)
        self.reputation = reputation or {"status": "neutral", "dangerLevel": 10}
        self.requests = []

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def calls(self, method):
        return [r for r in self.requests if r.method == method]

    def _find(self, id):
        for entry in self.entries:
            if entry["_id"] == id:
                return entry
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == ADMIN_PREFIX:
            page = int(request.url.params.get("page", 1))
            limit = int(request.url.params.get("limit", 10))
            start = (page - 1) * limit
            return httpx.Response(200, json={"phoneNumbers": self.entries[start:start + limit]})

        parts = path[len(ADMIN_PREFIX):].strip("/").split("/")
        id = parts[0]

        if id in self.fail_ids:
            return httpx.Response(500, json={"error": f"Cannot process {id}"})

        entry = self._find(id)
        if entry is None:
            return httpx.Response(404, json={"error": "Phone number not found"})

        if request.method == "DELETE":
            self.entries.remove(entry)
            return httpx.Response(200, json={"success": True})

        action = parts[1]
        if action == "assign":
            body = json.loads(request.content)
            entry["status"] = "assigned"
            entry["assignedTo"] = body["userId"]
        elif action == "unassign":
            entry["status"] = "available"
            entry.pop("assignedTo", None)
        elif action == "reputation":
            return httpx.Response(200, json={"success": True, "reputation": self.reputation})

        return httpx.Response(200, json={"success": True, "phoneNumber": entry})
