# scripts/tests_smoketest.py
# Run against a live gateway: GATEWAY_URL=http://127.0.0.1:3000 python scripts/tests_smoketest.py
from __future__ import annotations
import asyncio, os, uuid

import httpx

from backend.crypto import generate_rsa_keypair, public_key_to_json

URL = os.environ.get("GATEWAY_URL", "http://127.0.0.1:3000")

async def run_smoke_test():
    print("Starting smoke test against", URL)

    # fresh id so repeated runs against the same chain don't collide
    user_id = f"smoke-{uuid.uuid4().hex[:12]}"
    first_key = public_key_to_json(generate_rsa_keypair()[1])
    second_key = public_key_to_json(generate_rsa_keypair()[1])

    async with httpx.AsyncClient(base_url=URL, timeout=300) as client:
        r = await client.post("/register", json={"userId": user_id, "publicKey": first_key})
        assert r.status_code == 200, r.text
        print(f"[{user_id}] register -> {r.json()['txHash']}")

        r = await client.get(f"/user/{user_id}")
        assert r.status_code == 200, r.text
        assert r.json()["publicKey"] == first_key
        print(f"[{user_id}] fetch OK")

        r = await client.post("/updateUser", json={"userId": user_id, "publicKey": second_key})
        assert r.status_code == 200, r.text
        print(f"[{user_id}] update -> {r.json()['txHash']}")

        r = await client.get(f"/user/{user_id}")
        assert r.json()["publicKey"]["n"] == second_key["n"]
        print(f"[{user_id}] fetch after update OK")

        r = await client.delete(f"/deleteUser/{user_id}")
        assert r.status_code == 200, r.text
        r = await client.get(f"/user/{user_id}")
        assert r.status_code == 404, r.text
        print(f"[{user_id}] delete OK")

    print("Smoke test PASSED")

if __name__ == "__main__":
    asyncio.run(run_smoke_test())
