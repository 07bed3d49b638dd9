import asyncio
import random
import string
import time

import httpx

# 💀 API ANNIHILATOR: run against a live server (uvicorn swms.main:app)

BASE_URL = "http://127.0.0.1:8000"


def generate_garbage(length=1000):
    return "".join(random.choices(string.ascii_letters + string.digits + "!@#$%^&*()", k=length))


async def attack_endpoint(client, endpoint, method="GET", payload=None, headers=None):
    try:
        url = f"{BASE_URL}{endpoint}"
        start = time.time()
        if method == "POST":
            resp = await client.post(url, json=payload, headers=headers, timeout=5.0)
        else:
            resp = await client.get(url, headers=headers, timeout=5.0)
        duration = time.time() - start
        return resp.status_code, duration
    except httpx.HTTPError as e:
        print(f"Request Error to {endpoint}: {e}")
        return "ERROR", 0


async def run_annihilation(concurrency=100, iterations=10):
    print(f"💀 LAUNCHING ANNIHILATION: {concurrency} clients, {iterations} waves")
    limits = httpx.Limits(max_keepalive_connections=concurrency, max_connections=concurrency)
    async with httpx.AsyncClient(limits=limits) as client:
        for wave in range(iterations):
            tasks = []
            print(f"🔥 WAVE {wave + 1}/{iterations} INCOMING...")

            for _ in range(concurrency):
                # 1. Forged bearer credentials against the gate
                tasks.append(
                    attack_endpoint(
                        client,
                        "/api/users",
                        headers={"Authorization": f"Bearer {generate_garbage(200)}"},
                    )
                )
                # 2. Login brute force (rate limiter should answer 429)
                tasks.append(
                    attack_endpoint(
                        client,
                        "/auth/login",
                        "POST",
                        {"email": "admin@swms.local", "password": generate_garbage(100)},
                    )
                )
                # 3. Reset-token guessing
                tasks.append(
                    attack_endpoint(
                        client,
                        "/auth/reset-password",
                        "POST",
                        {"token": generate_garbage(43), "new_password": generate_garbage(12)},
                    )
                )

            results = await asyncio.gather(*tasks)

            codes = {}
            for code, _ in results:
                codes[code] = codes.get(code, 0) + 1
            print(f"   Results: {codes}")

            if codes.get(500, 0) > 0:
                print("🚨 CRITICAL: 500 ERROR DETECTED!")
            if codes.get(200, 0) > 0:
                print("🚨 CRITICAL: garbage credential was accepted!")
            if codes.get("ERROR", 0) > 10:
                print("⚠️  WARNING: High connection failure rate")


if __name__ == "__main__":
    try:
        asyncio.run(run_annihilation(concurrency=50, iterations=5))
    except KeyboardInterrupt:
        print("Annihilation aborted.")
