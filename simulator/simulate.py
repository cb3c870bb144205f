#!/usr/bin/env python3
"""
Traffic simulator for GrubDash.
Seeds a small menu, then keeps placing orders and walking them through the
status lifecycle against a running service.

Usage:
    python simulate.py              # default: 1 order every 2 seconds
    python simulate.py --rate 0.5   # 1 order every 0.5 seconds (faster)
    python simulate.py --count 20   # send exactly 20 orders then exit
"""

import argparse
import json
import random
import time
import urllib.error
import urllib.request

SERVICE_URL = "http://localhost:5000"

MENU = [
    ("Margherita", "Tomato, mozzarella and basil", 12),
    ("Salmon Roll", "Eight pieces with avocado", 15),
    ("Double Bacon", "Two patties, smoked bacon, cheddar", 14),
    ("Burrito", "Slow-cooked beef and black beans", 11),
    ("Tiramisu", "Mascarpone and espresso", 7),
]
CUSTOMERS = [
    ("308 Negra Arroyo Lane", "(505) 143-3369"),
    ("1600 Pennsylvania Avenue NW", "(202) 456-1111"),
    ("221B Baker Street", "(020) 7224-3688"),
    ("742 Evergreen Terrace", "(939) 555-0113"),
]
# Statuses an order moves through after creation; delivered is never sent
# because the service refuses it.
PROGRESSION = ["preparing", "out-for-delivery"]


def call(method: str, path: str, data: dict | None = None) -> dict | None:
    body = json.dumps({"data": data}).encode("utf-8") if data is not None else None
    req = urllib.request.Request(
        f"{SERVICE_URL}{path}",
        data=body,
        headers={"Content-Type": "application/json"},
        method=method,
    )
    try:
        with urllib.request.urlopen(req, timeout=30) as resp:
            raw = resp.read()
            return json.loads(raw) if raw else {}
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        print(f"  [HTTP {e.code}] {body[:120]}", flush=True)
        return None
    except Exception as e:
        print(f"  [ERROR] {e}", flush=True)
        return None


def seed_menu() -> list[dict]:
    dishes = []
    for name, description, price in MENU:
        result = call(
            "POST",
            "/dishes",
            {
                "name": name,
                "description": description,
                "price": price,
                "image_url": f"https://images.example.com/{name.lower().replace(' ', '-')}.jpg",
            },
        )
        if result:
            dishes.append(result["data"])
    return dishes


def place_order(dishes: list[dict]) -> dict | None:
    deliver_to, mobile = random.choice(CUSTOMERS)
    lines = [
        {"dishId": d["id"], "quantity": random.randint(1, 3)}
        for d in random.sample(dishes, k=random.randint(1, min(3, len(dishes))))
    ]
    result = call("POST", "/orders", {"deliverTo": deliver_to, "mobileNumber": mobile, "dishes": lines})
    return result["data"] if result else None


def advance(order: dict) -> bool:
    """Move an order one step, or cancel it while still pending. True when done."""
    if order["status"] == "pending" and random.random() < 0.2:
        if call("DELETE", f"/orders/{order['id']}") is not None:
            print(f"  ✗ Order {order['id']} cancelled", flush=True)
        return True
    step = PROGRESSION.index(order["status"]) + 1 if order["status"] in PROGRESSION else 0
    if step >= len(PROGRESSION):
        return True
    order["status"] = PROGRESSION[step]
    if call("PUT", f"/orders/{order['id']}", order):
        print(f"  ↻ Order {order['id']} → {order['status']}", flush=True)
    return False


def main():
    parser = argparse.ArgumentParser(description="GrubDash Traffic Simulator")
    parser.add_argument("--rate", type=float, default=2.0, help="Seconds between orders (default: 2)")
    parser.add_argument("--count", type=int, default=0, help="Number of orders to send (0 = infinite)")
    args = parser.parse_args()

    print(f"🚀 Simulator starting — 1 order every {args.rate}s", flush=True)
    dishes = seed_menu()
    if not dishes:
        print("No dishes could be created, is the service running?", flush=True)
        return
    print(f"   Menu ready with {len(dishes)} dishes.", flush=True)

    sent = 0
    open_orders: list[dict] = []
    try:
        while True:
            order = place_order(dishes)
            if order:
                print(f"→ [{sent + 1}] Order {order['id']} for {order['deliverTo']} — status: {order['status']}", flush=True)
                open_orders.append(order)
            open_orders = [o for o in open_orders if not advance(o)]
            sent += 1
            if args.count and sent >= args.count:
                print(f"\n✅ Done — {sent} orders sent.", flush=True)
                break
            time.sleep(args.rate)
    except KeyboardInterrupt:
        print(f"\n⏹ Stopped after {sent} orders.", flush=True)


if __name__ == "__main__":
    main()
