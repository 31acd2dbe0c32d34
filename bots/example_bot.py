"""Reference bot that plays Maze Duel Server via the REST API.

Creates an AI-vs-AI match, joins two AI combatants, and plays each turn
with a simple greedy policy:
  - If the enemy is in an adjacent cell, attack it.
  - Otherwise step toward the enemy along the longer axis.
  - If that step is a wall, attack the wall to clear the way.
  - If it is blocked by the edge, try the other axis.

Usage:
    1. Start the server:  uvicorn main:app --reload
    2. Run this bot:      python bots/example_bot.py

Environment variables:
    MAZE_DUEL_URL  Server URL (default: http://127.0.0.1:8000)
"""

import os
import sys
import time

import httpx

BASE_URL = os.environ.get("MAZE_DUEL_URL", "http://127.0.0.1:8000")

_STEPS = {
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
}


def choose_action(state: dict, combatant_id: str) -> tuple[str, str]:
    """Pick (action, direction) for a combatant from a state snapshot.

    Args:
        state: Snapshot as returned by GET /matches/{id}/state.
        combatant_id: The combatant whose turn it is.

    Returns:
        An (action, direction) pair ready for POST /matches/{id}/action.
    """
    me = next(c for c in state["combatants"] if c["id"] == combatant_id)
    enemy = next(c for c in state["combatants"] if c["id"] != combatant_id)
    grid = state["maze"]["grid"]
    mx, my = me["position"]
    ex, ey = enemy["position"]
    dx, dy = ex - mx, ey - my

    for direction, step in _STEPS.items():
        if (mx + step[0], my + step[1]) == (ex, ey):
            return "attack", direction

    horizontal = "east" if dx > 0 else "west"
    vertical = "south" if dy > 0 else "north"
    if abs(dx) >= abs(dy):
        preferred = [horizontal, vertical] if dy else [horizontal]
    else:
        preferred = [vertical, horizontal] if dx else [vertical]

    for direction in preferred:
        sx, sy = _STEPS[direction]
        nx, ny = mx + sx, my + sy
        if not (0 <= ny < len(grid) and 0 <= nx < len(grid[0])):
            continue
        cell = grid[ny][nx]
        if cell == "empty":
            return "move", direction
        if cell == "wall":
            return "attack", direction

    # Boxed in by the edge: knock down the first wall we can find
    for direction, (sx, sy) in _STEPS.items():
        nx, ny = mx + sx, my + sy
        if 0 <= ny < len(grid) and 0 <= nx < len(grid[0]) and grid[ny][nx] == "wall":
            return "attack", direction
    return "attack", preferred[0]


def main() -> None:
    """Run a complete AI-vs-AI match."""
    client = httpx.Client(base_url=BASE_URL, timeout=10.0)

    # 1. Create the match
    print("Creating match...")
    resp = client.post(
        "/matches",
        json={"mode": "ai_vs_ai", "maze_width": 11, "maze_height": 11},
    )
    resp.raise_for_status()
    match_id = resp.json()["match_id"]
    print(f"  Match ID: {match_id}")

    # 2. Join two combatants
    for name in ("Theseus", "Asterion"):
        resp = client.post(
            f"/matches/{match_id}/combatants",
            json={"name": name, "type": "ai", "ai_script_id": "example_bot"},
        )
        resp.raise_for_status()
        joined = resp.json()
        print(f"  {name} joined at {joined['position']}, status {joined['status']}")

    # 3. Game loop
    print("\n--- MATCH ---\n")
    max_turns = 500
    state: dict = {}
    for _ in range(max_turns):
        resp = client.get(f"/matches/{match_id}/state")
        resp.raise_for_status()
        state = resp.json()

        if state["status"] != "playing":
            break

        owner = state["current_turn_owner"]
        action, direction = choose_action(state, owner)
        if not _submit_action(client, match_id, owner, action, direction):
            sys.exit(1)

        time.sleep(0.05)  # Small delay for readability

    if state.get("winner"):
        print(f"\n*** MATCH OVER! Winner: {state['winner']['name']} ***")
    else:
        print(f"\nMatch ended with status {state.get('status')}")

    # 4. Print the full action log
    print("\n--- ACTION LOG ---\n")
    resp = client.get(f"/matches/{match_id}/log")
    resp.raise_for_status()
    for event in resp.json():
        print(
            f"  [Turn {event['turn']}] {event['combatant_id'][:8]} "
            f"{event['action']} {event['direction']} -> {event['result']}"
        )

    client.close()


def _submit_action(
    client: httpx.Client,
    match_id: str,
    combatant_id: str,
    action: str,
    direction: str,
) -> bool:
    """Submit an action and print the result. Returns True if accepted."""
    resp = client.post(
        f"/matches/{match_id}/action",
        json={"combatant_id": combatant_id, "action": action, "direction": direction},
    )
    if resp.status_code == 200:
        result = resp.json()
        print(f"  Turn {result['state']['turn']}: {action} {direction} -> {result['result']}")
        return True
    detail = resp.json().get("detail", resp.text)
    print(f"  -> FAILED: {detail}")
    return False


if __name__ == "__main__":
    main()
