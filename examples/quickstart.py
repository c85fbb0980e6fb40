"""Issue a few compliments for a simulated unwrapping session."""

from __future__ import annotations

from gift_compliment import ComplimentRequest, ComplimentService, EnvData, UserSignals
from gift_compliment.logging import configure_logging
from gift_compliment.store import IssuedHashStore


def main() -> None:
    configure_logging()
    service = ComplimentService(store=IssuedHashStore())
    env = EnvData(width=1440, height=900, device_pixel_ratio=2, timezone_offset_minutes=-60)
    signals = UserSignals(pixels_moved=4200, clicks=3, idle_ms=1800)

    for attempt in range(3):
        response = service.compliment(
            ComplimentRequest(signals=signals, env=env, user_key="demo-user", nonce=f"demo-{attempt}")
        )
        print(response.reflection)
        print(response.text)
        print(response.id[:16])
        print()


if __name__ == "__main__":
    main()
