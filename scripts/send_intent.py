from __future__ import annotations

"""Send one transcript to Home Assistant through the skill and print the reply."""

import asyncio
import sys

from dotenv import load_dotenv, find_dotenv

from ha_skill.config.settings import Settings
from ha_skill.skill.errors import SkillError
from ha_skill.skill.forwarder import create_skill
from ha_skill.skill.schemas.skill_types import VoiceIntent


USAGE = """\
Usage:
  python scripts/send_intent.py "turn on the kitchen lights"

Auto-loads `.env` from the project root (or parent dirs) using python-dotenv.

Requires env HA__ACCESS_TOKEN; HA__BASE_URL defaults to
http://homeassistant.local:8123.
"""


async def _send(transcript: str) -> int:
    settings = Settings()
    skill = create_skill()
    try:
        await skill.initialize(settings.to_skill_config())
        status = skill.get_status()
        if status.last_error:
            print(f"warning: {status.last_error}", file=sys.stderr)
        response = await skill.handle_intent(
            VoiceIntent(transcript=transcript, device_id=settings.ha.device_id)
        )
    except SkillError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        await skill.teardown()
    print(response.model_dump_json(indent=2))
    return 0 if response.success else 2


def main() -> None:
    # Auto-load .env (search upwards)
    load_dotenv(find_dotenv(), override=False)

    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr, end="")
        sys.exit(1)
    sys.exit(asyncio.run(_send(" ".join(sys.argv[1:]))))


if __name__ == "__main__":
    main()
