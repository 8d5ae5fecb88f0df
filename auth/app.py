import contextlib
import logging
import random
from typing import AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from auth import config
from telemetry import shutdown_telemetry


logger = logging.getLogger(__name__)


CONFIG = config.Config()


def roll_dice(sides: int = 6) -> int:
    return random.randint(1, sides)


async def rolldice(request: Request) -> PlainTextResponse:
    roll = roll_dice()
    logger.debug("Rolled %d", roll)
    return PlainTextResponse(str(roll))


@contextlib.asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    yield
    shutdown_telemetry()


app = Starlette(routes=[Route("/rolldice", rolldice)], lifespan=lifespan)
