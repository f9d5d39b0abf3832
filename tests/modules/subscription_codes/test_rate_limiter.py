# -*- coding: utf-8 -*-
"""
Tests para el rate limiter de intentos de canje (ventana deslizante).

Cubre:
- Conteo dentro de la ventana y bloqueo al alcanzar el máximo
- reset_in calculado desde el intento más antiguo de la ventana
- Aislamiento por actor (id y tipo)
- Intentos fuera de la ventana no cuentan
"""

from datetime import timedelta

import pytest

from app.modules.subscription_codes.enums import ActorType, AttemptOutcome
from app.modules.subscription_codes.services import CodeAttemptRateLimiter

async def _record(limiter, session, actor_id, at, actor_type=ActorType.CLIENT):
    await limiter.record_attempt(
        session,
        actor_id,
        actor_type,
        "AAAA-BBBB-CCCC-DDDD",
        AttemptOutcome.INVALID,
        now=at,
    )
    await session.commit()


@pytest.mark.asyncio
async def test_fresh_actor_is_allowed(db_session, fixed_now):
    limiter = CodeAttemptRateLimiter(max_attempts=5, window_seconds=60)

    result = await limiter.check_limit(db_session, 1, ActorType.CLIENT, now=fixed_now)

    assert result.allowed is True
    assert result.attempts_remaining == 5
    assert result.current_count == 0
    assert result.reset_in_seconds == 0
    assert limiter.remaining_after_record(result) == 4


@pytest.mark.asyncio
async def test_blocks_after_max_attempts_with_reset_from_oldest(db_session, fixed_now):
    limiter = CodeAttemptRateLimiter(max_attempts=5, window_seconds=60)
    for offset in range(5):
        await _record(limiter, db_session, 7, fixed_now + timedelta(seconds=offset))

    now = fixed_now + timedelta(seconds=10)
    result = await limiter.check_limit(db_session, 7, ActorType.CLIENT, now=now)

    assert result.allowed is False
    assert result.current_count == 5
    assert result.attempts_remaining == 0
    # El intento más antiguo (t=0) sale de la ventana en t=60
    assert result.reset_in_seconds == 50


@pytest.mark.asyncio
async def test_window_slides(db_session, fixed_now):
    limiter = CodeAttemptRateLimiter(max_attempts=2, window_seconds=60)
    await _record(limiter, db_session, 3, fixed_now)
    await _record(limiter, db_session, 3, fixed_now + timedelta(seconds=30))

    blocked = await limiter.check_limit(db_session, 3, ActorType.CLIENT, now=fixed_now + timedelta(seconds=59))
    assert blocked.allowed is False

    allowed = await limiter.check_limit(db_session, 3, ActorType.CLIENT, now=fixed_now + timedelta(seconds=61))
    assert allowed.allowed is True
    assert allowed.current_count == 1
    assert allowed.reset_in_seconds == 29


@pytest.mark.asyncio
async def test_attempts_are_isolated_per_actor(db_session, fixed_now):
    limiter = CodeAttemptRateLimiter(max_attempts=1, window_seconds=60)
    await _record(limiter, db_session, 10, fixed_now)

    other_client = await limiter.check_limit(db_session, 11, ActorType.CLIENT, now=fixed_now)
    same_id_seller = await limiter.check_limit(db_session, 10, ActorType.SELLER, now=fixed_now)
    same_client = await limiter.check_limit(db_session, 10, ActorType.CLIENT, now=fixed_now)

    assert other_client.allowed is True
    assert same_id_seller.allowed is True
    assert same_client.allowed is False
