# -*- coding: utf-8 -*-
"""
Tests para la generación y normalización de códigos.

Cubre:
- Formato XXXX-XXXX-XXXX-XXXX sobre A-Z0-9
- Normalización (mayúsculas, separadores arbitrarios)
- Rechazo de formatos inválidos (MalformedCode)
- Reintentos ante colisión y agotamiento (GenerationExhausted)
"""

import logging

import pytest

from app.modules.subscription_codes.errors import GenerationExhausted, MalformedCode
from app.modules.subscription_codes.utils import (
    CODE_ALPHABET,
    CODE_PATTERN,
    canonicalize_code,
    generate_code,
    generate_unique_code,
    is_valid_code_format,
    normalize_code,
)


def test_generated_codes_match_pattern():
    for _ in range(200):
        code = generate_code()
        assert CODE_PATTERN.match(code), code
        assert len(code) == 19
        assert set(code.replace("-", "")) <= set(CODE_ALPHABET)


def test_generated_codes_are_not_repeated():
    codes = {generate_code() for _ in range(1000)}
    assert len(codes) == 1000


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("abcd-efgh-ijkl-mnop", "ABCD-EFGH-IJKL-MNOP"),
        ("  ABCD EFGH IJKL MNOP ", "ABCD-EFGH-IJKL-MNOP"),
        ("abcdefghijklmnop", "ABCD-EFGH-IJKL-MNOP"),
        ("AB.CD_EF/GH-12:34-5678", "ABCD-EFGH-1234-5678"),
    ],
)
def test_normalize_code_accepts_separators_and_case(raw, expected):
    assert normalize_code(raw) == expected
    assert canonicalize_code(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "ABC", "ABCD-EFGH-IJKL", "ABCD-EFGH-IJKL-MNOPQ", "ÁBCD-EFGH-IJKL-MNOP"],
)
def test_canonicalize_rejects_malformed(raw):
    with pytest.raises(MalformedCode):
        canonicalize_code(raw)


def test_is_valid_code_format_requires_canonical_form():
    assert is_valid_code_format("ABCD-EFGH-IJKL-MNOP")
    assert not is_valid_code_format("abcd-efgh-ijkl-mnop")
    assert not is_valid_code_format("ABCDEFGHIJKLMNOP")
    assert not is_valid_code_format("")


@pytest.mark.asyncio
async def test_generate_unique_code_retries_on_collision(caplog):
    """Las dos primeras candidatas colisionan; la tercera se acepta."""
    seen = []

    async def exists(code: str) -> bool:
        seen.append(code)
        return len(seen) < 3

    with caplog.at_level(logging.WARNING):
        code = await generate_unique_code(exists, max_retries=5)

    assert code == seen[-1]
    assert len(seen) == 3
    collisions = [r for r in caplog.records if "collision" in r.getMessage()]
    assert len(collisions) == 2


@pytest.mark.asyncio
async def test_generate_unique_code_exhausted(caplog):
    calls = 0

    async def always_taken(code: str) -> bool:
        nonlocal calls
        calls += 1
        return True

    with caplog.at_level(logging.WARNING):
        with pytest.raises(GenerationExhausted):
            await generate_unique_code(always_taken, max_retries=10)

    assert calls == 10
    assert any(r.levelno == logging.ERROR and "exhausted" in r.getMessage() for r in caplog.records)
