# -*- coding: utf-8 -*-
"""
app/modules/subscription_codes/utils/code_generator.py

Generación y normalización de códigos de suscripción.

Formato: XXXX-XXXX-XXXX-XXXX sobre el alfabeto A-Z0-9 (36 símbolos),
16 símbolos aleatorios = ~82.7 bits de entropía. Se muestrea con
`secrets` (CSPRNG).

Autor: EcoPro
Fecha: 2026-10-08
"""

from __future__ import annotations

import logging
import re
import secrets
import string
from typing import Awaitable, Callable

from ..errors import GenerationExhausted, MalformedCode

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_GROUPS = 4
CODE_GROUP_SIZE = 4
CODE_LENGTH = CODE_GROUPS * CODE_GROUP_SIZE
CODE_PATTERN = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")
DEFAULT_MAX_RETRIES = 10

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def _group(raw: str) -> str:
    return "-".join(
        raw[i:i + CODE_GROUP_SIZE] for i in range(0, CODE_LENGTH, CODE_GROUP_SIZE)
    )


def generate_code() -> str:
    """Código aleatorio en formato canónico."""
    return _group("".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH)))


def normalize_code(raw: str) -> str:
    """
    Quita todo lo no alfanumérico y pasa a mayúsculas. Si quedan
    exactamente 16 símbolos se reinsertan los guiones.

    Examples:
        >>> normalize_code(" abcd efgh-ijkl.mnop ")
        'ABCD-EFGH-IJKL-MNOP'
        >>> normalize_code("abc")
        'ABC'
    """
    stripped = _NON_ALNUM.sub("", raw or "").upper()
    if len(stripped) == CODE_LENGTH:
        return _group(stripped)
    return stripped


def is_valid_code_format(code: str) -> bool:
    return bool(code) and CODE_PATTERN.match(code) is not None


def canonicalize_code(raw: str) -> str:
    """normalize_code + chequeo de formato. Lanza MalformedCode."""
    code = normalize_code(raw)
    if not is_valid_code_format(code):
        raise MalformedCode()
    return code


async def generate_unique_code(
    exists: Callable[[str], Awaitable[bool]],
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> str:
    """
    Genera un código que `exists` reporte como libre.

    Una colisión con 36^16 combinaciones es prácticamente imposible;
    agotar los reintentos indica un problema operativo (p.ej. un
    generador degradado) y se registra como ERROR.
    """
    for attempt in range(1, max_retries + 1):
        code = generate_code()
        if not await exists(code):
            return code
        logger.warning("Subscription code collision (attempt %d/%d)", attempt, max_retries)

    logger.error("Subscription code generation exhausted after %d attempts", max_retries)
    raise GenerationExhausted()


__all__ = [
    "CODE_ALPHABET",
    "CODE_PATTERN",
    "CODE_LENGTH",
    "generate_code",
    "normalize_code",
    "is_valid_code_format",
    "canonicalize_code",
    "generate_unique_code",
]
