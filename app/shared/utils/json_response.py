# -*- coding: utf-8 -*-
"""
app/shared/utils/json_response.py

JSONResponse con charset UTF-8 explícito. Se registra como
default_response_class de la app para que los mensajes de chat y los
errores con acentos no lleguen con mojibake a clientes que no asumen UTF-8.

Autor: EcoPro
Fecha: 2026-10-05
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


def error_response(
    status_code: int,
    error: str,
    headers: Optional[Dict[str, str]] = None,
    **fields: Any,
) -> UTF8JSONResponse:
    """
    Respuesta de error de dominio: {"error": ..., **fields}.

    Los campos extra (attemptsRemaining, resetIn, ...) se incluyen tal cual.
    """
    content: Dict[str, Any] = {"error": error}
    content.update({k: v for k, v in fields.items() if v is not None})
    return UTF8JSONResponse(content=content, status_code=status_code, headers=headers)


__all__ = ["UTF8JSONResponse", "error_response"]
