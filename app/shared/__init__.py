# -*- coding: utf-8 -*-
"""
app/shared/__init__.py

Infraestructura compartida: configuración, base de datos, scheduler,
seguridad y helpers HTTP. No importa nada en import-time para evitar
efectos colaterales durante la recolección de tests.
"""
