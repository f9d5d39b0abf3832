# -*- coding: utf-8 -*-
"""
app/__init__.py

Paquete principal del backend EcoPro Billing: ciclo de vida de códigos
de suscripción y conciliación de webhooks de pago.

Autor: EcoPro
Fecha: 2026-10-02
"""

# Fin del archivo app/__init__.py
