# -*- coding: utf-8 -*-
"""
app/modules/billing/providers/__init__.py
"""

from .payment_processor_client import PaymentProcessorClient, ProcessorSession

__all__ = ["PaymentProcessorClient", "ProcessorSession"]
