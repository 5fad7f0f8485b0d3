"""Shared engine instance for the API routes."""
from ..engine import PricingEngine

engine = PricingEngine()
