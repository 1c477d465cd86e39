"""
REST API for the kitchen
"""
from .server import KitchenAPI, create_app

__all__ = ['KitchenAPI', 'create_app']
