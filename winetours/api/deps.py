"""Shared API dependencies"""

from fastapi import Request

from winetours.services import Services


def get_services(request: Request) -> Services:
    """Service container built in the application lifespan"""
    return request.app.state.services
