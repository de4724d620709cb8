"""Lookup helpers shared by the route modules"""
from fastapi import HTTPException
from typing import Optional


def check_not_found(item, resource_name: str = "Resource", resource_id: Optional[int] = None) -> None:

    if not item:
        if resource_id:
            raise HTTPException(
                status_code=404,
                detail=f"{resource_name} with id {resource_id} not found"
            )
        raise HTTPException(status_code=404, detail=f"{resource_name} not found")


def normalize_email(email: str) -> str:
    return email.strip().lower()
