"""
FastAPI dependencies for host-level function key checks.
"""

import secrets

from fastapi import Depends, Header, HTTPException, Query, status

from .config import Settings, get_settings


class FunctionKeyAuth:
    """
    Function key authentication dependency.

    The key is read from the x-functions-key header or the "code" query
    parameter. When no key is configured the check is disabled.
    """

    async def __call__(
        self,
        x_functions_key: str | None = Header(None, alias="x-functions-key"),
        code: str | None = Query(None),
        settings: Settings = Depends(get_settings),
    ) -> None:
        expected = settings.function_key
        if not expected:
            return

        provided = x_functions_key or code
        if not provided:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing function key")

        if not secrets.compare_digest(provided.encode(), expected.encode()):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid function key")


# Dependency instance
require_function_key = FunctionKeyAuth()
