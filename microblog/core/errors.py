"""
Service exception -> HTTP status mapping used by the JSON routes.

ValueError      -> 400 (bad input)
PermissionError -> 401 (bad credentials)
LookupError     -> 404 (missing record)
anything else   -> 500
"""

from fastapi import HTTPException, status


def http_error(error: Exception, action: str = "Request") -> HTTPException:
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, PermissionError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(error))
    if isinstance(error, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action} failed: {error}")
