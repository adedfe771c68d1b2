"""
PoolError → HTTPException 변환
"""
from fastapi import HTTPException

from clamm.errors import (
    CollaboratorFailure,
    ContextError,
    InputError,
    InvariantViolation,
    PoolError,
    StateError,
)

# 오류 종류별 HTTP 상태 코드 (앞에서부터 첫 매치)
STATUS_BY_KIND = (
    (InputError, 422),
    (StateError, 409),
    (InvariantViolation, 409),
    (ContextError, 409),
    (CollaboratorFailure, 402),
)


def to_http_exception(err: PoolError) -> HTTPException:
    for kind, status_code in STATUS_BY_KIND:
        if isinstance(err, kind):
            return HTTPException(status_code=status_code, detail=err.to_dict())
    return HTTPException(status_code=500, detail=err.to_dict())
