"""
Pool errors

Every failure a pool can raise is a PoolError carrying a short string tag
(``code``), grouped by kind:

- StateError: the pool is in the wrong state for the call (locked, initialized or not)
- InputError: the caller passed something invalid (also a ValueError)
- InvariantViolation: applying the call would break a liquidity invariant
- ContextError: the call runs against storage the pool does not own
- CollaboratorFailure: an external collaborator (token transfer) refused
"""


class PoolError(Exception):
    """Base class for all pool failures."""

    code: str = "ERR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "error": self.__class__.__name__,
            "message": self.message,
        }


# ---------------------------------------------------------------- kinds

class StateError(PoolError):
    pass


class InputError(PoolError, ValueError):
    pass


class InvariantViolation(PoolError):
    pass


class ContextError(PoolError):
    pass


class CollaboratorFailure(PoolError):
    pass


# ---------------------------------------------------------------- state

class Locked(StateError):
    code = "LOK"


class AlreadyInitialized(StateError):
    code = "AI"


class NotInitialized(StateError):
    code = "NI"


# ---------------------------------------------------------------- input

class AmountIsZero(InputError):
    code = "AZ"


class InvalidRange(InputError):
    code = "TLU"


class BelowGlobalMin(InputError):
    code = "TLM"


class AboveGlobalMax(InputError):
    code = "TUM"


class InvalidSqrtPrice(InputError):
    code = "R"


class InvalidTickSpacing(InputError):
    code = "TS"


class IdenticalTokens(InputError):
    code = "IT"


class NoPosition(InputError):
    code = "NP"


# ---------------------------------------------------------------- invariants

class LiquidityCeilingExceeded(InvariantViolation):
    code = "LO"


class LiquidityUnderflow(InvariantViolation):
    code = "LS"


class LiquidityOverflow(InvariantViolation):
    code = "LA"


# ---------------------------------------------------------------- context / collaborators

class NonCanonicalContext(ContextError):
    code = "DC"


class TransferFailed(CollaboratorFailure):
    code = "STF"
