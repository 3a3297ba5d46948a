class SplitEngineError(Exception):
    """Base class for input the engine refuses to compute on.

    Mirrors the shape of an HTTP error so an outer application can turn it
    into a response with ``status_code`` and ``detail`` directly.
    """

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidAmount(SplitEngineError):
    pass


class NoShares(SplitEngineError):
    pass


class InvalidWeight(SplitEngineError):
    pass


class DuplicateSplit(SplitEngineError):
    pass


class UnknownMember(SplitEngineError):
    status_code = 404

    def __init__(self, member_id, detail: str | None = None):
        super().__init__(detail or f"Member {member_id!r} is not part of the group")
        self.member_id = member_id


class UnbalancedInput(SplitEngineError):
    def __init__(self, total: int, detail: str | None = None):
        super().__init__(detail or f"Balances do not sum to zero (off by {total})")
        self.total = total
