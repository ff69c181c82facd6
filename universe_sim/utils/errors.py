# universe_sim/utils/errors.py
class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided config (dates, cash, etc).
    Should NOT print traceback.
    """


class InvariantViolation(ValueError):
    """
    上游（filter / engine）给出的数据自相矛盾：
      - delta 中 added 与 removed 有交集
      - filter 返回了快照之外的 symbol

    不可恢复，当前 step 直接失败。
    """


class ConsistencyError(RuntimeError):
    """
    收到非 active symbol 的数据，且同一 step 内没有 DELISTED 通知可以解释。
    """
