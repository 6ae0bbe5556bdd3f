"""Service modules"""
from .operation_builder import OperationBuilder, compute_expire_period
from .roll_buyer import RollBuyer, RollBuyOutcome, RollBuyReport

__all__ = [
    "OperationBuilder",
    "compute_expire_period",
    "RollBuyer",
    "RollBuyOutcome",
    "RollBuyReport",
]
