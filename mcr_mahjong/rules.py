"""
MCR rule configuration
"""

from dataclasses import dataclass


@dataclass
class MCRRules:
    """
    Attributes:
        min_points: Points (flowers excluded) a hand needs to be declared
        count_flowers: Score 1 point per flower tile
        base_payment: Paid by every opponent on top of the hand value
    """
    name: str = "MCR"
    min_points: int = 8
    count_flowers: bool = True
    base_payment: int = 8

    def __repr__(self) -> str:
        return f"MCRRules({self.name})"


MCR_RULES = MCRRules()

# Practice tables that waive the 8-point minimum
MCR_TRAINING_RULES = MCRRules(name="MCR Training", min_points=0)
