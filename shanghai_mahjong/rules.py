"""
Shanghai rule configuration
"""

from dataclasses import dataclass, field
from typing import Dict


def _default_payment_table() -> Dict[int, int]:
    # capped fan -> units paid by one player
    return {1: 1, 2: 2, 3: 4, 4: 6, 5: 8, 6: 10, 7: 12, 8: 15}


@dataclass
class ShanghaiRules:
    """
    Attributes:
        min_fan: Fan a hand needs to be declared
        fan_cap: Fan beyond this count are not paid
        payment_table: Units one player pays for each capped fan count
        seven_pairs: Allow the seven pairs shape
        count_seat_flowers: Score flowers matching the seat wind
    """
    name: str = "Shanghai"
    min_fan: int = 1
    fan_cap: int = 8
    payment_table: Dict[int, int] = field(default_factory=_default_payment_table)
    seven_pairs: bool = True
    count_seat_flowers: bool = True

    def payment_for(self, fan: int) -> int:
        return self.payment_table.get(min(fan, self.fan_cap), 0)

    def __repr__(self) -> str:
        return f"ShanghaiRules({self.name})"


SHANGHAI_RULES = ShanghaiRules()

# Tables that need two fan before a hand can be declared
SHANGHAI_TWO_FAN_RULES = ShanghaiRules(name="Shanghai 2-fan", min_fan=2)
