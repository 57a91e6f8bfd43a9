"""
Random SMT-Lisp formula generator.

Expression = (Operator Expression Expression) | Number, wrapped as
"(simplify <expr>)". Each operand nests with NESTING_PROBABILITY; with two
operands per node the expected number of nested children is 0.5, so
generation terminates almost surely and trees stay shallow.
"""

import random
from typing import Optional

OPERATORS = ("+", "-", "*")
LITERAL_MIN = -10
LITERAL_MAX = 9
NESTING_PROBABILITY = 0.25


class ExpressionGenerator:
    def __init__(
        self,
        seed: Optional[int] = None,
        literal_min: int = LITERAL_MIN,
        literal_max: int = LITERAL_MAX,
        nesting_probability: float = NESTING_PROBABILITY,
    ):
        if literal_min > literal_max:
            raise ValueError("literal_min must not exceed literal_max")
        if not 0.0 <= nesting_probability < 0.5:
            # 2 operands * p must stay below 1 for the recursion to die out
            raise ValueError("nesting_probability must be in [0, 0.5)")
        self.random = random.Random(seed)
        self.literal_min = literal_min
        self.literal_max = literal_max
        self.nesting_probability = nesting_probability

    def fuzz_many(self, count: int) -> str:
        """``count`` independent formulas, one per line."""
        return "\n".join(self.formula() for _ in range(count))

    def formula(self) -> str:
        return f"(simplify {self.expression()})"

    def expression(self) -> str:
        parts = [self.random.choice(OPERATORS)]
        for _ in range(2):
            if self.random.random() < self.nesting_probability:
                parts.append(self.expression())
            else:
                parts.append(self.number())
        return "(" + " ".join(parts) + ")"

    def number(self) -> str:
        return str(self.random.randint(self.literal_min, self.literal_max))
