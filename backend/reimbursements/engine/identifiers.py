import random
from typing import Callable, Optional

from reimbursements.errors import ReimbursementError


class ReimbursementNumberGenerator:
    """
    Produces reimbursement numbers like ``RI123456789``.

    The random source is injected so tests can pass a seeded ``random.Random``.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        prefix: str = "RI",
        digits: int = 9,
        max_attempts: int = 20,
    ):
        self.rng = rng or random.SystemRandom()
        self.prefix = prefix
        self.digits = digits
        self.max_attempts = max_attempts

    def candidate(self) -> str:
        return f"{self.prefix}{self.rng.randrange(10 ** self.digits):0{self.digits}d}"

    def generate(self, exists: Optional[Callable[[str], bool]] = None) -> str:
        for _ in range(self.max_attempts):
            number = self.candidate()
            if exists is None or not exists(number):
                return number
        raise ReimbursementError(
            f"Could not generate a unique {self.prefix} number after {self.max_attempts} attempts"
        )
