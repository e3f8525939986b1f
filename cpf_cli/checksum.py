"""CPF checksum engine.

A CPF is 11 decimal digits: 9 significant digits followed by 2 check digits.
Both check digits come from the same weighted sum over the reversed
significant digits:

    d1 = sum(rev[i] * (9 - i)) % 11 % 10
    d2 = (sum([0] + rev weighted the same way) + d1 * 9) % 11 % 10

The trailing ``% 10`` folds a remainder of 10 into digit 0 and must stay.
"""

from __future__ import annotations

import random
import re
import secrets
from collections.abc import Sequence

from cpf_cli.utils import GenerationError, InvalidLengthError, get_logger

logger = get_logger(__name__)

CPF_LENGTH = 11
SIGNIFICANT_LENGTH = 9

_NON_DIGIT = re.compile(r"\D", re.ASCII)


# ═══════════════════════════════════════════════════════════════════
# NORMALIZATION
# ═══════════════════════════════════════════════════════════════════

def normalize(text: str) -> str:
    """Remove every non-digit character, e.g. '529.982.247-25' -> '52998224725'."""
    return _NON_DIGIT.sub("", text)


def is_repeated(s: str) -> bool:
    """True when ``s`` is non-empty and made of a single repeated character."""
    if not s:
        return False
    return s == s[0] * len(s)


# ═══════════════════════════════════════════════════════════════════
# CHECK DIGITS
# ═══════════════════════════════════════════════════════════════════

def weighted_sum(digits: Sequence[int]) -> int:
    """Sum of ``digit * (9 - (i % 10))`` over the sequence."""
    return sum(digit * (9 - (i % 10)) for i, digit in enumerate(digits))


def compute_check_digits(nine_digits: Sequence[int]) -> tuple[int, int]:
    """Compute the two check digits for the 9 significant digits.

    Raises:
        InvalidLengthError: if the input does not hold exactly 9 digits.
    """
    if len(nine_digits) != SIGNIFICANT_LENGTH:
        raise InvalidLengthError(
            f"invalid digits length: expected {SIGNIFICANT_LENGTH}, got {len(nine_digits)}"
        )

    reversed_digits = list(reversed(nine_digits))
    d1 = weighted_sum(reversed_digits) % 11 % 10
    d2 = (weighted_sum([0] + reversed_digits) + d1 * 9) % 11 % 10
    return d1, d2


# ═══════════════════════════════════════════════════════════════════
# FORMAT / VALIDATE
# ═══════════════════════════════════════════════════════════════════

def format_cpf(text: str) -> str:
    """Format a CPF as ``DDD.DDD.DDD-DD``.

    Only the digit count is checked, not the check digits.
    """
    digits = normalize(text)
    if len(digits) != CPF_LENGTH:
        raise InvalidLengthError(f"invalid CPF number (must have {CPF_LENGTH} digits)")
    return f"{digits[0:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:11]}"


def validate(text: str, length_only: bool = False) -> bool:
    """Check whether ``text`` holds a valid CPF.

    With ``length_only`` only the shape is checked: 11 digits that are not
    all the same. Never raises; malformed input is simply invalid.
    """
    digits = normalize(text)
    if len(digits) != CPF_LENGTH:
        return False
    if is_repeated(digits):
        return False
    if length_only:
        return True

    significant, suffix = digits[:SIGNIFICANT_LENGTH], digits[SIGNIFICANT_LENGTH:]
    try:
        d1, d2 = compute_check_digits([int(ch) for ch in significant])
    except (ValueError, InvalidLengthError):
        # unreachable: normalize() leaves only ASCII digits
        logger.debug("Could not compute check digits for %r", text)
        return False
    return suffix == f"{d1}{d2}"


# ═══════════════════════════════════════════════════════════════════
# GENERATION
# ═══════════════════════════════════════════════════════════════════

class CPFEngine:
    """Generates CPFs from an explicit random source.

    Production code uses the default ``secrets.SystemRandom``. Tests may pass
    a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else secrets.SystemRandom()

    def _digit(self) -> int:
        try:
            return self.rng.randrange(10)
        except (OSError, NotImplementedError) as exc:
            raise GenerationError(f"failed to generate random digit: {exc}") from exc

    def generate(self, formatted: bool = True, invalid: bool = False) -> str:
        """Generate a random CPF.

        With ``invalid`` the check digits are drawn at random instead of
        computed, so roughly 1 in 100 results is still a valid CPF.
        """
        significant = [self._digit() for _ in range(SIGNIFICANT_LENGTH)]

        if invalid:
            check = (self._digit(), self._digit())
        else:
            check = compute_check_digits(significant)

        cpf = "".join(str(d) for d in (*significant, *check))
        if len(cpf) != CPF_LENGTH:
            raise GenerationError(f"generated CPF has {len(cpf)} digits")

        if formatted:
            try:
                return format_cpf(cpf)
            except InvalidLengthError as exc:
                raise GenerationError(f"failed to format CPF: {exc}") from exc
        return cpf
