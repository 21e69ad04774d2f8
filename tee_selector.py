"""
Tee Selection
Picks the rating block a player's handicap is calculated from
"""

import logging

from society_models import Gender, is_configured

logger = logging.getLogger(__name__)


def select_tee_by_gender(gender, men_tee, ladies_tee):
    """
    Pick the tee for a player.

    Fallback order:
        1. Ladies tee, if the player is female and it is configured
        2. Men's tee, if configured
        3. Whichever of the two is configured
        4. None

    Args:
        gender: Gender (or anything Gender.parse understands)
        men_tee: TeeRating or None
        ladies_tee: TeeRating or None

    Returns:
        The selected TeeRating, or None if neither tee is configured
    """
    gender = Gender.parse(gender)
    men_ok = is_configured(men_tee)
    ladies_ok = is_configured(ladies_tee)

    if gender is Gender.FEMALE and ladies_ok:
        return ladies_tee
    if men_ok:
        return men_tee
    if ladies_ok:
        return ladies_tee

    logger.debug("No configured tee for gender=%s", gender.value)
    return None
