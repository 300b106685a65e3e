import base64
import logging
from typing import Optional, Tuple

from core.errors import ConfigError, InsufficientCreditsError, NotFoundError, UpstreamError, ValidationError
from core.repositories.user_repository import UserRepository
from core.services.image_provider import ImageProvider


logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = 1000
DATA_URI_PREFIX = "data:image/png;base64,"


def to_data_uri(image: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(image).decode("ascii")


async def generate_image_with_billing(
    repo: UserRepository,
    provider: ImageProvider,
    user_id: int,
    prompt: Optional[str],
) -> Tuple[str, int]:
    """Charge one credit per generated image.

    The credit is taken only after the generator returned a non-empty image, and
    the decrement is conditional on a positive balance, so a failed or raced
    request never moves the balance below zero.
    """
    if not provider.is_configured:
        logger.error("Image generator API key is not configured")
        raise ConfigError("Server configuration error: API key not found")

    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")

    prompt = (prompt or "").strip()
    if not prompt:
        raise ValidationError("Prompt is required")
    if len(prompt) > MAX_PROMPT_LENGTH:
        raise ValidationError(f"Prompt must be {MAX_PROMPT_LENGTH} characters or less")

    if user.credit_balance <= 0:
        raise InsufficientCreditsError(user.credit_balance)

    image = await provider.generate(prompt)
    if not image:
        raise UpstreamError(
            "Image generation failed: Empty response from ClipDrop API", kind=UpstreamError.EMPTY
        )

    updated = repo.debit_credit_if_positive(user.id)
    if updated is None:
        current = repo.get_by_id(user.id)
        raise InsufficientCreditsError(current.credit_balance if current else 0)

    logger.info("Generated image for user id=%s, balance now %s", user.id, updated.credit_balance)
    return to_data_uri(image), updated.credit_balance
