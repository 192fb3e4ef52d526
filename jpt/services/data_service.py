import random
import uuid
from datetime import datetime
from jpt.config.settings import ServiceSettings
from jpt.models.api_models import SyntheticDataPayload

RANDOM_NUMBER_UPPER = 1000
RANDOM_SUFFIX_UPPER = 100


def generate_synthetic_data(settings: ServiceSettings) -> SyntheticDataPayload:
    """
    Produce a fresh payload of pseudo-random values.

    A new generator seeded from OS entropy is created on every call, so
    values are independent across requests and across runs.
    """
    rng = random.Random()

    return SyntheticDataPayload(
        service=settings.app_name,
        random_number=rng.randrange(RANDOM_NUMBER_UPPER),
        random_string=f"data-{rng.randrange(RANDOM_SUFFIX_UPPER)}",
        timestamp=datetime.now(),
        data_type=settings.data_type,
        port=settings.port,
        uuid=str(uuid.uuid4()) if settings.include_uuid else None
    )
