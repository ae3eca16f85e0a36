"""
ExposureService - Graded exposure ladder

Steps are rated in SUDS (0-100) and climbed from least to most
distressing. Validating a step earns XP once; adding or editing a step
earns nothing.
"""

import logging
from uuid import uuid4
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from src.exceptions import RecordNotFoundError, ValidationError
from src.gamification.session import ProgressionSession
from src.models.profile import AwardOutcome
from src.models.tracking import ExposureStep
from src.storage.local_store import LocalStore, user_key

logger = logging.getLogger(__name__)

EXPOSURES_KEY = "exposures"


def _build_step(data: dict) -> ExposureStep:
    """Validate step fields, reporting the first bad field as a ValidationError"""
    try:
        return ExposureStep.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "step"
        raise ValidationError(
            f"Invalid exposure step: {error['msg']}",
            field=field,
            value=data.get(field),
        ) from e


class ExposureService:
    """Service for exposure steps"""

    def __init__(self, store: LocalStore, session: ProgressionSession):
        self.store = store
        self.session = session

    @property
    def _key(self) -> str:
        return user_key(self.session.user_id, EXPOSURES_KEY)

    async def _load(self) -> List[ExposureStep]:
        data = await self.store.get(self._key, default=[])
        return [ExposureStep.model_validate(item) for item in data]

    async def _save(self, steps: List[ExposureStep]) -> None:
        await self.store.set(self._key, [s.model_dump() for s in steps])

    async def list_steps(self) -> List[ExposureStep]:
        """The ladder: lowest SUDS first, insertion order within a rating"""
        return sorted(await self._load(), key=lambda s: s.rating)

    async def add_step(self, behavior: str, rating: int = 50) -> ExposureStep:
        step = _build_step({"id": uuid4().hex, "behavior": behavior, "rating": rating})
        steps = await self._load()
        steps.append(step)
        await self._save(steps)
        logger.info(f"User {self.session.user_id} added exposure step {step.id} ({rating} SUDS)")
        return step

    async def edit_step(
        self,
        step_id: str,
        behavior: Optional[str] = None,
        rating: Optional[int] = None,
    ) -> ExposureStep:
        """Change a step's wording or rating; completion is left untouched"""
        steps = await self._load()
        index = self._index_of(steps, step_id)

        update = steps[index].model_dump()
        if behavior is not None:
            update["behavior"] = behavior
        if rating is not None:
            update["rating"] = rating
        steps[index] = _build_step(update)

        await self._save(steps)
        return steps[index]

    async def validate_step(
        self,
        step_id: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Optional[AwardOutcome]:
        """
        Mark a step as done

        Returns:
            AwardOutcome, or None if the step was already completed

        Raises:
            RecordNotFoundError: no step with that id
        """
        steps = await self._load()
        index = self._index_of(steps, step_id)
        if steps[index].completed:
            logger.info(f"Exposure step {step_id} already validated for user {self.session.user_id}")
            return None

        steps[index] = steps[index].model_copy(update={"completed": True})
        await self._save(steps)
        return await self.session.award_activity("exposure", x, y)

    def _index_of(self, steps: List[ExposureStep], step_id: str) -> int:
        for i, step in enumerate(steps):
            if step.id == step_id:
                return i
        raise RecordNotFoundError(
            f"Exposure step {step_id} not found",
            record_type="Exposure step",
            record_id=step_id,
            user_id=self.session.user_id,
        )
