"""
GymCMS Backend — Trainer, Class, Plan & Testimonial Services
==============================================================

What:  Repositories for the records behind the public marketing pages.

Entity notes:
    Classes       reads carry trainer_name / trainer_photo / trainer_specialty
                  from the referenced trainer; a dangling trainer_id simply
                  yields nulls.
    Plans         features accepted as a list or as a JSON-encoded list;
                  always returned as a list.
    Testimonials  rating must lie in 1..5.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from gymcms.exceptions import ValidationError
from gymcms.models import GymClass, MembershipPlan, Testimonial, Trainer
from gymcms.services.caller import Caller
from gymcms.services.repository import Repository

logger = logging.getLogger(__name__)


class TrainerService(Repository[Trainer]):
    model = Trainer
    entity_type = "trainer"
    label = "Trainer"
    noun = "trainer"
    required_fields = ("name",)
    required_message = "Name is required"


class ClassService(Repository[GymClass]):
    model = GymClass
    entity_type = "class"
    label = "Class"
    noun = "class"
    required_fields = ("name",)
    required_message = "Name is required"
    nullable_fields = frozenset({"trainer_id"})

    async def _decorate(self, items: List[GymClass]) -> List[GymClass]:
        trainer_ids = {item.trainer_id for item in items if item.trainer_id is not None}
        trainers = {}
        if trainer_ids:
            result = await self.session.execute(select(Trainer).where(Trainer.id.in_(trainer_ids)))
            trainers = {trainer.id: trainer for trainer in result.scalars().all()}

        for item in items:
            trainer = trainers.get(item.trainer_id)
            item.trainer_name = trainer.name if trainer else None
            item.trainer_photo = trainer.photo if trainer else None
            item.trainer_specialty = trainer.specialty if trainer else None
        return items


def normalize_features(value: Any) -> List[str]:
    """
    Accept a native list or an already-serialized JSON list.

    Raises:
        ValidationError if the value is neither.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else []
        except json.JSONDecodeError:
            raise ValidationError("Features must be a list of strings", field="features")
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Features must be a list of strings", field="features")
    return [str(item) for item in value]


class PlanService(Repository[MembershipPlan]):
    model = MembershipPlan
    entity_type = "membership_plan"
    label = "Plan"
    noun = "plan"
    required_fields = ("name", "price")
    required_message = "Name and price are required"

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[MembershipPlan], caller: Caller
    ) -> Dict[str, Any]:
        if "price" in fields and fields["price"] < 0:
            raise ValidationError("Price must not be negative", field="price")
        if "features" in fields:
            fields["features"] = normalize_features(fields["features"])
        if fields.get("billing_period") == "":
            fields.pop("billing_period")
        return fields


class TestimonialService(Repository[Testimonial]):
    model = Testimonial
    entity_type = "testimonial"
    label = "Testimonial"
    noun = "testimonial from"
    required_fields = ("client_name", "content")
    required_message = "Client name and content are required"

    def display_name(self, entity: Testimonial) -> str:
        return entity.client_name

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[Testimonial], caller: Caller
    ) -> Dict[str, Any]:
        rating = fields.get("rating")
        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", field="rating")
        return fields
