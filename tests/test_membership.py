"""
GymCMS Backend — Membership Plan Tests
========================================

What we test:
    ✅ features round-trips as a list, never as a serialized string
    ✅ A JSON-encoded list from older clients is accepted
    ✅ Invalid features, negative prices and missing fields are rejected
    ✅ The three seeded plans come back in sort order
"""

import pytest

from gymcms.exceptions import ValidationError
from gymcms.services.fitness_service import PlanService, normalize_features


class TestFeatures:

    @pytest.mark.asyncio
    async def test_features_come_back_as_list(self, session, admin_caller):
        service = PlanService(session)
        plan = await service.create({"name": "Student", "price": 2000, "features": ["Gym Access"]}, admin_caller)

        fetched = await service.get(plan.id, admin_caller)

        assert fetched.features == ["Gym Access"]
        assert fetched.features_json == '["Gym Access"]'

    @pytest.mark.asyncio
    async def test_json_string_features(self, session, admin_caller):
        plan = await PlanService(session).create(
            {"name": "Couple", "price": 6000, "features": '["Two members", "Shared locker"]'},
            admin_caller,
        )
        assert plan.features == ["Two members", "Shared locker"]

    @pytest.mark.asyncio
    async def test_update_features_only(self, session, admin_caller):
        service = PlanService(session)
        plan = await service.create({"name": "Day Pass", "price": 300, "features": ["Gym Access"]}, admin_caller)

        updated = await service.update(plan.id, {"features": ["Gym Access", "Sauna"]}, admin_caller)

        assert updated.features == ["Gym Access", "Sauna"]
        assert updated.price == 300

    def test_normalize_rejects_non_lists(self):
        with pytest.raises(ValidationError):
            normalize_features("not json")
        with pytest.raises(ValidationError):
            normalize_features({"a": 1})
        assert normalize_features("") == []


class TestPlanRules:

    @pytest.mark.asyncio
    async def test_missing_price(self, session, admin_caller):
        with pytest.raises(ValidationError) as exc_info:
            await PlanService(session).create({"name": "Free"}, admin_caller)
        assert exc_info.value.message == "Name and price are required"

    @pytest.mark.asyncio
    async def test_negative_price(self, session, admin_caller):
        with pytest.raises(ValidationError):
            await PlanService(session).create({"name": "Refund", "price": -1}, admin_caller)

    @pytest.mark.asyncio
    async def test_zero_price_is_allowed(self, session, admin_caller):
        plan = await PlanService(session).create({"name": "Trial", "price": 0}, admin_caller)
        assert plan.price == 0
        assert plan.billing_period == "month"

    @pytest.mark.asyncio
    async def test_seeded_plans_in_order(self, session, anonymous):
        result = await PlanService(session).list(anonymous)

        assert [p.name for p in result.items] == ["Basic", "Premium", "Elite"]
        premium = result.items[1]
        assert premium.is_featured is True
        assert premium.features[0] == "Everything in Basic"
