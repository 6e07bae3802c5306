"""/api/membership: plan listing and admin plan creation."""

from gymcms.functions.base import FunctionContext, FunctionResponse, dump, function_handler
from gymcms.schemas.fitness import PlanCreate, PlanResponse
from gymcms.services.fitness_service import PlanService


async def _list(ctx: FunctionContext) -> FunctionResponse:
    result = await PlanService(ctx.session).list(await ctx.caller())
    return FunctionResponse(body=dump(PlanResponse, result.items))


async def _create(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    body = ctx.body_as(PlanCreate)
    plan = await PlanService(ctx.session).create(body.model_dump(), caller)
    return FunctionResponse(status_code=201, body=dump(PlanResponse, plan))


handler = function_handler({"GET": _list, "POST": _create})
