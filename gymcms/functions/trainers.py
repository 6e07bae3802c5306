"""/api/trainers: active trainers for the site, creation for admins."""

from gymcms.functions.base import FunctionContext, FunctionResponse, dump, function_handler
from gymcms.schemas.fitness import TrainerCreate, TrainerResponse
from gymcms.services.fitness_service import TrainerService


async def _list(ctx: FunctionContext) -> FunctionResponse:
    result = await TrainerService(ctx.session).list(await ctx.caller())
    return FunctionResponse(body=dump(TrainerResponse, result.items))


async def _create(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    body = ctx.body_as(TrainerCreate)
    trainer = await TrainerService(ctx.session).create(body.model_dump(), caller)
    return FunctionResponse(status_code=201, body=dump(TrainerResponse, trainer))


handler = function_handler({"GET": _list, "POST": _create})
