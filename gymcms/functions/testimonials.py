"""/api/testimonials: approved testimonials for the site, creation for admins."""

from gymcms.functions.base import FunctionContext, FunctionResponse, dump, function_handler
from gymcms.schemas.fitness import TestimonialCreate, TestimonialResponse
from gymcms.services.fitness_service import TestimonialService


async def _list(ctx: FunctionContext) -> FunctionResponse:
    result = await TestimonialService(ctx.session).list(await ctx.caller())
    return FunctionResponse(body=dump(TestimonialResponse, result.items))


async def _create(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    body = ctx.body_as(TestimonialCreate)
    testimonial = await TestimonialService(ctx.session).create(body.model_dump(), caller)
    return FunctionResponse(status_code=201, body=dump(TestimonialResponse, testimonial))


handler = function_handler({"GET": _list, "POST": _create})
