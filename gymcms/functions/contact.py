"""/api/contact: public form submission (POST) and the admin inbox (GET)."""

from gymcms.functions.base import FunctionContext, FunctionResponse, function_handler
from gymcms.schemas.inbox import ContactCreate, SubmissionListResponse
from gymcms.services.inbox_service import ContactService


async def _submit(ctx: FunctionContext) -> FunctionResponse:
    body = ctx.body_as(ContactCreate)
    submission = await ContactService(ctx.session).create(body.model_dump(), await ctx.caller())
    return FunctionResponse(
        status_code=201,
        body={
            "message": "Message sent successfully! We will get back to you soon.",
            "id": submission.id,
        },
    )


async def _list(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    service = ContactService(ctx.session)
    result = await service.list_submissions(
        caller,
        unread_only=ctx.request.query.get("unread") == "true",
        limit=ctx.query_int("limit", 50),
        offset=ctx.query_int("offset", 0),
    )
    envelope = SubmissionListResponse.from_result(result, unread=await service.unread_count())
    return FunctionResponse(body=envelope.model_dump(mode="json"))


handler = function_handler({"POST": _submit, "GET": _list})
