"""/api/settings: public key/value read and atomic admin bulk update."""

from gymcms.functions.base import FunctionContext, FunctionResponse, function_handler
from gymcms.services.settings_service import SettingsService


async def _get(ctx: FunctionContext) -> FunctionResponse:
    return FunctionResponse(body=await SettingsService(ctx.session).get_all())


async def _update(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    updated = await SettingsService(ctx.session).bulk_update(ctx.request.body, caller)
    return FunctionResponse(body=updated)


handler = function_handler({"GET": _get, "PUT": _update})
