"""/api/auth/me: the identity behind the presented token."""

from gymcms.functions.base import FunctionContext, FunctionResponse, dump, function_handler
from gymcms.schemas.auth import MeResponse
from gymcms.services.auth_service import CredentialService


async def _me(ctx: FunctionContext) -> FunctionResponse:
    caller = await ctx.caller(required=True)
    user = await CredentialService(ctx.session).current_user(caller)
    return FunctionResponse(body={"user": dump(MeResponse, user)})


handler = function_handler({"GET": _me})
