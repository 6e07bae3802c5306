"""/api/auth/login as a standalone function."""

from gymcms.functions.base import FunctionContext, FunctionResponse, dump, function_handler
from gymcms.schemas.auth import LoginRequest, UserSummary
from gymcms.services.auth_service import CredentialService


async def _login(ctx: FunctionContext) -> FunctionResponse:
    body = ctx.body_as(LoginRequest)
    token, user = await CredentialService(ctx.session).login(
        body.email, body.password, ctx.request.client_ip
    )
    return FunctionResponse(body={"token": token, "user": dump(UserSummary, user)})


handler = function_handler({"POST": _login})
