"""
GymCMS Backend — Function-per-Route Handlers
==============================================

The second deployment shape: each module serves one URL through its
`handler`, invoked as `await handler(FunctionRequest(...), db)`. HANDLERS
maps the public path to its handler for platforms that route by table.
"""

from gymcms.functions import (
    auth_login,
    auth_me,
    contact,
    membership,
    settings,
    testimonials,
    trainers,
)
from gymcms.functions.base import FunctionRequest, FunctionResponse

HANDLERS = {
    "/api/auth/login": auth_login.handler,
    "/api/auth/me": auth_me.handler,
    "/api/contact": contact.handler,
    "/api/membership": membership.handler,
    "/api/settings": settings.handler,
    "/api/testimonials": testimonials.handler,
    "/api/trainers": trainers.handler,
}

__all__ = ["FunctionRequest", "FunctionResponse", "HANDLERS"]
