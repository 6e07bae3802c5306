# Routes package init
"""
GymCMS Backend — API Routes Package
=====================================

One module per resource, each exposing an APIRouter under /api.
Routes stay thin: parse the request, resolve the caller through deps,
call a service, shape the response.
"""
