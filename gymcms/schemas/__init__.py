"""
Request/response contracts, one module per entity family.

Create/Update models leave every field optional: required-field checks
live in the services so both deployment shapes report the same message.
Update bodies are read with model_dump(exclude_unset=True), so a field
the client did not send is never written.
"""
