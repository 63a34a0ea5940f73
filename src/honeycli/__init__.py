"""honeycli -- authenticated, envelope-aware requests against the Honeycomb API.

The centrepiece is ``honeycli api <path>``: a generic request pipeline that
infers the HTTP method, credential class, and content envelope from a bare
path, encodes ``key=value`` fields, translates between the flat-JSON v1 API
and the JSON:API-style v2 API, follows ``Link`` pagination, and filters
responses with jq.

Typical usage::

    honeycli auth login --key-type config
    honeycli api /1/auth
    honeycli api /2/teams/my-team/environments -f name=prod
    honeycli api /1/columns/my-dataset --paginate --jq '.[].key_name'

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr output discipline with Rich support.
    api: The request pipeline (fields, envelopes, builder, filter, runner).
"""

__version__ = "0.1.0"
